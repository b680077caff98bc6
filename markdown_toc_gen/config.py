"""Configuration loading and management."""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

from .logger import LOG_LEVEL_NAMES
from .models import MarkerPair

STYLES = ("horizontal", "vertical")
TOOL_NAME = "markdown-toc-gen"


@dataclass
class TocConfig:
    """Configuration for generating Markdown tables of contents.

    Attributes:
        style: ``"horizontal"`` for a bullet-separated line, ``"vertical"`` for
            an indented list.
        max_level: Deepest heading level included in the TOC.
        start_marker: Line (or line fragment) opening the TOC region.
        end_marker: Line (or line fragment) closing the TOC region.
        auto_insert: Insert markers after the first level-1 heading when the
            document has none.
        watch: Keep watching the processed paths and rewrite them on change.
        log_level: One of ``error``, ``warn``, ``info``, ``debug``.
        preserve_unicode: Keep non-ASCII word characters in generated slugs.
        max_file_size: Maximum file size in bytes that will be processed.
        files: Paths or glob patterns used when none are given on the command line.

    Examples:
        TocConfig(style="vertical", max_level=3, auto_insert=True)
    """

    # Rendering
    style: str = "horizontal"
    max_level: int = 2

    # TOC markers
    start_marker: str = "<!-- toc -->"
    end_marker: str = "<!-- tocstop -->"

    # Behavior
    auto_insert: bool = False
    watch: bool = False
    log_level: str = "info"
    preserve_unicode: bool = False

    # Limits
    max_file_size: int = 10 * 1024 * 1024

    files: list[str] = field(default_factory=list)

    @property
    def markers(self) -> MarkerPair:
        return MarkerPair(start=self.start_marker, end=self.end_marker)


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`max_level` must be <= 6")
    """


# camelCase keys written by the JavaScript flavour of this tool.
_KEY_ALIASES = {
    "maxLevel": "max_level",
    "autoInsert": "auto_insert",
    "logLevel": "log_level",
    "preserveUnicode": "preserve_unicode",
    "maxFileSize": "max_file_size",
    "startMarker": "start_marker",
    "endMarker": "end_marker",
}
_FIELD_NAMES = {config_field.name for config_field in fields(TocConfig)}
_MISSING = object()


def load_config(search_path: Path) -> TocConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root. In each
    directory the first match wins: the ``[tool.markdown-toc-gen]`` table of
    `pyproject.toml`, the ``[markdown-toc-gen]`` or ``[tool.markdown-toc-gen]``
    table of `.tocrc.toml`, then a JSON object in `.tocrc.json` or `.tocrc`.
    Files that cannot be read or decoded are skipped. Returns defaults when no
    configuration is found.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        TocConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If a matching table is not a mapping or contains unsupported keys.

    Examples:
        load_config(Path("docs"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_toml(
            current / "pyproject.toml", table_paths=[("tool", TOOL_NAME)]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_toml(
            current / ".tocrc.toml",
            table_paths=[(TOOL_NAME,), ("tool", TOOL_NAME)],
        )
        if dotfile_config is not None:
            return dotfile_config

        for name in (".tocrc.json", ".tocrc"):
            json_config = _load_from_json(current / name)
            if json_config is not None:
                return json_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return TocConfig()


def load_config_file(config_file: Path) -> TocConfig:
    """Load configuration from an explicitly named file.

    TOML files (by suffix) are read like `.tocrc.toml`; anything else is parsed
    as JSON.

    Raises:
        ConfigError: If the file cannot be read, decoded, or holds invalid settings.
    """
    if config_file.suffix == ".toml":
        try:
            with open(config_file, "rb") as stream:
                data = tomllib.load(stream)
        except (OSError, tomllib.TOMLDecodeError) as error:
            raise ConfigError(f"Failed to load config file {config_file}: {error}") from error
        for table_path in [(TOOL_NAME,), ("tool", TOOL_NAME), ()]:
            raw_config = _extract_table(data, table_path)
            if raw_config is not _MISSING:
                return _build_config_from_raw(raw_config, config_file, table_path)

    try:
        with open(config_file, encoding="UTF-8") as stream:
            data = json.load(stream)
    except (OSError, ValueError) as error:
        raise ConfigError(f"Failed to load config file {config_file}: {error}") from error
    return _build_config_from_raw(data, config_file, ())


def _load_from_toml(config_file: Path, table_paths: list[tuple[str, ...]]) -> TocConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _load_from_json(config_file: Path) -> TocConfig | None:
    if not config_file.is_file():
        return None

    try:
        with open(config_file, encoding="UTF-8") as stream:
            data = json.load(stream)
    except (OSError, ValueError):
        return None

    return _build_config_from_raw(data, config_file, ())


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> TocConfig:
    table_display = f"[{'.'.join(table_path)}]" if table_path else "top-level"

    if raw_config is None:
        return TocConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid {table_display} settings in {config_file}")

    settings = {}
    for key, value in raw_config.items():
        if key == "markers":
            if not isinstance(value, dict) or set(value) - {"start", "end"}:
                raise ConfigError(f"Invalid `markers` settings in {config_file}")
            if "start" in value:
                settings["start_marker"] = value["start"]
            if "end" in value:
                settings["end_marker"] = value["end"]
            continue
        settings[_KEY_ALIASES.get(key, key)] = value

    unknown = sorted(set(settings) - _FIELD_NAMES)
    if unknown:
        raise ConfigError(
            f"Invalid {table_display} settings in {config_file}: "
            f"unsupported keys {', '.join(unknown)}"
        )

    return TocConfig(**settings)


def validate_config(config: TocConfig) -> None:
    """Validate a `TocConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If the style, level, markers, log level or limits are
            invalid, or a field has the wrong type.

    Examples:
        validate_config(TocConfig(style="vertical", max_level=3))
    """
    _ensure_integers({"max_level": config.max_level, "max_file_size": config.max_file_size})
    _ensure_booleans(
        {
            "auto_insert": config.auto_insert,
            "watch": config.watch,
            "preserve_unicode": config.preserve_unicode,
        }
    )

    if config.style not in STYLES:
        raise ConfigError(f"`style` must be one of: {', '.join(STYLES)}")

    if config.max_level < 1:
        raise ConfigError("`max_level` must be >= 1")
    if config.max_level > 6:
        raise ConfigError("`max_level` must be <= 6")

    if not isinstance(config.start_marker, str) or not config.start_marker.strip():
        raise ConfigError("`start_marker` must not be empty")
    if not isinstance(config.end_marker, str) or not config.end_marker.strip():
        raise ConfigError("`end_marker` must not be empty")
    if config.start_marker.strip() == config.end_marker.strip():
        raise ConfigError("`start_marker` and `end_marker` must differ")

    if config.log_level not in LOG_LEVEL_NAMES:
        raise ConfigError(f"`log_level` must be one of: {', '.join(LOG_LEVEL_NAMES)}")

    if config.max_file_size <= 0:
        raise ConfigError("`max_file_size` must be a positive integer")

    if not isinstance(config.files, list) or not all(
        isinstance(entry, str) for entry in config.files
    ):
        raise ConfigError("`files` must be a list of strings")


def apply_overrides(config: TocConfig, **overrides: object) -> TocConfig:
    """Apply override values to a `TocConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        TocConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `TocConfig`.

    Examples:
        updated = apply_overrides(config, style="vertical", max_level=None)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(
    search_path: Path, config_file: Path | None = None, **overrides: object
) -> TocConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        config_file: Explicit configuration file; disables the directory walk.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        TocConfig: Validated configuration ready for rendering.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), style="vertical", max_level=3)
    """
    if config_file is not None:
        config = load_config_file(config_file)
    else:
        config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")


def _ensure_booleans(values: dict[str, object]) -> None:
    for key, value in values.items():
        if not isinstance(value, bool):
            raise ConfigError(f"`{key}` must be a boolean")
