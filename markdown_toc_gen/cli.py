"""
Generates or refreshes the table of contents of Markdown files in place.
The TOC is written between the configured start and end markers.
"""

from __future__ import annotations

from pathlib import Path

import click

from .batch import log_report, process_file, process_files
from .config import STYLES, ConfigError, build_config
from .logger import LOG_LEVEL_NAMES, Logger
from .watch import FileWatcher

__all__ = ["cli"]


@click.command()
@click.version_option(package_name="markdown-toc-gen")
@click.option("--style", type=click.Choice(STYLES), help="TOC style (default: horizontal)")
@click.option(
    "--auto-insert/--no-auto-insert",
    default=None,
    help="Insert TOC markers after the first level-1 heading when missing",
)
@click.option("--max-level", type=int, help="Deepest heading level to include (default: 2)")
@click.option(
    "--watch/--no-watch", default=None, help="Keep watching the files and update them on change"
)
@click.option("--log-level", type=click.Choice(list(LOG_LEVEL_NAMES)), help="Log verbosity")
@click.option("--start-marker", help="TOC start marker (default: <!-- toc -->)")
@click.option("--end-marker", help="TOC end marker (default: <!-- tocstop -->)")
@click.option(
    "--preserve-unicode/--no-preserve-unicode",
    default=None,
    help="Keep non-ASCII word characters in anchors",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file (TOML or JSON)",
)
@click.argument("paths", nargs=-1)
@click.pass_context
def cli(
    ctx: click.Context,
    paths: tuple[str, ...],
    style: str | None = None,
    auto_insert: bool | None = None,
    max_level: int | None = None,
    watch: bool | None = None,
    log_level: str | None = None,
    start_marker: str | None = None,
    end_marker: str | None = None,
    preserve_unicode: bool | None = None,
    config_path: Path | None = None,
):
    """
    Update the table of contents of Markdown files, directories or globs.

    Args:
        ctx: Click context, used for help output and exit codes.
        paths: Files, directories or glob patterns to process. Falls back to
            the `files` list of the configuration file.
        style: Override for the TOC style.
        auto_insert: Override for inserting missing markers.
        max_level: Override for the deepest heading level.
        watch: Override for watch mode.
        log_level: Override for log verbosity.
        start_marker: Override for the TOC start marker.
        end_marker: Override for the TOC end marker.
        preserve_unicode: Override for Unicode-preserving anchors.
        config_path: Explicit configuration file.

    Returns:
        None.

    Raises:
        click.BadParameter: If the configuration is invalid.

    Examples:
        markdown-toc-gen README.md docs --style vertical --max-level 3
    """
    try:
        config = build_config(
            Path.cwd(),
            config_file=config_path,
            style=style,
            auto_insert=auto_insert,
            max_level=max_level,
            watch=watch,
            log_level=log_level,
            start_marker=start_marker,
            end_marker=end_marker,
            preserve_unicode=preserve_unicode,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    patterns = list(paths) or list(config.files)
    if not patterns:
        click.secho("Specify the files or directories to process.", fg="yellow", err=True)
        click.echo(ctx.get_help(), err=True)
        ctx.exit(1)

    logger = Logger(config.log_level)
    report = process_files(patterns, config, logger, always_write=config.watch)
    log_report(report, logger)

    if not config.watch:
        if report.failed:
            ctx.exit(1)
        return

    logger.info("Watching for changes (press Ctrl+C to stop)...")

    def on_change(filepath: Path) -> None:
        logger.info(f"Change detected: {filepath}")
        process_file(filepath, config, logger, always_write=True)

    watcher = FileWatcher(patterns, on_change)
    try:
        watcher.run()
    except KeyboardInterrupt:
        watcher.stop()


if __name__ == "__main__":
    cli()
