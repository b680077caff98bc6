from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from markdown_toc_gen.filesystem import (
    MAX_FILE_SIZE_ENV_VAR,
    collect_file_stat,
    enforce_file_size,
    expand_paths,
    get_max_file_size,
    safe_read,
    write_document,
)


def _touch(path: Path, content: str = "# Doc\n") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_expand_paths_walks_directories(tmp_path: Path):
    top = _touch(tmp_path / "docs" / "a.md")
    nested = _touch(tmp_path / "docs" / "guide" / "b.markdown")
    _touch(tmp_path / "docs" / "notes.txt")
    _touch(tmp_path / "docs" / ".hidden" / "c.md")
    _touch(tmp_path / "docs" / ".draft.md")

    result = expand_paths([str(tmp_path / "docs")])

    assert sorted(result) == sorted([top, nested])


def test_expand_paths_expands_globs(tmp_path: Path):
    first = _touch(tmp_path / "guides" / "one.md")
    second = _touch(tmp_path / "guides" / "deep" / "two.md")
    _touch(tmp_path / "guides" / "three.txt")

    result = expand_paths([str(tmp_path / "guides" / "**" / "*.md")])

    assert sorted(result) == sorted([first, second])


def test_expand_paths_passes_explicit_files_through(tmp_path: Path):
    notes = _touch(tmp_path / "notes.txt")

    assert expand_paths([str(notes)]) == [notes]


def test_expand_paths_drops_duplicates_and_missing_paths(tmp_path: Path):
    readme = _touch(tmp_path / "README.md")

    result = expand_paths([str(readme), str(tmp_path), str(tmp_path / "missing.md")])

    assert result == [readme]


def test_get_max_file_size_defaults(monkeypatch):
    monkeypatch.delenv(MAX_FILE_SIZE_ENV_VAR, raising=False)

    assert get_max_file_size(default=123) == 123


def test_get_max_file_size_reads_environment(monkeypatch):
    monkeypatch.setenv(MAX_FILE_SIZE_ENV_VAR, "2048")

    assert get_max_file_size(default=123) == 2048


@pytest.mark.parametrize("value", ["abc", "0", "-5"])
def test_get_max_file_size_rejects_invalid_environment(monkeypatch, value):
    monkeypatch.setenv(MAX_FILE_SIZE_ENV_VAR, value)

    with pytest.raises(ValueError, match=MAX_FILE_SIZE_ENV_VAR):
        get_max_file_size()


def test_enforce_file_size_rejects_large_files(tmp_path: Path):
    target = _touch(tmp_path / "big.md", "x" * 32)

    with pytest.raises(IOError, match="exceeds the maximum allowed size"):
        enforce_file_size(collect_file_stat(target), 16, target)


def test_collect_file_stat_rejects_directories(tmp_path: Path):
    with pytest.raises(IOError, match="not a regular file"):
        collect_file_stat(tmp_path)


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="Symlink support is required")
def test_collect_file_stat_rejects_symlinks(tmp_path: Path):
    source = _touch(tmp_path / "source.md")
    link = tmp_path / "alias.md"
    try:
        os.symlink(source, link)
    except OSError as error:  # pragma: no cover - platform dependent
        pytest.skip(f"Unable to create symlink: {error}")

    with pytest.raises(IOError, match="Symlinks"):
        collect_file_stat(link)


def test_safe_read_keeps_crlf(tmp_path: Path):
    target = tmp_path / "crlf.md"
    target.write_bytes(b"# Title\r\n\r\nBody\r\n")

    with safe_read(target) as handle:
        assert handle.read() == "# Title\r\n\r\nBody\r\n"


def test_safe_read_reports_missing_files(tmp_path: Path):
    with pytest.raises(IOError, match="Error accessing"):
        safe_read(tmp_path / "missing.md")


def test_write_document_replaces_content_and_keeps_permissions(tmp_path: Path):
    target = _touch(tmp_path / "doc.md", "old\n")
    os.chmod(target, 0o640)
    before = collect_file_stat(target)

    write_document(target, "new\r\ncontent\r\n", before)

    assert target.read_bytes() == b"new\r\ncontent\r\n"
    assert stat.S_IMODE(os.stat(target).st_mode) == 0o640
    assert [path.name for path in tmp_path.iterdir()] == ["doc.md"]


def test_write_document_refuses_when_file_changed(tmp_path: Path):
    target = _touch(tmp_path / "doc.md", "old\n")
    before = collect_file_stat(target)
    target.write_text("changed by someone else\n", encoding="utf-8")

    with pytest.raises(IOError, match="changed during processing"):
        write_document(target, "new\n", before)

    assert target.read_text(encoding="utf-8") == "changed by someone else\n"
