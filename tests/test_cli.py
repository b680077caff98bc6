from __future__ import annotations

import json
import textwrap
from pathlib import Path

from markdown_toc_gen.cli import cli
from markdown_toc_gen.constants import TOC_END_MARKER, TOC_START_MARKER


def _write(tmp_path: Path, filename: str, content: str) -> Path:
    path = tmp_path / filename
    path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
    return path


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def _marked_document(tmp_path: Path, filename: str = "doc.md") -> Path:
    return _write(
        tmp_path,
        filename,
        f"""
        # Guide

        {TOC_START_MARKER}
        {TOC_END_MARKER}

        ## Install
        ### Details
        ## Usage
        """,
    )


def test_cli_updates_file_in_place(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _marked_document(tmp_path)

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    assert "[Guide](#guide) • [Install](#install) • [Usage](#usage)" in target.read_text(
        encoding="utf-8"
    )
    assert "Table of contents updated" in result.output
    assert "1 file(s) updated" in result.output


def test_cli_second_run_reports_up_to_date(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _marked_document(tmp_path)
    cli_runner.invoke(cli, [str(target)])
    content = target.read_text(encoding="utf-8")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    assert "Table of contents is up to date" in result.output
    assert target.read_text(encoding="utf-8") == content


def test_cli_vertical_style_and_max_level(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _marked_document(tmp_path)

    result = cli_runner.invoke(cli, ["--style", "vertical", "--max-level", "3", str(target)])

    assert result.exit_code == 0
    content = target.read_text(encoding="utf-8")
    assert "- [Guide](#guide)\n  - [Install](#install)\n    - [Details](#details)" in content


def test_cli_warns_when_markers_missing(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "plain.md", "# Plain\n\n## Section\n")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    assert "No TOC markers found" in result.output
    assert target.read_text(encoding="utf-8") == "# Plain\n\n## Section\n"


def test_cli_auto_insert(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "plain.md", "# Plain\n\n## Section\n")

    result = cli_runner.invoke(cli, ["--auto-insert", str(target)])

    assert result.exit_code == 0
    content = target.read_text(encoding="utf-8")
    assert content.startswith(f"# Plain\n\n{TOC_START_MARKER}\n")
    assert "[Section](#section)" in content


def test_cli_custom_markers(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "custom.md", "# T\n<!-- s --><!-- e -->\n## A\n")

    result = cli_runner.invoke(
        cli, ["--start-marker", "<!-- s -->", "--end-marker", "<!-- e -->", str(target)]
    )

    assert result.exit_code == 0
    assert target.read_text(encoding="utf-8") == "# T\n<!-- s -->[T](#t) • [A](#a)<!-- e -->\n## A\n"


def test_cli_processes_directories(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    docs = tmp_path / "docs"
    docs.mkdir()
    first = _marked_document(docs, "one.md")
    second = _marked_document(docs, "two.markdown")

    result = cli_runner.invoke(cli, ["docs"])

    assert result.exit_code == 0
    assert "2 file(s) updated" in result.output
    assert "[Install](#install)" in first.read_text(encoding="utf-8")
    assert "[Install](#install)" in second.read_text(encoding="utf-8")


def test_cli_reads_pyproject_config(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.markdown-toc-gen]
        style = "vertical"
        files = ["doc.md"]
        """,
    )
    target = _marked_document(tmp_path)

    result = cli_runner.invoke(cli, [])

    assert result.exit_code == 0
    assert "- [Guide](#guide)\n  - [Install](#install)" in target.read_text(encoding="utf-8")


def test_cli_flags_override_config(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.markdown-toc-gen]
        style = "vertical"
        """,
    )
    target = _marked_document(tmp_path)

    result = cli_runner.invoke(cli, ["--style", "horizontal", str(target)])

    assert result.exit_code == 0
    assert "[Guide](#guide) • [Install](#install)" in target.read_text(encoding="utf-8")


def test_cli_explicit_json_config(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config_file = tmp_path / "toc.json"
    config_file.write_text(json.dumps({"style": "vertical", "maxLevel": 1}), encoding="utf-8")
    target = _marked_document(tmp_path)

    result = cli_runner.invoke(cli, ["--config", str(config_file), str(target)])

    assert result.exit_code == 0
    content = target.read_text(encoding="utf-8")
    assert "- [Guide](#guide)" in content
    assert "[Install](#install)" not in content


def test_cli_requires_paths(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, [])

    assert result.exit_code == 1
    assert "Specify the files or directories to process." in result.output
    assert "Usage:" in result.output


def test_cli_rejects_invalid_max_level(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _marked_document(tmp_path)
    content = target.read_text(encoding="utf-8")

    result = cli_runner.invoke(cli, ["--max-level", "9", str(target)])

    assert result.exit_code != 0
    assert "max_level" in result.output
    assert target.read_text(encoding="utf-8") == content


def test_cli_rejects_invalid_config_file(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.markdown-toc-gen]
        colour = "blue"
        """,
    )
    target = _marked_document(tmp_path)

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "colour" in result.output


def test_cli_exits_with_error_when_a_file_fails(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    bad = tmp_path / "bad.md"
    bad.write_bytes(b"\xff\xfe")
    good = _marked_document(tmp_path)

    result = cli_runner.invoke(cli, [str(bad), str(good)])

    assert result.exit_code == 1
    assert "Processing failed" in result.output
    assert "1 file(s) failed" in result.output
    assert "[Install](#install)" in good.read_text(encoding="utf-8")


def test_cli_error_log_level_is_quiet(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _marked_document(tmp_path)

    result = cli_runner.invoke(cli, ["--log-level", "error", str(target)])

    assert result.exit_code == 0
    assert result.output == ""


def test_cli_debug_log_level_traces_pipeline(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _marked_document(tmp_path)

    result = cli_runner.invoke(cli, ["--log-level", "debug", str(target)])

    assert result.exit_code == 0
    assert f"Processing {target}" in result.output
    assert "TOC markers span lines 3 to 4" in result.output


def test_cli_watch_mode_stops_on_interrupt(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _marked_document(tmp_path)

    def interrupt(self):
        raise KeyboardInterrupt

    monkeypatch.setattr("markdown_toc_gen.cli.FileWatcher.run", interrupt)

    result = cli_runner.invoke(cli, ["--watch", str(target)])

    assert result.exit_code == 0
    assert "Watching for changes" in result.output
    assert "[Install](#install)" in target.read_text(encoding="utf-8")
