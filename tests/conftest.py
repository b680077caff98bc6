import pytest
from click.testing import CliRunner

from markdown_toc_gen.logger import Logger, LogLevel


class RecordingLogger(Logger):
    """Logger that keeps messages instead of printing them."""

    def __init__(self, level: str = "debug"):
        super().__init__(level)
        self.records: list[tuple[LogLevel, str]] = []

    def _emit(self, level: LogLevel, message: str, color: str) -> None:
        if level <= self.level:
            self.records.append((level, message))

    def messages(self, level: LogLevel) -> list[str]:
        return [message for record_level, message in self.records if record_level is level]


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture()
def recording_logger() -> RecordingLogger:
    """Provides a logger capturing every message down to debug level."""
    return RecordingLogger()
