from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import pytest
import structlog

from postgrestest.logger import LOGGER_NAMESPACE, LoggingConfig, configure_logging, get_logger

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    yield
    structlog.reset_defaults()
    package_logger = logging.getLogger(LOGGER_NAMESPACE)
    package_logger.handlers = []
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


class TestLoggingConfig:
    def test_defaults(self) -> None:
        config = LoggingConfig()

        assert config.level == "INFO"
        assert config.json_output is False

    def test_reads_prefixed_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PGTEST_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("PGTEST_LOG_JSON_OUTPUT", "true")

        config = LoggingConfig()

        assert config.level == "DEBUG"
        assert config.json_output is True


class TestConfigureLogging:
    def test_json_events_go_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingConfig(level="DEBUG", json_output=True))

        get_logger(f"{LOGGER_NAMESPACE}.tests").info("Test schema created", schema="py_test_00")

        captured = capsys.readouterr()
        assert captured.out == ""
        event = json.loads(captured.err.strip().splitlines()[-1])
        assert event["event"] == "Test schema created"
        assert event["schema"] == "py_test_00"
        assert event["level"] == "info"

    def test_level_filters_events(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingConfig(level="WARNING", json_output=True))

        get_logger(f"{LOGGER_NAMESPACE}.tests").debug("Test schema dropped", schema="py_test_00")

        assert "Test schema dropped" not in capsys.readouterr().err
