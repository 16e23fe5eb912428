"""
Tests for the logging setup.
"""
import errno
import json
import logging
import sys

import pytest

from pppoat.com.core.exceptions import BrokenLinkError
from pppoat.helper.logging_config import (
    ColoredFormatter,
    JsonFormatter,
    PppoatLoggingConfig,
    RateLimitFilter,
)


def _record(msg="hello", level=logging.INFO, name="pppoat.test"):
    return logging.LogRecord(name, level, __file__, 10, msg, None, None)


def test_json_formatter():
    data = json.loads(JsonFormatter().format(_record("ping %s" % "ok")))

    assert data["message"] == "ping ok"
    assert data["level"] == "INFO"
    assert data["logger"] == "pppoat.test"
    assert data["timestamp"].endswith("+00:00")


def test_json_formatter_code_from_extra():
    record = _record("send failed")
    record.code = -errno.EPIPE

    assert json.loads(JsonFormatter().format(record))["code"] == -errno.EPIPE


def test_json_formatter_code_from_exception():
    try:
        raise BrokenLinkError(3)
    except BrokenLinkError:
        record = logging.LogRecord("pppoat.test", logging.ERROR, __file__, 10, "link gone", None, sys.exc_info())

    data = json.loads(JsonFormatter().format(record))
    assert data["code"] == -errno.EPIPE
    assert "BrokenLinkError" in data["exception"]


def test_json_formatter_without_code():
    assert "code" not in json.loads(JsonFormatter().format(_record()))


def test_colored_formatter_restores_levelname():
    record = _record(level=logging.ERROR)

    text = ColoredFormatter("%(levelname)s %(message)s").format(record)

    assert "\033[31m" in text
    assert record.levelname == "ERROR"


def test_rate_limit_filter_suppresses_repeats():
    rate_filter = RateLimitFilter(rate=60.0)

    assert rate_filter.filter(_record("dropped"))
    assert not rate_filter.filter(_record("dropped"))
    assert rate_filter.filter(_record("other"))


def test_rate_limit_zero_lets_everything_through():
    rate_filter = RateLimitFilter(rate=0.0)
    assert rate_filter.filter(_record())
    assert rate_filter.filter(_record())


class TestInitialize:

    def test_console_on_stderr(self, reset_logging):
        PppoatLoggingConfig.initialize(log_level="debug")

        logger = logging.getLogger("pppoat")
        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        handler = logger.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stderr

    def test_level_from_environment(self, reset_logging, monkeypatch):
        monkeypatch.setenv("PPPOAT_LOG_LEVEL", "warning")

        PppoatLoggingConfig.initialize()

        assert logging.getLogger("pppoat").level == logging.WARNING

    def test_unknown_level(self, reset_logging):
        with pytest.raises(ValueError):
            PppoatLoggingConfig.initialize(log_level="chatty")

    def test_json_log_file(self, reset_logging, tmp_path):
        log_file = tmp_path / "logs" / "pppoat.log"

        PppoatLoggingConfig.initialize(log_level="INFO", log_file=log_file, enable_json=True)
        logging.getLogger("pppoat.test").info("tunnel up")
        for handler in logging.getLogger("pppoat").handlers:
            handler.flush()

        lines = log_file.read_text().splitlines()
        assert json.loads(lines[-1])["message"] == "tunnel up"

    def test_initialize_once(self, reset_logging):
        PppoatLoggingConfig.initialize(log_level="ERROR")
        PppoatLoggingConfig.initialize(log_level="DEBUG")

        assert logging.getLogger("pppoat").level == logging.ERROR

    def test_build_config_without_rate_limit(self):
        config = PppoatLoggingConfig.build_config("INFO", rate_limit=None)

        assert config["filters"] == {}
        assert config["handlers"]["console"]["filters"] == []
        assert "file" not in config["handlers"]
