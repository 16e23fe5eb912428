"""
Logging configuration for pppoat.

Builds a ``logging.config.dictConfig`` setup used by the command line runner.
Console output goes to stderr because stdout may carry the link itself.
Supported:
- Console and rotating file handlers
- Level from argument or ``PPPOAT_LOG_LEVEL``
- Structured JSON formatting for files
- Colorized console output
- Rate limiting for repeated messages (e.g. dropped datagrams)

Example:
    >>> from pppoat.helper.logging_config import PppoatLoggingConfig
    >>> PppoatLoggingConfig.initialize(log_level="DEBUG")
    >>> logging.getLogger("pppoat").info("started")
"""
import json
import logging
import logging.config
import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from pppoat.com.core.exceptions import CommunicationError


class JsonFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs log records as JSON objects for easy parsing by log aggregators.
    Records carry the negative errno ``code`` when one is known, either passed
    as ``extra={"code": ...}`` or taken from a logged ``CommunicationError``.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        code = getattr(record, "code", None)
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)
            if code is None and isinstance(record.exc_info[1], CommunicationError):
                code = record.exc_info[1].code
        if code is not None:
            log_obj["code"] = code
        return json.dumps(log_obj)


class ColoredFormatter(logging.Formatter):
    """Colored console formatter using ANSI codes per level."""

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


class RateLimitFilter(logging.Filter):
    """
    Suppress identical messages repeated within ``rate`` seconds.

    Keyed on the unformatted message, so a flood of dropped datagrams from
    changing senders is limited as well.
    """

    def __init__(self, rate: float = 1.0):
        super().__init__()
        self.rate = rate
        self.last_log: Dict[Any, float] = {}

    def filter(self, record: logging.LogRecord) -> bool:
        key = (record.name, record.levelno, record.msg)
        now = time.monotonic()
        last = self.last_log.get(key)
        if last is not None and now - last < self.rate:
            return False
        self.last_log[key] = now
        return True


class PppoatLoggingConfig:
    """Process wide logging setup."""

    _initialized = False
    _logger_name = "pppoat"

    @classmethod
    def initialize(
        cls,
        log_level: Optional[str] = None,
        log_file: Optional[Path] = None,
        enable_colors: bool = False,
        enable_json: bool = False,
        rate_limit: Optional[float] = 1.0,
    ) -> None:
        """
        Initialize logging once per process.

        Args:
            log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
                       Falls back to ``PPPOAT_LOG_LEVEL``, then INFO.
            log_file: Optional path of a rotating log file.
            enable_colors: Colored console output.
            enable_json: JSON formatting for the log file.
            rate_limit: Minimum seconds between duplicate messages (None = off).
        """
        if cls._initialized:
            logging.getLogger(__name__).debug("Logging already initialized, skipping")
            return

        if log_level is None:
            log_level = os.getenv("PPPOAT_LOG_LEVEL", "INFO")
        log_level = log_level.upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"Unknown log level: {log_level}")

        if log_file is not None:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)

        logging.config.dictConfig(cls.build_config(
            log_level=log_level,
            log_file=log_file,
            enable_colors=enable_colors,
            enable_json=enable_json,
            rate_limit=rate_limit,
        ))
        cls._initialized = True

        logging.getLogger(cls._logger_name).debug(
            f"Logging initialized (level={log_level}, file={log_file}, json={enable_json})"
        )

    @classmethod
    def build_config(
        cls,
        log_level: str,
        log_file: Optional[Path] = None,
        enable_colors: bool = False,
        enable_json: bool = False,
        rate_limit: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Build the ``dictConfig`` dictionary."""
        formatters = {
            "standard": {
                "format": "%(asctime)s - %(name)s - %(levelname)-8s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S"
            },
            "detailed": {
                "format": "%(asctime)s - %(name)s - %(levelname)-8s - [%(filename)s:%(lineno)d] - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S"
            },
            "colored": {
                "()": "pppoat.helper.logging_config.ColoredFormatter",
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S"
            },
            "json": {
                "()": "pppoat.helper.logging_config.JsonFormatter",
            },
        }

        filters: Dict[str, Any] = {}
        handler_filters = []
        if rate_limit is not None:
            filters["rate_limit"] = {
                "()": "pppoat.helper.logging_config.RateLimitFilter",
                "rate": rate_limit,
            }
            handler_filters.append("rate_limit")

        handlers: Dict[str, Any] = {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": "colored" if enable_colors else "standard",
                "stream": "ext://sys.stderr",
                "filters": handler_filters,
            }
        }
        if log_file is not None:
            handlers["file"] = {
                "class": "logging.handlers.RotatingFileHandler",
                "level": log_level,
                "formatter": "json" if enable_json else "detailed",
                "filename": str(log_file),
                "maxBytes": 10485760,  # 10MB
                "backupCount": 5,
                "encoding": "utf8",
                "filters": handler_filters,
            }

        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": formatters,
            "filters": filters,
            "handlers": handlers,
            "loggers": {
                cls._logger_name: {
                    "level": log_level,
                    "handlers": list(handlers),
                    "propagate": False,
                },
            },
            "root": {
                "level": "WARNING",
                "handlers": ["console"],
            },
        }

    @classmethod
    def reset(cls) -> None:
        """
        Reset the logging configuration.

        This is mainly useful for testing.
        """
        cls._initialized = False
        logger = logging.getLogger(cls._logger_name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)
        logger.propagate = True

        root = logging.getLogger()
        for handler in list(root.handlers):
            if handler.get_name() in ("console", "file"):
                root.removeHandler(handler)
