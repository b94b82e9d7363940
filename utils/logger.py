"""
Centralized logging configuration for Lookout.

This module provides structured JSON logging with:
- Rotating file handlers to prevent log file bloat
- Separate files for different log levels
- Optional human-readable console output on stderr
- Environment-based configuration (LOG_LEVEL, LOG_DIR, LOG_TO_FILE, LOG_TO_CONSOLE)
"""

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any


class JsonFormatter(logging.Formatter):
    """
    Custom JSON formatter for structured logging.
    Outputs logs in JSON format for easy parsing by log aggregation systems.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record as a JSON string.

        Args:
            record: The log record to format

        Returns:
            JSON string representation of the log record
        """
        log_data: dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Structured context passed as extra={"extra_fields": {...}}
        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)


class LoggerConfig:
    """
    Centralized logger configuration and management.
    """

    LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_TO_FILE = os.getenv("LOG_TO_FILE", "true").lower() == "true"
    LOG_TO_CONSOLE = os.getenv("LOG_TO_CONSOLE", "false").lower() == "true"
    CONSOLE_LEVEL = os.getenv("LOG_CONSOLE_LEVEL", "WARNING").upper()
    MAX_BYTES = 10 * 1024 * 1024  # 10MB per file
    BACKUP_COUNT = 5

    _initialized = False

    @classmethod
    def _rotating_handler(cls, filename: str, level: int, formatter: logging.Formatter):
        handler = logging.handlers.RotatingFileHandler(
            cls.LOG_DIR / filename,
            maxBytes=cls.MAX_BYTES,
            backupCount=cls.BACKUP_COUNT,
            encoding="utf-8",
        )
        handler.setLevel(level)
        handler.setFormatter(formatter)
        return handler

    @classmethod
    def setup_logging(cls) -> None:
        """
        Set up the logging configuration for the entire application.
        This should be called once at application startup.
        """
        if cls._initialized:
            return

        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, cls.LOG_LEVEL, logging.INFO))
        root_logger.handlers.clear()

        json_formatter = JsonFormatter()

        if cls.LOG_TO_FILE:
            cls.LOG_DIR.mkdir(parents=True, exist_ok=True)

            # app.log (INFO+), error.log (ERROR+), debug.log only at DEBUG level
            root_logger.addHandler(cls._rotating_handler("app.log", logging.INFO, json_formatter))
            root_logger.addHandler(
                cls._rotating_handler("error.log", logging.ERROR, json_formatter)
            )
            if cls.LOG_LEVEL == "DEBUG":
                root_logger.addHandler(
                    cls._rotating_handler("debug.log", logging.DEBUG, json_formatter)
                )

        if cls.LOG_TO_CONSOLE:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(getattr(logging, cls.CONSOLE_LEVEL, logging.WARNING))
            console_handler.setFormatter(
                logging.Formatter(
                    fmt="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
            root_logger.addHandler(console_handler)

        # httpx logs every request at INFO; keep it out of app.log
        logging.getLogger("httpx").setLevel(logging.WARNING)

        cls._initialized = True

        logging.getLogger(__name__).info(
            "Logging system initialized",
            extra={
                "extra_fields": {
                    "log_level": cls.LOG_LEVEL,
                    "log_dir": str(cls.LOG_DIR),
                    "file_logging": cls.LOG_TO_FILE,
                    "console_logging": cls.LOG_TO_CONSOLE,
                }
            },
        )

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Get a logger instance with the specified name.

        Args:
            name: The name of the logger (typically __name__)

        Returns:
            Configured logger instance
        """
        if not cls._initialized:
            cls.setup_logging()

        return logging.getLogger(name)


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger instance.

    Example:
        >>> from utils.logger import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.warning("Search failed", extra={"extra_fields": {"query": "black holes"}})
    """
    return LoggerConfig.get_logger(name)


LoggerConfig.setup_logging()
