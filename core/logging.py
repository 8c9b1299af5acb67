"""
Logging Module for AuctionBridge.

Architecture:
- Structured logging (JSON format for production)
- Multiple handlers (console + rotating file)
- Service-specific loggers with isolated log files
- Environment-aware configuration (LOG_LEVEL, ENVIRONMENT, LOG_DIR, LOG_TO_FILE)
- Correlation ID support so every line of one import can be grouped
"""

import logging
import sys
import json
import functools
import time
from pathlib import Path
from logging.handlers import RotatingFileHandler
from datetime import datetime, timezone
from typing import Optional
import os


# Project root and logs directory
PROJECT_ROOT = Path(__file__).parent.parent
LOGS_DIR = Path(os.getenv("LOG_DIR", str(PROJECT_ROOT / "logs")))

# Attributes every LogRecord carries; anything else came in through extra=
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
}


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.
    Outputs logs in JSON format for easy parsing by log aggregators.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "service": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if "correlation_id" in extra:
            log_data["correlation_id"] = extra.pop("correlation_id")
        if extra:
            log_data["extra"] = extra

        return json.dumps(log_data, default=str, ensure_ascii=False)


class ColoredConsoleFormatter(logging.Formatter):
    """
    Colored console formatter for development.
    Makes logs readable in terminal with color coding.
    """

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        # Work on a copy so the file handler never sees escape codes
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{color}{record.levelname:8}{self.RESET}"
        correlation_id = getattr(record, "correlation_id", None)
        if correlation_id:
            record.msg = f"[{correlation_id}] {record.msg}"
        return super().format(record)


def get_logger(
    service_name: str,
    log_level: Optional[str] = None,
    enable_console: bool = True,
    enable_file: Optional[bool] = None,
    enable_json: Optional[bool] = None,
) -> logging.Logger:
    """
    Get a configured logger for a service.

    Args:
        service_name: Name of the service (e.g., 'yahoo-parser', 'importer-api')
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_console: Enable console output
        enable_file: Enable file output with rotation (LOG_TO_FILE env when None)
        enable_json: Use JSON format (defaults to on in production)

    Returns:
        Configured logger instance

    Usage:
        logger = get_logger('importer')
        logger.info('Import started', extra={'correlation_id': '1a2b3c4d'})
    """
    if log_level is None:
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    environment = os.getenv("ENVIRONMENT", "development").lower()
    is_production = environment == "production"

    if enable_json is None:
        enable_json = is_production
    if enable_file is None:
        enable_file = os.getenv("LOG_TO_FILE", "true").lower() in ("1", "true", "yes")

    logger = logging.getLogger(service_name)
    logger.setLevel(getattr(logging, log_level))
    logger.handlers.clear()  # Clear existing handlers to avoid duplicates

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, log_level))

        if enable_json:
            console_formatter = StructuredFormatter()
        else:
            console_formatter = ColoredConsoleFormatter(
                fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )

        console_handler.setFormatter(console_formatter)
        logger.addHandler(console_handler)

    if enable_file:
        LOGS_DIR.mkdir(parents=True, exist_ok=True)
        log_file = LOGS_DIR / f"{service_name}.log"

        # 10MB per file, keep 5 backups
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(getattr(logging, log_level))

        if enable_json:
            file_formatter = StructuredFormatter()
        else:
            file_formatter = logging.Formatter(
                fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(module)s:%(funcName)s:%(lineno)d | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )

        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def log_execution_time(logger: logging.Logger):
    """
    Decorator to log function execution time.

    Usage:
        @log_execution_time(logger)
        def run_import():
            pass
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                result = func(*args, **kwargs)
                execution_time = time.time() - start_time
                logger.info(
                    f"{func.__name__} executed successfully",
                    extra={"execution_time_seconds": round(execution_time, 3)},
                )
                return result
            except Exception:
                execution_time = time.time() - start_time
                logger.error(
                    f"{func.__name__} failed after {execution_time:.2f}s",
                    exc_info=True,
                    extra={"execution_time_seconds": round(execution_time, 3)},
                )
                raise

        return wrapper

    return decorator
