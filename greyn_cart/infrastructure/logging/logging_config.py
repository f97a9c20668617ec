"""
Logging configuration for the Greyn Eco cart service

Console output for development, rotating JSON files for the main and error
logs, and structlog for structured request events.
"""

import logging
import logging.handlers
import os
import sys
import threading
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
from pythonjsonlogger import jsonlogger

from greyn_cart.infrastructure.configuration.config import Settings, get_config
from greyn_cart.infrastructure.utilities.constants import LoggingSettings


class CartJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter with process, thread and cart context fields"""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["thread_name"] = threading.current_thread().name
        log_record["process_id"] = os.getpid()

        if hasattr(record, "storage_key"):
            log_record["storage_key"] = record.storage_key

        if hasattr(record, "operation_time"):
            log_record["operation_time_ms"] = record.operation_time


def setup_logging(config: Optional[Settings] = None) -> None:
    """
    Setup logging for the service

    Features:
    - Human readable console output outside production
    - Rotating JSON application log
    - Rotating JSON error-only log
    - structlog routed through the stdlib handlers
    """
    config = config or get_config()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.log_level.upper()))

    # Clear existing handlers
    root_logger.handlers.clear()

    if config.environment != "production":
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(console_handler)
    else:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(CartJsonFormatter())
        root_logger.addHandler(console_handler)

    if config.enable_file_logging:
        logs_dir = Path(config.log_dir)
        logs_dir.mkdir(parents=True, exist_ok=True)

        app_handler = logging.handlers.RotatingFileHandler(
            logs_dir / LoggingSettings.MAIN_LOG_FILE,
            maxBytes=LoggingSettings.MAX_LOG_FILE_SIZE,
            backupCount=LoggingSettings.MAIN_LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        app_handler.setFormatter(CartJsonFormatter())
        app_handler.setLevel(logging.INFO)
        root_logger.addHandler(app_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            logs_dir / LoggingSettings.ERROR_LOG_FILE,
            maxBytes=LoggingSettings.MAX_LOG_FILE_SIZE,
            backupCount=LoggingSettings.ERROR_LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        error_handler.setFormatter(CartJsonFormatter())
        error_handler.setLevel(logging.ERROR)
        root_logger.addHandler(error_handler)

    _configure_structlog()
    _configure_external_loggers()

    logging.getLogger(__name__).info(
        "Logging configured - Level: %s, Environment: %s, Files: %s",
        config.log_level,
        config.environment,
        config.enable_file_logging,
    )


def _configure_structlog() -> None:
    """Configure structlog to render JSON through the stdlib loggers"""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _configure_external_loggers() -> None:
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_structured_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance"""
    return structlog.get_logger(name)


class PerformanceLogger:
    """Context manager for performance logging"""

    def __init__(
        self,
        operation_name: str,
        logger: Optional[logging.Logger] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.operation_name = operation_name
        self.logger = logger or logging.getLogger(__name__)
        self.details = details or {}
        self.start_time = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.debug(
            "Starting operation: %s",
            self.operation_name,
            extra={"operation": self.operation_name, **self.details},
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = (time.perf_counter() - self.start_time) * 1000

        if exc_type is None:
            self.logger.debug(
                "Completed operation: %s",
                self.operation_name,
                extra={
                    "operation": self.operation_name,
                    "operation_time": duration,
                    "success": True,
                    **self.details,
                },
            )
        else:
            self.logger.error(
                "Failed operation: %s",
                self.operation_name,
                extra={
                    "operation": self.operation_name,
                    "operation_time": duration,
                    "success": False,
                    "error_type": exc_type.__name__,
                    "error_message": str(exc_val),
                    **self.details,
                },
            )
        return False
