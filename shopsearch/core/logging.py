"""
Logging configuration for the engine.

Usage:
    from shopsearch.core.logging import setup_logging
    setup_logging()

    # Library modules keep using standard loggers:
    import logging
    logger = logging.getLogger(__name__)

Index rebuilds and query summaries are logged at INFO; skipped catalog
records at WARNING, which in production also land in logs/engine_errors.log.
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

import structlog

from shopsearch.core.config import Settings, settings as default_settings

LOG_DIR = Path("logs")
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024  # 10MB
LOG_FILE_BACKUPS = 5
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
CONSOLE_FORMATS = {
    "json": "%(message)s",
    "console": "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
}


def _renderer(log_format: str):
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False, exception_formatter=structlog.dev.plain_traceback)


def _rotating_handler(filename: str, level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(LOG_DIR / filename, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


def setup_logging(config: Optional[Settings] = None):
    """Configure structlog and the root logger from engine settings."""
    config = config or default_settings
    log_level = getattr(logging, config.log_level.upper(), logging.INFO)

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
            _renderer(config.log_format),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        logging.Formatter(CONSOLE_FORMATS.get(config.log_format, CONSOLE_FORMATS["console"]))
    )

    handlers = [console_handler]
    if config.environment == "production":
        LOG_DIR.mkdir(exist_ok=True)
        handlers.append(_rotating_handler("engine.log", logging.DEBUG))
        handlers.append(_rotating_handler("engine_errors.log", logging.WARNING))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = handlers

    logging.getLogger(__name__).info(
        f"Logging configured: app={config.app_name}, level={config.log_level}, "
        f"format={config.log_format}, env={config.environment}"
    )
