"""
Logging Configuration
Sets up centralized logging for the API, writing to the console and, when a
log directory is configured, to a rotating file.
"""

import os
import sys
import logging
import logging.config
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def build_logging_config(log_file_path: str | None, log_level: str = "INFO") -> dict:
    """Build the dictConfig payload. Without a file path only the console is used."""
    handler_names = ["console"]
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "stream": sys.stdout,
            "formatter": "default",
            "level": log_level,
        },
    }
    if log_file_path:
        handler_names.append("file")
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": log_file_path,
            "maxBytes": 10 * 1024 * 1024,  # 10 MB
            "backupCount": 5,
            "formatter": "default",
            "level": log_level,
            "encoding": "utf8",
        }

    def logger_entry(level: str) -> dict:
        return {"handlers": handler_names, "level": level, "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": LOG_FORMAT, "datefmt": DATE_FORMAT},
        },
        "handlers": handlers,
        "loggers": {
            "": {  # Root logger
                "handlers": handler_names,
                "level": log_level,
                "propagate": True,
            },
            "uvicorn": logger_entry("INFO"),
            "uvicorn.error": logger_entry("INFO"),
            "uvicorn.access": logger_entry("INFO"),
            # Request-level HTTP chatter from the media store client
            "httpx": logger_entry("WARNING"),
            "app": logger_entry(log_level),
        },
    }


def setup_logging(log_dir: str | None = "/var/log/bandhan", log_level: str = "INFO"):
    """
    Configure logging for the application.

    Args:
        log_dir: Directory to store log files. Empty or None logs to console only.
        log_level: Logging level (default: INFO)
    """
    log_file_path = None
    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        log_file_path = os.path.join(log_dir, "app.log")

    logging.config.dictConfig(build_logging_config(log_file_path, log_level))

    logger = logging.getLogger("app")
    if log_file_path:
        logger.info(f"Logging initialized. Writing logs to {log_file_path}")
    else:
        logger.info("Logging initialized (console only)")
