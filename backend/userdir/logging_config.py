"""
Logging Configuration
Console logging for the service, plus a rotating userdir.log when the log
directory is writable.
"""

import logging
import logging.config
import sys
from pathlib import Path

# Third-party loggers kept at INFO whatever the service level is
_LIBRARY_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "celery")


def _prepare_log_file(log_dir: str) -> Path | None:
    """Returns the log file path, or None when the directory cannot be created."""
    try:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
    except OSError:
        return None
    return Path(log_dir) / "userdir.log"


def setup_logging(log_dir: str = "/var/log/userdir", log_level: str = "INFO"):
    """
    Configure logging for the service.

    Args:
        log_dir: Directory for userdir.log. Falls back to console only when
            it cannot be created, e.g. when running as a non-root user.
        log_level: Logging level (default: INFO)
    """
    log_file_path = _prepare_log_file(log_dir)

    handlers_config = {
        "console": {
            "class": "logging.StreamHandler",
            "stream": sys.stdout,
            "formatter": "default",
            "level": log_level,
        },
    }
    if log_file_path is not None:
        handlers_config["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": str(log_file_path),
            "maxBytes": 10 * 1024 * 1024,  # 10 MB
            "backupCount": 5,
            "formatter": "default",
            "level": log_level,
            "encoding": "utf8",
        }
    handlers = list(handlers_config)

    loggers = {
        "": {"handlers": handlers, "level": log_level, "propagate": True},
        "userdir": {"handlers": handlers, "level": log_level, "propagate": False},
    }
    for name in _LIBRARY_LOGGERS:
        loggers[name] = {"handlers": handlers, "level": "INFO", "propagate": False}

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": handlers_config,
            "loggers": loggers,
        }
    )

    logger = logging.getLogger("userdir")
    if log_file_path is None:
        logger.warning(f"Log directory {log_dir} is not writable; logging to console only")
    else:
        logger.info(f"Logging initialized. Writing logs to {log_file_path}")
