"""
core/logging.py

Centralized logging configuration for the API.
- Colored console output via colorlog
- Rotating logs/app.log (1MB max, 5 backups)
- Separate logs/error.log for ERROR and above
- Root level driven by settings.LOG_LEVEL

Initialized once at startup from guardhub.main.
"""

import os
from logging.config import dictConfig
from typing import Any

from guardhub.core.config import BASE_DIR, settings

LOG_DIR = os.path.join(BASE_DIR, "logs")
os.makedirs(LOG_DIR, exist_ok=True)

LOG_LEVEL = settings.LOG_LEVEL.upper()
LOG_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] in %(module)s: %(message)s"

LOGGING_CONFIG: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {"format": LOG_FORMAT},
        "color": {
            "()": "colorlog.ColoredFormatter",
            "format": f"%(log_color)s{LOG_FORMAT}",
            "log_colors": {
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "color",
        },
        "file": {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": os.path.join(LOG_DIR, "app.log"),
            "maxBytes": 1 * 1024 * 1024,  # 1MB
            "backupCount": 5,
            "formatter": "default",
            "encoding": "utf-8",
        },
        "error_file": {
            "class": "logging.FileHandler",
            "filename": os.path.join(LOG_DIR, "error.log"),
            "level": "ERROR",
            "formatter": "default",
            "encoding": "utf-8",
        },
    },
    "loggers": {
        "uvicorn": {"level": "WARNING"},
        "sqlalchemy": {"level": "WARNING"},
        "botocore": {"level": "WARNING"},
    },
    "root": {
        "level": LOG_LEVEL,
        "handlers": ["console", "file", "error_file"],
    },
}


def init_logging() -> None:
    """Applies LOGGING_CONFIG to the root logger."""
    dictConfig(LOGGING_CONFIG)
