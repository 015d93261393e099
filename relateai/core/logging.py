"""
Logging setup: console + rotating file via dictConfig.
"""
import logging
import logging.config
import sys
from pathlib import Path
from typing import Optional

from relateai.config import settings

LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 3


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    level = (level or settings.LOG_LEVEL).upper()
    path = Path(log_file or settings.LOG_FILE)
    path.parent.mkdir(parents=True, exist_ok=True)

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "stream": sys.stdout,
                "level": level,
                "formatter": "default",
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "filename": str(path),
                "maxBytes": LOG_MAX_BYTES,
                "backupCount": LOG_BACKUPS,
                "encoding": "utf-8",
                "level": "DEBUG",
                "formatter": "default",
            },
        },
        "loggers": {
            "uvicorn.error": {"handlers": ["console", "file"], "level": level, "propagate": False},
            "uvicorn.access": {"handlers": ["console", "file"], "level": level, "propagate": False},
            "relateai": {"handlers": ["console", "file"], "level": level, "propagate": False},
        },
        "root": {"handlers": ["console", "file"], "level": level},
    }
    logging.config.dictConfig(config)

    # Third-party chatter
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
