# fpams/core/logging_config.py
import logging.config

from fpams.core.config import settings


def setup_logging(level: str | None = None) -> None:
    """Configure root logging once for the API process and the RQ worker."""
    level = (level or settings.LOG_LEVEL).upper()

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "root": {"handlers": ["console"], "level": level},
            "loggers": {
                # SQL echo is noisy; keep it behind WARNING unless asked for
                "sqlalchemy.engine": {"level": "WARNING"},
            },
        }
    )
