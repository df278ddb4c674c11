import logging.config

from participium.config import settings


def setup_logging() -> None:
    """Configure stdlib logging once at startup."""
    level = settings.LOG_LEVEL.upper()
    logging.config.dictConfig({
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
                "stream": "ext://sys.stdout",
            },
        },
        "root": {"handlers": ["console"], "level": level},
        "loggers": {
            # SQL echo is opt-in through LOG_LEVEL=DEBUG
            "sqlalchemy.engine": {"level": "INFO" if level == "DEBUG" else "WARNING"},
            "uvicorn.access": {"level": level},
        },
    })
