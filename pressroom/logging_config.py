import logging.config

from pressroom.config import settings


def configure_logging(level: str | None = None) -> None:
    """Install the console handler used by the app and uvicorn alike."""
    level = (level or settings.LOG_LEVEL).upper()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {
                "pressroom": {"level": level},
            },
            "root": {"handlers": ["console"], "level": level},
        }
    )
