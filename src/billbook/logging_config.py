"""Logging configuration for the billbook command line."""

import logging
import logging.config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def build_logging_config(level: int = logging.WARNING) -> dict:
    """Return a dictConfig mapping that logs billbook records to stderr."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": LOG_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "stream": "ext://sys.stderr",
                "level": level,
            },
        },
        "loggers": {
            "billbook": {
                "handlers": ["console"],
                "level": level,
                "propagate": False,
            },
        },
    }


def configure_logging(verbose: bool = False) -> None:
    """Configure billbook logging: WARNING by default, DEBUG when verbose."""
    logging.config.dictConfig(build_logging_config(logging.DEBUG if verbose else logging.WARNING))
