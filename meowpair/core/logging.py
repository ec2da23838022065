"""
Process-wide logging setup.

Modules log through `logging.getLogger(__name__)`; this only installs the
stdout handler and level once, at application start.
"""
import logging
import logging.config

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": _FORMAT},
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "formatter": "default",
            },
        },
        "loggers": {
            "meowpair": {"handlers": ["stdout"], "level": level.upper(), "propagate": False},
        },
    })
