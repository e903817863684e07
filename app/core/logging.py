"""Global logging configuration"""

import logging
import sys

from app.core.config import settings


class ColoredFormatter(logging.Formatter):
    """Colored log formatter (development only)"""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logging() -> None:
    """Configure root logging for the application

    Every record carries the current request id (see ``RequestIdFilter``).
    """
    # imported here: the middlewares package imports this module
    from app.core.middlewares.context import RequestIdFilter

    log_level = logging.DEBUG if settings.debug else logging.INFO

    if settings.is_development:
        log_fmt = (
            "%(asctime)s | %(levelname)-8s | %(request_id)s | "
            "%(name)s:%(lineno)d | %(message)s"
        )
        formatter: logging.Formatter = ColoredFormatter(
            fmt=log_fmt,
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        # one JSON object per line for the log shipper
        json_fmt = (
            '{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
            '"logger": "%(name)s", "request_id": "%(request_id)s", '
            '"message": "%(message)s"}'
        )
        formatter = logging.Formatter(
            fmt=json_fmt,
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.setLevel(log_level)
    handler.addFilter(RequestIdFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # noisy third-party loggers
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.database_echo else logging.WARNING
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("LiteLLM").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a logger instance

    Args:
        name: logger name (usually ``__name__``)

    Returns:
        logging.Logger: configured logger

    Example::

        from app.core.logging import get_logger
        logger = get_logger(__name__)
        logger.info("Recommendations generated")
    """
    return logging.getLogger(name)
