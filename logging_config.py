"""Structured JSON logging for the alarm service."""

import logging
import sys

import structlog


def configure_logging(level: str = "INFO") -> None:
    """Route structlog events through stdlib logging as one JSON object per line."""
    timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            timestamper,
            structlog.processors.add_log_level,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers = [handler]

    # urllib3 connection chatter is noise next to the decision log
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    structlog.get_logger(__name__).info("logging_configured", level=level.upper())
