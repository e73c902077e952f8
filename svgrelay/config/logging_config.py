import logging

import structlog


def configure_logging(level: str = "INFO"):
    """
    Sets the structlog level filter for the whole process.
    Args:
        level (str): Standard logging level name (`DEBUG`, `INFO`, ...). Unknown names fall back to `INFO`.
    """
    numeric_level = logging.getLevelName(str(level).upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=False,
    )
