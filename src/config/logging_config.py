"""Console logging setup for suite runs."""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Chatty third-party loggers kept at WARNING unless explicitly asked for
NOISY_LOGGERS = ("asyncio", "urllib3")


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for a suite run.

    Args:
        level: Log level name, e.g. "DEBUG" or "INFO"
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
    logging.getLogger().setLevel(numeric_level)

    if numeric_level > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
