# File: community_action/core/logging.py

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Install a single stream handler on the package logger.

    Safe to call more than once (tests build the app repeatedly).
    """
    logger = logging.getLogger("community_action")
    logger.setLevel(level.upper())

    if not any(getattr(h, "_community_action", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._community_action = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
