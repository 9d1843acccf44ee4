"""Logging setup.

Usage::

    from ring_trng.log import get_logger
    logger = get_logger(__name__)
    logger.debug("cell 2 fully enabled")
"""

from __future__ import annotations

import logging

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str, config: dict | None = None) -> logging.Logger:
    """Create and return a configured logger.

    Args:
        name: Logger name (typically __name__ of the calling module).
        config: Optional ``logging`` section of the configuration file,
            with ``level`` and ``format`` keys.

    Returns:
        Configured logging.Logger instance.
    """
    log_cfg = config or {}

    logger = logging.getLogger(name)

    # Avoid adding duplicate handlers if called multiple times
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(log_cfg.get("format", DEFAULT_FORMAT)))
        logger.addHandler(handler)

    if "level" in log_cfg:
        logger.setLevel(getattr(logging, str(log_cfg["level"]).upper(), logging.WARNING))
    elif logger.level == logging.NOTSET:
        logger.setLevel(logging.WARNING)
    return logger
