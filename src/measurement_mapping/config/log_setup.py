"""Root logger configuration for host applications embedding the mapping."""

from __future__ import annotations

import logging

from measurement_mapping.config.settings import get_config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: int | str | None = None) -> None:
    """Set up the root logger.

    Parameters
    ----------
    level:
        Logging level name or number.  When ``None`` the ``logging.level``
        configuration key is used, defaulting to ``INFO``.
    """
    if level is None:
        level = get_config().get("logging", {}).get("level", "INFO")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=DATE_FORMAT)
