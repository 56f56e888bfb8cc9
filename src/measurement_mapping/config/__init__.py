"""Configuration sub-package.

Provides settings loading, typed configuration access and logging setup.

Quick usage::

    from measurement_mapping.config import configure_logging, get_config

    configure_logging()
    print(get_config()["logging"]["level"])
"""

from __future__ import annotations

from measurement_mapping.config.log_setup import configure_logging
from measurement_mapping.config.settings import (
    get_config,
    get_typed_config,
)

__all__ = [
    "configure_logging",
    "get_config",
    "get_typed_config",
]
