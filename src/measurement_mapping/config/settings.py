"""Settings module -- single entry point for application configuration.

:func:`get_config` returns the merged configuration dictionary.  It loads
``config/default.yaml``, overlays the file named by
``MEASUREMENT_MAPPING_CONFIG`` when set, and finally applies any ``MMAP_``
prefixed environment variable overrides.
"""

from __future__ import annotations

import functools
import os
from pathlib import Path
from typing import Any

from measurement_mapping.domain.models import AppConfig

# Project root is two levels up from ``src/measurement_mapping/config/``.
_PROJECT_ROOT = Path(__file__).resolve().parents[3]

# Environment variable naming an optional overlay file.
_OVERLAY_ENV = "MEASUREMENT_MAPPING_CONFIG"


def get_typed_config() -> AppConfig:
    """Load and return the :class:`AppConfig` wrapper.

    Resolution order:

    1. ``config/default.yaml``
    2. The overlay file named by ``MEASUREMENT_MAPPING_CONFIG``, if set
    3. Environment variables with ``MMAP_`` prefix

    Returns
    -------
    AppConfig
        Frozen configuration object.
    """
    return AppConfig.load(
        default_path=_PROJECT_ROOT / "config" / "default.yaml",
        overlay_path=os.environ.get(_OVERLAY_ENV),
        env_prefix="MMAP_",
    )


@functools.lru_cache(maxsize=1)
def get_config() -> dict[str, Any]:
    """Return the fully merged configuration dictionary.

    The result is cached so that repeated calls within the same process are
    essentially free.  Call ``get_config.cache_clear()`` after changing the
    environment.
    """
    return get_typed_config().data

