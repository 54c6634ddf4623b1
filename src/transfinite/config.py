"""Surface evaluation settings with YAML file and environment override support.

Settings are looked up in this order:

1. An explicit path passed to :func:`load_settings`
2. The file named by the ``TRANSFINITE_CONFIG`` environment variable
3. The user config file (``~/.config/transfinite/settings.yaml``)
4. Built-in defaults

A settings file is a YAML mapping using the field names of
:class:`SurfaceSettings`, for example::

    use_gamma: false
    epsilon: 1.0e-9
    resolution: 30
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

__all__ = [
    "TRANSFINITE_CONFIG",
    "SurfaceSettings",
    "load_settings",
    "settings_from_mapping",
    "clear_cache",
]

logger = logging.getLogger(__name__)

# Environment variable naming a settings file
TRANSFINITE_CONFIG = "TRANSFINITE_CONFIG"

_USER_CONFIG = Path.home() / ".config" / "transfinite" / "settings.yaml"


@dataclass(frozen=True)
class SurfaceSettings:
    """Numerical settings shared by every surface.

    Parameters
    ----------
    use_gamma : bool
        Use the rational ``d / (2d + 1)`` remapping of interior distances
        instead of the identity.
    epsilon : float
        Distance below which a side counts as "on the boundary" in the
        blend functions, and below which ``u + v`` counts as zero in the
        rational twist.
    twist_step : float
        Finite difference step used to estimate corner twist vectors.
    resolution : int
        Default domain resolution for mesh sampling.
    """

    use_gamma: bool = True
    epsilon: float = 1.0e-8
    twist_step: float = 1.0e-4
    resolution: int = 15

    def __post_init__(self):
        if self.epsilon <= 0.0:
            raise ValueError(f"epsilon must be positive, got {self.epsilon}")
        if self.twist_step <= 0.0:
            raise ValueError(f"twist_step must be positive, got {self.twist_step}")
        if not isinstance(self.resolution, int) or self.resolution < 1:
            raise ValueError(f"resolution must be an integer >= 1, got {self.resolution}")


def clear_cache() -> None:
    """Clear cached settings.

    Call this after editing a settings file or changing the environment.
    """
    _load_settings_cached.cache_clear()


def settings_from_mapping(data: Optional[Dict[str, Any]],
                          base: Optional[SurfaceSettings] = None) -> SurfaceSettings:
    """Build settings from a mapping, starting from ``base`` (or defaults)."""
    base = base or SurfaceSettings()
    if not data:
        return base
    if not isinstance(data, dict):
        raise ValueError("settings must be a mapping")
    known = {f.name for f in fields(SurfaceSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"unknown settings: {', '.join(unknown)}")
    values = dict(data)
    if "use_gamma" in values:
        if not isinstance(values["use_gamma"], bool):
            raise ValueError(f"use_gamma must be true or false, got {values['use_gamma']!r}")
    for key in ("epsilon", "twist_step"):
        if key in values:
            values[key] = float(values[key])
    return replace(base, **values)


def _settings_path(path: Optional[Path]) -> Optional[Path]:
    if path is not None:
        return Path(path)
    env_path = os.environ.get(TRANSFINITE_CONFIG)
    if env_path:
        return Path(env_path.strip())
    if _USER_CONFIG.is_file():
        return _USER_CONFIG
    return None


@lru_cache(maxsize=None)
def _load_settings_cached(path: Optional[Path]) -> SurfaceSettings:
    if path is None:
        return SurfaceSettings()
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    logger.debug("loaded surface settings from %s", path)
    return settings_from_mapping(data)


def load_settings(path: Optional[os.PathLike] = None) -> SurfaceSettings:
    """Return the active :class:`SurfaceSettings`.

    Raises ``FileNotFoundError`` if an explicit path (or the file named by
    ``TRANSFINITE_CONFIG``) does not exist, and ``ValueError`` for invalid
    contents.
    """
    return _load_settings_cached(_settings_path(path))
