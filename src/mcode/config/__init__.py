"""Configuration management for mcode."""

from __future__ import annotations

from .constants import *  # noqa: F403, F401
from .settings import McodeConfig, get_config

__all__ = [
    "McodeConfig",
    "get_config",
]
