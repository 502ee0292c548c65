"""Run policy and configuration access."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..config import McodeConfig
from ..config import get_config as _get_global_config
from ..config.constants import DEFAULT_EXTENSIONS, DEFAULT_PRESET, DEFAULT_TARGET_EXTENSION
from .filters import parse_extensions

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionPolicy:
    """Immutable flags and settings governing a single run."""

    commit: bool = False
    force: bool = False
    delete: bool = False
    recursive: bool = False
    extensions: tuple[str, ...] = tuple(DEFAULT_EXTENSIONS.split(","))
    preset: str = DEFAULT_PRESET
    target_extension: str = DEFAULT_TARGET_EXTENSION

    @property
    def dry_run(self) -> bool:
        """True when nothing on disk may change."""
        return not self.commit


class ConfigManager:
    """Configuration manager that turns settings and flags into a policy."""

    def __init__(self, config_path: Path | None = None) -> None:
        """
        Initialize configuration manager.

        Args:
            config_path: Optional path to a YAML config file

        """
        self._config = McodeConfig.load_from_file(config_path) if config_path else _get_global_config()

    @property
    def config(self) -> McodeConfig:
        """Get the base configuration."""
        return self._config

    def get_value(self, key_path: str, default: object = None) -> object:
        """Get a configuration value by dotted path, e.g. ``engine.preset``."""
        try:
            value: object = self._config
            for part in key_path.split("."):
                value = getattr(value, part)
        except AttributeError:
            return default
        else:
            return value

    def build_policy(  # noqa: PLR0913
        self,
        *,
        commit: bool = False,
        force: bool = False,
        delete: bool = False,
        recursive: bool = False,
        extensions: str | Iterable[str] | None = None,
        preset: str | None = None,
    ) -> ConversionPolicy:
        """Merge command line flags over configured defaults."""
        if extensions is None:
            extensions = self._config.conversion.extensions

        policy = ConversionPolicy(
            commit=commit,
            force=force,
            delete=delete,
            recursive=recursive,
            extensions=parse_extensions(extensions),
            preset=preset or self._config.engine.preset,
            target_extension=self._config.conversion.target_extension,
        )
        if not policy.extensions:
            LOG.warning("Extension list is empty, no file will be converted")
        LOG.debug("Run policy: %s", policy)
        return policy
