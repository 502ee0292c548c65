"""Configuration management for mcode."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .constants import DEFAULT_ENGINE_BINARY, DEFAULT_EXTENSIONS, DEFAULT_PRESET, DEFAULT_TARGET_EXTENSION

LOG = logging.getLogger(__name__)


# Configuration singleton
class _ConfigSingleton:
    """Configuration singleton holder."""

    _instance: McodeConfig | None = None

    @classmethod
    def get_instance(cls) -> McodeConfig:
        """Get the configuration instance."""
        if cls._instance is None:
            config_path = Path.cwd() / "config.yaml"
            if config_path.exists():
                cls._instance = McodeConfig.load_from_file(config_path)
            else:
                cls._instance = McodeConfig()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the configuration instance."""
        cls._instance = None


_config_singleton = _ConfigSingleton()


@dataclass
class EngineConfig:
    """Transcoding engine settings."""

    binary: str = DEFAULT_ENGINE_BINARY
    preset: str = DEFAULT_PRESET


@dataclass
class ConversionConfig:
    """Which files are converted and into what."""

    extensions: str = DEFAULT_EXTENSIONS
    target_extension: str = DEFAULT_TARGET_EXTENSION


@dataclass
class GlobalConfig:
    """Global settings."""

    log_level: str = "INFO"


@dataclass
class McodeConfig:
    """Main configuration class."""

    conversion: ConversionConfig = field(default_factory=ConversionConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    @classmethod
    def load_from_file(cls, config_path: Path) -> McodeConfig:
        """Load configuration from YAML file."""
        try:
            with config_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)

            return cls._from_dict(data or {})
        except (OSError, yaml.YAMLError) as e:
            LOG.warning("Failed to load config from %s: %s", config_path, e)
            return cls()

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> McodeConfig:
        """Create config from dictionary."""
        if not isinstance(data, dict):
            LOG.warning("Ignoring config: expected a mapping, got %s", type(data).__name__)
            return cls()

        return cls(
            conversion=cls._parse_conversion_config(data.get("conversion") or {}),
            engine=cls._parse_engine_config(data.get("engine") or {}),
            global_=GlobalConfig(log_level=str((data.get("global") or {}).get("log_level", "INFO"))),
        )

    @classmethod
    def _parse_conversion_config(cls, conversion_data: dict[str, Any]) -> ConversionConfig:
        """Parse conversion configuration."""
        extensions = conversion_data.get("extensions", DEFAULT_EXTENSIONS)
        # A YAML list is accepted as well as the comma separated form
        if isinstance(extensions, (list, tuple)):
            extensions = ",".join(str(ext) for ext in extensions)

        target_extension = str(conversion_data.get("target_extension", DEFAULT_TARGET_EXTENSION)).lstrip(".")
        if not target_extension:
            LOG.warning("Empty target_extension in config. Using '%s'", DEFAULT_TARGET_EXTENSION)
            target_extension = DEFAULT_TARGET_EXTENSION

        return ConversionConfig(extensions=str(extensions), target_extension=target_extension)

    @classmethod
    def _parse_engine_config(cls, engine_data: dict[str, Any]) -> EngineConfig:
        """Parse engine configuration."""
        return EngineConfig(
            binary=str(engine_data.get("binary", DEFAULT_ENGINE_BINARY)),
            preset=str(engine_data.get("preset", DEFAULT_PRESET)),
        )


def get_config() -> McodeConfig:
    """Get the global configuration instance."""
    return _config_singleton.get_instance()
