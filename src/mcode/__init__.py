"""mcode - batch conversion of video files into mp4."""

from __future__ import annotations

__version__ = "0.1.0"
__description__ = "Batch conversion of video files into mp4 with HandBrakeCLI"

# Public API exports
from .config import McodeConfig, get_config
from .core import (
    ConfigManager,
    ConversionPolicy,
    FileEntry,
    FileManager,
    HandBrakeEngine,
    HandBrakeError,
    ProcessingError,
    ProcessingResult,
    ProcessingStatus,
    is_eligible,
    scan,
)
from .core.directory_processor import process_directory, run_pipeline
from .processors import Mp4Converter

__all__ = [
    # Configuration
    "McodeConfig",
    "get_config",
    "ConfigManager",
    "ConversionPolicy",
    # Pipeline
    "scan",
    "is_eligible",
    "Mp4Converter",
    "FileManager",
    "HandBrakeEngine",
    "process_directory",
    "run_pipeline",
    # Data classes
    "FileEntry",
    "ProcessingResult",
    "ProcessingStatus",
    # Exceptions
    "ProcessingError",
    "HandBrakeError",
]
