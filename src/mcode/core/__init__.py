"""Core abstractions and utilities for mcode."""

from .base import ConversionTask, ProcessingError, ProcessingResult, ProcessingStatus
from .config import ConfigManager, ConversionPolicy
from .file_manager import FileManager, FileOperation
from .filters import is_eligible, parse_extensions
from .handbrake import (
    EngineEvent,
    EngineEventType,
    HandBrakeEngine,
    HandBrakeError,
    Progress,
    TranscodingEngine,
    parse_progress_line,
)
from .scanner import FileEntry, FileMetadata, scan, split_filename

__all__ = [
    "ConfigManager",
    "ConversionPolicy",
    "ConversionTask",
    "EngineEvent",
    "EngineEventType",
    "FileEntry",
    "FileManager",
    "FileMetadata",
    "FileOperation",
    "HandBrakeEngine",
    "HandBrakeError",
    "ProcessingError",
    "ProcessingResult",
    "ProcessingStatus",
    "Progress",
    "TranscodingEngine",
    "is_eligible",
    "parse_extensions",
    "parse_progress_line",
    "scan",
    "split_filename",
]
