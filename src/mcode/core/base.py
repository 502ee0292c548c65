"""Base types shared by the conversion pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

    from .config import ConversionPolicy
    from .scanner import FileEntry

LOG = logging.getLogger(__name__)


class ProcessingStatus(Enum):
    """Status of a processing operation."""

    SUCCESS = "success"
    SKIPPED = "skipped"
    DRY_RUN = "dry_run"
    FAILED = "failed"
    ERROR = "error"


@dataclass
class ProcessingResult:
    """Result of converting one file."""

    source_file: Path
    status: ProcessingStatus
    message: str = ""
    output_file: Path | None = None
    original_size: int | None = None
    new_size: int | None = None
    processing_time: float = 0.0
    source_deleted: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        """Whether the engine produced a converted destination."""
        return self.status is ProcessingStatus.SUCCESS


@dataclass(frozen=True)
class ConversionTask:
    """One eligible file paired with where it converts to."""

    source: FileEntry
    destination: Path
    policy: ConversionPolicy


class ProcessingError(Exception):
    """Base exception for conversion errors."""

    def __init__(
        self,
        message: str,
        file_path: Path | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.file_path = file_path
        self.cause = cause
