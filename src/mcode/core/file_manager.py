"""Output placement and source deletion."""

from __future__ import annotations

import logging
import os
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..config.constants import TEMP_OUTPUT_MARKER
from .base import ProcessingError

if TYPE_CHECKING:
    from .config import ConversionPolicy

LOG = logging.getLogger(__name__)


@dataclass
class FileOperation:
    """Record of one filesystem change made during the session."""

    operation_type: str
    source_path: Path
    target_path: Path | None = None
    success: bool = False
    timestamp: float = 0.0

    def __post_init__(self) -> None:
        """Set timestamp if not provided."""
        if self.timestamp == 0.0:
            self.timestamp = time.time()


class FileManager:
    """Moves finished conversions into place and deletes converted sources."""

    def __init__(self) -> None:
        """Initialize an empty session."""
        self.session_operations: list[FileOperation] = []

    def reserve_temp_output(self, destination: Path) -> Path:
        """
        Create an empty, uniquely named sibling file for the engine to write to.

        The name is never one that already existed, so discarding it later
        cannot remove a file this session did not make.

        Raises:
            ProcessingError: the file could not be created

        """
        try:
            with tempfile.NamedTemporaryFile(
                dir=destination.parent,
                prefix=f"{destination.stem}.",
                suffix=f"{TEMP_OUTPUT_MARKER}{destination.suffix}",
                delete=False,
            ) as tmp:
                temp_path = Path(tmp.name)
        except OSError as e:
            msg = f"Could not create temporary output next to {destination}: {e}"
            raise ProcessingError(msg, file_path=destination, cause=e) from e

        self.session_operations.append(
            FileOperation(operation_type="output_reserve", source_path=temp_path, target_path=destination, success=True)
        )
        return temp_path

    def commit_output(self, temp_path: Path, destination: Path) -> FileOperation:
        """Atomically move a finished conversion over ``destination``."""
        try:
            os.replace(temp_path, destination)
        except OSError as e:
            self.session_operations.append(
                FileOperation(operation_type="output_commit", source_path=temp_path, target_path=destination)
            )
            self.discard_output(temp_path)
            msg = f"Could not move converted file into place: {e}"
            raise ProcessingError(msg, file_path=destination, cause=e) from e

        operation = FileOperation(
            operation_type="output_commit",
            source_path=temp_path,
            target_path=destination,
            success=True,
        )
        self.session_operations.append(operation)
        LOG.debug("Committed %s -> %s", temp_path, destination)
        return operation

    def discard_output(self, temp_path: Path) -> None:
        """Remove a partial conversion, if the engine left one."""
        try:
            if temp_path.exists():
                temp_path.unlink()
                self.session_operations.append(
                    FileOperation(operation_type="output_discard", source_path=temp_path, success=True)
                )
                LOG.debug("Removed partial output: %s", temp_path)
        except OSError as e:
            LOG.warning("Failed to remove partial output %s: %s", temp_path, e)

    def maybe_delete(
        self,
        source: Path,
        *,
        destination_exists: bool,
        succeeded: bool,
        policy: ConversionPolicy,
    ) -> bool:
        """
        Delete a converted source when every condition holds.

        The source is removed only for a committed run with deletion enabled,
        after a successful conversion whose destination exists on disk.
        Otherwise nothing happens.

        Returns:
            True if the source was deleted

        Raises:
            ProcessingError: the source could not be removed

        """
        if not (policy.delete and policy.commit and destination_exists and succeeded):
            return False

        LOG.warning("Delete: %s", source, extra={"highlight": True})
        try:
            source.unlink()
        except OSError as e:
            self.session_operations.append(FileOperation(operation_type="delete", source_path=source))
            msg = f"Failed to delete {source}: {e}"
            raise ProcessingError(msg, file_path=source, cause=e) from e

        self.session_operations.append(FileOperation(operation_type="delete", source_path=source, success=True))
        return True

    def get_session_summary(self) -> dict[str, Any]:
        """Get summary of file operations in this session."""
        successful_ops = [op for op in self.session_operations if op.success]
        failed_ops = [op for op in self.session_operations if not op.success]

        return {
            "total_operations": len(self.session_operations),
            "successful_operations": len(successful_ops),
            "failed_operations": len(failed_ops),
            "outputs_committed": sum(1 for op in successful_ops if op.operation_type == "output_commit"),
            "sources_deleted": sum(1 for op in successful_ops if op.operation_type == "delete"),
            "operations": self.session_operations,
        }
