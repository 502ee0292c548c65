"""Serial pipeline driving discovered files through conversion and deletion."""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING

from .base import ConversionTask, ProcessingError, ProcessingResult, ProcessingStatus
from .filters import is_eligible
from .scanner import scan

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from ..processors.video_processor import Mp4Converter
    from .config import ConversionPolicy
    from .scanner import FileEntry

LOG = logging.getLogger(__name__)


def process_directory(root: Path, converter: Mp4Converter, policy: ConversionPolicy) -> list[ProcessingResult]:
    """
    Scan ``root`` and convert every eligible file in discovery order.

    Args:
        root: Directory to process
        converter: Converter that performs each conversion
        policy: Run policy (commit, force, delete, recursive, extensions)

    Returns:
        One result per eligible file

    """
    LOG.info("Scanning directory: %s (recursive: %s)", root, policy.recursive)
    queue = scan(root, recursive=policy.recursive)
    LOG.info("Found %d files", len(queue))

    results = run_pipeline(queue, converter, policy)
    _log_summary(results, dry_run=policy.dry_run)
    return results


def run_pipeline(
    queue: Iterable[FileEntry], converter: Mp4Converter, policy: ConversionPolicy
) -> list[ProcessingResult]:
    """
    Consume the queue strictly from the front, one conversion at a time.

    Each item is converted, then its source deletion is decided, before the
    next item is taken. Ineligible items are passed over without a result.
    """
    pending = deque(queue)
    results: list[ProcessingResult] = []

    while pending:
        entry = pending.popleft()
        if not is_eligible(entry.extension, policy.extensions):
            continue

        task = ConversionTask(
            source=entry,
            destination=converter.destination_for(entry, policy),
            policy=policy,
        )
        results.append(_process_task(task, converter))

    return results


def _process_task(task: ConversionTask, converter: Mp4Converter) -> ProcessingResult:
    """Convert one file, then delete its source if the policy allows."""
    source = task.source.absolute_path
    result = converter.convert(source, task.destination, task.policy)

    destination_exists = task.destination.exists()
    if not (destination_exists and result.succeeded):
        return result

    try:
        result.source_deleted = converter.file_manager.maybe_delete(
            source,
            destination_exists=destination_exists,
            succeeded=result.succeeded,
            policy=task.policy,
        )
    except ProcessingError as e:
        LOG.exception("Converted %s but could not delete the source", source)
        result.status = ProcessingStatus.ERROR
        result.message = str(e)
    return result


def _log_summary(results: list[ProcessingResult], *, dry_run: bool) -> None:
    """Log how the run went."""
    counts = {status: 0 for status in ProcessingStatus}
    for result in results:
        counts[result.status] += 1
    deleted = sum(1 for result in results if result.source_deleted)

    if dry_run:
        would_convert = sum(1 for result in results if result.metadata.get("would_convert", True))
        LOG.info(
            "Dry run complete: %d files would be converted, %d skipped (use --commit to convert)",
            would_convert,
            len(results) - would_convert,
        )
        return

    LOG.info(
        "Processing complete: %d converted, %d skipped, %d failed, %d errors, %d sources deleted",
        counts[ProcessingStatus.SUCCESS],
        counts[ProcessingStatus.SKIPPED],
        counts[ProcessingStatus.FAILED],
        counts[ProcessingStatus.ERROR],
        deleted,
    )
