"""MP4 conversion of a single file through the transcoding engine."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Protocol

from ..core import (
    EngineEventType,
    FileManager,
    HandBrakeEngine,
    ProcessingError,
    ProcessingResult,
    ProcessingStatus,
)

if TYPE_CHECKING:
    from pathlib import Path

    from ..core import ConversionPolicy, FileEntry, Progress, TranscodingEngine


class ConversionObserver(Protocol):
    """Receives the engine's live status for the conversion in progress."""

    def begin(self) -> None:
        """Real work started."""

    def progress(self, progress: Progress) -> None:
        """A status update arrived."""

    def complete(self) -> None:
        """The engine finished, successfully or not."""


class Mp4Converter:
    """Converts one file at a time, honouring the commit and force flags."""

    def __init__(
        self,
        engine: TranscodingEngine | None = None,
        file_manager: FileManager | None = None,
        observer: ConversionObserver | None = None,
    ) -> None:
        """Initialize converter with its engine, file manager and progress observer."""
        self.engine = engine if engine is not None else HandBrakeEngine()
        self.file_manager = file_manager if file_manager is not None else FileManager()
        self.observer = observer
        self.logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    @staticmethod
    def destination_for(entry: FileEntry, policy: ConversionPolicy) -> Path:
        """Where ``entry`` is converted to: same directory, target extension."""
        return entry.destination(policy.target_extension)

    def convert(self, source: Path, destination: Path, policy: ConversionPolicy) -> ProcessingResult:
        """
        Convert ``source`` into ``destination``.

        A dry run (no commit) and an existing destination without force both
        return without touching the disk. Engine failures are reported in the
        result, never raised.
        """
        self.logger.info("Transcoding...")
        self.logger.info("src: %s", source)
        self.logger.info("dst: %s", destination)

        destination_exists = destination.exists()
        if destination_exists:
            self.logger.warning("dst exists: %s", destination, extra={"highlight": policy.force})

        if not policy.commit:
            would_convert = not destination_exists or policy.force
            return ProcessingResult(
                source_file=source,
                status=ProcessingStatus.DRY_RUN,
                message="Dry run, nothing converted" if would_convert else "Dry run, destination exists",
                output_file=destination,
                metadata={"would_convert": would_convert},
            )

        if destination_exists and destination.resolve() == source.resolve():
            self.logger.warning("...skipping, destination is the source file.")
            return ProcessingResult(
                source_file=source,
                status=ProcessingStatus.SKIPPED,
                message="Destination is the source file",
                output_file=destination,
            )

        if destination_exists and not policy.force:
            self.logger.warning("...skipping.")
            return ProcessingResult(
                source_file=source,
                status=ProcessingStatus.SKIPPED,
                message="Destination exists",
                output_file=destination,
            )

        return self._transcode(source, destination, policy)

    def _transcode(self, source: Path, destination: Path, policy: ConversionPolicy) -> ProcessingResult:
        """Run the engine and commit its output."""
        start_time = time.time()
        try:
            temp_path = self.file_manager.reserve_temp_output(destination)
        except ProcessingError as e:
            self.logger.exception("Could not prepare output for %s", destination)
            return ProcessingResult(
                source_file=source,
                status=ProcessingStatus.ERROR,
                message=str(e),
                metadata={"preset": policy.preset, "error": str(e)},
            )

        began = False
        completed = False
        error: ProcessingError | None = None
        raw_output = ""

        events = self.engine.spawn(policy.preset, source, temp_path)
        try:
            for event in events:
                if event.type is EngineEventType.BEGIN:
                    began = True
                    self._notify("begin")
                elif event.type is EngineEventType.PROGRESS:
                    self._notify("progress", event.progress)
                elif event.type is EngineEventType.ERROR:
                    # Reported through the result once the engine completes
                    error = event.error or ProcessingError("Engine reported an error", file_path=source)
                    self.logger.debug("Engine error for %s: %s", source, error)
                elif event.type is EngineEventType.COMPLETE:
                    raw_output = event.output
                    completed = True
                    break
        finally:
            self._notify("complete")
            if not completed:
                # Interrupted: stop the engine before removing what it wrote
                close = getattr(events, "close", None)
                if close is not None:
                    close()
                self.file_manager.discard_output(temp_path)

        processing_time = time.time() - start_time

        if not began:
            self.logger.error("%s", raw_output or f"No output from engine for {source}")

        if error is not None or not began:
            self.file_manager.discard_output(temp_path)
            message = str(error) if error is not None else "Engine finished without starting a conversion"
            return ProcessingResult(
                source_file=source,
                status=ProcessingStatus.FAILED,
                message=message,
                processing_time=processing_time,
                metadata={"preset": policy.preset, "began": began},
            )

        try:
            if temp_path.stat().st_size == 0:
                self.file_manager.discard_output(temp_path)
                msg = f"Output file not created: {destination}"
                raise ProcessingError(msg, file_path=source)
            self.file_manager.commit_output(temp_path, destination)
            new_size = destination.stat().st_size
            original_size = source.stat().st_size
        except (OSError, ProcessingError) as e:
            self.logger.exception("Could not finish %s", destination)
            return ProcessingResult(
                source_file=source,
                status=ProcessingStatus.ERROR,
                message=str(e),
                processing_time=processing_time,
                metadata={"preset": policy.preset, "error": str(e)},
            )

        self.logger.info("finished transcoding: %s", destination)
        return ProcessingResult(
            source_file=source,
            status=ProcessingStatus.SUCCESS,
            message=f"Converted with preset '{policy.preset}'",
            output_file=destination,
            original_size=original_size,
            new_size=new_size,
            processing_time=processing_time,
            metadata={"preset": policy.preset},
        )

    def _notify(self, signal: str, *args: object) -> None:
        """Forward an engine signal to the observer, if one is attached."""
        if self.observer is not None:
            getattr(self.observer, signal)(*args)
