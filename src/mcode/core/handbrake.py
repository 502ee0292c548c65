"""HandBrakeCLI integration: command building and event streaming."""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from ..config.constants import DEFAULT_ENGINE_BINARY, ENGINE_OUTPUT_TAIL_LINES, NO_TITLE_MARKER
from .base import ProcessingError

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

LOG = logging.getLogger(__name__)

# "Encoding: task 1 of 1, 42.17 % (97.31 fps, avg 101.02 fps, ETA 00h01m12s)"
_PROGRESS_PATTERN = re.compile(
    r"^(?P<task>[A-Za-z]+): task (?P<task_number>\d+) of (?P<task_count>\d+), "
    r"(?P<percent>\d+(?:\.\d+)?) %"
    r"(?: \((?P<fps>\d+(?:\.\d+)?) fps, avg (?P<avg_fps>\d+(?:\.\d+)?) fps, ETA (?P<eta>[0-9hms]+)\))?"
)


class HandBrakeError(ProcessingError):
    """HandBrake-specific error."""

    def __init__(
        self,
        message: str,
        *,
        command: list[str] | None = None,
        return_code: int | None = None,
        output: str | None = None,
        file_path: Path | None = None,
    ) -> None:
        """Initialize HandBrake error with detailed context."""
        super().__init__(message, file_path=file_path)
        self.command = command
        self.return_code = return_code
        self.output = output


class EngineEventType(Enum):
    """Signals emitted by a transcoding engine, in emission order."""

    BEGIN = "begin"
    PROGRESS = "progress"
    ERROR = "error"
    COMPLETE = "complete"


@dataclass(frozen=True)
class Progress:
    """One progress report from the engine."""

    task: str
    percent_complete: float
    fps: float = 0.0
    avg_fps: float = 0.0
    eta: str = ""
    task_number: int = 1
    task_count: int = 1


@dataclass(frozen=True)
class EngineEvent:
    """A single engine signal with its payload."""

    type: EngineEventType
    progress: Progress | None = None
    error: HandBrakeError | None = None
    output: str = ""


class TranscodingEngine(Protocol):
    """Anything that converts one file and reports through engine events."""

    def spawn(self, preset: str, input_path: Path, output_path: Path) -> Iterator[EngineEvent]:
        """Start a conversion; the last event yielded is always COMPLETE."""
        ...


def parse_progress_line(line: str) -> Progress | None:
    """Parse a HandBrakeCLI status line, or return None for any other line."""
    match = _PROGRESS_PATTERN.match(line.strip())
    if match is None:
        return None

    return Progress(
        task=match.group("task"),
        percent_complete=float(match.group("percent")),
        fps=float(match.group("fps") or 0.0),
        avg_fps=float(match.group("avg_fps") or 0.0),
        eta=match.group("eta") or "",
        task_number=int(match.group("task_number")),
        task_count=int(match.group("task_count")),
    )


class HandBrakeEngine:
    """Runs HandBrakeCLI and turns its console output into engine events."""

    def __init__(self, binary: str = DEFAULT_ENGINE_BINARY) -> None:
        """Initialize with the HandBrakeCLI executable name or path."""
        self.binary = binary

    def check_availability(self) -> None:
        """Check if the HandBrakeCLI executable is available."""
        if not shutil.which(self.binary):
            error_msg = f"Missing HandBrake executable: {self.binary}"
            LOG.error(error_msg)
            raise HandBrakeError(error_msg)

    def build_command(self, preset: str, input_path: Path, output_path: Path) -> list[str]:
        """Build the HandBrakeCLI command for one conversion."""
        return [self.binary, "--preset", preset, "-i", str(input_path), "-o", str(output_path)]

    def spawn(self, preset: str, input_path: Path, output_path: Path) -> Iterator[EngineEvent]:
        """
        Run one conversion, yielding events as HandBrakeCLI reports them.

        BEGIN is yielded with the first status line, ERROR when the process
        fails or finds nothing to decode, and COMPLETE (with the raw output
        tail) once the process has exited.
        """
        command = self.build_command(preset, input_path, output_path)
        LOG.debug("Running HandBrake command: %s", " ".join(command))

        output: deque[str] = deque(maxlen=ENGINE_OUTPUT_TAIL_LINES)
        began = False

        try:
            # Text mode turns the carriage-return status updates into lines
            process = subprocess.Popen(  # noqa: S603
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            msg = f"Could not start {self.binary}: {e}"
            yield EngineEvent(
                EngineEventType.ERROR,
                error=HandBrakeError(msg, command=command, file_path=input_path),
            )
            yield EngineEvent(EngineEventType.COMPLETE, output=msg)
            return

        with process:
            assert process.stdout is not None  # noqa: S101
            try:
                for raw_line in process.stdout:
                    line = raw_line.rstrip()
                    if not line:
                        continue

                    progress = parse_progress_line(line)
                    if progress is None:
                        output.append(line)
                        continue

                    if not began:
                        began = True
                        yield EngineEvent(EngineEventType.BEGIN)
                    yield EngineEvent(EngineEventType.PROGRESS, progress=progress)
            except GeneratorExit:
                # Consumer stopped early
                LOG.debug("Stopping %s", self.binary)
                process.kill()
                raise

            return_code = process.wait()

        raw_output = "\n".join(output)
        error = self._detect_error(return_code, raw_output, command, input_path)
        if error is not None:
            yield EngineEvent(EngineEventType.ERROR, error=error)
        yield EngineEvent(EngineEventType.COMPLETE, output=raw_output)

    def _detect_error(
        self, return_code: int, raw_output: str, command: list[str], input_path: Path
    ) -> HandBrakeError | None:
        """Translate an exit status and output into an error, if any."""
        if return_code != 0:
            msg = f"HandBrake failed with return code {return_code}"
        elif NO_TITLE_MARKER in raw_output:
            msg = f"No decodable video found in {input_path}"
        else:
            return None

        return HandBrakeError(
            msg,
            command=command,
            return_code=return_code,
            output=raw_output,
            file_path=input_path,
        )
