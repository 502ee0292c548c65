"""Single-line conversion status display."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

from colorama import Style
from tqdm import tqdm

from ..config.constants import PROGRESS_COLUMNS, PROGRESS_HEADER

if TYPE_CHECKING:
    from ..core import Progress


def format_progress_line(progress: Progress) -> str:
    """Lay out one status update in the fixed header columns."""
    fields = (
        progress.task,
        f"{progress.percent_complete:.2f}",
        f"{progress.fps:.2f}",
        f"{progress.avg_fps:.2f}",
        progress.eta,
    )

    line = ""
    for column, text in zip(PROGRESS_COLUMNS, fields):
        line = line.ljust(column - 1) + text + "  "
    return line.rstrip()


class ProgressDisplay:
    """Overwrites one console line with the engine's latest status."""

    def __init__(self, file: TextIO | None = None) -> None:
        self.file = file if file is not None else sys.stdout
        self._bar: tqdm | None = None

    def begin(self) -> None:
        """Print the column header and open the status line."""
        tqdm.write(f"{Style.BRIGHT}{PROGRESS_HEADER}{Style.RESET_ALL}", file=self.file)
        self._bar = tqdm(total=100, bar_format="{desc}", file=self.file, leave=True)

    def progress(self, progress: Progress) -> None:
        """Replace the status line with ``progress``."""
        if self._bar is None:
            self.begin()
        self._bar.set_description_str(format_progress_line(progress))

    def complete(self) -> None:
        """Close the status line; safe to call when nothing was shown."""
        if self._bar is not None:
            self._bar.close()
            self._bar = None
