"""Failure table shown after a run."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..config.constants import (
    ERROR_MSG_TRUNCATE_LENGTH,
    FILENAME_TRUNCATE_LENGTH,
    MAX_ERROR_MSG_LENGTH,
    MAX_FILENAME_LENGTH,
)

if TYPE_CHECKING:
    from ..core import ProcessingResult


def print_failure_table(failed_results: list[ProcessingResult]) -> None:
    """
    Print a simple table showing conversion failures.

    Args:
        failed_results: ProcessingResult objects with failed or error status

    """
    if not failed_results:
        return

    print("\n" + "=" * 80)
    print(f"{'CONVERSION FAILURES':^80}")
    print("=" * 80)
    print(f"Total failed: {len(failed_results)} files\n")

    print(f"{'FILE':<40} | {'ERROR':<35}")
    print("-" * 80)

    for result in failed_results:
        filename = result.source_file.name
        if len(filename) > MAX_FILENAME_LENGTH:
            filename = filename[:FILENAME_TRUNCATE_LENGTH] + "..."

        error_msg = result.message or "Unknown error"
        if len(error_msg) > MAX_ERROR_MSG_LENGTH:
            error_msg = error_msg[:ERROR_MSG_TRUNCATE_LENGTH] + "..."

        print(f"{filename:<40} | {error_msg:<35}")

    print("\nTIP: Run with -v to see the engine output, or check the source files play correctly\n")
