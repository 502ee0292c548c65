"""Tests for output placement and the source deletion policy."""

from itertools import product
from pathlib import Path
from unittest.mock import patch

import pytest
from conftest import make_policy

from mcode.core import FileManager, ProcessingError


@pytest.mark.parametrize(("delete", "commit", "exists", "succeeded"), list(product([True, False], repeat=4)))
def test_delete_requires_every_condition(
    tmp_path: Path, *, delete: bool, commit: bool, exists: bool, succeeded: bool
) -> None:
    """The source goes only when delete, commit, an existing destination and success all hold."""
    source = tmp_path / "a.avi"
    source.write_bytes(b"x")
    manager = FileManager()

    deleted = manager.maybe_delete(
        source,
        destination_exists=exists,
        succeeded=succeeded,
        policy=make_policy(delete=delete, commit=commit),
    )

    should_delete = delete and commit and exists and succeeded
    assert deleted is should_delete
    assert source.exists() is not should_delete


def test_delete_failure_is_raised(tmp_path: Path) -> None:
    """A removal error is surfaced, not swallowed."""
    source = tmp_path / "a.avi"
    source.write_bytes(b"x")
    manager = FileManager()

    with patch.object(Path, "unlink", side_effect=PermissionError("read-only")), pytest.raises(ProcessingError) as exc:
        manager.maybe_delete(
            source, destination_exists=True, succeeded=True, policy=make_policy(delete=True, commit=True)
        )

    assert isinstance(exc.value.cause, PermissionError)
    assert manager.get_session_summary()["failed_operations"] == 1


def test_delete_of_vanished_source_is_raised(tmp_path: Path) -> None:
    """A source that disappeared before deletion is reported."""
    with pytest.raises(ProcessingError):
        FileManager().maybe_delete(
            tmp_path / "gone.avi",
            destination_exists=True,
            succeeded=True,
            policy=make_policy(delete=True, commit=True),
        )


def test_reserved_temp_output_is_new_sibling(tmp_path: Path) -> None:
    """The engine writes to a fresh file beside the destination, keeping its extension."""
    (tmp_path / "a.tmp.mp4").write_bytes(b"user data")
    manager = FileManager()

    first = manager.reserve_temp_output(tmp_path / "a.mp4")
    second = manager.reserve_temp_output(tmp_path / "a.mp4")

    assert first != second
    for temp in (first, second):
        assert temp.parent == tmp_path
        assert temp.name.startswith("a.")
        assert temp.name.endswith(".tmp.mp4")
        assert temp != tmp_path / "a.tmp.mp4"
        assert temp.read_bytes() == b""
    assert (tmp_path / "a.tmp.mp4").read_bytes() == b"user data"


def test_reserve_temp_output_in_missing_directory_is_raised(tmp_path: Path) -> None:
    """A destination directory that cannot take the file is reported."""
    with pytest.raises(ProcessingError):
        FileManager().reserve_temp_output(tmp_path / "gone" / "a.mp4")


def test_commit_output_replaces_destination(tmp_path: Path) -> None:
    """The finished file atomically takes the destination's place."""
    temp = tmp_path / "a.tmp.mp4"
    temp.write_bytes(b"new")
    destination = tmp_path / "a.mp4"
    destination.write_bytes(b"old")
    manager = FileManager()

    manager.commit_output(temp, destination)

    assert destination.read_bytes() == b"new"
    assert not temp.exists()
    summary = manager.get_session_summary()
    assert summary["outputs_committed"] == 1


def test_commit_output_failure_keeps_destination(tmp_path: Path) -> None:
    """When the move fails the destination is untouched and the partial file removed."""
    temp = tmp_path / "a.tmp.mp4"
    temp.write_bytes(b"new")
    destination = tmp_path / "a.mp4"
    destination.write_bytes(b"old")

    with patch("mcode.core.file_manager.os.replace", side_effect=OSError("disk full")), pytest.raises(ProcessingError):
        FileManager().commit_output(temp, destination)

    assert destination.read_bytes() == b"old"
    assert not temp.exists()


def test_session_summary_counts_deletions(tmp_path: Path) -> None:
    """Deletions are tallied in the session summary."""
    manager = FileManager()
    policy = make_policy(delete=True, commit=True)
    for name in ("a.avi", "b.avi"):
        (tmp_path / name).write_bytes(b"x")
        manager.maybe_delete(tmp_path / name, destination_exists=True, succeeded=True, policy=policy)

    summary = manager.get_session_summary()
    assert summary["sources_deleted"] == 2
    assert summary["successful_operations"] == 2
