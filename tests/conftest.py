"""Shared fixtures: a scripted transcoding engine and a sample media tree."""

from __future__ import annotations

from pathlib import Path

import pytest

from mcode.core import ConversionPolicy, EngineEvent, EngineEventType, HandBrakeError, Progress


class FakeEngine:
    """Engine stand-in that writes a small output file and records every call."""

    def __init__(
        self,
        *,
        begin: bool = True,
        fail_with: str | None = None,
        write_output: bool = True,
        progress_steps: tuple[float, ...] = (25.0, 50.0, 99.5),
        interrupt: bool = False,
    ) -> None:
        self.begin = begin
        self.fail_with = fail_with
        self.write_output = write_output
        self.progress_steps = progress_steps
        self.interrupt = interrupt
        self.calls: list[tuple[str, Path, Path]] = []
        self.active = 0
        self.overlapped = False

    def check_availability(self) -> None:
        """Always available."""

    def spawn(self, preset: str, input_path: Path, output_path: Path):
        if self.active:
            self.overlapped = True
        self.active += 1
        self.calls.append((preset, Path(input_path), Path(output_path)))

        if self.begin:
            yield EngineEvent(EngineEventType.BEGIN)
            for percent in self.progress_steps:
                yield EngineEvent(
                    EngineEventType.PROGRESS,
                    progress=Progress(task="Encoding", percent_complete=percent, fps=30.0, avg_fps=29.5, eta="00h00m01s"),
                )

        if self.write_output:
            Path(output_path).write_bytes(b"converted:" + Path(input_path).name.encode())

        if self.interrupt:
            self.active -= 1
            raise KeyboardInterrupt

        if self.fail_with:
            yield EngineEvent(EngineEventType.ERROR, error=HandBrakeError(self.fail_with, return_code=3))

        self.active -= 1
        yield EngineEvent(EngineEventType.COMPLETE, output="fake engine output")


@pytest.fixture
def fake_engine() -> FakeEngine:
    """A well-behaved engine."""
    return FakeEngine()


@pytest.fixture
def media_dir(tmp_path: Path) -> Path:
    """Root with a.avi, b.mpg, c.txt and sub/d.avi."""
    (tmp_path / "a.avi").write_bytes(b"avi source a")
    (tmp_path / "b.mpg").write_bytes(b"mpg source b")
    (tmp_path / "c.txt").write_text("not a video")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "d.avi").write_bytes(b"avi source d")
    return tmp_path


def make_policy(**overrides: object) -> ConversionPolicy:
    """Policy with the default extension list and the given flags."""
    values: dict[str, object] = {"extensions": ("avi", "mpg"), "preset": "Fast 1080p30"}
    values.update(overrides)
    return ConversionPolicy(**values)  # type: ignore[arg-type]


def snapshot(root: Path) -> dict[str, bytes | None]:
    """Every path below ``root`` with its content (None for directories)."""
    return {
        str(path.relative_to(root)): (None if path.is_dir() else path.read_bytes())
        for path in sorted(root.rglob("*"))
    }
