"""Directory discovery producing the ordered work queue."""

from __future__ import annotations

import logging
import os
import re
import stat
from dataclasses import dataclass
from pathlib import Path

LOG = logging.getLogger(__name__)

_FILENAME_PATTERN = re.compile(r"^(?P<name>.+)\.(?P<extension>[^.]+)$")


@dataclass(frozen=True)
class FileMetadata:
    """Filesystem attributes captured when the file was discovered."""

    size: int
    mode: int
    inode: int
    device: int
    nlink: int
    uid: int
    gid: int
    atime: float
    mtime: float
    ctime: float
    birthtime: float | None = None

    @classmethod
    def from_stat(cls, stats: os.stat_result) -> FileMetadata:
        """Build metadata from an ``os.stat`` result."""
        return cls(
            size=stats.st_size,
            mode=stats.st_mode,
            inode=stats.st_ino,
            device=stats.st_dev,
            nlink=stats.st_nlink,
            uid=stats.st_uid,
            gid=stats.st_gid,
            atime=stats.st_atime,
            mtime=stats.st_mtime,
            ctime=stats.st_ctime,
            # Only some platforms report a creation time
            birthtime=getattr(stats, "st_birthtime", None),
        )


@dataclass(frozen=True)
class FileEntry:
    """A discovered plain file that may be converted."""

    absolute_path: Path
    parent_directory: Path
    filename: str
    base_name: str
    extension: str
    metadata: FileMetadata

    def destination(self, target_extension: str) -> Path:
        """Path of the converted file next to the source."""
        return self.parent_directory / f"{self.base_name}.{target_extension}"


def split_filename(filename: str) -> tuple[str, str] | None:
    """
    Split a filename into base name and final extension.

    Returns None when the name has no extension or the base name is made of
    dots only (".bashrc", "..avi").
    """
    match = _FILENAME_PATTERN.match(filename)
    if match is None or not match.group("name").strip("."):
        return None
    return match.group("name"), match.group("extension")


def scan(path: Path | str | None = None, *, recursive: bool = False) -> list[FileEntry]:
    """
    Enumerate files under ``path`` in discovery order.

    Subdirectory contents are spliced in where the subdirectory is listed
    (pre-order). Without ``recursive`` no subdirectory is entered. Entries
    that vanish or cannot be inspected, and directories that cannot be
    listed, are skipped silently.

    Args:
        path: Root directory, defaults to the current directory
        recursive: Descend into subdirectories

    Returns:
        Ordered list of file entries

    """
    root = Path(path) if path is not None else Path()
    files: list[FileEntry] = []
    _scan_directory(root, files, recursive=recursive, ancestors=frozenset())
    LOG.debug("Discovered %d files under %s (recursive: %s)", len(files), root, recursive)
    return files


def _scan_directory(
    directory: Path, files: list[FileEntry], *, recursive: bool, ancestors: frozenset[Path]
) -> None:
    """Append the files of ``directory`` (and subdirectories) to ``files``."""
    try:
        items = list(directory.iterdir())
    except OSError as e:
        LOG.debug("Cannot list %s: %s", directory, e)
        return

    parent = Path(os.path.abspath(directory))
    ancestors = ancestors | {directory.resolve()}

    for item in items:
        try:
            stats = item.stat()
        except OSError as e:
            LOG.debug("Skipping %s: %s", item, e)
            continue

        if stat.S_ISDIR(stats.st_mode):
            # A link back to a directory on the current path would never end
            if recursive and item.resolve() not in ancestors:
                _scan_directory(item, files, recursive=recursive, ancestors=ancestors)
            continue

        if not stat.S_ISREG(stats.st_mode):
            LOG.debug("Skipping %s: not a regular file", item)
            continue

        parts = split_filename(item.name)
        if parts is None:
            LOG.debug("Skipping %s: no extension", item)
            continue

        base_name, extension = parts
        files.append(
            FileEntry(
                absolute_path=parent / item.name,
                parent_directory=parent,
                filename=item.name,
                base_name=base_name,
                extension=extension,
                metadata=FileMetadata.from_stat(stats),
            )
        )
