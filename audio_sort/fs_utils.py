from __future__ import annotations

import errno
import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Optional

from .models import MoveOutcome

logger = logging.getLogger(__name__)


def path_exists(path: Path) -> Optional[bool]:
    """Like ``Path.exists`` but also sees dangling symlinks and over-long names."""
    try:
        path.lstat()
        return True
    except FileNotFoundError:
        return False
    except OSError as exc:
        if exc.errno != errno.ENAMETOOLONG:
            raise
        parent = path.parent
        try:
            with os.scandir(parent) as it:
                for entry in it:
                    if entry.name == path.name:
                        return True
        except FileNotFoundError:
            return None
        return False


def safe_rename(src: Path, dst: Path) -> None:
    try:
        src.rename(dst)
        return
    except OSError as exc:
        if exc.errno != errno.ENAMETOOLONG:
            raise
    src_dir_fd = os.open(src.parent, os.O_RDONLY)
    try:
        dst.parent.mkdir(parents=True, exist_ok=True)
        dst_dir_fd = os.open(dst.parent, os.O_RDONLY)
        try:
            os.rename(src.name, dst.name, src_dir_fd=src_dir_fd, dst_dir_fd=dst_dir_fd)
        finally:
            os.close(dst_dir_fd)
    finally:
        os.close(src_dir_fd)


def safe_move(source: Path, target: Path) -> MoveOutcome:
    """Rename ``source`` to ``target`` unless something already occupies ``target``.

    Never overwrites. Returns ``MoveOutcome.COLLISION`` instead of moving when
    the target exists; what to do about it is up to the caller.
    """
    if source == target:
        return MoveOutcome.MOVED
    if path_exists(target):
        return MoveOutcome.COLLISION
    target.parent.mkdir(parents=True, exist_ok=True)
    safe_rename(source, target)
    logger.debug("Moved %s -> %s", source, target)
    return MoveOutcome.MOVED


def iter_regular_files(root: Path) -> Iterator[Path]:
    """Yield every regular file below ``root``, sorted, without following symlinks."""
    files: list[Path] = []
    for dirpath, _, filenames in os.walk(root, followlinks=False):
        directory = Path(dirpath)
        for name in filenames:
            file_path = directory / name
            if file_path.is_symlink() or not file_path.is_file():
                continue
            files.append(file_path)
    yield from sorted(files, key=str)


def prune_empty_parents(
    root: Path, directories: Iterable[Path], keep: Optional[set[Path]] = None
) -> int:
    """Remove each of ``directories`` that is now empty, then its empty parents.

    Walks up towards ``root`` and stops at the first directory that still has
    entries. Only ``rmdir`` is used so files are never deleted. ``root`` and
    anything in ``keep`` survive even when empty.
    """
    keep = keep or set()
    removed = 0
    for directory in sorted(set(directories), key=lambda p: len(p.parts), reverse=True):
        current = directory
        while current != root and root in current.parents:
            if current in keep or current.is_symlink() or not current.is_dir():
                break
            try:
                current.rmdir()
            except OSError as exc:
                if exc.errno not in (errno.ENOTEMPTY, errno.EEXIST):
                    logger.warning("Failed to remove %s: %s", current, exc)
                break
            removed += 1
            logger.info("Removed empty directory %s", current)
            current = current.parent
    return removed
