"""Lazy depth-first repository walker.

Both generators prune directories in the skip-set before descending and
treat unreadable directories as empty, so a partially inaccessible tree
never aborts a scan. Entries are visited in sorted name order, which keeps
repeated scans of the same tree identical.
"""

import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from wheelscan.analyzers.ignore import should_skip_dir
from wheelscan.logging import logger


@dataclass(frozen=True)
class WalkEntry:
    """A file or directory met during the walk."""

    name: str
    path: Path
    relative_path: str
    is_dir: bool

    @property
    def depth(self) -> int:
        """Number of path segments from the repo root."""
        return len(self.relative_path.split("/"))


def _list_dir(directory: Path) -> list[os.DirEntry]:
    try:
        with os.scandir(directory) as it:
            return sorted(it, key=lambda e: e.name)
    except OSError as e:
        # Permission denied, deleted mid-scan, not a directory
        logger.debug("  Skipping unreadable directory %s: %s", directory, e)
        return []


def _is_dir(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        return False


def _is_file(entry: os.DirEntry) -> bool:
    try:
        return entry.is_file()
    except OSError:
        return False


def walk_entries(
    root: Path,
    skip_dirs: frozenset[str] | set[str] = frozenset(),
) -> Iterator[WalkEntry]:
    """Yield directories and files under root, depth-first.

    A directory is yielded before its contents. Directories whose name is in
    SKIP_DIRS or skip_dirs, or whose relative path is in skip_dirs, are
    neither yielded nor entered.

    Args:
        root: Directory to walk.
        skip_dirs: Extra directory names or relative paths to prune.

    Yields:
        WalkEntry for each visited directory and regular file.
    """
    root = Path(root)
    # Explicit stack of iterators keeps deep trees clear of the recursion limit
    stack: list[Iterator[os.DirEntry]] = [iter(_list_dir(root))]

    while stack:
        entry = next(stack[-1], None)
        if entry is None:
            stack.pop()
            continue

        path = Path(entry.path)
        relative = path.relative_to(root).as_posix()

        if _is_dir(entry):
            if should_skip_dir(entry.name, skip_dirs, relative):
                continue
            yield WalkEntry(name=entry.name, path=path, relative_path=relative, is_dir=True)
            stack.append(iter(_list_dir(path)))
        elif _is_file(entry):
            yield WalkEntry(name=entry.name, path=path, relative_path=relative, is_dir=False)


def walk_files(
    root: Path,
    skip_dirs: frozenset[str] | set[str] = frozenset(),
) -> Iterator[Path]:
    """Yield file paths under root, depth-first, honoring the skip-set."""
    for entry in walk_entries(root, skip_dirs):
        if not entry.is_dir:
            yield entry.path
