"""Utility functions for path operations."""

import os
import shutil
from pathlib import Path
from typing import Iterable, List

from ..util.logging import get_logger

logger = get_logger(__name__)


def ensure_directory(path: Path) -> Path:
    """Ensure directory exists, creating it if necessary."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def _remove(path: Path) -> None:
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.is_dir():
        shutil.rmtree(path)


def _merge(source: Path, destination: Path) -> None:
    """Copy source onto destination like cp -rT, replacing whatever is in the way.

    Symlinks are recreated, never followed, and an existing file or link at
    the destination is replaced rather than written through.
    """
    if source.is_symlink():
        _remove(destination)
        destination.symlink_to(os.readlink(source))
    elif source.is_dir():
        if destination.is_symlink() or (destination.exists() and not destination.is_dir()):
            _remove(destination)
        destination.mkdir(exist_ok=True)
        for entry in sorted(source.iterdir()):
            _merge(entry, destination / entry.name)
        shutil.copystat(source, destination)
    else:
        if destination.is_symlink() or destination.is_dir():
            _remove(destination)
        shutil.copy2(source, destination)


def copy_path(source: Path, destination: Path) -> bool:
    """Copy a file or directory tree, merging into an existing destination.

    A missing source is not an error: nothing is copied and False is
    returned. Any other failure is logged as a warning and also reported
    as False, so callers can keep going.
    """
    if not source.exists() and not source.is_symlink():
        logger.debug(f"Skipping missing source {source}")
        return False

    try:
        ensure_directory(destination.parent)
        _merge(source, destination)
        logger.debug(f"Copied {source} -> {destination}")
        return True
    except OSError as e:
        logger.warning(f"Failed to copy {source} -> {destination}: {e}")
        return False


def copy_contents(source_dir: Path, destination_dir: Path) -> List[Path]:
    """Copy every entry of source_dir into destination_dir.

    Hidden entries are included. Returns the destination paths that were
    copied successfully.
    """
    if not source_dir.is_dir():
        logger.debug(f"Skipping missing directory {source_dir}")
        return []

    ensure_directory(destination_dir)
    copied = []
    for entry in sorted(source_dir.iterdir()):
        target = destination_dir / entry.name
        if copy_path(entry, target):
            copied.append(target)
    return copied


def copy_home_relative(home: Path, relative_paths: Iterable[str], destination_dir: Path) -> List[str]:
    """Copy paths given relative to home into destination_dir, keeping their relative layout."""
    copied = []
    for rel in relative_paths:
        if copy_path(home / rel, destination_dir / rel):
            copied.append(rel)
    return copied


def reset_directory(path: Path) -> Path:
    """Remove a directory with all its contents and recreate it empty."""
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.exists():
        shutil.rmtree(path)
    return ensure_directory(path)


def calculate_path_size(path: Path) -> int:
    """Total size in bytes of a file or directory tree."""
    if path.is_file():
        return path.stat().st_size
    total = 0
    for child in path.rglob("*"):
        if child.is_file() and not child.is_symlink():
            total += child.stat().st_size
    return total


def format_size(size_bytes: int) -> str:
    """Format file size in human readable format."""
    if size_bytes == 0:
        return "0 B"

    size_names = ["B", "KB", "MB", "GB", "TB"]
    i = 0
    while size_bytes >= 1024.0 and i < len(size_names) - 1:
        size_bytes /= 1024.0
        i += 1

    return f"{size_bytes:.1f} {size_names[i]}"
