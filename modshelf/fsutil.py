"""File-system helpers for listing, comparing and pruning mod files."""

from __future__ import annotations

import filecmp
import os
from pathlib import Path
from typing import List, Union

PathLike = Union[str, "os.PathLike[str]"]

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def list_files_in_subfolders(folder: PathLike) -> List[str]:
    """Return the paths of all files below ``folder``, relative and sorted.

    A missing folder yields an empty list.
    """
    root = Path(folder)
    if not root.is_dir():
        return []
    files = [
        (Path(directory) / name).relative_to(root).as_posix()
        for directory, _, names in os.walk(root)
        for name in names
    ]
    return sorted(files)


def list_subfolders(folder: PathLike) -> List[str]:
    """Return the names of the folders directly inside ``folder``, sorted."""
    root = Path(folder)
    if not root.is_dir():
        return []
    return sorted(entry.name for entry in root.iterdir() if entry.is_dir())


def files_are_identical(first: PathLike, second: PathLike) -> bool:
    """Tell whether both paths are files with the same content."""
    if not (Path(first).is_file() and Path(second).is_file()):
        return False
    return filecmp.cmp(first, second, shallow=False)


def parse_size_units(size: float) -> str:
    """Format a byte count with a binary unit, such as ``"1.50 MB"``."""
    value = float(size)
    unit_index = 0
    while abs(value) >= 1024 and unit_index < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit_index += 1
    if unit_index == 0:
        return f"{int(value)} B"
    return f"{value:.2f} {_SIZE_UNITS[unit_index]}"


def remove_empty_parents(folder: PathLike) -> List[Path]:
    """Delete ``folder`` and its ancestors for as long as they are empty.

    Returns the folders that were removed, innermost first.
    """
    removed: List[Path] = []
    current = Path(folder)
    while current.is_dir() and not any(current.iterdir()):
        current.rmdir()
        removed.append(current)
        if current.parent == current:
            break
        current = current.parent
    return removed