#!/usr/bin/env python3
"""
Auxiliary utility functions for Heurisko

Path construction helpers used by the finder, and formatting helpers
used for the verbose summary.
"""

import pathlib
from typing import Optional

from errors import OutOfMemory

PATH_SEPARATOR = "/"


def join_path(base: str, name: str) -> str:
    """Join a base path and an entry name into a new path

    No normalization happens: a trailing separator on base yields a
    doubled separator, and '.' or '..' are kept as given.

    Args:
        base: Path of the directory being walked
        name: Name of the entry inside that directory

    Returns:
        The string base + "/" + name

    Raises:
        OutOfMemory: If the new string cannot be allocated
    """
    try:
        return base + PATH_SEPARATOR + name
    except MemoryError as e:
        raise OutOfMemory(f"Couldn't allocate path for '{name}'") from e


def file_name(path: str) -> str:
    """Return the part of a path after the last separator"""
    return path.rpartition(PATH_SEPARATOR)[2]


def format_bytes(size_bytes: int) -> str:
    """Format byte size into human-readable string

    Args:
        size_bytes: Size in bytes to format

    Returns:
        Formatted string like "1.2 GiB", "345 MiB", "12 KiB", or "789 B"
    """
    if size_bytes >= 1024**3:
        return f"{size_bytes / (1024**3):.1f} GiB"
    if size_bytes >= 1024**2:
        return f"{size_bytes / (1024**2):.1f} MiB"
    if size_bytes >= 1024:
        return f"{size_bytes / 1024:.1f} KiB"
    return f"{size_bytes} B"


def format_path_for_display(path: str, home_path: Optional[str] = None) -> str:
    """Replace the home directory prefix of a path with ~"""
    if home_path is None:
        home_path = str(pathlib.Path.home())

    if path == home_path or path.startswith(home_path + PATH_SEPARATOR):
        return "~" + path[len(home_path) :]
    return path
