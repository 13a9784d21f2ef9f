"""Small filesystem helpers used for checkpoint directories."""

from __future__ import annotations

import os
from typing import Union

PathLike = Union[str, "os.PathLike[str]"]


def remove_all(path: PathLike) -> int:
    """Remove a file or directory tree and return how many entries were removed.

    Symbolic links are removed, never followed. A missing path removes nothing.
    """
    target = os.fspath(path)
    if not os.path.lexists(target):
        return 0
    if os.path.isdir(target) and not os.path.islink(target):
        with os.scandir(target) as entries:
            children = [entry.path for entry in entries]
        removed = sum(remove_all(child) for child in children)
        os.rmdir(target)
        return removed + 1
    os.remove(target)
    return 1


def create_directory(path: PathLike) -> bool:
    """Create one directory; return False if it already exists.

    Raises ``FileNotFoundError`` if the parent is missing and
    ``FileExistsError`` if the path exists but is not a directory.
    """
    target = os.fspath(path)
    try:
        os.mkdir(target)
    except FileExistsError:
        if os.path.isdir(target):
            return False
        raise
    return True


def file_exists(path: PathLike) -> bool:
    """True if the path names an existing file or directory."""
    return os.path.exists(os.fspath(path))