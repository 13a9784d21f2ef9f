"""Creation of nested checkpoint directories."""

from __future__ import annotations

import errno
import os
import time
from typing import Any

__all__ = ["ensure_directory_exists", "set_checkpoint_directory"]

_MODE = 0o775
_RETRIES = 5
_TRANSIENT = (errno.EINPROGRESS, errno.EAGAIN)


def _thread_yield() -> None:
    time.sleep(4096e-9)


def _make_directory(path: str) -> None:
    """Create ``path``; an existing entry counts as success.

    Transient failures are retried a few times before the error is raised.
    """
    for attempt in range(_RETRIES):
        try:
            os.mkdir(path, _MODE)
        except FileExistsError:
            return
        except OSError as error:
            if error.errno not in _TRANSIENT or attempt == _RETRIES - 1:
                raise
            _thread_yield()
        else:
            return


def ensure_directory_exists(create: bool, directory: str, *args: Any) -> str:
    """Build ``directory`` followed by one level per component in ``args``.

    Each component is appended as ``"/" + str(component) + "/"``. When
    ``create`` is true every level is created on disk as it is built.
    Returns the final path; raises ``OSError`` if a level cannot be created.
    """
    if not args:
        raise TypeError("ensure_directory_exists needs at least one path component")
    path = directory
    for component in args:
        if create:
            _make_directory(path)
        path = f"{path}/{component}/"
    if create:
        _make_directory(path)
    return path


def set_checkpoint_directory(memory_space: Any, create: bool, directory: str, *args: Any) -> str:
    """Ensure the directory exists and make it ``memory_space``'s default path.

    ``memory_space`` must provide ``set_default_path(path)``. Returns the path.
    """
    path = ensure_directory_exists(create, directory, *args)
    memory_space.set_default_path(path)
    return path