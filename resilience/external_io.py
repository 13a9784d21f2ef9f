"""File access for checkpointed data and per-file IO configuration."""

from __future__ import annotations

import os
import warnings
from typing import Any

from .jsonparse import parse
from .jsonvalue import to_str

__all__ = [
    "resolve_path",
    "IOAccessor",
    "transfer_from_host",
    "transfer_to_host",
    "create_empty_file",
    "IOConfigurationManager",
    "get_configuration_manager",
    "reset_configuration_manager",
]

CONFIG_ENVIRONMENT_VARIABLE = "KR_IO_CONFIG"


def resolve_path(path: str, default: str) -> str:
    """Place ``path`` under ``default`` unless it already holds a directory part."""
    if "/" in path:
        return path
    full = default
    if full and not full.endswith("/"):
        full += "/"
    return full + path


class IOAccessor:
    """Reads and writes the bytes of one data file.

    This accessor keeps the data as a plain file at ``file_path``;
    subclasses override the three file methods for other storage formats.
    """

    READ_FILE = 0
    WRITE_FILE = 1

    def __init__(self, data_size: int = 0, file_path: str = "", is_contiguous: bool = True) -> None:
        self.data_size = data_size
        self.file_path = file_path
        self.is_contiguous = is_contiguous

    def read_file(self, size: int | None = None) -> bytes:
        """Read up to ``size`` bytes (default ``data_size``) from the file."""
        count = self.data_size if size is None else size
        with open(self.file_path, "rb") as handle:
            return handle.read(count)

    def write_file(self, data: bytes) -> int:
        """Replace the file's contents with ``data``; return bytes written."""
        with open(self.file_path, "wb") as handle:
            return handle.write(data)

    def open_file(self) -> int:
        """Create the file empty so later parallel reads and writes find it."""
        with open(self.file_path, "wb"):
            pass
        return 0


def transfer_from_host(accessor: IOAccessor | None, data: bytes) -> int:
    """Write host data through ``accessor``; nothing happens without one."""
    if accessor is None:
        return 0
    return accessor.write_file(data)


def transfer_to_host(accessor: IOAccessor | None, size: int) -> bytes:
    """Read ``size`` bytes through ``accessor``; empty without one."""
    if accessor is None:
        return b""
    return accessor.read_file(size)


def create_empty_file(accessor: IOAccessor | None) -> None:
    """Have ``accessor`` create its file, if there is an accessor."""
    if accessor is not None:
        accessor.open_file()


class IOConfigurationManager:
    """Named IO settings loaded from a JSON file."""

    def __init__(self) -> None:
        self.config_list: dict[str, Any] = {}

    def load_configuration(self, path: str) -> None:
        """Load every entry of the JSON file at ``path``, keyed by its ``name``.

        An empty path loads nothing and warns that defaults are in use.
        """
        if not path:
            warnings.warn(
                f"{CONFIG_ENVIRONMENT_VARIABLE} not set. loading default setting for HDF5 files access.",
                RuntimeWarning,
                stacklevel=2,
            )
            return
        with open(path, encoding="utf-8") as handle:
            document = parse(handle.read())
        if isinstance(document, dict):
            entries = list(document.values())
        elif isinstance(document, list):
            entries = document
        else:
            entries = []
        for entry in entries:
            if not isinstance(entry, dict) or "name" not in entry:
                raise KeyError("configuration entry has no 'name'")
            name = entry["name"]
            if not isinstance(name, str):
                name = to_str(name)
            self.config_list[name] = entry

    def get_config(self, name: str) -> dict[str, Any]:
        """Settings for ``name``; an unknown name gets a new empty entry."""
        return self.config_list.setdefault(name, {})


_manager: IOConfigurationManager | None = None


def get_configuration_manager() -> IOConfigurationManager:
    """The shared manager, loaded on first use from ``KR_IO_CONFIG``."""
    global _manager
    if _manager is None:
        manager = IOConfigurationManager()
        manager.load_configuration(os.environ.get(CONFIG_ENVIRONMENT_VARIABLE, ""))
        _manager = manager
    return _manager


def reset_configuration_manager() -> IOConfigurationManager | None:
    """Forget the shared manager so the next use loads it again.

    Returns the manager that was discarded, or ``None`` if none was loaded.
    """
    global _manager
    previous = _manager
    _manager = None
    return previous