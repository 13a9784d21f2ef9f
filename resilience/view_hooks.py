"""Callbacks fired when arrays are copied or moved.

Each kind of event has a :class:`CallbackOverloadSet` holding up to two
callbacks: one for writable arrays and one for read-only arrays. A callback
receives a :class:`~resilience.viewholder.ViewHolder` for the array.
While a hook runs on a thread, further hooks on that thread are suppressed.
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

import numpy as np

from .viewholder import ViewHolder, make_view_holder

__all__ = ["CallbackOverloadSet", "DynamicViewHooks", "hooks"]

Callback = Callable[[ViewHolder], None]


class CallbackOverloadSet:
    """A mutable-view callback and a const-view callback, guarded by a lock."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._callback: Optional[Callback] = None
        self._const_callback: Optional[Callback] = None

    def call(self, view: np.ndarray, label: str = "") -> None:
        """Invoke the callback matching ``view``'s constness, if one is set."""
        with self._lock:
            if self._callback is None and self._const_callback is None:
                return
            holder = make_view_holder(view, label)
            callback = self._const_callback if holder.is_const else self._callback
            if callback is not None:
                callback(holder)

    def set_callback(self, callback: Callback) -> None:
        with self._lock:
            self._callback = callback

    def set_const_callback(self, callback: Callback) -> None:
        with self._lock:
            self._const_callback = callback

    def clear_callback(self) -> None:
        with self._lock:
            self._callback = None

    def clear_const_callback(self) -> None:
        with self._lock:
            self._const_callback = None

    def reset(self) -> None:
        with self._lock:
            self._callback = None
            self._const_callback = None


class DynamicViewHooks:
    """The four hook sets and the per-thread reentrancy guard."""

    def __init__(self) -> None:
        self.copy_constructor_set = CallbackOverloadSet()
        self.copy_assignment_set = CallbackOverloadSet()
        self.move_constructor_set = CallbackOverloadSet()
        self.move_assignment_set = CallbackOverloadSet()
        self._local = threading.local()

    @property
    def reentrant(self) -> bool:
        """True while a hook is running on the current thread."""
        return getattr(self._local, "active", False)

    def reset(self) -> None:
        """Clear every callback in every set."""
        for overload_set in (
            self.copy_constructor_set,
            self.copy_assignment_set,
            self.move_constructor_set,
            self.move_assignment_set,
        ):
            overload_set.reset()

    def _fire(self, overload_set: CallbackOverloadSet, view: np.ndarray, label: str) -> None:
        if self.reentrant:
            return
        self._local.active = True
        try:
            overload_set.call(view, label)
        finally:
            self._local.active = False

    def copy_constructed(self, view: np.ndarray, label: str = "") -> None:
        self._fire(self.copy_constructor_set, view, label)

    def copy_assigned(self, view: np.ndarray, label: str = "") -> None:
        self._fire(self.copy_assignment_set, view, label)

    def move_constructed(self, view: np.ndarray, label: str = "") -> None:
        self._fire(self.move_constructor_set, view, label)

    def move_assigned(self, view: np.ndarray, label: str = "") -> None:
        self._fire(self.move_assignment_set, view, label)


hooks = DynamicViewHooks()