"""Registration of arrays held in a :class:`~resilience.viewholder.ViewHolder`."""

from __future__ import annotations

from typing import IO

from .registration import Deserializer, Registration, Serializer
from .viewholder import ViewHolder

__all__ = ["ViewRegistration"]


class ViewRegistration(Registration):
    """Registers a held array under the holder's label."""

    def __init__(self, view: ViewHolder) -> None:
        super().__init__(view.label)
        self.view = view

    @property
    def serializer(self) -> Serializer:
        def write(stream: IO[bytes]) -> bool:
            self.view.serialize(stream)
            return True

        return write

    @property
    def deserializer(self) -> Deserializer:
        def read(stream: IO[bytes]) -> bool:
            try:
                self.view.deserialize(stream)
            except EOFError:
                return False
            return True

        return read

    def is_same_reference(self, other: Registration) -> bool:
        """True if ``other`` holds the same array or a subview starting at or after it."""
        if not isinstance(other, ViewRegistration):
            return self._type_mismatch()
        return self.view.address <= other.view.address