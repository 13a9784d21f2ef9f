"""Named pieces of application state that a checkpoint reads and writes.

A registration pairs a sanitized name with a way to write the state to a
binary stream and read it back. Registrations compare equal and hash alike
when their names match, so a set of them holds one entry per name.
"""

from __future__ import annotations

import math
import warnings
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import IO, Any, Callable

import numpy as np

from .viewholder import ViewHolder

__all__ = [
    "sanitized_label",
    "label_hash",
    "Registration",
    "CustomRegistration",
    "SimpleRegistration",
    "RegistrationInfo",
    "make_registration",
]

Serializer = Callable[[IO[bytes]], bool]
Deserializer = Callable[[IO[bytes]], bool]

_INT_MAX = 2**31 - 1
_SIZE_MODULUS = 2**64
_HASH_BASE = np.float32(67)


def sanitized_label(label: str) -> str:
    """Replace every byte that is not an ASCII letter or digit with ``_``.

    A character that takes several bytes in UTF-8 becomes as many underscores.
    """
    parts = []
    for char in label:
        if char.isascii() and char.isalnum():
            parts.append(char)
        else:
            parts.append("_" * len(char.encode("utf-8")))
    return "".join(parts)


def label_hash(name: str) -> int:
    """Position-weighted hash of a label, small enough to serve as an int id.

    Each byte is weighted by a power of 67 in single precision; positions
    whose weight overflows single precision contribute nothing.
    """
    total = 0
    with np.errstate(over="ignore", invalid="ignore"):
        for position, byte in enumerate(name.encode("utf-8")):
            character = np.float32(byte - 256 if byte > 127 else byte)
            weight = np.power(_HASH_BASE, np.float32(position), dtype=np.float32)
            product = float(np.float32(character * weight))
            if not math.isfinite(product):
                continue
            total = (total + int(math.fmod(product, _INT_MAX))) % _SIZE_MODULUS
    return total % _INT_MAX


class Registration(ABC):
    """A named piece of state with a serializer and a deserializer."""

    def __init__(self, name: str) -> None:
        self.name = sanitized_label(name)

    @property
    @abstractmethod
    def serializer(self) -> Serializer:
        """Callable writing the state to a stream; returns success."""

    @property
    @abstractmethod
    def deserializer(self) -> Deserializer:
        """Callable reading the state from a stream; returns success."""

    @abstractmethod
    def is_same_reference(self, other: Registration) -> bool:
        """True if ``other`` refers to the same state as this registration."""

    def serialize(self, stream: IO[bytes]) -> bool:
        return self.serializer(stream)

    def deserialize(self, stream: IO[bytes]) -> bool:
        return self.deserializer(stream)

    def _type_mismatch(self) -> bool:
        warnings.warn(
            f"member name {self.name} is shared by more than 1 registration type",
            RuntimeWarning,
            stacklevel=3,
        )
        return False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Registration):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return label_hash(self.name)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


class CustomRegistration(Registration):
    """State written and read by user-supplied functions."""

    def __init__(self, serializer: Serializer, deserializer: Deserializer, name: str) -> None:
        super().__init__(name)
        self._serializer = serializer
        self._deserializer = deserializer

    @property
    def serializer(self) -> Serializer:
        return self._serializer

    @property
    def deserializer(self) -> Deserializer:
        return self._deserializer

    def is_same_reference(self, other: Registration) -> bool:
        if not isinstance(other, CustomRegistration):
            return self._type_mismatch()
        return other is self


class SimpleRegistration(Registration):
    """State held in a contiguous buffer, saved and restored byte for byte."""

    def __init__(self, member: Any, name: str) -> None:
        super().__init__(name)
        self.member = member
        self._bytes = memoryview(member).cast("B")
        if len(self._bytes):
            self._address = np.frombuffer(self._bytes, dtype=np.uint8).__array_interface__["data"][0]
        else:
            self._address = id(member)

    @property
    def serializer(self) -> Serializer:
        def write(stream: IO[bytes]) -> bool:
            stream.write(self._bytes)
            return True

        return write

    @property
    def deserializer(self) -> Deserializer:
        def read(stream: IO[bytes]) -> bool:
            if self._bytes.readonly:
                raise TypeError(f"member {self.name} is read-only")
            needed = len(self._bytes)
            data = stream.read(needed)
            self._bytes[: len(data)] = data
            return len(data) == needed

        return read

    def is_same_reference(self, other: Registration) -> bool:
        if not isinstance(other, SimpleRegistration):
            return self._type_mismatch()
        return self._address == other._address


@dataclass
class RegistrationInfo:
    """A member paired with the label it should be registered under."""

    member: Any
    label: str


def make_registration(member: Any, label: str | None = None) -> Registration:
    """Build the registration suited to ``member``.

    A :class:`RegistrationInfo` is unpacked, a registration is returned as
    is, a :class:`ViewHolder` is registered under its own label, and any
    other buffer is registered byte for byte under ``label``.
    """
    if isinstance(member, Registration):
        return member
    if isinstance(member, RegistrationInfo):
        return make_registration(member.member, member.label)
    if isinstance(member, ViewHolder):
        from .registration_views import ViewRegistration

        return ViewRegistration(member)
    if label is None:
        raise TypeError("a label is required to register this member")
    return SimpleRegistration(member, label)