"""Type-erased handles to array data that can be copied and streamed as bytes.

A :class:`ViewHolder` wraps a NumPy array and exposes the facts a checkpoint
needs about it: element count, element size, memory span, contiguity and
whether it lives in host memory. Its contents can be written to a binary
stream and read back. A holder of a read-only array is a *const* holder and
can only be read from.
"""

from __future__ import annotations

from typing import IO, Any

import numpy as np

__all__ = ["ViewHolder", "make_view_holder"]


def _memory_order(array: np.ndarray) -> str:
    """Order in which a contiguous copy of ``array`` keeps its layout."""
    if array.flags.f_contiguous and not array.flags.c_contiguous:
        return "F"
    return "C"


def _span(array: np.ndarray) -> int:
    """Number of elements between the first and last one in memory, inclusive."""
    if array.size == 0:
        return 0
    reach = sum((extent - 1) * abs(stride) for extent, stride in zip(array.shape, array.strides))
    return reach // array.itemsize + 1


class ViewHolder:
    """Holds a reference to an array and moves its contents to and from bytes."""

    def __init__(self, array: np.ndarray, label: str = "", host_space: bool = True) -> None:
        if not isinstance(array, np.ndarray):
            raise TypeError(f"expected a numpy array, not {type(array).__name__}")
        self._array = array
        self.label = label
        self.is_host_space = host_space

    @property
    def data(self) -> np.ndarray:
        """The held array itself."""
        return self._array

    @property
    def address(self) -> int:
        """Address of the array's first element."""
        return self._array.__array_interface__["data"][0]

    @property
    def size(self) -> int:
        return int(self._array.size)

    @property
    def span(self) -> int:
        return _span(self._array)

    @property
    def span_is_contiguous(self) -> bool:
        flags = self._array.flags
        return bool(flags.c_contiguous or flags.f_contiguous)

    @property
    def data_type_size(self) -> int:
        return int(self._array.itemsize)

    @property
    def nbytes(self) -> int:
        """Bytes the contents occupy once packed: element size times count."""
        return self.data_type_size * self.size

    @property
    def is_const(self) -> bool:
        """True when the held array cannot be written."""
        return not self._array.flags.writeable

    def _packed(self) -> bytes:
        return self._array.tobytes(order=_memory_order(self._array))

    def deep_copy_to_buffer(self, buffer: Any) -> None:
        """Pack the contents into the start of the writable ``buffer``."""
        target = memoryview(buffer).cast("B")
        if target.readonly:
            raise TypeError("buffer is read-only")
        needed = self.nbytes
        if len(target) < needed:
            raise ValueError(f"buffer holds {len(target)} bytes, {needed} needed")
        target[:needed] = self._packed()

    def deep_copy_from_buffer(self, buffer: Any) -> None:
        """Unpack the start of ``buffer`` into the held array."""
        if self.is_const:
            raise TypeError("cannot copy into a read-only view")
        source = memoryview(buffer).cast("B")
        needed = self.nbytes
        if len(source) < needed:
            raise ValueError(f"buffer holds {len(source)} bytes, {needed} needed")
        values = np.frombuffer(source[:needed], dtype=self._array.dtype, count=self.size)
        self._array[...] = values.reshape(self._array.shape, order=_memory_order(self._array))

    def serialize(self, stream: IO[bytes]) -> None:
        """Write the packed contents to a binary stream."""
        if self.span_is_contiguous and self.is_host_space:
            stream.write(self._packed())
        else:
            buffer = bytearray(self.nbytes)
            self.deep_copy_to_buffer(buffer)
            stream.write(buffer)

    def deserialize(self, stream: IO[bytes]) -> None:
        """Fill the held array from a binary stream.

        Raises ``EOFError`` if the stream ends before the contents are read.
        """
        if self.is_const:
            raise TypeError("cannot deserialize into a read-only view")
        needed = self.nbytes
        data = stream.read(needed)
        if len(data) < needed:
            raise EOFError(f"stream ended after {len(data)} of {needed} bytes")
        self.deep_copy_from_buffer(data)

    def clone(self) -> ViewHolder:
        """A new holder referring to the same array."""
        return ViewHolder(self._array, self.label, self.is_host_space)

    def __repr__(self) -> str:
        kind = "const " if self.is_const else ""
        return f"<{kind}ViewHolder {self.label!r} size={self.size}>"


def make_view_holder(array: np.ndarray, label: str = "", host_space: bool = True) -> ViewHolder:
    """Wrap ``array`` in a holder; a read-only array gives a const holder."""
    return ViewHolder(array, label, host_space)