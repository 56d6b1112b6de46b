"""A read position in a byte buffer, for parsing little-endian binary data."""

from __future__ import annotations

import struct
from functools import lru_cache
from typing import Any, Callable


class ParseError(Exception):
    """Raised when binary data cannot be parsed."""


class TooShortError(ParseError):
    """Raised when a read runs past the end of the buffer."""

    def __init__(self, message: str = "ran out of data") -> None:
        super().__init__(message)


@lru_cache(maxsize=None)
def _struct_codec(fmt: str) -> tuple[int, Callable[[bytes], Any]]:
    packer = struct.Struct("<" + fmt)

    def decode(data: bytes) -> Any:
        values = packer.unpack(data)
        return values[0] if len(values) == 1 else values

    return packer.size, decode


def _codec(fmt: Any) -> tuple[int, Callable[[bytes], Any]]:
    """Return (size, decoder) for a struct format string or a fixed-size type.

    A fixed-size type has an integer ``SIZE`` attribute and a ``from_bytes``
    callable taking exactly that many bytes.
    """
    if isinstance(fmt, str):
        return _struct_codec(fmt)
    return fmt.SIZE, fmt.from_bytes


class Cursor:
    """A position in an immutable byte buffer."""

    __slots__ = ("buf", "pos")

    def __init__(self, buf: bytes, pos: int = 0) -> None:
        self.buf = buf if isinstance(buf, bytes) else bytes(buf)
        self.pos = pos

    def __repr__(self) -> str:
        return f"Cursor(pos={self.pos})"

    def bytes_remaining(self) -> int:
        return max(0, len(self.buf) - self.pos)

    def peek(self, fmt: Any) -> Any:
        """Decode a value at the current position without moving."""
        size, decode = _codec(fmt)
        if self.bytes_remaining() < size:
            raise TooShortError()
        return decode(self.buf[self.pos:self.pos + size])

    def next(self, fmt: Any) -> Any:
        """Decode a value and move past it."""
        value = self.peek(fmt)
        self.pos += _codec(fmt)[0]
        return value

    def nth(self, fmt: Any, n: int) -> Any:
        """Decode the n-th value of an array starting here, without moving."""
        size, _ = _codec(fmt)
        return (self + size * n).next(fmt)

    def next_n(self, fmt: Any, n: int) -> list:
        """Decode ``n`` consecutive values and move past them."""
        size, decode = _codec(fmt)
        data = self.next_n_u8s(size * n)
        return [decode(data[i:i + size]) for i in range(0, len(data), size)] if size else [
            decode(b"") for _ in range(n)
        ]

    def next_n_u8s(self, n: int) -> bytes:
        """Return the next ``n`` raw bytes and move past them."""
        if n < 0:
            raise ValueError("cannot read a negative number of bytes")
        if self.pos + n > len(self.buf):
            raise TooShortError()
        data = self.buf[self.pos:self.pos + n]
        self.pos += n
        return data

    def slice_from_cur_to_end(self) -> bytes:
        return self.buf[self.pos:]

    def jump_forward(self, amount: int) -> None:
        self.jump_to(self.pos + amount)

    def jump_to(self, pos: int) -> None:
        self.pos = pos

    def copy(self) -> Cursor:
        return Cursor(self.buf, self.pos)

    def __add__(self, amount: int) -> Cursor:
        if not isinstance(amount, int):
            return NotImplemented
        return Cursor(self.buf, self.pos + amount)