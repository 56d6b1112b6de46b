"""Sixteen-byte NUL-padded names used throughout Nitro files."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


def _is_letter_or_digit(b: int) -> bool:
    return 0x30 <= b <= 0x39 or 0x41 <= b <= 0x5A or 0x61 <= b <= 0x7A


def _escape_byte(b: int) -> str:
    if b == 0x09:
        return "\\t"
    if b == 0x0D:
        return "\\r"
    if b == 0x0A:
        return "\\n"
    if b in (0x22, 0x27, 0x5C):
        return "\\" + chr(b)
    if 0x20 <= b <= 0x7E:
        return chr(b)
    return f"\\u{{{b:x}}}"


@dataclass(frozen=True, repr=False)
class Name:
    """A human-readable name stored as sixteen NUL-padded bytes."""

    raw: bytes

    SIZE: ClassVar[int] = 16

    def __post_init__(self) -> None:
        if len(self.raw) != self.SIZE:
            raise ValueError(f"a name is {self.SIZE} bytes, got {len(self.raw)}")

    @classmethod
    def from_bytes(cls, buf: bytes) -> Name:
        return cls(bytes(buf))

    @property
    def trimmed(self) -> bytes:
        """The name with trailing NUL bytes removed."""
        return self.raw.rstrip(b"\0")

    def print_safe(self) -> str:
        """Return the name as a non-empty string of letters, digits and underscores."""
        trimmed = self.trimmed
        if not trimmed:
            return "_"
        return "".join(chr(b) if _is_letter_or_digit(b) else "_" for b in trimmed)

    def __str__(self) -> str:
        # Non-printable bytes become periods, as hex editors show them.
        return "".join("." if b < 0x20 else chr(b) for b in self.trimmed)

    def __repr__(self) -> str:
        trimmed = self.trimmed
        normal = bool(trimmed) and all(
            _is_letter_or_digit(b) or b in (0x5F, 0x2D) for b in trimmed
        )
        if normal:
            return trimmed.decode("ascii")
        return '"' + "".join(_escape_byte(b) for b in trimmed) + '"'