"""Info blocks: sequences of (datum, name) pairs found throughout Nitro files."""

from __future__ import annotations

import struct
from typing import Any

from .cursor import Cursor, ParseError
from .name import Name


def _datum_size(fmt: Any) -> int:
    if isinstance(fmt, str):
        return struct.calcsize("<" + fmt)
    return fmt.SIZE


def read_info_block(cur: Cursor, fmt: Any) -> list[tuple[Any, Name]]:
    """Read an info block whose data have the given format.

    ``fmt`` is a little-endian struct format string or a fixed-size type.
    Returns the (datum, name) pairs in order.
    """
    c = cur.copy()
    dummy = c.next("B")
    count = c.next("B")
    c.next("H")  # header size
    c.next("H")  # unknown subheader size
    c.next("H")  # unknown section size
    c.next("I")  # unknown constant
    c.next_n("I", count)  # unknown data
    size_of_datum = c.next("H")
    c.next("H")  # data section size
    data = c.next_n(fmt, count)
    names = c.next_n(Name, count)

    if dummy != 0:
        raise ParseError(f"info block: expected dummy byte to be 0, got {dummy}")
    if size_of_datum != _datum_size(fmt):
        raise ParseError(
            f"info block: datum size {size_of_datum} does not match "
            f"expected {_datum_size(fmt)}"
        )
    return list(zip(data, names))