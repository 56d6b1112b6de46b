import struct

import pytest

from nitrofile.cursor import Cursor, ParseError, TooShortError
from nitrofile.info_block import read_info_block
from nitrofile.name import Name


def build_info_block(fmt, data, names, dummy=0, datum_size=None):
    count = len(data)
    size = struct.calcsize("<" + fmt)
    out = struct.pack("<BBH", dummy, count, 0)
    out += struct.pack("<HHI", 0, 0, 0)
    out += struct.pack(f"<{count}I", *range(count))
    out += struct.pack("<HH", size if datum_size is None else datum_size, size * count)
    for d in data:
        out += struct.pack("<" + fmt, *(d if isinstance(d, tuple) else (d,)))
    for n in names:
        out += n.ljust(16, b"\0")
    return out


def test_reads_u32_pairs():
    data = build_info_block("I", [100, 200], [b"first", b"second"])
    result = read_info_block(Cursor(data), "I")
    assert result == [
        (100, Name.from_bytes(b"first".ljust(16, b"\0"))),
        (200, Name.from_bytes(b"second".ljust(16, b"\0"))),
    ]


def test_reads_tuple_data():
    data = build_info_block("HBB", [(8, 3, 0), (16, 1, 0)], [b"a", b"b"])
    result = read_info_block(Cursor(data), "HBB")
    assert [d for d, _ in result] == [(8, 3, 0), (16, 1, 0)]
    assert [str(n) for _, n in result] == ["a", "b"]


def test_empty_block():
    data = build_info_block("I", [], [])
    assert read_info_block(Cursor(data), "I") == []


def test_cursor_not_moved():
    data = build_info_block("I", [7], [b"x"])
    cur = Cursor(data)
    read_info_block(cur, "I")
    assert cur.pos == 0


def test_reads_at_offset():
    prefix = b"\xaa" * 5
    data = prefix + build_info_block("I", [42], [b"obj"])
    result = read_info_block(Cursor(data) + len(prefix), "I")
    assert result[0][0] == 42


def test_nonzero_dummy_rejected():
    data = build_info_block("I", [1], [b"x"], dummy=1)
    with pytest.raises(ParseError):
        read_info_block(Cursor(data), "I")


def test_wrong_datum_size_rejected():
    data = build_info_block("I", [1], [b"x"], datum_size=8)
    with pytest.raises(ParseError):
        read_info_block(Cursor(data), "I")


def test_truncated_block_raises_too_short():
    data = build_info_block("I", [1, 2], [b"x", b"y"])
    with pytest.raises(TooShortError):
        read_info_block(Cursor(data[:-1]), "I")