import struct

import pytest

from nitrofile.cursor import Cursor, ParseError, TooShortError


@pytest.fixture
def data():
    return struct.pack("<HIB", 0xBEEF, 0xDEADBEEF, 0x7F)


def test_next_reads_little_endian_in_sequence(data):
    cur = Cursor(data)
    assert cur.next("H") == 0xBEEF
    assert cur.next("I") == 0xDEADBEEF
    assert cur.next("B") == 0x7F
    assert cur.bytes_remaining() == 0


def test_peek_does_not_move(data):
    cur = Cursor(data)
    assert cur.peek("H") == 0xBEEF
    assert cur.pos == 0


def test_tuple_formats():
    buf = struct.pack("<HBB", 513, 7, 9)
    assert Cursor(buf).next("HBB") == (513, 7, 9)


def test_next_n_and_nth():
    values = [10, 20, 30, 40]
    buf = struct.pack("<4H", *values)
    cur = Cursor(buf)
    assert cur.nth("H", 2) == values[2]
    assert cur.pos == 0
    assert cur.next_n("H", 4) == values
    assert cur.pos == len(buf)


def test_nth_out_of_range():
    cur = Cursor(struct.pack("<2H", 1, 2))
    with pytest.raises(TooShortError):
        cur.nth("H", 2)


def test_too_short_is_parse_error():
    cur = Cursor(b"\x01")
    with pytest.raises(ParseError):
        cur.next("H")
    assert cur.pos == 0


def test_next_n_u8s(data):
    cur = Cursor(data)
    assert cur.next_n_u8s(2) == data[:2]
    assert cur.slice_from_cur_to_end() == data[2:]
    with pytest.raises(TooShortError):
        cur.next_n_u8s(len(data))


def test_add_and_copy_are_independent(data):
    cur = Cursor(data)
    moved = cur + 2
    assert moved.next("I") == 0xDEADBEEF
    assert cur.pos == 0
    other = cur.copy()
    other.jump_forward(6)
    assert other.next("B") == 0x7F
    assert cur.pos == 0


def test_bytes_remaining_saturates(data):
    cur = Cursor(data)
    cur.jump_to(len(data) + 10)
    assert cur.bytes_remaining() == 0
    with pytest.raises(TooShortError):
        cur.next("B")


def test_custom_fixed_size_type():
    class Pair:
        SIZE = 2

        @classmethod
        def from_bytes(cls, buf):
            return (buf[1], buf[0])

    cur = Cursor(bytes([1, 2, 3, 4]))
    assert cur.next_n(Pair, 2) == [(2, 1), (4, 3)]


def test_negative_length_rejected(data):
    with pytest.raises(ValueError):
        Cursor(data).next_n_u8s(-1)