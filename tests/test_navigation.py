import pytest

from nitrofile.navigation import (
    DEFAULT_SPEED_IDX,
    SPEEDS,
    maybe_next,
    maybe_prev,
    next_index,
    prev_index,
    speed_for,
)


def test_next_index_steps_and_wraps():
    assert next_index(0, 0, 3) == 1
    assert next_index(2, 0, 3) == 0


def test_prev_index_steps_and_wraps():
    assert prev_index(2, 0, 3) == 1
    assert prev_index(0, 0, 3) == 2


@pytest.mark.parametrize("x", [0, 1, 2, 3, 4])
def test_next_and_prev_are_inverse(x):
    assert prev_index(next_index(x, 0, 5), 0, 5) == x
    assert next_index(prev_index(x, 0, 5), 0, 5) == x


def test_next_index_empty_range_raises():
    with pytest.raises(ValueError):
        next_index(0, 0, 0)
    with pytest.raises(ValueError):
        prev_index(0, 0, 0)


def test_maybe_next_on_empty_range():
    assert maybe_next(None, 0, 0) is None
    assert maybe_prev(None, 0, 0) is None


def test_maybe_next_sequence():
    seen = []
    x = maybe_next(None, 0, 3)
    while x is not None:
        seen.append(x)
        x = maybe_next(x, 0, 3)
    assert seen == [0, 1, 2]


def test_maybe_prev_sequence():
    seen = []
    x = maybe_prev(None, 0, 3)
    while x is not None:
        seen.append(x)
        x = maybe_prev(x, 0, 3)
    assert seen == [2, 1, 0]


def test_maybe_prev_undoes_maybe_next():
    for x in [None, 0, 1, 2]:
        assert maybe_prev(maybe_next(x, 0, 3), 0, 3) == x


def test_speed_for_default_and_extremes():
    assert speed_for(DEFAULT_SPEED_IDX) == 1.0
    assert speed_for(0) == 0.5
    assert speed_for(len(SPEEDS) - 1) == 550.0


def test_speeds_increase():
    speeds = [speed_for(i) for i in range(len(SPEEDS))]
    assert speeds == sorted(speeds)


@pytest.mark.parametrize("idx", [-1, len(SPEEDS)])
def test_speed_for_out_of_range(idx):
    with pytest.raises(IndexError):
        speed_for(idx)