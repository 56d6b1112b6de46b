import pytest

from nitrofile.fps import FPS_INTERVAL, FpsCounter


def test_starts_at_zero_until_interval_passes():
    counter = FpsCounter()
    counter.update(FPS_INTERVAL / 4)
    counter.update(FPS_INTERVAL / 4)
    assert counter.fps == 0.0


def test_interval_exactly_reached_does_not_refresh():
    counter = FpsCounter()
    counter.update(FPS_INTERVAL)
    assert counter.fps == 0.0


def test_single_long_frame():
    counter = FpsCounter()
    counter.update(4.0)
    assert counter.fps == pytest.approx(0.25)


def test_frames_divided_by_time():
    counter = FpsCounter()
    for _ in range(5):
        counter.update(0.5)
    # 5 frames over 2.5 seconds
    assert counter.fps == pytest.approx(5 / 2.5)


def test_accumulators_reset_after_refresh():
    counter = FpsCounter()
    counter.update(4.0)
    first = counter.fps
    counter.update(0.1)
    assert counter.fps == first
    counter.update(4.0)
    # two frames over 4.1 seconds since the last refresh
    assert counter.fps == pytest.approx(2 / 4.1)


def test_custom_interval():
    counter = FpsCounter(interval=0.5)
    counter.update(0.3)
    assert counter.fps == 0.0
    counter.update(0.3)
    assert counter.fps == pytest.approx(2 / 0.6)