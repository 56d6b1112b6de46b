"""Frames-per-second measurement."""

from __future__ import annotations

FPS_INTERVAL = 2.0
"""Length in seconds of the intervals over which the frame rate is measured."""


class FpsCounter:
    """Tracks frames per second, refreshed once per measurement interval."""

    def __init__(self, interval: float = FPS_INTERVAL) -> None:
        self.interval = interval
        self.fps = 0.0
        self._time_acc = 0.0
        self._frames_acc = 0.0

    def update(self, dt: float) -> None:
        """Record one frame that took ``dt`` seconds."""
        self._time_acc += dt
        self._frames_acc += 1.0

        if self._time_acc > self.interval:
            self.fps = self._frames_acc / self._time_acc
            self._time_acc = 0.0
            self._frames_acc = 0.0