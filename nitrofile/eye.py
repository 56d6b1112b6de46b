"""A free-flying camera."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

_TWO_PI = 2.0 * math.pi
_MAX_ALTITUDE = 0.499 * math.pi


def _rotation_x(theta: float) -> np.ndarray:
    c, s = math.cos(theta), math.sin(theta)
    return np.array(
        [
            [1.0, 0.0, 0.0, 0.0],
            [0.0, c, -s, 0.0],
            [0.0, s, c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def _rotation_y(theta: float) -> np.ndarray:
    c, s = math.cos(theta), math.sin(theta)
    return np.array(
        [
            [c, 0.0, s, 0.0],
            [0.0, 1.0, 0.0, 0.0],
            [-s, 0.0, c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def _translation(v: np.ndarray) -> np.ndarray:
    m = np.eye(4)
    m[:3, 3] = v
    return m


@dataclass
class Eye:
    """Camera position plus azimuth and altitude angles in radians."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    azimuth: float = 0.0
    altitude: float = 0.0

    def __post_init__(self) -> None:
        self.position = np.array(self.position, dtype=float)

    def model_view(self) -> np.ndarray:
        """The 4x4 model-view matrix."""
        return (
            _rotation_x(-self.altitude)
            @ _rotation_y(-self.azimuth)
            @ _translation(-self.position)
        )

    def move_by(self, dv) -> None:
        """Move by ``dv``: x is forward, y is to the right, z is up.

        The eye is treated as level, so looking up or down does not change
        the direction of motion.
        """
        t = _rotation_y(self.azimuth)[:3, :3]
        forward = t @ np.array([0.0, 0.0, -1.0])
        side = t @ np.array([1.0, 0.0, 0.0])
        up = t @ np.array([0.0, 1.0, 0.0])
        self.position = self.position + forward * dv[0] + side * dv[1] + up * dv[2]

    def free_look(self, dv) -> None:
        """Turn by ``dv`` (horizontal, vertical), keeping the angles in range."""
        self.azimuth -= dv[0]
        self.altitude -= dv[1]

        # Wrap once; steps are expected to be small.
        if self.azimuth >= _TWO_PI:
            self.azimuth -= _TWO_PI
        elif self.azimuth < 0.0:
            self.azimuth += _TWO_PI

        # Stay away from the poles.
        self.altitude = min(max(self.altitude, -_MAX_ALTITUDE), _MAX_ALTITUDE)