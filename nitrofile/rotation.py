"""Decoding of the compact formats used to store 3x3 rotation matrices.

A "rotation" decoded here need not actually be orthogonal.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from .bits import bits
from .fixed import fix16

log = logging.getLogger(__name__)


def _from_columns(*entries: float) -> np.ndarray:
    """Build a 3x3 matrix from nine entries given column by column."""
    return np.array(entries, dtype=float).reshape(3, 3).T


def pivot_mat(select: int, neg: int, a: float, b: float) -> np.ndarray:
    """Decode a pivot-form matrix: one +-1 pivot and a 2x2 block from a and b."""
    if select >= 9:
        log.debug("pivot with select=%d", select)
        return _from_columns(-a, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0)

    o = 1.0 if bits(neg, 0, 1, 16) == 0 else -1.0
    c = b if bits(neg, 1, 2, 16) == 0 else -b
    d = a if bits(neg, 2, 3, 16) == 0 else -a

    layouts = (
        (o, 0.0, 0.0, 0.0, a, b, 0.0, c, d),
        (0.0, o, 0.0, a, 0.0, b, c, 0.0, d),
        (0.0, 0.0, o, a, b, 0.0, c, d, 0.0),
        (0.0, a, b, o, 0.0, 0.0, 0.0, c, d),
        (a, 0.0, b, 0.0, o, 0.0, c, 0.0, d),
        (a, b, 0.0, 0.0, 0.0, o, c, d, 0.0),
        (0.0, a, b, 0.0, c, d, o, 0.0, 0.0),
        (a, 0.0, b, c, 0.0, d, 0.0, o, 0.0),
        (a, b, 0.0, c, d, 0.0, 0.0, 0.0, o),
    )
    return _from_columns(*layouts[select])


def basis_mat(values: Sequence[int]) -> np.ndarray:
    """Decode a matrix packed as two basis vectors in five u16s.

    The third column is the cross product of the first two.
    """
    in0, in1, in2, in3, in4 = values
    packed = (in4, in0, in1, in2, in3)

    out = [bits(v, 3, 16, 16) for v in packed]
    last = 0
    for v in packed:
        last = ((last << 3) | bits(v, 0, 3, 16)) & 0xFFFF
    out.append(last)

    def f(x: int) -> float:
        return fix16(x, 1, 0, 12)

    col_a = np.array([f(out[1]), f(out[2]), f(out[3])])
    col_b = np.array([f(out[4]), f(out[0]), f(out[5])])
    col_c = np.cross(col_a, col_b)
    return np.column_stack((col_a, col_b, col_c))