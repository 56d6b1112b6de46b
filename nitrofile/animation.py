"""Joint animations: per-object translation, rotation and scale curves."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Union

import numpy as np

from .bits import bits
from .cursor import Cursor, ParseError
from .fixed import fix16, fix32
from .name import Name
from .rotation import basis_mat, pivot_mat

log = logging.getLogger(__name__)

_STAMP = b"J\0AC"


def _fx32(x: int) -> float:
    return fix32(x, 1, 19, 12)


def _fx16(x: int) -> float:
    return fix16(x, 1, 3, 12)


@dataclass
class NoCurve:
    """A curve that is undefined everywhere; sampling gives the default."""

    def sample_at(self, default: Any, frame: int) -> Any:
        """Return a private copy of ``default`` so callers may modify it freely."""
        if isinstance(default, np.ndarray):
            return default.copy()
        return default


@dataclass
class ConstantCurve:
    """A curve with the same value at every frame."""

    value: Any

    def sample_at(self, default: Any, frame: int) -> Any:
        return self.value


@dataclass
class SampledCurve:
    """A curve sampled at a fixed rate on [start_frame, end_frame]."""

    start_frame: int
    end_frame: int
    values: list

    def sample_at(self, default: Any, frame: int) -> Any:
        """Sample by linear interpolation, holding the end values outside the range."""
        if not self.values:
            return default
        if frame <= self.start_frame:
            return self.values[0]
        if frame >= self.end_frame - 1:
            return self.values[-1]

        lam = (frame - self.start_frame) / (self.end_frame - 1 - self.start_frame)
        idx = lam * (len(self.values) - 1)
        lo = math.floor(idx)
        hi = math.ceil(idx)
        gamma = idx - lo
        return self.values[lo] * (1.0 - gamma) + self.values[hi] * gamma


Curve = Union[NoCurve, ConstantCurve, SampledCurve]


def _no_curves() -> tuple[Curve, Curve, Curve]:
    return (NoCurve(), NoCurve(), NoCurve())


@dataclass
class TRSCurves:
    """Translation, rotation and scale curves for one object."""

    trans: tuple[Curve, Curve, Curve] = field(default_factory=_no_curves)
    rotation: Curve = field(default_factory=NoCurve)
    scale: tuple[Curve, Curve, Curve] = field(default_factory=_no_curves)

    def sample_at(self, frame: int) -> np.ndarray:
        """Return the 4x4 matrix translation * rotation * scale at ``frame``."""
        tx, ty, tz = (curve.sample_at(0.0, frame) for curve in self.trans)
        rot = self.rotation.sample_at(np.eye(3), frame)
        sx, sy, sz = (curve.sample_at(1.0, frame) for curve in self.scale)

        translation = np.eye(4)
        translation[:3, 3] = (tx, ty, tz)
        rotation = np.eye(4)
        rotation[:3, :3] = rot
        scale = np.diag([sx, sy, sz, 1.0])
        return translation @ rotation @ scale


@dataclass
class Animation:
    name: Name
    num_frames: int
    objects_curves: list[TRSCurves]


@dataclass(frozen=True)
class _CurveInfo:
    start_frame: int
    end_frame: int
    rate: int
    data_width: int

    @classmethod
    def from_u32(cls, x: int) -> _CurveInfo:
        info = cls(
            start_frame=bits(x, 0, 16),
            end_frame=bits(x, 16, 28),
            rate=bits(x, 30, 32),
            data_width=bits(x, 28, 30),
        )
        if not info.start_frame < info.end_frame:
            raise ParseError(
                f"curve starts at frame {info.start_frame} but ends at {info.end_frame}"
            )
        return info

    @property
    def num_samples(self) -> int:
        return (self.end_frame - self.start_frame) >> self.rate


def _read_scalar_curve(base: Cursor, cur: Cursor, is_const: bool, paired: bool) -> Curve:
    """Read a translation (single) or scale (paired) curve; the second of a pair is ignored."""
    if is_const:
        raw = cur.next("II")[0] if paired else cur.next("I")
        return ConstantCurve(_fx32(raw))

    info = _CurveInfo.from_u32(cur.next("I"))
    off = cur.next("I")
    data = base + off
    if info.data_width == 0:
        raw_values = data.next_n("II" if paired else "I", info.num_samples)
        decode = _fx32
    else:
        raw_values = data.next_n("HH" if paired else "H", info.num_samples)
        decode = _fx16
    values = [decode(v[0] if paired else v) for v in raw_values]
    return SampledCurve(info.start_frame, info.end_frame, values)


def _read_object_curves(
    base: Cursor, start: Cursor, pivot_data: Cursor, basis_data: Cursor
) -> TRSCurves:
    cur = start.copy()
    flags = cur.next("H")
    cur.next("B")  # dummy
    cur.next("B")  # index

    def flag(lo: int, hi: int) -> int:
        return bits(flags, lo, hi, 16)

    log.debug("animation flags: %#06x", flags)

    if flag(0, 1) != 0:
        return TRSCurves()

    trans: tuple[Curve, Curve, Curve] = _no_curves()
    if flag(1, 3) == 0:
        trans = tuple(  # type: ignore[assignment]
            _read_scalar_curve(base, cur, flag(3 + i, 4 + i) != 0, paired=False)
            for i in range(3)
        )

    # Rotation data holds references into the pivot and basis tables.
    def fetch_matrix(x: int) -> np.ndarray:
        mode = bits(x, 15, 16, 16)
        idx = bits(x, 0, 15, 16)
        if mode == 1:
            selneg, a, b = pivot_data.nth("HHH", idx)
            return pivot_mat(bits(selneg, 0, 4, 16), bits(selneg, 4, 8, 16), _fx16(a), _fx16(b))
        return basis_mat(basis_data.nth("HHHHH", idx))

    rotation: Curve = NoCurve()
    if flag(6, 8) == 0:
        if flag(8, 9) != 0:
            v = cur.next("H")
            cur.next("H")  # padding
            rotation = ConstantCurve(fetch_matrix(v))
        else:
            info = _CurveInfo.from_u32(cur.next("I"))
            off = cur.next("I")
            refs = (base + off).next_n("H", info.num_samples)
            rotation = SampledCurve(
                info.start_frame, info.end_frame, [fetch_matrix(v) for v in refs]
            )

    scale: tuple[Curve, Curve, Curve] = _no_curves()
    if flag(9, 11) == 0:
        scale = tuple(  # type: ignore[assignment]
            _read_scalar_curve(base, cur, flag(11 + i, 12 + i) != 0, paired=True)
            for i in range(3)
        )

    return TRSCurves(trans=trans, rotation=rotation, scale=scale)


def read_animation(cur: Cursor, name: Name) -> Animation:
    """Read a joint animation starting at ``cur``."""
    c = cur.copy()
    stamp = c.next_n_u8s(4)
    num_frames = c.next("H")
    num_objects = c.next("H")
    c.next("I")  # unknown
    pivot_data_off = c.next("I")
    basis_data_off = c.next("I")
    object_offs = c.next_n("H", num_objects)

    if stamp != _STAMP:
        raise ParseError(f"expected animation stamp {_STAMP!r}, got {stamp!r}")
    if num_frames == 0:
        raise ParseError("ignoring animation with 0 frames")

    pivot_data = cur + pivot_data_off
    basis_data = cur + basis_data_off
    objects_curves = [
        _read_object_curves(cur, cur + off, pivot_data, basis_data) for off in object_offs
    ]
    return Animation(name=name, num_frames=num_frames, objects_curves=objects_curves)