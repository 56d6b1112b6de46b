"""Pattern animations, which swap the images used by a model's materials."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .cursor import Cursor
from .info_block import read_info_block
from .name import Name

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatternKeyframe:
    frame: int
    texture_idx: int
    """Index into Pattern.texture_names."""
    palette_idx: int
    """Index into Pattern.palette_names."""


@dataclass
class PatternTrack:
    """The keyframes at which a material's image changes."""

    name: Name
    keyframes: list[PatternKeyframe] = field(default_factory=list)

    def sample(self, frame: int) -> tuple[int, int]:
        """Return (texture_idx, palette_idx) in effect at ``frame``."""
        if not self.keyframes:
            raise ValueError("pattern track has no keyframes")
        next_pos = next(
            (i for i, key in enumerate(self.keyframes) if key.frame > frame), None
        )
        if next_pos is None:
            keyframe = self.keyframes[-1]
        elif next_pos == 0:
            keyframe = self.keyframes[0]
        else:
            keyframe = self.keyframes[next_pos - 1]
        return keyframe.texture_idx, keyframe.palette_idx


@dataclass
class Pattern:
    name: Name
    num_frames: int
    texture_names: list[Name]
    palette_names: list[Name]
    material_tracks: list[PatternTrack]


def read_pattern(cur: Cursor, name: Name) -> Pattern:
    """Read a pattern animation starting at ``cur``."""
    log.debug("pattern: %r", name)

    c = cur.copy()
    c.next_n_u8s(4)
    num_frames = c.next("H")
    num_texture_names = c.next("B")
    num_palette_names = c.next("B")
    texture_names_off = c.next("H")
    palette_names_off = c.next("H")
    end = c.copy()

    texture_names = (cur + texture_names_off).next_n(Name, num_texture_names)
    palette_names = (cur + palette_names_off).next_n(Name, num_palette_names)

    material_tracks = []
    for (num_keyframes, _unknown, off), track_name in read_info_block(end, "IHH"):
        keyframes = [
            PatternKeyframe(frame, texture_idx, palette_idx)
            for frame, texture_idx, palette_idx in (cur + off).next_n("HBB", num_keyframes)
        ]
        material_tracks.append(PatternTrack(track_name, keyframes))

    return Pattern(
        name=name,
        num_frames=num_frames,
        texture_names=texture_names,
        palette_names=palette_names,
        material_tracks=material_tracks,
    )