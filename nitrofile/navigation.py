"""Stepping through models, animations and movement speeds in the viewer."""

from __future__ import annotations

from typing import Optional

SPEEDS = (0.5, 1.0, 3.0, 15.0, 32.0, 64.0, 96.0, 200.0, 550.0)
"""Movement speeds that can be chosen, slowest first."""

DEFAULT_SPEED_IDX = 1

FRAMERATE = 1.0 / 60.0
"""Animation frame length in seconds."""

CONTROL_HELP = (
    "--------\n"
    "Controls\n"
    "--------\n"
    "  WASD         Forward/Left/Back/Right\n"
    "  EQ           Up/Down\n"
    "  L.Shift      Increase Speed\n"
    "  L.Ctrl       Decrease Speed\n"
    "  L.Mouse      Free Look\n"
    "  ,.           Prev/Next Model\n"
    "  OP           Prev/Next Animation\n"
    "  []           Single-step Animation\n"
    "  KL           Prev/Next Pattern Animation\n"
    "  Space        Print Info\n"
)


def _check_nonempty(start: int, end: int) -> None:
    if start >= end:
        raise ValueError(f"empty range [{start}, {end})")


def next_index(x: int, start: int, end: int) -> int:
    """The element after ``x`` in [start, end), wrapping to the start."""
    _check_nonempty(start, end)
    return start if x == end - 1 else x + 1


def prev_index(x: int, start: int, end: int) -> int:
    """The element before ``x`` in [start, end), wrapping to the end."""
    _check_nonempty(start, end)
    return end - 1 if x == start else x - 1


def maybe_next(x: Optional[int], start: int, end: int) -> Optional[int]:
    """Step forward through [start, end); None lies before the first and after the last."""
    if x is None:
        return None if start == end else start
    return None if x == end - 1 else x + 1


def maybe_prev(x: Optional[int], start: int, end: int) -> Optional[int]:
    """Step backward through [start, end); None lies before the first and after the last."""
    if x is None:
        return None if start == end else end - 1
    return None if x == start else x - 1


def speed_for(speed_idx: int) -> float:
    """The movement speed at index ``speed_idx`` of :data:`SPEEDS`."""
    if not 0 <= speed_idx < len(SPEEDS):
        raise IndexError(f"no speed with index {speed_idx}")
    return SPEEDS[speed_idx]