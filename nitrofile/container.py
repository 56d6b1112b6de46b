"""Nitro containers: files holding model, texture and animation sections.

A container is recognised by a four-byte stamp such as ``BMD0``. It holds
sections, each with its own stamp: ``MDL0`` holds models, ``JNT0`` holds
joint animations and ``PAT0`` holds pattern animations. Which kinds of
section a container holds is not enforced; any section that can be read
is read.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from .animation import Animation, read_animation
from .cursor import Cursor, ParseError
from .info_block import read_info_block
from .model import Model, read_model
from .name import Name
from .pattern import Pattern, read_pattern

log = logging.getLogger(__name__)

STAMPS = (b"BMD0", b"BTX0", b"BCA0", b"BTP0")


@dataclass
class Container:
    """The readable contents of a Nitro container."""

    stamp: bytes
    file_size: int
    models: list[Model] = field(default_factory=list)
    animations: list[Animation] = field(default_factory=list)
    patterns: list[Pattern] = field(default_factory=list)


def read_container(cur: Cursor) -> Container:
    """Read a container starting at ``cur``.

    Sections that cannot be read are skipped; so are individual items
    inside a section that fail to parse.
    """
    c = cur.copy()
    stamp = c.next_n_u8s(4)
    bom = c.next("H")
    c.next("H")  # version
    file_size = c.next("I")
    header_size = c.next("H")
    num_sections = c.next("H")
    section_offs = c.next_n("I", num_sections)

    if stamp not in STAMPS:
        raise ParseError(
            "unrecognized Nitro container: expected the first four bytes "
            "to be one of: BMD0, BTX0, BCA0, BTP0"
        )
    if bom != 0xFEFF:
        raise ParseError(f"container byte order mark should be 0xfeff, got {bom:#x}")
    if header_size != 16:
        raise ParseError(f"container header size should be 16, got {header_size}")
    if file_size <= 16:
        raise ParseError(f"container file size {file_size} is too small")

    cont = Container(stamp=bytes(stamp), file_size=file_size)
    for section_off in section_offs:
        try:
            _read_section(cont, cur + section_off)
        except ParseError as e:
            log.debug("skipping Nitro section: %s", e)
    return cont


def _read_section(cont: Container, cur: Cursor) -> None:
    stamp = cur.copy().next_n_u8s(4)
    if stamp == b"MDL0":
        _add_items(cur, b"MDL0", read_model, cont.models, "model")
    elif stamp == b"JNT0":
        _add_items(cur, b"JNT0", read_animation, cont.animations, "animation")
    elif stamp == b"PAT0":
        _add_items(cur, b"PAT0", read_pattern, cont.patterns, "pattern")
    elif stamp == b"TEX0":
        raise ParseError("TEX0 sections are not supported")
    else:
        raise ParseError(
            "unrecognized Nitro format: expected the first four bytes "
            "to be one of: MDL0, TEX0, JNT0, PAT0"
        )


def _add_items(
    cur: Cursor,
    expected_stamp: bytes,
    reader: Callable[[Cursor, Name], object],
    out: list,
    kind: str,
) -> None:
    """Read every item listed in a section's info block into ``out``."""
    c = cur.copy()
    stamp = c.next_n_u8s(4)
    c.next("I")  # section size
    if stamp != expected_stamp:
        raise ParseError(f"expected section stamp {expected_stamp!r}, got {stamp!r}")

    for off, name in read_info_block(c, "I"):
        try:
            out.append(reader(cur + off, name))
        except ParseError as e:
            log.error("error on %s %s: %s", kind, name, e)