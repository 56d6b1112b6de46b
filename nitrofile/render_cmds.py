"""Render commands of model files, decoded into simple render ops."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from .cursor import Cursor, ParseError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkinTerm:
    weight: float
    stack_pos: int
    inv_bind_idx: int


@dataclass(frozen=True)
class LoadMatrix:
    """cur_matrix = matrix_stack[stack_pos]"""

    stack_pos: int


@dataclass(frozen=True)
class StoreMatrix:
    """matrix_stack[stack_pos] = cur_matrix"""

    stack_pos: int


@dataclass(frozen=True)
class MulObject:
    """cur_matrix = cur_matrix * object_matrices[object_idx]"""

    object_idx: int


@dataclass(frozen=True)
class Skin:
    """cur_matrix = sum of weight * matrix_stack[stack_pos] * inv_binds[inv_bind_idx]"""

    terms: tuple[SkinTerm, ...]


@dataclass(frozen=True)
class ScaleUp:
    """cur_matrix = cur_matrix * scale(model.up_scale)"""


@dataclass(frozen=True)
class ScaleDown:
    """cur_matrix = cur_matrix * scale(model.down_scale)"""


@dataclass(frozen=True)
class BindMaterial:
    """Bind materials[material_idx] for subsequent draws."""

    material_idx: int


@dataclass(frozen=True)
class Draw:
    """Draw meshes[mesh_idx]."""

    mesh_idx: int


Op = Union[LoadMatrix, StoreMatrix, MulObject, Skin, ScaleUp, ScaleDown, BindMaterial, Draw]

_PARAM_LENGTHS = {
    0x00: 0,
    0x01: 0,
    0x02: 2,
    0x03: 1,
    0x04: 1,
    0x05: 1,
    0x06: 3,
    0x07: 1,
    0x08: 1,
    0x0B: 0,
    0x0C: 2,
    0x0D: 2,
    0x24: 1,
    0x26: 4,
    0x2B: 0,
    0x40: 0,
    0x44: 1,
    0x46: 4,
    0x47: 2,
    0x66: 5,
    0x80: 0,
}


def _next_opcode_params(cur: Cursor) -> tuple[int, bytes]:
    opcode = cur.next("B")
    if opcode == 0x09:
        # store slot, term count, then count (stack_pos, inv_bind, weight) triples
        count = cur.nth("B", 1)
        return opcode, cur.next_n_u8s(2 + 3 * count)
    try:
        params_len = _PARAM_LENGTHS[opcode]
    except KeyError:
        raise ParseError(f"unknown render command opcode: {opcode:#x}") from None
    return opcode, cur.next_n_u8s(params_len)


def _mul_object_ops(opcode: int, params: bytes) -> list[Op]:
    store_pos = params[3] if opcode in (0x26, 0x66) else None
    if opcode == 0x46:
        load_pos = params[3]
    elif opcode == 0x66:
        load_pos = params[4]
    else:
        load_pos = None

    ops: list[Op] = []
    if load_pos is not None:
        ops.append(LoadMatrix(load_pos))
    ops.append(MulObject(params[0]))
    if store_pos is not None:
        ops.append(StoreMatrix(store_pos))
    return ops


def _skin_ops(params: bytes) -> list[Op]:
    store_pos, num_terms = params[0], params[1]
    triples = params[2:2 + 3 * num_terms]
    terms = tuple(
        SkinTerm(weight=weight / 256.0, stack_pos=stack_pos, inv_bind_idx=inv_bind_idx)
        for stack_pos, inv_bind_idx, weight in zip(triples[0::3], triples[1::3], triples[2::3])
    )
    return [Skin(terms), StoreMatrix(store_pos)]


def parse_render_cmds(cur: Cursor) -> list[Op]:
    """Parse a stream of render commands, ending at the end command, into ops."""
    c = cur.copy()
    ops: list[Op] = []
    while True:
        opcode, params = _next_opcode_params(c)
        log.debug("render cmd %#04x %s", opcode, params.hex())

        if opcode == 0x01:
            return ops
        if opcode in (0x00, 0x02):
            # NOP, and a visibility-like command that emits nothing
            continue
        if opcode == 0x03:
            ops.append(LoadMatrix(params[0]))
        elif opcode in (0x04, 0x24, 0x44):
            ops.append(BindMaterial(params[0]))
        elif opcode == 0x05:
            ops.append(Draw(params[0]))
        elif opcode in (0x06, 0x26, 0x46, 0x66):
            ops.extend(_mul_object_ops(opcode, params))
        elif opcode == 0x09:
            ops.extend(_skin_ops(params))
        elif opcode == 0x0B:
            ops.append(ScaleUp())
        elif opcode == 0x2B:
            ops.append(ScaleDown())
        else:
            log.debug("skipping unknown render command %#x", opcode)