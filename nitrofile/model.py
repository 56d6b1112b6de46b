"""Models: meshes, materials, objects and render commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .bits import bits
from .cursor import Cursor, ParseError
from .fixed import fix16, fix32
from .info_block import read_info_block
from .name import Name
from .render_cmds import BindMaterial, Draw, MulObject, Op, Skin, parse_render_cmds
from .rotation import pivot_mat

log = logging.getLogger(__name__)

_INV_BIND_SIZE = (4 * 3 + 3 * 3) * 4


def _fx32(x: int) -> float:
    return fix32(x, 1, 19, 12)


def _fx16(x: int) -> float:
    return fix16(x, 1, 3, 12)


@dataclass
class Mesh:
    """A piece of a model: a blob of GPU commands."""

    name: Name
    gpu_commands: bytes


@dataclass
class Material:
    """Drawing state such as colours, texture and culling."""

    name: Name
    texture_name: Optional[Name]
    palette_name: Optional[Name]
    params: int
    width: int
    height: int
    diffuse: tuple[float, float, float]
    diffuse_is_default_vertex_color: bool
    ambient: tuple[float, float, float]
    specular: tuple[float, float, float]
    enable_shininess_table: bool
    emission: tuple[float, float, float]
    alpha: float
    cull_backface: bool
    cull_frontface: bool
    texture_mat: np.ndarray


@dataclass
class Object:
    """A rest-pose transform, typically one bone of a skeleton."""

    name: Name
    trans: Optional[np.ndarray]
    rot: Optional[np.ndarray]
    scale: Optional[np.ndarray]
    matrix: np.ndarray
    """The TRS matrix of the parts above."""


@dataclass
class Model:
    """A model: its data and the render commands that draw it."""

    name: Name
    materials: list[Material]
    meshes: list[Mesh]
    objects: list[Object]
    inv_binds: list[np.ndarray]
    render_ops: list[Op]
    up_scale: float
    down_scale: float


def read_model(cur: Cursor, name: Name) -> Model:
    """Read a model starting at ``cur``."""
    log.debug("model: %r", name)

    c = cur.copy()
    c.next("I")  # section size
    render_cmds_off = c.next("I")
    materials_off = c.next("I")
    mesh_off = c.next("I")
    inv_binds_off = c.next("I")
    c.next_n_u8s(3)
    num_objects = c.next("B")
    c.next("B")  # number of materials
    c.next("B")  # number of meshes
    c.next_n_u8s(2)
    up_scale = _fx32(c.next("I"))
    down_scale = _fx32(c.next("I"))
    c.next_n("H", 4)  # vertex, surface, triangle and quad counts
    c.next_n("H", 6)  # bounding box
    c.next_n_u8s(8)
    objects_cur = c.copy()

    render_ops = parse_render_cmds(cur + render_cmds_off)
    meshes = _read_meshes(cur + mesh_off)
    materials = _read_materials(cur + materials_off)
    objects = _read_objects(objects_cur)
    inv_binds = _read_inv_binds(cur + inv_binds_off, num_objects)

    model = Model(
        name=name,
        materials=materials,
        meshes=meshes,
        objects=objects,
        inv_binds=inv_binds,
        render_ops=render_ops,
        up_scale=up_scale,
        down_scale=down_scale,
    )
    _validate_render_ops(model)
    return model


def _validate_render_ops(model: Model) -> None:
    """Check that every index in the render ops is in bounds."""
    for op in model.render_ops:
        if isinstance(op, MulObject):
            good = op.object_idx < len(model.objects)
        elif isinstance(op, BindMaterial):
            good = op.material_idx < len(model.materials)
        elif isinstance(op, Draw):
            good = op.mesh_idx < len(model.meshes)
        elif isinstance(op, Skin):
            good = all(term.inv_bind_idx < len(model.inv_binds) for term in op.terms)
        else:
            good = True
        if not good:
            raise ParseError("model had out-of-bounds index in render commands")


def _read_meshes(cur: Cursor) -> list[Mesh]:
    return [_read_mesh(cur + off, name) for off, name in read_info_block(cur, "I")]


def _read_mesh(cur: Cursor, name: Name) -> Mesh:
    log.debug("mesh: %r", name)
    c = cur.copy()
    c.next("H")  # dummy
    section_size = c.next("H")
    c.next("I")  # unknown
    cmds_off = c.next("I")
    cmds_len = c.next("I")

    if section_size != 16:
        raise ParseError(f"mesh section size should be 16, got {section_size}")
    if cmds_len % 4 != 0:
        raise ParseError(f"mesh command length {cmds_len} is not a multiple of 4")

    return Mesh(name=name, gpu_commands=(cur + cmds_off).next_n_u8s(cmds_len))


def _pair_names(cur: Cursor, pairing_cur: Cursor, materials: list[Material], attr: str) -> None:
    for (off, num, _), name in read_info_block(pairing_cur, "HBB"):
        for mat_id in (cur + off).next_n_u8s(num):
            if mat_id >= len(materials):
                raise ParseError(f"{attr} refers to missing material {mat_id}")
            setattr(materials[mat_id], attr, name)


def _read_materials(cur: Cursor) -> list[Material]:
    c = cur.copy()
    texture_pairing_off = c.next("H")
    palette_pairing_off = c.next("H")

    materials = [_read_material(cur + off, name) for off, name in read_info_block(c, "I")]

    # Texture and palette names are attached to materials by separate tables.
    _pair_names(cur, cur + texture_pairing_off, materials, "texture_name")
    _pair_names(cur, cur + palette_pairing_off, materials, "palette_name")
    return materials


def _rgb(x: int) -> tuple[float, float, float]:
    return (bits(x, 0, 5) / 31.0, bits(x, 5, 10) / 31.0, bits(x, 10, 15) / 31.0)


def _read_material(cur: Cursor, name: Name) -> Material:
    log.debug("material: %r", name)
    c = cur.copy()
    c.next("H")  # dummy
    section_size = c.next("H")
    dif_amb = c.next("I")
    spe_emi = c.next("I")
    polygon_attr = c.next("I")
    c.next("I")  # unknown, possibly shininess
    params = c.next("I")
    c.next("I")
    c.next("I")
    width = c.next("H")
    height = c.next("H")
    c.next("I")
    c.next("I")

    # The section size tells whether texture matrix data follows.
    if section_size == 60:
        a = _fx32(c.next("I"))
        b = _fx32(c.next("I"))
        texture_mat = np.diag([a, b, 1.0, 1.0])
    else:
        texture_mat = np.eye(4)

    return Material(
        name=name,
        texture_name=None,
        palette_name=None,
        params=params,
        width=width,
        height=height,
        diffuse=_rgb(bits(dif_amb, 0, 15)),
        diffuse_is_default_vertex_color=bits(dif_amb, 15, 16) != 0,
        ambient=_rgb(bits(dif_amb, 16, 31)),
        specular=_rgb(bits(spe_emi, 0, 15)),
        enable_shininess_table=bits(spe_emi, 15, 16) != 0,
        emission=_rgb(bits(spe_emi, 16, 31)),
        alpha=bits(polygon_attr, 16, 21) / 31.0,
        cull_backface=bits(polygon_attr, 6, 7) == 0,
        cull_frontface=bits(polygon_attr, 7, 8) == 0,
        texture_mat=texture_mat,
    )


def _read_objects(cur: Cursor) -> list[Object]:
    return [_read_object(cur + off, name) for off, name in read_info_block(cur, "I")]


def _read_object(cur: Cursor, name: Name) -> Object:
    c = cur.copy()
    flags = c.next("H")
    t = bits(flags, 0, 1, 16)
    r = bits(flags, 1, 2, 16)
    s = bits(flags, 2, 3, 16)
    p = bits(flags, 3, 4, 16)
    m0 = c.next("H")

    trans = rot = scale = None

    if t == 0:
        trans = np.array([_fx32(v) for v in c.next("III")])

    if p == 1:
        a = _fx16(c.next("H"))
        b = _fx16(c.next("H"))
        rot = pivot_mat(bits(flags, 4, 8, 16), bits(flags, 8, 12, 16), a, b)
    elif r == 0:
        entries = [m0, *c.next_n("H", 8)]
        # Entries are stored column by column.
        rot = np.array([_fx16(v) for v in entries]).reshape(3, 3).T

    if s == 0:
        scale = np.array([_fx32(v) for v in c.next("III")])

    matrix = np.eye(4)
    if scale is not None:
        matrix = np.diag([*scale, 1.0])
    if rot is not None:
        rot4 = np.eye(4)
        rot4[:3, :3] = rot
        matrix = rot4 @ matrix
    if trans is not None:
        trans4 = np.eye(4)
        trans4[:3, 3] = trans
        matrix = trans4 @ matrix

    return Object(name=name, trans=trans, rot=rot, scale=scale, matrix=matrix)


def _read_inv_binds(cur: Cursor, num_objects: int) -> list[np.ndarray]:
    """Read as many inverse bind matrices (up to ``num_objects``) as the data holds.

    Each entry is a 4x3 matrix followed by an ignored 3x3 matrix.
    """
    c = cur.copy()
    inv_binds = []
    for _ in range(num_objects):
        if c.bytes_remaining() < _INV_BIND_SIZE:
            break
        m = [_fx32(v) for v in c.next_n("I", 12)]
        columns = np.array(
            [
                [m[0], m[1], m[2], 0.0],
                [m[3], m[4], m[5], 0.0],
                [m[6], m[7], m[8], 0.0],
                [m[9], m[10], m[11], 1.0],
            ]
        )
        inv_binds.append(columns.T)
        c.jump_forward(3 * 3 * 4)
    return inv_binds