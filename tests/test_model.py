import struct

import numpy as np
import pytest

from nitrofile.cursor import Cursor, ParseError
from nitrofile.fixed import fix16, fix32
from nitrofile.model import read_model
from nitrofile.name import Name
from nitrofile.render_cmds import BindMaterial, Draw, MulObject
from nitrofile.rotation import pivot_mat

DEFAULT_RENDER = bytes([0x06, 0, 0, 0, 0x04, 0, 0x05, 0, 0x01])
# t=0 (translation), r=1 (no matrix), s=0 (scale), p=0
DEFAULT_OBJECT = struct.pack("<HH3I3I", 0x2, 0, 4096, 8192, 0, 8192, 4096, 4096)
GPU = bytes(range(8))


def _name(s):
    return s.encode("ascii").ljust(16, b"\0")


def _info_block(fmt, entries):
    count = len(entries)
    size = struct.calcsize("<" + fmt)
    out = struct.pack("<BBHHHI", 0, count, 0, 0, 0, 0)
    out += b"\0" * (4 * count)
    out += struct.pack("<HH", size, 0)
    out += b"".join(struct.pack("<" + fmt, *d) for d, _ in entries)
    out += b"".join(_name(n) for _, n in entries)
    return out


def _material(section_size=44, tex_scale=None):
    dif_amb = 0x1F | 0x8000 | (0x1F << 21)
    spe_emi = (0x1F << 10) | (0x1F << 16)
    polygon_attr = (31 << 16) | (1 << 6)
    data = struct.pack(
        "<HHIIIIIIIHHII",
        0, section_size, dif_amb, spe_emi, polygon_attr, 0, 0x1234, 0, 0, 32, 64, 4096, 4096,
    )
    if tex_scale is not None:
        data += struct.pack("<II", *tex_scale) + b"\0" * 8
    return data


def _align(buf):
    while len(buf) % 4:
        buf.append(0)


def build_model(
    render=DEFAULT_RENDER,
    object_data=DEFAULT_OBJECT,
    material=None,
    mat_ids=b"\0",
    mesh_section_size=16,
    gpu=GPU,
    num_inv_binds=1,
    num_objects=1,
):
    buf = bytearray(64)

    objects_ib = _info_block("I", [((40,), "obj0")])
    assert len(objects_ib) == 40
    buf += objects_ib + object_data
    _align(buf)

    render_off = len(buf)
    buf += render
    _align(buf)

    mat_off = len(buf)
    material = _material() if material is None else material
    material_rel = 4 + 40
    tex_rel = material_rel + len(material)
    ids_rel = tex_rel + 40
    ids = mat_ids + b"\0" * (-len(mat_ids) % 4)
    pal_rel = ids_rel + len(ids)
    buf += struct.pack("<HH", tex_rel, pal_rel)
    buf += _info_block("I", [((material_rel,), "mat0")])
    buf += material
    buf += _info_block("HBB", [((ids_rel, len(mat_ids), 0), "tex0")])
    buf += ids
    buf += _info_block("HBB", [])
    _align(buf)

    mesh_off = len(buf)
    buf += _info_block("I", [((40,), "mesh0")])
    buf += struct.pack("<HHIII", 0, mesh_section_size, 0, 16, len(gpu)) + gpu
    _align(buf)

    inv_off = len(buf)
    for _ in range(num_inv_binds):
        entries = [4096, 0, 0, 0, 4096, 0, 0, 0, 4096, 8192, 0, 4096]
        buf += struct.pack("<12I", *entries) + b"\0" * 36

    header = struct.pack("<IIIII", len(buf), render_off, mat_off, mesh_off, inv_off)
    header += b"\0\0\0" + bytes([num_objects, 1, 1]) + b"\0\0"
    header += struct.pack("<II", 4096, 2048)
    header += struct.pack("<4H", 0, 0, 0, 0) + struct.pack("<6H", 0, 0, 0, 0, 0, 0)
    header += b"\0" * 8
    assert len(header) == 64
    buf[:64] = header
    return Cursor(bytes(buf))


NAME = Name.from_bytes(_name("model"))


def fx32(x):
    return fix32(x, 1, 19, 12)


def test_reads_basic_model():
    model = read_model(build_model(), NAME)
    assert model.name == NAME
    assert model.render_ops == [MulObject(0), BindMaterial(0), Draw(0)]
    assert model.up_scale == fx32(4096)
    assert model.down_scale == fx32(2048)
    assert [m.name for m in model.meshes] == [Name.from_bytes(_name("mesh0"))]
    assert model.meshes[0].gpu_commands == GPU


def test_material_fields():
    model = read_model(build_model(), NAME)
    mat = model.materials[0]
    assert mat.name == Name.from_bytes(_name("mat0"))
    assert mat.texture_name == Name.from_bytes(_name("tex0"))
    assert mat.palette_name is None
    assert mat.params == 0x1234
    assert (mat.width, mat.height) == (32, 64)
    assert mat.diffuse == (1.0, 0.0, 0.0)
    assert mat.diffuse_is_default_vertex_color is True
    assert mat.ambient == (0.0, 1.0, 0.0)
    assert mat.specular == (0.0, 0.0, 1.0)
    assert mat.enable_shininess_table is False
    assert mat.emission == (1.0, 0.0, 0.0)
    assert mat.alpha == 1.0
    assert mat.cull_backface is False
    assert mat.cull_frontface is True
    assert np.allclose(mat.texture_mat, np.eye(4))


def test_material_texture_matrix():
    model = read_model(build_model(material=_material(60, (8192, 4096))), NAME)
    expected = np.diag([fx32(8192), fx32(4096), 1.0, 1.0])
    assert np.allclose(model.materials[0].texture_mat, expected)


def test_object_translation_and_scale():
    model = read_model(build_model(), NAME)
    obj = model.objects[0]
    assert obj.name == Name.from_bytes(_name("obj0"))
    assert obj.rot is None
    assert np.allclose(obj.trans, [fx32(4096), fx32(8192), 0.0])
    assert np.allclose(obj.scale, [fx32(8192), fx32(4096), fx32(4096)])
    assert np.allclose(obj.matrix[:3, 3], obj.trans)
    assert np.allclose(np.diag(obj.matrix)[:3], obj.scale)
    assert np.allclose(obj.matrix[3], [0.0, 0.0, 0.0, 1.0])


def test_object_with_pivot_rotation():
    flags = 0x1 | 0x4 | 0x8 | (2 << 4) | (1 << 8)
    data = struct.pack("<HHHH", flags, 0, 4096, 0x800)
    obj = read_model(build_model(object_data=data), NAME).objects[0]
    assert obj.trans is None and obj.scale is None
    expected = pivot_mat(2, 1, fix16(4096, 1, 3, 12), fix16(0x800, 1, 3, 12))
    assert np.allclose(obj.rot, expected)
    assert np.allclose(obj.matrix[:3, :3], expected)


def test_object_with_full_matrix():
    entries = (4096, 0, 0, 0, 4096, 0, 0, 0, 4096)
    data = struct.pack("<H9H", 0x5, *entries)
    obj = read_model(build_model(object_data=data), NAME).objects[0]
    assert np.allclose(obj.rot, np.eye(3))
    assert np.allclose(obj.matrix, np.eye(4))


def test_inverse_bind_matrices():
    model = read_model(build_model(), NAME)
    assert len(model.inv_binds) == 1
    inv = model.inv_binds[0]
    assert np.allclose(inv[3], [0.0, 0.0, 0.0, 1.0])
    assert np.allclose(inv[:3, :3], np.eye(3))
    assert inv[0, 3] == fx32(8192)
    assert inv[2, 3] == fx32(4096)


def test_missing_inverse_binds_are_skipped():
    model = read_model(build_model(num_inv_binds=0), NAME)
    assert model.inv_binds == []


def test_out_of_bounds_draw_raises():
    render = bytes([0x05, 3, 0x01])
    with pytest.raises(ParseError):
        read_model(build_model(render=render), NAME)


def test_out_of_bounds_skin_raises():
    render = bytes([0x09, 0, 1, 0, 3, 255, 0x01])
    with pytest.raises(ParseError):
        read_model(build_model(render=render), NAME)


def test_bad_mesh_section_size_raises():
    with pytest.raises(ParseError):
        read_model(build_model(mesh_section_size=20), NAME)


def test_mesh_command_length_must_be_multiple_of_four():
    with pytest.raises(ParseError):
        read_model(build_model(gpu=b"\0" * 6), NAME)


def test_pairing_to_missing_material_raises():
    with pytest.raises(ParseError):
        read_model(build_model(mat_ids=b"\x05"), NAME)