# nitrofile

Readers for the binary Nitro file family. The package reads models,
skeletal (joint) animations and pattern animations from Nitro
containers (`BMD0`, `BTX0`, `BCA0` and `BTP0` headers). It also has the
pieces needed to build a joint tree and skin from a model's symbolic
matrices. Matrices are returned as `numpy` arrays.

## Installation

```
pip install nitrofile
```

To run the tests:

```
pip install "nitrofile[test]"
pytest
```

## Reading a container

```python
from pathlib import Path

from nitrofile.container import read_container
from nitrofile.cursor import Cursor

data = Path("model.nsbmd").read_bytes()
container = read_container(Cursor(data))

for model in container.models:
    print(model.name, len(model.meshes), "meshes", len(model.objects), "objects")
for anim in container.animations:
    print(anim.name, anim.num_frames, "frames")
for pattern in container.patterns:
    print(pattern.name, pattern.num_frames, "frames")
```

`read_container` raises `nitrofile.cursor.ParseError` when the header is
not valid. It checks the stamp, the byte order mark, the header size and
the file size. Reading past the end of the data raises `TooShortError`,
a subclass of `ParseError`.

Sections that cannot be read are skipped and logged at debug level.
These are `MDL0` (models), `JNT0` (joint animations) and `PAT0` (pattern
animations). A model, animation or pattern that fails to parse is logged
as an error and left out of the container.

## Models

`nitrofile.model.read_model` returns a `Model` with these fields:

- `materials`: a list of `Material`. Each holds its colours, alpha,
  culling flags, texture size, raw texture parameters, its texture and
  palette names, and a 4x4 texture matrix.
- `meshes`: a list of `Mesh`. Each mesh's `gpu_commands` is kept as raw
  bytes.
- `objects`: a list of `Object`. Each is a rest-pose transform with
  optional `trans`, `rot` and `scale` parts and the combined 4x4 `matrix`.
- `inv_binds`: inverse bind matrices, as many as the data holds, up to
  the number of objects.
- `render_ops`: render ops from `nitrofile.render_cmds`. These are
  `LoadMatrix`, `StoreMatrix`, `MulObject`, `Skin`, `ScaleUp`,
  `ScaleDown`, `BindMaterial` and `Draw`.
- `up_scale` and `down_scale`.

If any render op refers to an object, material, mesh or inverse bind
matrix that does not exist, the model is rejected.

## Animations

An `Animation` has one `TRSCurves` for each object. Each curve for
translation, rotation or scale is a `NoCurve`, a `ConstantCurve` or a
`SampledCurve`. A `TRSCurves` can be sampled at any frame to give the
4x4 matrix translation × rotation × scale:

```python
matrix = anim.objects_curves[0].sample_at(10)
```

Between samples, values are interpolated linearly. Before the first
frame and after the last, the value at that end is held. A missing
curve gives 0 for translation, 1 for scale and the identity for
rotation.

## Pattern animations

A `Pattern` has the names of its textures and palettes, and one
`PatternTrack` per material. A track gives the indices in effect at a
frame:

```python
texture_idx, palette_idx = pattern.material_tracks[0].sample(5)
```

## Names

`nitrofile.name.Name` wraps the 16-byte NUL-padded names used
throughout the files:

- `str(name)` trims the padding and shows control bytes as `.`.
- `repr(name)` quotes and escapes the name unless it is plain letters,
  digits, `_` and `-`.
- `name.print_safe()` returns a non-empty string of letters, digits and
  underscores.

## Skeletons

`nitrofile.symbolic_matrix` defines symbolic matrices:

- `ObjectMatrix`, `InvBindMatrix` and `UninitializedMatrix`.
- `CMatrix`, a product of those.
- `AMatrix`, a weighted sum of `CMatrix` terms. It supports `*=` by a
  symbolic matrix or a number, and `+=` by another `AMatrix`.

`nitrofile.skeleton.VertexRecord` holds a list of `AMatrix` values and,
for each vertex, the index of the matrix applied to it.
`nitrofile.joint_tree.build_skeleton` turns a record into a `Skeleton`:
a `JointTree` of `Joint`s, its root, and one `SkinVertex` of weighted
`Influence`s per vertex.

```python
from nitrofile.joint_tree import build_skeleton
from nitrofile.skeleton import VertexRecord
from nitrofile.symbolic_matrix import AMatrix, ObjectMatrix

record = VertexRecord(
    matrices=[AMatrix.one(), AMatrix.from_smatrix(ObjectMatrix(0))],
    vertices=[1, 1, 1],
)
skeleton = build_skeleton(record, model, [obj.matrix for obj in model.objects])
```

If a vertex's matrix is not a proper skinning matrix, a warning is
logged.

## Utilities

- `nitrofile.bits.bits`: extracts a bit field from an unsigned integer.
- `nitrofile.fixed.fix16` and `fix32`: decode fixed-point numbers.
- `nitrofile.cursor.Cursor`: reads little-endian data. It takes a
  `struct` format string, or a type with `SIZE` and `from_bytes`, such
  as `Name`.
- `nitrofile.info_block.read_info_block`: reads the (datum, name) lists
  found throughout the format.
- `nitrofile.rotation.pivot_mat` and `basis_mat`: decode the compact
  rotation formats.
- `nitrofile.namers.UniqueNamer`: hands out `"A"`, then `"A1"`,
  `"A2"` and so on.
- `nitrofile.bilist.BiList` and `nitrofile.bimap.BiMap`: lookups in both
  directions.
- `nitrofile.out_dir.OutDir`: an output directory that must not exist
  yet. `make_ready` raises `OutDirExistsError` if it does. The directory
  is created when the first file is written.
- `nitrofile.eye.Eye`: a free-flying camera with model-view matrix,
  movement and look controls.
- `nitrofile.fps.FpsCounter`: a frame-rate counter.
- `nitrofile.navigation`: wrap-around stepping through selections, plus
  the movement speed table.

## What this package does not do

- It does not decode textures or palettes. `TEX0` sections are skipped.
- It does not interpret the GPU command blobs in meshes. It builds no
  vertex or index buffers.
- It does not fill a `VertexRecord` from a model's render ops. You
  supply the record to `build_skeleton`.
- It has no viewer window, rendering, file export or command-line
  program.