"""Building a joint tree and skin from the symbolic matrices of a model.

Every vertex has a symbolic matrix M applied to it, built from object
matrices (which depend on the pose) and constant matrices (inverse binds and
uninitialized slots). Each term of M is a weighted product of factors. Its
longest constant suffix is dropped, and the remaining factors become a chain
of joints starting at a root. The last joint of the chain is then an
influence on the vertex, with the term's weight.

Matrices with several terms only behave as true skinning matrices when each
term is the identity in the rest pose and the weights sum to one. Other
matrices are handled the same way, but a warning is logged.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from functools import reduce
from typing import Optional

import numpy as np

from .model import Model
from .skeleton import (
    Influence,
    Joint,
    JointTree,
    RootTransform,
    Skeleton,
    SkinVertex,
    VertexRecord,
)
from .symbolic_matrix import AMatrix, InvBindMatrix, ObjectMatrix, SMatrix, UninitializedMatrix

log = logging.getLogger(__name__)

# The smallest number representable on the hardware is about 0.0002, so
# these bumps are below anything that could be stored in a model.
_BUMPS = (0.000012, -0.000017, 0.000006, -0.000008, 0.00001)
_U32 = 0xFFFFFFFF


def build_skeleton(vr: VertexRecord, model: Model, objects: Sequence[np.ndarray]) -> Skeleton:
    """Build a skeleton whose skin reproduces the matrices recorded in ``vr``.

    ``objects`` gives the object matrices of the rest pose.
    """
    b = _Builder(model, objects)

    cache: list[Optional[SkinVertex]] = [None] * len(vr.matrices)
    max_num_influences = 0
    vertices: list[SkinVertex] = []
    for mat_idx in vr.vertices:
        sv = cache[mat_idx]
        if sv is None:
            sv = b.amatrix_to_skinvert(vr.matrices[mat_idx])
            simplify_skinvert(sv)
            max_num_influences = max(max_num_influences, len(sv.influences))
            cache[mat_idx] = sv
        vertices.append(SkinVertex(list(sv.influences)))

    if b.unusual_matrices:
        log.warning(
            "unusual matrices encountered in model %s; the skin for this "
            "model may function imperfectly",
            model.name,
        )

    # Until now rest_world_to_local has held the rest local-to-world; the
    # inversion is done once here rather than factor by factor.
    for joint in b.graph:
        joint.rest_world_to_local = invert_matrix(joint.rest_world_to_local)

    # Bring several roots (or none) under a universal root so the graph is a tree.
    if len(b.roots) != 1:
        b.make_root()

    return Skeleton(
        tree=b.graph,
        root=b.roots[0],
        vertices=vertices,
        max_num_influences=max_num_influences,
    )


def simplify_skinvert(sv: SkinVertex) -> None:
    """Merge influences on the same joint, drop zero weights, sort by weight descending."""
    totals: dict[int, float] = {}
    for influence in sv.influences:
        totals[influence.joint] = totals.get(influence.joint, 0.0) + influence.weight
    merged = [Influence(weight, joint) for joint, weight in totals.items() if weight != 0.0]
    sv.influences = sorted(merged, key=lambda influence: -influence.weight)


def invert_matrix(mat: np.ndarray) -> np.ndarray:
    """Invert a 4x4 matrix, nudging its upper-left 3x3 block until it is non-singular.

    The final row is assumed to be (0 0 0 1). The input is not modified.
    """
    mat = np.array(mat, dtype=float)
    rng = 0x83E17875
    eps = np.finfo(float).eps
    while True:
        if abs(np.linalg.det(mat)) > eps:
            try:
                return np.linalg.inv(mat)
            except np.linalg.LinAlgError:
                pass

        for col in range(3):
            mat[(rng + col) % 3, col] += _BUMPS[(rng + col) % len(_BUMPS)]

        rng ^= (rng << 17) & _U32
        rng ^= rng >> 13
        rng ^= (rng << 5) & _U32


def _is_constant(smat: SMatrix) -> bool:
    return not isinstance(smat, ObjectMatrix)


def _relative_eq(a: np.ndarray, b: np.ndarray, epsilon: float, max_relative: float) -> bool:
    diff = np.abs(a - b)
    largest = np.maximum(np.abs(a), np.abs(b))
    return bool(np.all((diff <= epsilon) | (diff <= largest * max_relative)))


class _Builder:
    def __init__(self, model: Model, objects: Sequence[np.ndarray]) -> None:
        self.model = model
        self.objects = objects
        self.graph = JointTree()
        self.roots: list[int] = []
        self.unusual_matrices = False

    def make_root(self) -> None:
        """Add a universal root above all current roots, unless there already is one."""
        if len(self.roots) == 1 and isinstance(
            self.graph[self.roots[0]].local_to_parent, RootTransform
        ):
            return
        root = self.graph.add_node(Joint(RootTransform(), np.eye(4)))
        for old_root in self.roots:
            self.graph.add_edge(root, old_root)
        self.roots = [root]

    def amatrix_to_skinvert(self, amatrix: AMatrix) -> SkinVertex:
        self._detect_unusual_matrices(amatrix)
        return SkinVertex(
            [
                Influence(term.weight, self._cmatrix_to_joint(term.cmat.factors))
                for term in amatrix.terms
            ]
        )

    def _cmatrix_to_joint(self, factors: Sequence[SMatrix]) -> int:
        factors = list(factors)
        while factors and _is_constant(factors[-1]):
            factors.pop()

        if not factors:
            # Only the universal root, with the identity transform, fits.
            self.make_root()
            return self.roots[0]

        node = self._find_root(factors[0])
        for factor in factors[1:]:
            node = self._find_child(node, factor)
        return node

    def _find_root(self, smat: SMatrix) -> int:
        """Find or create a root joint with the given transform."""
        if len(self.roots) == 1:
            root = self.roots[0]
            if isinstance(self.graph[root].local_to_parent, RootTransform):
                return self._find_child(root, smat)

        for idx in self.roots:
            if self.graph[idx].local_to_parent == smat:
                return idx

        new_root = self.graph.add_node(Joint(smat, self._eval_smatrix(smat)))
        self.roots.append(new_root)
        return new_root

    def _find_child(self, node: int, smat: SMatrix) -> int:
        """Find or create a child of ``node`` with the given transform."""
        for idx in self.graph.children(node):
            if self.graph[idx].local_to_parent == smat:
                return idx

        rest = self.graph[node].rest_world_to_local @ self._eval_smatrix(smat)
        child = self.graph.add_node(Joint(smat, rest))
        self.graph.add_edge(node, child)
        return child

    def _detect_unusual_matrices(self, amatrix: AMatrix) -> None:
        if len(amatrix.terms) <= 1:
            return
        identity = np.eye(4)
        total = 0.0
        for term in amatrix.terms:
            total += term.weight
            rest = self._eval_cmatrix(term.cmat.factors)
            if not _relative_eq(rest, identity, 0.1, 0.1):
                self.unusual_matrices = True
        if abs(total - 1.0) > 0.1:
            self.unusual_matrices = True

    def _eval_smatrix(self, smat: SMatrix) -> np.ndarray:
        """Value of an SMatrix in the rest pose."""
        if isinstance(smat, ObjectMatrix):
            return np.asarray(self.objects[smat.object_idx], dtype=float)
        if isinstance(smat, InvBindMatrix):
            return np.asarray(self.model.inv_binds[smat.inv_bind_idx], dtype=float)
        if isinstance(smat, UninitializedMatrix):
            return np.eye(4)
        raise TypeError(f"not a symbolic matrix: {smat!r}")

    def _eval_cmatrix(self, factors: Sequence[SMatrix]) -> np.ndarray:
        """Value of a product of SMatrices in the rest pose."""
        return reduce(lambda acc, smat: acc @ self._eval_smatrix(smat), factors, np.eye(4))