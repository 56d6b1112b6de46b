"""Skeletons (skins) reconstructed for models.

A skeleton is a tree of joints plus a skin vertex for every vertex. Each
joint has a local-to-parent transform; composing these from the root down
gives its local-to-world transform. A skin vertex lists influences, each a
joint and a weight, and the final vertex position follows the skinning
equation

    sum over influences of
        weight * (pose local-to-world) * (rest world-to-local) * (rest pos)
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Union

import numpy as np

from .symbolic_matrix import AMatrix, SMatrix


@dataclass(frozen=True)
class RootTransform:
    """Transform of the universal root joint; acts as the identity."""


Transform = Union[SMatrix, RootTransform]


@dataclass
class Joint:
    local_to_parent: Transform
    rest_world_to_local: np.ndarray
    """The inverse bind matrix, cached for convenience."""


class JointTree:
    """Directed graph of joints; edges go from parent to child."""

    def __init__(self) -> None:
        self._joints: list[Joint] = []
        self._children: list[list[int]] = []

    def add_node(self, joint: Joint) -> int:
        """Add a joint and return its index."""
        self._joints.append(joint)
        self._children.append([])
        return len(self._joints) - 1

    def add_edge(self, parent: int, child: int) -> None:
        """Make ``child`` a child of ``parent``."""
        for node in (parent, child):
            if not 0 <= node < len(self._joints):
                raise IndexError(f"no joint with index {node}")
        self._children[parent].append(child)

    def children(self, node: int) -> list[int]:
        """Indices of the children of ``node``, in the order they were added."""
        return list(self._children[node])

    def __getitem__(self, node: int) -> Joint:
        return self._joints[node]

    def __len__(self) -> int:
        return len(self._joints)

    def __iter__(self) -> Iterator[Joint]:
        return iter(self._joints)


@dataclass(frozen=True)
class Influence:
    weight: float
    joint: int


@dataclass
class SkinVertex:
    influences: list[Influence] = field(default_factory=list)


@dataclass
class VertexRecord:
    """The symbolic matrix applied to each vertex of a model."""

    matrices: list[AMatrix] = field(default_factory=list)
    """Every symbolic matrix computed while drawing the model."""
    vertices: list[int] = field(default_factory=list)
    """For each vertex, the index into ``matrices`` of the matrix applied to it."""


@dataclass
class Skeleton:
    tree: JointTree
    root: int
    vertices: list[SkinVertex]
    max_num_influences: int
    """Largest number of influences on any vertex."""