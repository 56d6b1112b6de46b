"""Symbolic matrices and their algebra."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class ObjectMatrix:
    """An object matrix of the model; its value depends on the pose."""

    object_idx: int


@dataclass(frozen=True)
class InvBindMatrix:
    """An inverse bind matrix of the model."""

    inv_bind_idx: int


@dataclass(frozen=True)
class UninitializedMatrix:
    """The contents of a matrix stack slot that was never stored to."""

    stack_pos: int


SMatrix = Union[ObjectMatrix, InvBindMatrix, UninitializedMatrix]
_SMATRIX_TYPES = (ObjectMatrix, InvBindMatrix, UninitializedMatrix)


@dataclass(frozen=True)
class CMatrix:
    """A composition (product) of SMatrices."""

    factors: tuple[SMatrix, ...] = ()

    @classmethod
    def one(cls) -> CMatrix:
        """The identity: a product of no factors."""
        return cls(())

    @classmethod
    def from_smatrix(cls, smat: SMatrix) -> CMatrix:
        return cls((smat,))


@dataclass(frozen=True)
class ATerm:
    weight: float
    cmat: CMatrix


@dataclass
class AMatrix:
    """A linear combination of CMatrices."""

    terms: list[ATerm] = field(default_factory=list)

    @classmethod
    def one(cls) -> AMatrix:
        """The identity: a single term of weight 1 with no factors."""
        return cls.from_cmatrix(CMatrix.one())

    @classmethod
    def zero(cls) -> AMatrix:
        """The zero matrix: no terms."""
        return cls([])

    @classmethod
    def from_cmatrix(cls, cmat: CMatrix) -> AMatrix:
        return cls([ATerm(1.0, cmat)])

    @classmethod
    def from_smatrix(cls, smat: SMatrix) -> AMatrix:
        return cls.from_cmatrix(CMatrix.from_smatrix(smat))

    def __imul__(self, other: Union[SMatrix, float]) -> AMatrix:
        """Right-multiply by an SMatrix, or scale by a number."""
        if isinstance(other, _SMATRIX_TYPES):
            self.terms = [
                ATerm(term.weight, CMatrix((*term.cmat.factors, other)))
                for term in self.terms
            ]
            return self
        if isinstance(other, (int, float)):
            if other == 0:
                self.terms = []
            else:
                self.terms = [ATerm(term.weight * other, term.cmat) for term in self.terms]
            return self
        return NotImplemented

    def __iadd__(self, other: AMatrix) -> AMatrix:
        """Add another AMatrix; like terms are not grouped."""
        if not isinstance(other, AMatrix):
            return NotImplemented
        self.terms = [*self.terms, *other.terms]
        return self