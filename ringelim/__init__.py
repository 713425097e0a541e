from .elimination import (
    determinant,
    eliminate,
    invariant_factors,
    kernel_basis,
    rank,
)
from .eliminator import EliminationResult, Form
from .errors import (
    EliminationError,
    PreconditionError,
    RingContractError,
    RingElimError,
)
from .matrix import RingMatrix
from .ring import QQ, ZZ, ZZ_I, EuclideanRing, PolynomialRing
from .snf import smith_normal_form
from .sparse import SparseRowStore

__all__ = [
    "EliminationError",
    "EliminationResult",
    "EuclideanRing",
    "Form",
    "PolynomialRing",
    "PreconditionError",
    "QQ",
    "RingContractError",
    "RingElimError",
    "RingMatrix",
    "SparseRowStore",
    "ZZ",
    "ZZ_I",
    "determinant",
    "eliminate",
    "invariant_factors",
    "kernel_basis",
    "rank",
    "smith_normal_form",
]
