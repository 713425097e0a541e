"""Public entry points.

``eliminate`` dispatches to the eliminator for the requested form. The
helpers below it (rank, kernel, determinant, invariant factors) are what
homology computations need from the engine.
"""

import logging

from .diagonal import DiagonalEliminator
from .echelon import ColEchelonEliminator, RowEchelonEliminator
from .eliminator import EliminationResult, Form
from .errors import PreconditionError
from .hermite import ColHermiteEliminator, RowHermiteEliminator
from .matrix import RingMatrix
from .snf import SmithEliminator

LOG = logging.getLogger(__name__)

ELIMINATORS = {
    Form.ROW_ECHELON: RowEchelonEliminator,
    Form.COL_ECHELON: ColEchelonEliminator,
    Form.ROW_HERMITE: RowHermiteEliminator,
    Form.COL_HERMITE: ColHermiteEliminator,
    Form.DIAGONAL: DiagonalEliminator,
    Form.SMITH: SmithEliminator,
}


def eliminate(matrix: RingMatrix, form=Form.SMITH,
              track_transformations: bool = False,
              debug: bool = False) -> EliminationResult:
    """Reduce ``matrix`` to the canonical ``form``.

    Args:
        matrix: Input matrix; it is not modified.
        form: A ``Form`` member or its name.
        track_transformations: Also build the left/right transforms and
            their inverses from the operation log.
        debug: Replay every operation on a dense copy of the input and
            check it against the live state. Slow; meant for tests.

    Returns:
        An ``EliminationResult``. When tracking,
        ``result == left @ matrix @ right``.
    """
    form = Form.coerce(form)
    eliminator = ELIMINATORS[form](
        matrix, track_transformations=track_transformations, debug=debug
    )
    result = eliminator.run().result()
    LOG.info("Eliminated %dx%d matrix over %s to %s: rank %d, %d operations",
             matrix.nrows, matrix.ncols, matrix.ring, form.value,
             result.rank, len(eliminator.log))
    return result


def rank(matrix: RingMatrix) -> int:
    return eliminate(matrix, Form.ROW_ECHELON).rank


def kernel_basis(matrix: RingMatrix) -> RingMatrix:
    """Columns spanning the kernel of ``matrix`` (a basis over the ring).

    From the column echelon form ``A @ Q``, whose trailing columns vanish;
    the matching columns of the unimodular ``Q`` are the basis.
    """
    res = eliminate(matrix, Form.COL_ECHELON, track_transformations=True)
    return res.right.submatrix(0, matrix.ncols, res.rank, matrix.ncols)


def determinant(matrix: RingMatrix):
    if matrix.nrows != matrix.ncols:
        raise PreconditionError(
            f"Determinant requires a square matrix, got {matrix.shape}",
            shape=matrix.shape,
        )
    ring = matrix.ring
    res = eliminate(matrix, Form.ROW_ECHELON, track_transformations=True)
    if res.rank < matrix.nrows:
        return ring.zero

    # det(P) det(A) = det(R), and det(P) is a unit
    det = ring.one
    for a in res.result.diagonal_entries():
        det = ring.mul(det, a)
    return ring.mul(det, ring.inverse(res.left_determinant))


def invariant_factors(matrix: RingMatrix) -> list:
    """Nonzero diagonal of the Smith normal form, d_1 | d_2 | ..."""
    res = eliminate(matrix, Form.SMITH)
    return res.result.diagonal_entries()[:res.rank]
