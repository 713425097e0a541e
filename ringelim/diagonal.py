"""Diagonalization: the prerequisite stage of the Smith normal form."""

import logging

from .eliminator import Form, MatrixEliminator
from .hermite import ColHermiteEliminator, RowHermiteEliminator

LOG = logging.getLogger(__name__)


class DiagonalEliminator(MatrixEliminator):
    """Alternate row and column Hermite passes until the matrix is diagonal.

    Each pass leaves a pivot whose degree is no larger than before; once
    the leading pivot stops shrinking it divides its whole row and column,
    which the next pass clears. The nonzero entries end up at
    ``(0, 0), ..., (r-1, r-1)`` because every pass is an echelon form.
    """

    form = Form.DIAGONAL

    def __init__(self, matrix, track_transformations=False, debug=False):
        super().__init__(matrix, track_transformations, debug)
        self.passes = 0

    def should_iterate(self) -> bool:
        return not self._is_diagonal()

    def iteration(self) -> None:
        self.passes += 1
        LOG.debug("Diagonal pass %d", self.passes)

        self.subrun(RowHermiteEliminator)
        if self._is_diagonal():
            return self.exit()

        self.subrun(ColHermiteEliminator)

    def finalize(self) -> None:
        super().finalize()
        self.rank = len(self.snapshot())

    def _is_diagonal(self) -> bool:
        positions = [(i, j) for i, j, _ in self.snapshot()]
        return positions == [(k, k) for k in range(len(positions))]
