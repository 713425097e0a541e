"""Row- and column-echelon elimination over a Euclidean ring.

* ``RowEchelonEliminator`` sweeps the columns left to right. In each column
  it picks the candidate row of least degree as pivot and reduces the other
  candidates by Euclidean division until only the pivot starts there.
* ``ColEchelonEliminator`` is the same algorithm run on the transpose.

The rank of the input is the number of pivot rows found.
"""

import logging

from .eliminator import Form, MatrixEliminator
from .operations import AddRow, MulRow, SwapRows
from .sparse import SparseRowStore

LOG = logging.getLogger(__name__)


class RowEchelonEliminator(MatrixEliminator):
    """Drive a matrix to row-echelon form with normalized pivots.

    Candidate rows for column ``j`` are found through the store's head
    position index. The pivot is the candidate with the smallest key
    ``(not identity, degree, row weight, row index)``. Every other
    candidate gets ``-q`` times the pivot row added, where ``q`` is the
    Euclidean quotient. If any remainder survives, the column is processed
    again with the smaller remainders as new candidates; otherwise the
    pivot row is swapped to the cursor and finished.
    """

    form = Form.ROW_ECHELON

    def __init__(self, matrix, track_transformations=False, debug=False):
        super().__init__(matrix, track_transformations, debug)
        self.store = SparseRowStore.from_matrix(matrix, track_head_positions=True)
        self.current_row = 0
        self.current_col = 0

    def should_iterate(self) -> bool:
        return not self.store.is_complete and self.current_col < self.ncols

    def iteration(self) -> None:
        ring = self.ring
        j = self.current_col

        candidates = self.store.head_rows(j)
        if not candidates:
            self.current_col += 1
            return

        i0, a0 = self._select_pivot(candidates)
        LOG.debug("Pivot: (%d, %d) %s", i0, j, a0)

        if not ring.is_normalized(a0):
            u = ring.normalizing_unit(a0)
            self.apply(MulRow(i0, u))
            a0 = ring.mul(u, a0)

        again = False
        for i, a in candidates:
            if i == i0:
                continue
            q, r = ring.divmod(a, a0)
            if not ring.is_zero(q):
                self.apply(AddRow(i0, i, ring.neg(q)))
            if not ring.is_zero(r):
                again = True

        if again:
            return

        if i0 != self.current_row:
            self.apply(SwapRows(i0, self.current_row))

        self.store.finish(self.current_row)
        self.current_row += 1
        self.current_col += 1
        self.rank = self.current_row

    def _select_pivot(self, candidates):
        ring = self.ring
        weight = self.store.weight

        def key(c):
            i, a = c
            return (not ring.is_one(a), ring.degree(a), weight(i), i)

        return min(candidates, key=key)


class ColEchelonEliminator(MatrixEliminator):
    form = Form.COL_ECHELON

    def prepare(self) -> None:
        sub = self.subrun(RowEchelonEliminator, transpose=True)
        self.rank = sub.rank
        self.exit()
