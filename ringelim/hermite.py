import logging

from .echelon import RowEchelonEliminator
from .eliminator import Form, MatrixEliminator
from .operations import AddRow

LOG = logging.getLogger(__name__)


class RowHermiteEliminator(MatrixEliminator):
    """
    Row Hermite normal form: row echelon followed by back-substitution.

    The echelon stage runs first and its row store is reused. Each pivot
    row then reduces the entries above its pivot by Euclidean division, so
    over ZZ every entry above a pivot ends up in ``[0, pivot)``.
    """

    form = Form.ROW_HERMITE

    def __init__(self, matrix, track_transformations=False, debug=False):
        super().__init__(matrix, track_transformations, debug)
        self.current_row = 0

    def prepare(self) -> None:
        sub = self.subrun(RowEchelonEliminator)
        self.adopt_store(sub)
        self.rank = sub.rank

    def should_iterate(self) -> bool:
        return self.current_row < self.nrows

    def iteration(self) -> None:
        ring = self.ring
        head = self.store.head(self.current_row)
        if head is None:
            return self.exit()

        j0, a0 = head
        for i in range(self.current_row):
            a = self.store.entry(i, j0)
            if ring.is_zero(a):
                continue
            q = ring.quo(a, a0)
            if not ring.is_zero(q):
                self.apply(AddRow(self.current_row, i, ring.neg(q)))

        self.current_row += 1


class ColHermiteEliminator(MatrixEliminator):
    form = Form.COL_HERMITE

    def prepare(self) -> None:
        sub = self.subrun(RowHermiteEliminator, transpose=True)
        self.rank = sub.rank
        self.exit()
