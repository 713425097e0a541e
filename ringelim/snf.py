import logging
from typing import Tuple

from .diagonal import DiagonalEliminator
from .eliminator import Form, MatrixEliminator
from .errors import EliminationError
from .matrix import RingMatrix
from .operations import AddCol, AddRow, MulRow, SwapCols, SwapRows

LOG = logging.getLogger(__name__)


def smith_normal_form(A: RingMatrix) -> Tuple[RingMatrix, RingMatrix, RingMatrix]:
    """
    Smith normal form front-end.

    Returns (U, V, S) with S = U * A * V in Smith normal form.
    """
    res = SmithEliminator(A, track_transformations=True).run().result()
    return res.left, res.right, res.result


class SmithEliminator(MatrixEliminator):
    """
    Smith normal form over a Euclidean ring.

    After diagonalization the nonzero diagonal values are processed from the
    top. At each position the remaining value of least degree is chosen as
    pivot and normalized. If some other remaining value is not divisible by
    it, a diagonal GCD step replaces the pair (a, b) by (gcd, lcm) and the
    position is tried again. Otherwise the pivot is swapped into place.

    The result is diag(d_1, ..., d_r, 0, ...) with d_1 | d_2 | ... | d_r,
    every d_i normalized.
    """

    form = Form.SMITH

    def __init__(self, matrix, track_transformations=False, debug=False):
        super().__init__(matrix, track_transformations, debug)
        self.diagonal = []
        self.current_index = 0

    def prepare(self) -> None:
        self.subrun(DiagonalEliminator)

        components = self._current.components()
        for k, (i, j, _) in enumerate(components):
            if i != k or j != k:
                raise EliminationError(
                    f"Diagonalization left an entry at ({i}, {j})"
                )
        self.diagonal = [a for _, _, a in components]
        self.rank = len(self.diagonal)

    def should_iterate(self) -> bool:
        return self.current_index < len(self.diagonal)

    def iteration(self) -> None:
        ring = self.ring
        diagonal = self.diagonal

        i0 = min(range(self.current_index, len(diagonal)),
                 key=lambda i: (ring.degree(diagonal[i]), i))
        a0 = diagonal[i0]

        if not ring.is_normalized(a0):
            u = ring.normalizing_unit(a0)
            a0 = diagonal[i0] = ring.mul(u, a0)
            self.append(MulRow(i0, u))
            self.verify()

        if not ring.is_one(a0):
            for i in range(self.current_index, len(diagonal)):
                if i != i0 and not ring.divides(a0, diagonal[i]):
                    self._diagonal_gcd(i0, i)
                    return

        if i0 != self.current_index:
            self._swap_diagonal(i0, self.current_index)

        self.current_index += 1

    def snapshot(self):
        ring = self.ring
        if not self.diagonal:
            return super().snapshot()
        return [(k, k, a) for k, a in enumerate(self.diagonal)
                if not ring.is_zero(a)]

    def finalize(self) -> None:
        self._result = RingMatrix.from_components(
            self.ring, self.nrows, self.ncols, self.snapshot()
        )

    def _diagonal_gcd(self, i: int, j: int) -> None:
        ring = self.ring
        a, b = self.diagonal[i], self.diagonal[j]

        # d = gcd(a, b) = pa + qb
        # m = lcm(a, b) = -ab / d
        p, q, d = ring.gcdex(a, b)
        m = ring.neg(ring.exact_div(ring.mul(a, b), d))

        self.diagonal[i] = d
        self.diagonal[j] = m

        self.append(AddRow(i, j, p))                                   # [a, 0; pa, b]
        self.append(AddCol(j, i, q))                                   # [a, 0;  d, b]
        self.append(AddRow(j, i, ring.neg(ring.exact_div(a, d))))      # [0, m;  d, b]
        self.append(AddCol(i, j, ring.neg(ring.exact_div(b, d))))      # [0, m;  d, 0]
        self.append(SwapRows(i, j))                                    # [d, 0;  0, m]
        self.verify()

        LOG.debug("DiagonalGCD:  (%d, %d), (%d, %d)", i, i, j, j)

    def _swap_diagonal(self, i: int, j: int) -> None:
        d = self.diagonal
        d[i], d[j] = d[j], d[i]

        self.append(SwapRows(i, j))
        self.append(SwapCols(i, j))
        self.verify()

        LOG.debug("SwapDiagonal: (%d, %d), (%d, %d)", i, i, j, j)
