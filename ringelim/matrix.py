from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import numpy as np
from sympy.polys.domains.gaussiandomains import GaussianInteger

from .errors import PreconditionError
from .ring import EuclideanRing

Component = Tuple[int, int, object]


@dataclass(eq=False)
class RingMatrix:
    """Dense matrix over a Euclidean ring, stored in a numpy object array."""

    ring: EuclideanRing
    data: np.ndarray

    def __post_init__(self):
        data = self.data
        if isinstance(data, np.ndarray):
            if data.ndim != 2:
                raise PreconditionError(
                    f"Expected a 2-d array, got {data.ndim} dimensions"
                )
            shape = data.shape
            rows = data.tolist()
        else:
            rows = [list(row) for row in data]
            ncols = len(rows[0]) if rows else 0
            for row in rows:
                if len(row) != ncols:
                    raise PreconditionError("All rows must have the same length")
            shape = (len(rows), ncols)

        coerce = self.ring.coerce
        arr = np.empty(shape, dtype=object)
        for i, row in enumerate(rows):
            for j, x in enumerate(row):
                arr[i, j] = coerce(x)
        self.data = arr

    @property
    def nrows(self) -> int:
        return self.data.shape[0]

    @property
    def ncols(self) -> int:
        return self.data.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.nrows, self.ncols

    @classmethod
    def from_rows(cls, ring: EuclideanRing, rows: List[list]) -> "RingMatrix":
        return cls(ring=ring, data=rows)

    @classmethod
    def zeros(cls, ring: EuclideanRing, nrows: int, ncols: int) -> "RingMatrix":
        data = np.empty((nrows, ncols), dtype=object)
        data.fill(ring.zero)
        return cls(ring, data)

    @classmethod
    def identity(cls, ring: EuclideanRing, n: int) -> "RingMatrix":
        M = cls.zeros(ring, n, n)
        for i in range(n):
            M.data[i, i] = ring.one
        return M

    @classmethod
    def diagonal(cls, ring: EuclideanRing, diag: list,
                 shape: Optional[Tuple[int, int]] = None) -> "RingMatrix":
        nrows, ncols = shape if shape is not None else (len(diag), len(diag))
        M = cls.zeros(ring, nrows, ncols)
        for i, v in enumerate(diag):
            M.data[i, i] = ring.coerce(v)
        return M

    @classmethod
    def from_components(cls, ring: EuclideanRing, nrows: int, ncols: int,
                        components: Iterable[Component]) -> "RingMatrix":
        M = cls.zeros(ring, nrows, ncols)
        for i, j, a in components:
            if not (0 <= i < nrows and 0 <= j < ncols):
                raise PreconditionError(
                    f"Component ({i}, {j}) outside a {nrows}x{ncols} matrix",
                    shape=(nrows, ncols),
                )
            M.data[i, j] = a
        return M

    def components(self) -> List[Component]:
        """Nonzero entries as (row, col, value), in row-major order."""
        is_zero = self.ring.is_zero
        return [
            (i, j, self.data[i, j])
            for i in range(self.nrows)
            for j in range(self.ncols)
            if not is_zero(self.data[i, j])
        ]

    def __getitem__(self, index):
        return self.data[index]

    def __eq__(self, other):
        if not isinstance(other, RingMatrix):
            return NotImplemented
        return (
            self.ring == other.ring
            and self.shape == other.shape
            and all(a == b for a, b in zip(self.data.flat, other.data.flat))
        )

    def copy(self) -> "RingMatrix":
        return RingMatrix(self.ring, self.data.copy())

    def transpose(self) -> "RingMatrix":
        return RingMatrix(self.ring, self.data.T.copy())

    @property
    def T(self) -> "RingMatrix":
        return self.transpose()

    def is_diagonal(self) -> bool:
        return all(i == j for i, j, _ in self.components())

    def diagonal_entries(self) -> list:
        n = min(self.nrows, self.ncols)
        return [self.data[i, i] for i in range(n)]

    def __matmul__(self, other: "RingMatrix") -> "RingMatrix":
        if self.ring != other.ring:
            raise PreconditionError("Cannot multiply matrices over different rings")

        rA, cA = self.shape
        rB, cB = other.shape
        if cA != rB:
            raise PreconditionError(
                f"Dimension mismatch: {cA} != {rB}", shape=(rA, cB)
            )

        ring = self.ring
        A = self.data
        B = other.data
        C = RingMatrix.zeros(ring, rA, cB)

        for i in range(rA):
            Ci = C.data[i]
            for k in range(cA):
                aik = A[i, k]
                if ring.is_zero(aik):
                    continue
                Bk = B[k]
                for j in range(cB):
                    if not ring.is_zero(Bk[j]):
                        Ci[j] = ring.add(Ci[j], ring.mul(aik, Bk[j]))

        return C

    def submatrix(self, row_start: int, row_end: int,
                  col_start: int, col_end: int) -> "RingMatrix":
        """Copy of rows [row_start:row_end) and cols [col_start:col_end)."""
        return RingMatrix(
            self.ring, self.data[row_start:row_end, col_start:col_end].copy()
        )

    # In-place elementary operations. These back ``ElementaryOperation.apply_to``.

    def add_row(self, source: int, target: int, r) -> None:
        """row[target] += r * row[source]"""
        ring = self.ring
        for j in range(self.ncols):
            self.data[target, j] = ring.add(
                self.data[target, j], ring.mul(r, self.data[source, j])
            )

    def mul_row(self, i: int, r) -> None:
        ring = self.ring
        for j in range(self.ncols):
            self.data[i, j] = ring.mul(r, self.data[i, j])

    def swap_rows(self, i: int, j: int) -> None:
        self.data[[i, j], :] = self.data[[j, i], :]

    def add_col(self, source: int, target: int, r) -> None:
        """col[target] += col[source] * r"""
        ring = self.ring
        for i in range(self.nrows):
            self.data[i, target] = ring.add(
                self.data[i, target], ring.mul(self.data[i, source], r)
            )

    def mul_col(self, j: int, r) -> None:
        ring = self.ring
        for i in range(self.nrows):
            self.data[i, j] = ring.mul(self.data[i, j], r)

    def swap_cols(self, i: int, j: int) -> None:
        self.data[:, [i, j]] = self.data[:, [j, i]]

    def to_sympy(self):
        import sympy as sp

        def entry(a):
            if isinstance(a, sp.Poly):
                return a.as_expr()
            if isinstance(a, GaussianInteger):
                return sp.Integer(a.x) + sp.I * sp.Integer(a.y)
            return sp.sympify(a)

        return sp.Matrix(self.nrows, self.ncols,
                         [entry(a) for a in self.data.flat])

    def pprint(self):
        from sympy import pprint
        pprint(self.to_sympy())
