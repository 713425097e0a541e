"""Elementary row/column operations and the log that records them.

Every eliminator expresses its work as a sequence of these operations.
Replaying the row operations on an identity matrix yields the left
transform ``P`` and replaying the column operations yields the right
transform ``Q``, so that ``P @ A @ Q`` equals the eliminated matrix.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Union

from .matrix import RingMatrix
from .ring import EuclideanRing


@dataclass(frozen=True)
class AddRow:
    """row[target] += multiplier * row[source]"""

    source: int
    target: int
    multiplier: object

    is_row = True

    def determinant(self, ring: EuclideanRing):
        return ring.one

    def inverse(self, ring: EuclideanRing) -> "AddRow":
        return AddRow(self.source, self.target, ring.neg(self.multiplier))

    def transposed(self) -> "AddCol":
        return AddCol(self.source, self.target, self.multiplier)

    def apply_to(self, matrix: RingMatrix) -> None:
        matrix.add_row(self.source, self.target, self.multiplier)


@dataclass(frozen=True)
class MulRow:
    """row[row] *= scalar"""

    row: int
    scalar: object

    is_row = True

    def determinant(self, ring: EuclideanRing):
        return self.scalar

    def inverse(self, ring: EuclideanRing) -> "MulRow":
        return MulRow(self.row, ring.inverse(self.scalar))

    def transposed(self) -> "MulCol":
        return MulCol(self.row, self.scalar)

    def apply_to(self, matrix: RingMatrix) -> None:
        matrix.mul_row(self.row, self.scalar)


@dataclass(frozen=True)
class SwapRows:
    i: int
    j: int

    is_row = True

    def determinant(self, ring: EuclideanRing):
        return ring.neg(ring.one)

    def inverse(self, ring: EuclideanRing) -> "SwapRows":
        return self

    def transposed(self) -> "SwapCols":
        return SwapCols(self.i, self.j)

    def apply_to(self, matrix: RingMatrix) -> None:
        matrix.swap_rows(self.i, self.j)


@dataclass(frozen=True)
class AddCol:
    """col[target] += col[source] * multiplier"""

    source: int
    target: int
    multiplier: object

    is_row = False

    def determinant(self, ring: EuclideanRing):
        return ring.one

    def inverse(self, ring: EuclideanRing) -> "AddCol":
        return AddCol(self.source, self.target, ring.neg(self.multiplier))

    def transposed(self) -> AddRow:
        return AddRow(self.source, self.target, self.multiplier)

    def apply_to(self, matrix: RingMatrix) -> None:
        matrix.add_col(self.source, self.target, self.multiplier)


@dataclass(frozen=True)
class MulCol:
    col: int
    scalar: object

    is_row = False

    def determinant(self, ring: EuclideanRing):
        return self.scalar

    def inverse(self, ring: EuclideanRing) -> "MulCol":
        return MulCol(self.col, ring.inverse(self.scalar))

    def transposed(self) -> MulRow:
        return MulRow(self.col, self.scalar)

    def apply_to(self, matrix: RingMatrix) -> None:
        matrix.mul_col(self.col, self.scalar)


@dataclass(frozen=True)
class SwapCols:
    i: int
    j: int

    is_row = False

    def determinant(self, ring: EuclideanRing):
        return ring.neg(ring.one)

    def inverse(self, ring: EuclideanRing) -> "SwapCols":
        return self

    def transposed(self) -> SwapRows:
        return SwapRows(self.i, self.j)

    def apply_to(self, matrix: RingMatrix) -> None:
        matrix.swap_cols(self.i, self.j)


RowOperation = Union[AddRow, MulRow, SwapRows]
ColOperation = Union[AddCol, MulCol, SwapCols]
ElementaryOperation = Union[RowOperation, ColOperation]


class OperationLog:
    """Ordered record of the elementary operations applied during a run."""

    def __init__(self, ring: EuclideanRing,
                 operations: Iterable[ElementaryOperation] = ()):
        self.ring = ring
        self.operations: List[ElementaryOperation] = list(operations)

    def __len__(self) -> int:
        return len(self.operations)

    def __iter__(self) -> Iterator[ElementaryOperation]:
        return iter(self.operations)

    def __eq__(self, other):
        if not isinstance(other, OperationLog):
            return NotImplemented
        return self.operations == other.operations

    def __repr__(self):
        return f"OperationLog({self.operations!r})"

    def append(self, op: ElementaryOperation) -> None:
        self.operations.append(op)

    def extend(self, ops: Iterable[ElementaryOperation]) -> None:
        self.operations.extend(ops)

    @property
    def row_operations(self) -> List[RowOperation]:
        return [op for op in self.operations if op.is_row]

    @property
    def col_operations(self) -> List[ColOperation]:
        return [op for op in self.operations if not op.is_row]

    def transposed(self) -> "OperationLog":
        return OperationLog(self.ring, (op.transposed() for op in self.operations))

    def inverse(self) -> "OperationLog":
        """The log that undoes this one: inverses in reverse order."""
        return OperationLog(
            self.ring, (op.inverse(self.ring) for op in reversed(self.operations))
        )

    def replay(self, matrix: RingMatrix) -> RingMatrix:
        """Apply every operation in order to a copy of ``matrix``."""
        M = matrix.copy()
        for op in self.operations:
            op.apply_to(M)
        return M

    def left_matrix(self, n: int) -> RingMatrix:
        P = RingMatrix.identity(self.ring, n)
        for op in self.row_operations:
            op.apply_to(P)
        return P

    def left_inverse_matrix(self, n: int) -> RingMatrix:
        P_inv = RingMatrix.identity(self.ring, n)
        for op in reversed(self.row_operations):
            op.inverse(self.ring).apply_to(P_inv)
        return P_inv

    def right_matrix(self, m: int) -> RingMatrix:
        Q = RingMatrix.identity(self.ring, m)
        for op in self.col_operations:
            op.apply_to(Q)
        return Q

    def right_inverse_matrix(self, m: int) -> RingMatrix:
        Q_inv = RingMatrix.identity(self.ring, m)
        for op in reversed(self.col_operations):
            op.inverse(self.ring).apply_to(Q_inv)
        return Q_inv

    def left_determinant(self):
        ring = self.ring
        det = ring.one
        for op in self.row_operations:
            det = ring.mul(det, op.determinant(ring))
        return det

    def right_determinant(self):
        ring = self.ring
        det = ring.one
        for op in self.col_operations:
            det = ring.mul(det, op.determinant(ring))
        return det
