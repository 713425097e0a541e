"""Sparse row storage for elimination.

Each row is a list of ``(col, value)`` cells sorted by column with no zero
values. Row additions rebuild the target list by a linear merge, so the
cost of ``add_row`` is proportional to the nonzeros of the two rows and
not to the matrix width.

Rows live in one of two generations. *Working* rows may still change;
*result* rows have been finished by the current pass and must not be
touched again. ``restart_pass`` moves everything back to working so a
following stage (echelon -> Hermite, say) can reuse the store.

When ``track_head_positions`` is set the store also maintains, for every
column, the set of working rows whose leading cell sits in that column.
"""

import logging
from bisect import bisect_left
from operator import itemgetter
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .errors import PreconditionError
from .matrix import Component, RingMatrix
from .operations import AddRow, ElementaryOperation, MulRow, SwapRows
from .ring import EuclideanRing

LOG = logging.getLogger(__name__)

Cell = Tuple[int, object]
Row = List[Cell]

_col = itemgetter(0)


class SparseRowStore:

    def __init__(self, ring: EuclideanRing, nrows: int, ncols: int,
                 components: Iterable[Component],
                 track_head_positions: bool = False):
        self.ring = ring
        self.nrows = nrows
        self.ncols = ncols

        grouped: Dict[int, Dict[int, object]] = {}
        for i, j, a in components:
            if not (0 <= i < nrows and 0 <= j < ncols):
                raise PreconditionError(
                    f"Component ({i}, {j}) outside a {nrows}x{ncols} matrix",
                    shape=(nrows, ncols),
                )
            cells = grouped.setdefault(i, {})
            if j in cells:
                raise PreconditionError(f"Duplicate component at ({i}, {j})")
            cells[j] = a

        is_zero = ring.is_zero
        self.working: Dict[int, Row] = {}
        for i, cells in grouped.items():
            row = [(j, cells[j]) for j in sorted(cells) if not is_zero(cells[j])]
            if row:
                self.working[i] = row
        self.result: Dict[int, Row] = {}

        self.track_head_positions = track_head_positions
        self.head_positions: Dict[int, Set[int]] = {}
        self._rebuild_head_positions()

    @classmethod
    def from_matrix(cls, matrix: RingMatrix,
                    track_head_positions: bool = False) -> "SparseRowStore":
        return cls(matrix.ring, matrix.nrows, matrix.ncols,
                   matrix.components(), track_head_positions)

    @classmethod
    def identity(cls, ring: EuclideanRing, n: int) -> "SparseRowStore":
        return cls(ring, n, n, ((i, i, ring.one) for i in range(n)))

    @property
    def shape(self) -> Tuple[int, int]:
        return self.nrows, self.ncols

    def __eq__(self, other):
        if not isinstance(other, SparseRowStore):
            return NotImplemented
        return self.shape == other.shape and self.snapshot() == other.snapshot()

    def __repr__(self):
        return (f"SparseRowStore({self.nrows}x{self.ncols}, "
                f"working={len(self.working)}, result={len(self.result)})")

    # Queries

    def head(self, i: int) -> Optional[Cell]:
        row = self.working.get(i)
        return row[0] if row else None

    def row(self, i: int) -> Row:
        return list(self.working.get(i) or self.result.get(i) or ())

    def entry(self, i: int, j: int):
        row = self.working.get(i) or self.result.get(i)
        if row:
            k = bisect_left(row, j, key=_col)
            if k < len(row) and row[k][0] == j:
                return row[k][1]
        return self.ring.zero

    def head_rows(self, j: int) -> List[Tuple[int, object]]:
        """Working rows whose leading cell is in column ``j``, by row index."""
        if not self.track_head_positions:
            raise PreconditionError("Head positions are not tracked by this store")
        return [(i, self.working[i][0][1])
                for i in sorted(self.head_positions.get(j, ()))]

    def weight(self, i: int) -> int:
        degree = self.ring.degree
        return sum(degree(a) for _, a in self.working.get(i, ()))

    @property
    def is_complete(self) -> bool:
        return not self.working

    # Mutations

    def apply(self, op: ElementaryOperation) -> None:
        if isinstance(op, AddRow):
            self.add_row(op.source, op.target, op.multiplier)
        elif isinstance(op, MulRow):
            self.mul_row(op.row, op.scalar)
        elif isinstance(op, SwapRows):
            self.swap_rows(op.i, op.j)
        else:
            raise PreconditionError(f"Row store cannot apply column operation {op}")

    def add_row(self, source: int, target: int, r) -> None:
        """row[target] += r * row[source]; a zero ``r`` changes nothing."""
        ring = self.ring
        if ring.is_zero(r):
            return
        self._check_mutable(source)
        self._check_mutable(target)

        src = self.working.get(source)
        if not src:
            raise PreconditionError(f"Attempt to add from empty row: {source}")
        dst = self.working.get(target)
        if not dst:
            raise PreconditionError(f"Attempt to add into empty row: {target}")

        if self.track_head_positions:
            self._remove_head_position(target)

        add, mul, is_zero = ring.add, ring.mul, ring.is_zero
        merged: Row = []
        p = q = 0
        while p < len(src) and q < len(dst):
            cs, a = src[p]
            ct, b = dst[q]
            if cs < ct:
                v = mul(r, a)
                if not is_zero(v):
                    merged.append((cs, v))
                p += 1
            elif cs > ct:
                merged.append((ct, b))
                q += 1
            else:
                v = add(b, mul(r, a))
                if not is_zero(v):
                    merged.append((cs, v))
                p += 1
                q += 1
        for cs, a in src[p:]:
            v = mul(r, a)
            if not is_zero(v):
                merged.append((cs, v))
        merged.extend(dst[q:])

        if merged:
            self.working[target] = merged
        else:
            del self.working[target]

        if self.track_head_positions:
            self._insert_head_position(target)

    def mul_row(self, i: int, r) -> None:
        ring = self.ring
        if ring.is_zero(r):
            raise PreconditionError(f"Attempt to multiply row {i} by zero")
        self._check_mutable(i)

        row = self.working.get(i)
        if not row:
            return

        if self.track_head_positions:
            self._remove_head_position(i)

        new_row = [(j, ring.mul(r, a)) for j, a in row]
        new_row = [(j, a) for j, a in new_row if not ring.is_zero(a)]
        if new_row:
            self.working[i] = new_row
        else:
            del self.working[i]

        if self.track_head_positions:
            self._insert_head_position(i)

    def swap_rows(self, i: int, j: int) -> None:
        if i == j:
            return
        self._check_mutable(i)
        self._check_mutable(j)

        if self.track_head_positions:
            self._remove_head_position(i)
            self._remove_head_position(j)

        row_i = self.working.pop(i, None)
        row_j = self.working.pop(j, None)
        if row_j is not None:
            self.working[i] = row_j
        if row_i is not None:
            self.working[j] = row_i

        if self.track_head_positions:
            self._insert_head_position(i)
            self._insert_head_position(j)

    def finish(self, i: int) -> None:
        """Move row ``i`` to the result generation for the rest of this pass."""
        self._check_mutable(i)
        if self.track_head_positions:
            self._remove_head_position(i)
        row = self.working.pop(i, None)
        if row:
            self.result[i] = row

    def restart_pass(self) -> None:
        """Make every finished row mutable again."""
        self.result.update(self.working)
        self.working = self.result
        self.result = {}
        self._rebuild_head_positions()
        LOG.debug("restart_pass: %d rows back in working", len(self.working))

    # Materialization

    def snapshot(self) -> List[Component]:
        rows = {**self.result, **self.working}
        return [(i, j, a) for i in sorted(rows) for j, a in rows[i]]

    def to_matrix(self) -> RingMatrix:
        return RingMatrix.from_components(self.ring, self.nrows, self.ncols,
                                          self.snapshot())

    # Internals

    def _check_mutable(self, i: int) -> None:
        if not 0 <= i < self.nrows:
            raise PreconditionError(
                f"Row {i} outside a {self.nrows}x{self.ncols} matrix",
                shape=self.shape,
            )
        if i in self.result:
            raise PreconditionError(f"Row {i} is already finished in this pass")

    def _rebuild_head_positions(self) -> None:
        self.head_positions = {}
        if self.track_head_positions:
            for i in self.working:
                self._insert_head_position(i)

    def _remove_head_position(self, i: int) -> None:
        row = self.working.get(i)
        if not row:
            return
        j = row[0][0]
        rows = self.head_positions[j]
        rows.discard(i)
        if not rows:
            del self.head_positions[j]

    def _insert_head_position(self, i: int) -> None:
        row = self.working.get(i)
        if not row:
            return
        self.head_positions.setdefault(row[0][0], set()).add(i)
