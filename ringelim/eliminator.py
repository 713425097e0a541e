"""The elimination state machine shared by every canonical-form algorithm.

An eliminator moves through PREPARING -> ITERATING -> EXITING -> DONE.
``prepare`` may delegate to prerequisite eliminators through ``subrun``;
``iteration`` is called until ``should_iterate`` fails or the algorithm
calls ``exit``; ``finalize`` materializes the result.

All changes to the matrix are expressed as elementary operations passed
through ``apply`` (or ``append`` for eliminators that keep their own live
state), which keeps the operation log in the order the operations were
performed.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Type

from .errors import EliminationError, PreconditionError
from .matrix import Component, RingMatrix
from .operations import AddCol, AddRow, ElementaryOperation, OperationLog

LOG = logging.getLogger(__name__)


class Form(Enum):
    """Canonical forms an eliminator can produce."""
    ROW_ECHELON = "RowEchelon"
    COL_ECHELON = "ColEchelon"
    ROW_HERMITE = "RowHermite"
    COL_HERMITE = "ColHermite"
    DIAGONAL = "Diagonal"
    SMITH = "Smith"

    @classmethod
    def coerce(cls, value) -> "Form":
        """Accept a Form, its value ("RowEchelon") or its name ("row_echelon")."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            pass
        try:
            return cls[str(value).upper()]
        except KeyError:
            raise PreconditionError(f"Unknown form: {value!r}") from None


class EliminatorState(Enum):
    PREPARING = "preparing"
    ITERATING = "iterating"
    EXITING = "exiting"
    DONE = "done"


@dataclass(frozen=True)
class EliminationResult:
    """
    Outcome of an elimination run.

    The transforms are present only when tracking was requested; then
    ``result == left @ matrix @ right``.
    """
    form: Form
    result: RingMatrix
    rank: int
    operations: Optional[OperationLog] = None
    left: Optional[RingMatrix] = None
    right: Optional[RingMatrix] = None
    left_inverse: Optional[RingMatrix] = None
    right_inverse: Optional[RingMatrix] = None
    left_determinant: object = None
    right_determinant: object = None


class MatrixEliminator:
    """
    Base class for eliminators.

    Subclasses either hold a ``SparseRowStore`` in ``self.store`` and use
    the default ``apply``/``snapshot``, or keep their own live state and
    override ``snapshot``.
    """

    form: Optional[Form] = None

    def __init__(self, matrix: RingMatrix, track_transformations: bool = False,
                 debug: bool = False):
        self.matrix = matrix
        self.ring = matrix.ring
        self.nrows, self.ncols = matrix.shape
        self.track_transformations = track_transformations
        self.debug = debug

        self.state = EliminatorState.PREPARING
        self.log = OperationLog(self.ring)
        self.store = None
        self.rank = 0

        self._current = matrix
        self._result: Optional[RingMatrix] = None
        self._replica = matrix.copy() if debug else None

    def __repr__(self):
        return (f"{type(self).__name__}({self.nrows}x{self.ncols}, "
                f"state={self.state.value}, operations={len(self.log)})")

    @property
    def keeps_log(self) -> bool:
        return self.track_transformations or self.debug

    # Lifecycle

    def run(self) -> "MatrixEliminator":
        if self.state is not EliminatorState.PREPARING:
            raise PreconditionError(f"{type(self).__name__} has already run")

        self.prepare()
        if self.state is EliminatorState.PREPARING:
            self.state = EliminatorState.ITERATING

        while self.state is EliminatorState.ITERATING:
            if not self.should_iterate():
                self.exit()
                break
            self.iteration()

        self.finalize()
        self.state = EliminatorState.DONE

        LOG.debug("%s done: %dx%d, rank %d, %d operations",
                  type(self).__name__, self.nrows, self.ncols,
                  self.rank, len(self.log))
        return self

    def prepare(self) -> None:
        pass

    def should_iterate(self) -> bool:
        return False

    def iteration(self) -> None:
        self.exit()

    def exit(self) -> None:
        self.state = EliminatorState.EXITING

    def finalize(self) -> None:
        self._result = self.current_matrix()

    # Live state

    def snapshot(self) -> List[Component]:
        if self.store is not None:
            return self.store.snapshot()
        return self._current.components()

    def current_matrix(self) -> RingMatrix:
        if self.store is not None:
            return self.store.to_matrix()
        return self._current

    # Operations

    def apply(self, op: ElementaryOperation) -> None:
        self.store.apply(op)
        self.append(op)
        self.verify()

    def append(self, op: ElementaryOperation) -> None:
        # a zero multiple is the identity and is never recorded
        if isinstance(op, (AddRow, AddCol)) and self.ring.is_zero(op.multiplier):
            return
        if self.keeps_log:
            self.log.append(op)
        if self.debug:
            op.apply_to(self._replica)

    def verify(self) -> None:
        """In debug mode, check the replayed log against the live state."""
        if not self.debug:
            return
        live = RingMatrix.from_components(self.ring, self.nrows, self.ncols,
                                          self.snapshot())
        if live != self._replica:
            raise EliminationError(
                f"{type(self).__name__}: live state diverged from the "
                f"operation log after {len(self.log)} operations"
            )

    # Composition

    def subrun(self, eliminator_cls: Type["MatrixEliminator"],
               transpose: bool = False) -> "MatrixEliminator":
        """
        Run a prerequisite eliminator on the current state and adopt its
        result and operations. With ``transpose`` the sub-run works on the
        transposed matrix and its operations are transposed back.
        """
        target = self.current_matrix()
        if transpose:
            target = target.transpose()

        sub = eliminator_cls(target, track_transformations=self.keeps_log,
                             debug=self.debug)
        sub.run()

        ops = sub.log.transposed() if transpose else sub.log
        for op in ops:
            self.append(op)

        result = sub._result
        self._current = result.transpose() if transpose else result
        self.store = None
        self.verify()
        return sub

    def adopt_store(self, sub: "MatrixEliminator") -> None:
        """Take over the row store of a finished non-transposed sub-run."""
        self.store = sub.store
        self.store.restart_pass()

    # Results

    def result(self) -> EliminationResult:
        if self.state is not EliminatorState.DONE:
            raise PreconditionError(f"{type(self).__name__} has not run yet")

        if not self.track_transformations:
            return EliminationResult(
                form=self.form,
                result=self._result,
                rank=self.rank,
                operations=self.log if self.keeps_log else None,
            )

        log = self.log
        return EliminationResult(
            form=self.form,
            result=self._result,
            rank=self.rank,
            operations=log,
            left=log.left_matrix(self.nrows),
            right=log.right_matrix(self.ncols),
            left_inverse=log.left_inverse_matrix(self.nrows),
            right_inverse=log.right_inverse_matrix(self.ncols),
            left_determinant=log.left_determinant(),
            right_determinant=log.right_determinant(),
        )
