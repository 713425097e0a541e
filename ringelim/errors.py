"""
Exception hierarchy for ringelim.

All exceptions inherit from RingElimError so callers can catch any
library-specific failure. Nothing here is recoverable by retrying:
elimination is deterministic, so an error means bad input or a ring
that does not honour its contract.
"""

from typing import Optional, Tuple


class RingElimError(Exception):
    """Base exception for all ringelim errors."""
    pass


class PreconditionError(RingElimError, ValueError):
    """
    Malformed input or misuse of the row store.

    Raised for ragged or mis-shaped matrices, duplicate coordinates,
    operations on empty rows and multiplication by zero.

    Attributes:
        shape: Offending (rows, cols) shape, if relevant
    """

    def __init__(self, message: str, shape: Optional[Tuple[int, int]] = None):
        super().__init__(message)
        self.shape = shape


class RingContractError(RingElimError, ArithmeticError):
    """
    A ring operation was asked for something the ring cannot do.

    Raised when inverting a non-unit or dividing inexactly.

    Attributes:
        operands: The values that triggered the failure
    """

    def __init__(self, message: str, operands: Tuple = ()):
        super().__init__(message)
        self.operands = operands


class EliminationError(RingElimError, RuntimeError):
    """An internal invariant of an elimination run was broken."""
    pass
