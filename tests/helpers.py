import random

from ringelim.matrix import RingMatrix
from ringelim.ring import EuclideanRing


def make_random_matrix(
    ring: EuclideanRing,
    nrows: int,
    ncols: int,
    bound: int = 9,
    density: float = 1.0,
) -> RingMatrix:
    """Random integer-valued matrix over ``ring`` with entries in [-bound, bound]."""
    data = [
        [
            random.randint(-bound, bound) if random.random() < density else 0
            for _ in range(ncols)
        ]
        for _ in range(nrows)
    ]
    return RingMatrix.from_rows(ring, data)


def det_ring_matrix(M: RingMatrix):
    """
    Naive Laplace-expansion determinant over the matrix's ring.
    Only for small square matrices in tests.
    """
    ring = M.ring
    data = M.data
    n = M.nrows
    assert n == M.ncols

    if n == 0:
        return ring.one
    if n == 1:
        return data[0, 0]

    det = ring.zero
    for j in range(n):
        if ring.is_zero(data[0, j]):
            continue
        minor = RingMatrix(ring, [
            [data[r, c] for c in range(n) if c != j] for r in range(1, n)
        ])
        term = ring.mul(data[0, j], det_ring_matrix(minor))
        det = ring.add(det, term) if j % 2 == 0 else ring.sub(det, term)
    return det


def is_unimodular(M: RingMatrix) -> bool:
    return M.ring.is_unit(det_ring_matrix(M))


def verify_echelon_structure(T: RingMatrix) -> bool:
    """
    Check:
    - For each non-zero row, the first non-zero column index strictly increases.
    - Once a zero row appears, all later rows are zero.
    """
    ring = T.ring
    last_pivot_col = -1
    zero_row_seen = False

    for r in range(T.nrows):
        pivot_col = -1
        for c in range(T.ncols):
            if not ring.is_zero(T.data[r, c]):
                pivot_col = c
                break

        if pivot_col == -1:
            zero_row_seen = True
        else:
            if zero_row_seen:
                return False
            if pivot_col <= last_pivot_col:
                return False
            last_pivot_col = pivot_col

    return True


def pivot_positions(T: RingMatrix) -> list[tuple[int, int]]:
    ring = T.ring
    positions = []
    for r in range(T.nrows):
        for c in range(T.ncols):
            if not ring.is_zero(T.data[r, c]):
                positions.append((r, c))
                break
    return positions


def verify_smith_form(S: RingMatrix) -> tuple[bool, str]:
    """Diagonal, normalized and d_i | d_{i+1} (zeros last)."""
    ring = S.ring
    for r, c, _ in S.components():
        if r != c:
            return False, f"Off-diagonal ({r},{c}) = {S.data[r, c]}"

    diag = S.diagonal_entries()
    for i in range(len(diag) - 1):
        d_curr, d_next = diag[i], diag[i + 1]
        if ring.is_zero(d_curr):
            if not ring.is_zero(d_next):
                return False, f"Zero before nonzero at {i}"
        elif not ring.divides(d_curr, d_next):
            return False, f"Chain break: {d_curr} !| {d_next}"
    for d in diag:
        if not ring.is_zero(d) and not ring.is_normalized(d):
            return False, f"{d} is not normalized"
    return True, ""


def sympy_rank(M: RingMatrix) -> int:
    return M.to_sympy().rank()


def sympy_invariants(M: RingMatrix) -> list[int]:
    """Integer invariant factors via SymPy, as sorted absolute values."""
    from sympy import ZZ
    from sympy.matrices.normalforms import smith_normal_form

    S = smith_normal_form(M.to_sympy(), domain=ZZ)
    n = min(S.rows, S.cols)
    diag = [abs(int(S[i, i])) for i in range(n)]
    return sorted(d for d in diag if d != 0)
