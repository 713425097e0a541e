from fractions import Fraction

import numpy as np
import pytest

from ringelim.errors import PreconditionError
from ringelim.matrix import RingMatrix
from ringelim.ring import QQ, ZZ


def test_construction_coerces_entries():
    M = RingMatrix.from_rows(QQ, [[1, 2], [3, 4]])
    assert M.shape == (2, 2)
    assert all(isinstance(a, Fraction) for a in M.data.flat)


def test_construction_from_numpy_array():
    M = RingMatrix(ZZ, np.array([[1, 2, 3]], dtype=int))
    assert M.shape == (1, 3)
    assert M.data.dtype == object
    assert M[0, 2] == 3


def test_ragged_rows_rejected():
    with pytest.raises(PreconditionError):
        RingMatrix.from_rows(ZZ, [[1, 2], [3]])


def test_large_integers_are_kept_exact():
    huge = 10 ** 100
    M = RingMatrix.from_rows(ZZ, [[huge, 1], [2, 3]])
    assert M[0, 0] == huge
    assert (M @ M)[0, 0] == huge * huge + 2


def test_matmul_and_identity():
    A = RingMatrix.from_rows(ZZ, [[1, 2], [3, 4], [5, 6]])
    B = RingMatrix.from_rows(ZZ, [[1, 0, -1], [2, 1, 0]])
    assert A @ B == RingMatrix.from_rows(
        ZZ, [[5, 2, -1], [11, 4, -3], [17, 6, -5]]
    )
    assert RingMatrix.identity(ZZ, 3) @ A == A


def test_matmul_dimension_mismatch():
    A = RingMatrix.from_rows(ZZ, [[1, 2]])
    with pytest.raises(PreconditionError):
        A @ A


def test_components_roundtrip():
    A = RingMatrix.from_rows(ZZ, [[0, 2, 0], [1, 0, 0]])
    comps = A.components()
    assert comps == [(0, 1, 2), (1, 0, 1)]
    assert RingMatrix.from_components(ZZ, 2, 3, comps) == A


def test_from_components_out_of_range():
    with pytest.raises(PreconditionError):
        RingMatrix.from_components(ZZ, 2, 2, [(2, 0, 1)])


def test_transpose_and_empty_shapes():
    A = RingMatrix.zeros(ZZ, 0, 3)
    assert A.shape == (0, 3)
    assert A.transpose().shape == (3, 0)
    assert A.components() == []


def test_elementary_operations_in_place():
    A = RingMatrix.from_rows(ZZ, [[1, 2], [3, 4]])
    A.add_row(0, 1, -3)
    assert A == RingMatrix.from_rows(ZZ, [[1, 2], [0, -2]])
    A.add_col(0, 1, -2)
    assert A == RingMatrix.from_rows(ZZ, [[1, 0], [0, -2]])
    A.mul_row(1, -1)
    A.swap_rows(0, 1)
    A.swap_cols(0, 1)
    assert A == RingMatrix.from_rows(ZZ, [[2, 0], [0, 1]])


def test_to_sympy():
    A = RingMatrix.from_rows(QQ, [[Fraction(1, 2), 0]])
    S = A.to_sympy()
    assert S.shape == (1, 2)
    assert S[0, 0] * 2 == 1
