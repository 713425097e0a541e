import pytest

from ringelim.errors import PreconditionError
from ringelim.matrix import RingMatrix
from ringelim.operations import AddCol, AddRow, MulRow, SwapRows
from ringelim.ring import ZZ
from ringelim.sparse import SparseRowStore


@pytest.fixture
def A():
    return RingMatrix.from_rows(ZZ, [
        [0, 2, 0, 4],
        [1, 0, 3, 0],
        [0, 0, 0, 0],
        [1, 5, 0, -2],
    ])


@pytest.fixture
def store(A):
    return SparseRowStore.from_matrix(A, track_head_positions=True)


def assert_heads_consistent(store):
    expected = {}
    for i, row in store.working.items():
        expected.setdefault(row[0][0], set()).add(i)
    assert store.head_positions == expected


def test_construct_sorts_and_drops_zeros():
    store = SparseRowStore(ZZ, 2, 3, [(0, 2, 5), (0, 0, 1), (1, 1, 0)])
    assert store.row(0) == [(0, 1), (2, 5)]
    assert store.row(1) == []
    assert store.head(1) is None


def test_duplicate_components_rejected():
    with pytest.raises(PreconditionError):
        SparseRowStore(ZZ, 2, 2, [(0, 1, 1), (0, 1, 2)])


def test_out_of_range_component_rejected():
    with pytest.raises(PreconditionError):
        SparseRowStore(ZZ, 2, 2, [(0, 2, 1)])


def test_head_entry_and_weight(store):
    assert store.head(0) == (1, 2)
    assert store.head(2) is None
    assert store.entry(3, 1) == 5
    assert store.entry(3, 2) == 0
    assert store.weight(3) == 1 + 5 + 2
    assert store.weight(2) == 0


def test_head_rows(store):
    assert store.head_rows(0) == [(1, 1), (3, 1)]
    assert store.head_rows(1) == [(0, 2)]
    assert store.head_rows(2) == []


def test_head_rows_requires_tracking(A):
    plain = SparseRowStore.from_matrix(A)
    with pytest.raises(PreconditionError):
        plain.head_rows(0)


def test_add_row_merges_and_cancels(store):
    # row3 - row1 = [0, 5, -3, -2]
    store.add_row(1, 3, -1)
    assert store.row(3) == [(1, 5), (2, -3), (3, -2)]
    assert store.head_rows(0) == [(1, 1)]
    assert sorted(store.head_rows(1)) == [(0, 2), (3, 5)]
    assert_heads_consistent(store)


def test_add_row_to_zero_removes_row(store):
    store.add_row(0, 0, -1)
    assert store.head(0) is None
    assert store.row(0) == []
    assert_heads_consistent(store)


def test_add_row_zero_multiplier_is_identity(store):
    before = store.snapshot()
    store.add_row(1, 3, 0)
    assert store.snapshot() == before
    # even an empty source is fine: nothing is read
    store.add_row(2, 3, 0)
    assert store.snapshot() == before


def test_add_row_from_or_into_empty_row_fails(store):
    with pytest.raises(PreconditionError, match="from empty row"):
        store.add_row(2, 0, 1)
    with pytest.raises(PreconditionError, match="into empty row"):
        store.add_row(0, 2, 1)


def test_mul_row(store):
    store.mul_row(3, -1)
    assert store.row(3) == [(0, -1), (1, -5), (3, 2)]
    assert_heads_consistent(store)
    with pytest.raises(PreconditionError):
        store.mul_row(3, 0)
    # multiplying an empty row changes nothing
    store.mul_row(2, 5)
    assert store.row(2) == []
    assert_heads_consistent(store)


def test_swap_rows_keeps_head_index(store):
    store.swap_rows(0, 1)
    assert store.head(0) == (0, 1)
    assert store.head(1) == (1, 2)
    assert_heads_consistent(store)

    store.swap_rows(2, 3)
    assert store.head(3) is None
    assert store.head(2) == (0, 1)
    assert_heads_consistent(store)


def test_swap_row_with_itself_is_noop(store):
    before = store.snapshot()
    heads = {j: set(rows) for j, rows in store.head_positions.items()}
    store.swap_rows(1, 1)
    assert store.snapshot() == before
    assert store.head_positions == heads


def test_finish_and_restart_pass(store):
    store.finish(0)
    store.finish(2)
    assert store.head(0) is None
    assert store.entry(0, 3) == 4
    assert 0 not in store.head_rows(1)
    assert_heads_consistent(store)

    with pytest.raises(PreconditionError, match="already finished"):
        store.add_row(0, 1, 1)

    store.finish(1)
    store.finish(3)
    assert store.is_complete

    snapshot = store.snapshot()
    store.restart_pass()
    assert not store.is_complete
    assert store.snapshot() == snapshot
    assert store.head(0) == (1, 2)
    assert_heads_consistent(store)


def test_snapshot_and_to_matrix(A, store):
    store.finish(1)
    assert store.snapshot() == A.components()
    assert store.to_matrix() == A


def test_apply_dispatch(store):
    store.apply(AddRow(1, 3, -1))
    store.apply(MulRow(0, -1))
    store.apply(SwapRows(0, 1))
    assert store.row(1) == [(1, -2), (3, -4)]
    with pytest.raises(PreconditionError):
        store.apply(AddCol(0, 1, 1))


def test_identity_and_equality():
    I = SparseRowStore.identity(ZZ, 3)
    assert I == SparseRowStore.from_matrix(RingMatrix.identity(ZZ, 3))
    assert I != SparseRowStore.identity(ZZ, 2)
