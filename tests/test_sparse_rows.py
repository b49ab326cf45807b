import numpy as np
import pytest
from hypothesis import given
from hypothesis import strategies as st

from sparseRows import UNUSED, SparseRowMatrix


def test_new_matrix_is_all_unused():
    A = SparseRowMatrix(3, 4)
    assert np.all(A.columns == UNUSED)
    assert np.all(A.counts == 0)
    assert A.dropped == 0


@pytest.mark.parametrize("rows, max_cols", [(-1, 4), (3, -2)])
def test_negative_dimensions_are_rejected(rows, max_cols):
    with pytest.raises(ValueError, match="Dimensões inválidas"):
        SparseRowMatrix(rows, max_cols)


def test_insert_keeps_columns_sorted():
    A = SparseRowMatrix(9, 8)
    for col, val in [(5, 0.2), (6, 0.5), (3, 1.0), (1, 3.0), (8, 2.0), (2, 8.0)]:
        A.insert(0, col, val)
    A.insert(1, 5, 7.0)
    A.insert(1, 4, 0.5)

    cols, vals = A.row(0)
    assert cols.tolist() == [1, 2, 3, 5, 6, 8]
    assert vals.tolist() == [3.0, 8.0, 1.0, 0.2, 0.5, 2.0]

    cols, vals = A.row(1)
    assert cols.tolist() == [4, 5]
    assert vals.tolist() == [0.5, 7.0]


def test_insert_at_end_of_used_range():
    A = SparseRowMatrix(10, 4)
    A.insert(0, 1, 1.0)
    A.insert(0, 3, 3.0)
    A.insert(0, 2, 2.0)
    A.insert(0, 9, 9.0)
    assert A.row(0)[0].tolist() == [1, 2, 3, 9]


def test_insert_into_full_row_is_counted(caplog):
    A = SparseRowMatrix(3, 2)
    A.insert(0, 0, 1.0)
    A.insert(0, 1, 1.0)

    A.insert(0, 2, 1.0)

    assert A.dropped == 1
    assert A.row(0)[0].tolist() == [0, 1]
    assert "cheia" in caplog.text


def test_insert_rejects_row_outside_matrix():
    A = SparseRowMatrix(2, 3)
    with pytest.raises(IndexError):
        A.insert(2, 0, 1.0)


@pytest.mark.parametrize("column", [UNUSED, -3, 2, 7])
def test_insert_rejects_column_outside_matrix(column):
    A = SparseRowMatrix(2, 3)
    with pytest.raises(IndexError, match="Coluna"):
        A.insert(0, column, -1.0)
    assert A.counts[0] == 0
    assert A.to_csr().nnz == 0


def test_calc_split_marks_rows_without_diagonal():
    A = SparseRowMatrix(3, 4)
    A.insert(0, 0, 2.0)
    A.insert(0, 1, -1.0)
    A.insert(1, 0, -1.0)
    A.insert(2, 1, -1.0)
    A.insert(2, 2, 2.0)

    assert A.calc_split().tolist() == [0, UNUSED, 1]


@given(
    row=st.integers(0, 9),
    others=st.sets(st.integers(0, 9), max_size=4),
    data=st.data(),
)
def test_calc_split_finds_diagonal_in_any_insert_order(row, others, data):
    columns = sorted(others | {row})
    order = data.draw(st.permutations(columns))
    A = SparseRowMatrix(10, 5)
    for col in order:
        A.insert(row, col, float(col) + 0.5)

    cols, vals = A.row(row)
    split = A.calc_split()

    assert cols.tolist() == columns
    assert np.all(np.diff(cols) > 0)
    assert cols[split[row]] == row
    assert vals[split[row]] == row + 0.5


def test_to_csr_matches_entries():
    A = SparseRowMatrix(3, 5)
    A.insert(0, 0, 2.0)
    A.insert(0, 2, -1.0)
    A.insert(1, 1, 3.0)
    A.insert(2, 0, -1.0)
    A.insert(2, 2, 4.0)

    dense = A.to_csr().toarray()

    assert np.array_equal(dense, np.array([
        [2.0, 0.0, -1.0],
        [0.0, 3.0, 0.0],
        [-1.0, 0.0, 4.0],
    ]))


def test_release_drops_storage():
    A = SparseRowMatrix(4, 5)
    A.insert(0, 0, 1.0)
    A.release()
    assert A.rows == 0
    assert A.columns.shape == (0, 0)
