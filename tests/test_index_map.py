import numpy as np
import pytest
from hypothesis import given
from hypothesis import strategies as st
from hypothesis.extra.numpy import arrays

from poisson import build_index_map


def test_build_index_map_numbers_row_major():
    mask = np.array([
        [0, 1, 1],
        [1, 0, 0],
        [0, 0, 1],
    ], dtype=np.uint8)

    idx, count = build_index_map(mask)

    assert count == 4
    assert np.array_equal(idx, np.array([
        [-1, 0, 1],
        [2, -1, -1],
        [-1, -1, 3],
    ]))


def test_build_index_map_all_false():
    idx, count = build_index_map(np.zeros((2, 3), dtype=bool))
    assert count == 0
    assert np.all(idx == -1)


@pytest.mark.parametrize(
    "mask",
    [
        pytest.param(np.zeros((0, 4), dtype=bool), id="zero rows"),
        pytest.param(np.ones(5, dtype=bool), id="1d"),
        pytest.param(np.ones((2, 2, 2), dtype=bool), id="3d"),
    ],
)
def test_build_index_map_rejects_bad_masks(mask):
    with pytest.raises(ValueError, match="2D"):
        build_index_map(mask)


@given(mask=arrays(dtype=bool, shape=st.tuples(st.integers(1, 8), st.integers(1, 8))))
def test_build_index_map_is_dense_numbering(mask):
    idx, count = build_index_map(mask)

    assert count == int(mask.sum())
    assert np.all(idx[~mask] == -1)
    # ordem de varredura por linhas
    assert np.array_equal(idx[mask], np.arange(count))
