# tests/test_similarity.py

import numpy as np
import pytest
from problem_finder.infrastructure.similarity import (
    cosine_similarity,
    cosine_similarity_matrix,
    get_top_similar,
    normalize_vector,
    pairwise_cosine_similarity,
)


def test_cosine_similarity_identical_and_orthogonal():
    assert cosine_similarity(np.array([1.0, 2.0]), np.array([2.0, 4.0])) == pytest.approx(1.0)
    assert cosine_similarity(np.array([1.0, 0.0]), np.array([0.0, 1.0])) == 0.0


def test_cosine_similarity_zero_vector_is_zero():
    assert cosine_similarity(np.zeros(3), np.array([1.0, 2.0, 3.0])) == 0.0


def test_cosine_similarity_length_mismatch_raises():
    with pytest.raises(ValueError, match="same length"):
        cosine_similarity(np.ones(2), np.ones(3))


def test_cosine_similarity_matrix_row_order_and_zero_rows():
    matrix = np.array([
        [1.0, 0.0],
        [0.0, 0.0],
        [1.0, 1.0],
    ])
    scores = cosine_similarity_matrix(matrix, np.array([[1.0, 0.0]]))

    assert scores.shape == (3,)
    assert scores[0] == pytest.approx(1.0)
    assert scores[1] == 0.0
    assert scores[2] == pytest.approx(1 / np.sqrt(2))


def test_cosine_similarity_matrix_zero_query():
    scores = cosine_similarity_matrix(np.eye(3), np.zeros(3))
    assert not scores.any()


def test_cosine_similarity_matrix_shape_mismatch_raises():
    with pytest.raises(ValueError):
        cosine_similarity_matrix(np.eye(3), np.ones(2))


def test_get_top_similar_threshold_and_order():
    ranked = get_top_similar([0.2, 0.005, 0.9, 0.01], k=-1, threshold=0.01)
    assert [(item.index, item.score) for item in ranked] == [(2, 0.9), (0, 0.2), (3, 0.01)]


def test_get_top_similar_ties_keep_index_order():
    ranked = get_top_similar([0.5, 0.7, 0.5, 0.5])
    assert [item.index for item in ranked] == [1, 0, 2, 3]


def test_get_top_similar_k_limits():
    ranked = get_top_similar([0.3, 0.2, 0.1], k=2)
    assert [item.index for item in ranked] == [0, 1]


def test_get_top_similar_non_positive_k_returns_all():
    assert len(get_top_similar([0.3, 0.2, 0.1], k=0)) == 3
    assert len(get_top_similar([0.3, 0.2, 0.1], k=-5)) == 3


def test_get_top_similar_nothing_passes():
    assert get_top_similar(np.zeros(4)) == []


def test_pairwise_cosine_similarity():
    result = pairwise_cosine_similarity(np.array([[1.0, 0.0], [0.0, 1.0], [0.0, 0.0]]))
    assert result.shape == (3, 3)
    np.testing.assert_allclose(np.diag(result), [1.0, 1.0, 1.0])
    assert result[0, 1] == pytest.approx(0.0)


def test_normalize_vector():
    np.testing.assert_allclose(normalize_vector(np.array([3.0, 4.0])), [0.6, 0.8])
    zero = np.zeros(2)
    normalized = normalize_vector(zero)
    assert not normalized.any()
    assert normalized is not zero
