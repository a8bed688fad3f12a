# problem_finder/infrastructure/similarity.py

from typing import List, Sequence

import numpy as np

from problem_finder.domain.models import ScoredIndex


def cosine_similarity(vector_a: np.ndarray, vector_b: np.ndarray) -> float:
    """
    Dot product over the product of norms, in [-1, 1].
    Returns 0.0 when either vector has zero norm.
    """
    a = np.asarray(vector_a, dtype=np.float64).ravel()
    b = np.asarray(vector_b, dtype=np.float64).ravel()
    if a.shape != b.shape:
        raise ValueError("Vectors must have the same length")

    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return float(np.dot(a, b) / (norm_a * norm_b))


def cosine_similarity_matrix(matrix: np.ndarray, query_vector: np.ndarray) -> np.ndarray:
    """
    Score every matrix row against the query, row order preserved.
    Accepts the query as a 1-D vector or a single-row matrix.
    """
    matrix = np.asarray(matrix, dtype=np.float64)
    query = np.asarray(query_vector, dtype=np.float64).ravel()
    if matrix.ndim != 2 or matrix.shape[1] != query.shape[0]:
        raise ValueError(
            f"Query length {query.shape[0]} does not match matrix shape {matrix.shape}"
        )

    query_norm = np.linalg.norm(query)
    if matrix.shape[0] == 0 or query_norm == 0:
        return np.zeros(matrix.shape[0], dtype=np.float64)

    row_norms = np.linalg.norm(matrix, axis=1)
    dots = matrix @ query
    scores = np.zeros(matrix.shape[0], dtype=np.float64)
    nonzero = row_norms > 0
    scores[nonzero] = dots[nonzero] / (row_norms[nonzero] * query_norm)
    return scores


def get_top_similar(
    similarities: Sequence[float],
    k: int = -1,
    threshold: float = 0.01,
) -> List[ScoredIndex]:
    """
    Keep scores >= threshold, best first. Ties keep ascending index
    order. k <= 0 returns everything that passes the threshold.
    """
    passing = [
        ScoredIndex(index=i, score=float(score))
        for i, score in enumerate(similarities)
        if score >= threshold
    ]
    # sorted() is stable, so equal scores stay in index order
    ranked = sorted(passing, key=lambda item: item.score, reverse=True)

    if 0 < k < len(ranked):
        return ranked[:k]
    return ranked


def pairwise_cosine_similarity(matrix: np.ndarray) -> np.ndarray:
    """Square matrix of row-vs-row similarities with 1.0 on the diagonal."""
    matrix = np.asarray(matrix, dtype=np.float64)
    norms = np.linalg.norm(matrix, axis=1)
    safe_norms = np.where(norms > 0, norms, 1.0)
    unit_rows = matrix / safe_norms[:, None]
    result = unit_rows @ unit_rows.T
    np.fill_diagonal(result, 1.0)
    return result


def normalize_vector(vector: np.ndarray) -> np.ndarray:
    vector = np.asarray(vector, dtype=np.float64)
    norm = np.linalg.norm(vector)
    if norm == 0:
        return vector.copy()
    return vector / norm
