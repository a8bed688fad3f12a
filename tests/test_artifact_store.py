# tests/test_artifact_store.py

import numpy as np
import pytest
from problem_finder.infrastructure.artifact_store import (
    FullMatrixLoader,
    PlaceholderMatrixLoader,
    PlatformArtifactStore,
    format_bytes,
    select_matrix_loader,
)
from problem_finder.infrastructure.tfidf_vectorizer import TfidfVectorizer


@pytest.fixture
def store(tmp_path):
    return PlatformArtifactStore(tmp_path / "codeforce")


def _fitted_vectorizer():
    return TfidfVectorizer().fit(["graph tree", "graph path"])


def test_format_bytes():
    assert format_bytes(0) == "0 Bytes"
    assert format_bytes(512) == "512 Bytes"
    assert format_bytes(1024) == "1 KB"
    assert format_bytes(1536) == "1.5 KB"
    assert format_bytes(1024 ** 3) == "1 GB"


def test_check_reports_missing_artifacts(store):
    status = store.check()
    assert not status.all_ready
    assert status.missing() == ["vectorizer", "matrix", "problems"]


def test_save_and_load_round_trip(store):
    vectorizer = _fitted_vectorizer()
    matrix = vectorizer.transform(["graph tree", "graph path"])
    store.save(vectorizer, matrix)

    loaded_vectorizer, loaded = store.load()

    assert loaded_vectorizer.vocabulary == vectorizer.vocabulary
    assert not loaded.degraded
    assert loaded.shape == (2, 3)
    np.testing.assert_allclose(loaded.matrix, matrix)


def test_save_matrix_rejects_non_2d(store):
    with pytest.raises(ValueError):
        store.save_matrix(np.zeros(3))


def test_load_missing_files_raise(store):
    with pytest.raises(FileNotFoundError):
        store.load_vectorizer()
    with pytest.raises(FileNotFoundError):
        store.load_matrix()
    with pytest.raises(FileNotFoundError):
        store.load_problems()


def test_oversized_matrix_loads_as_degraded_placeholder(tmp_path):
    store = PlatformArtifactStore(tmp_path, max_matrix_bytes=1)
    store.save_matrix(np.ones((3, 2)))

    result = store.load_matrix()

    assert result.degraded
    assert result.shape == (1, 1)
    assert "Large matrix file" in result.reason


def test_select_matrix_loader_by_size(tmp_path):
    path = tmp_path / "matrix.npz"
    path.write_bytes(b"x" * 10)

    assert isinstance(select_matrix_loader(path, max_bytes=10), FullMatrixLoader)
    assert isinstance(select_matrix_loader(path, max_bytes=9), PlaceholderMatrixLoader)


def test_placeholder_never_reads_file(tmp_path):
    result = PlaceholderMatrixLoader("too big").load(tmp_path / "does-not-exist.npz")
    assert result.degraded
    assert result.reason == "too big"


def test_corrupt_matrix_raises(store):
    store.platform_dir.mkdir(parents=True)
    with open(store.matrix_path, "wb") as f:
        np.savez(f, data=np.ones((2, 2)), rows=3, columns=2)

    with pytest.raises(ValueError, match="corrupt"):
        store.load_matrix()


def test_legitimate_one_by_one_matrix_is_not_degraded(store):
    store.save_matrix(np.array([[0.5]]))
    result = store.load_matrix()
    assert not result.degraded
    assert result.shape == (1, 1)


def test_file_stats(store):
    store.save_vectorizer(_fitted_vectorizer())
    stats = store.file_stats()

    assert stats["vectorizer"]["exists"]
    assert stats["vectorizer"]["size"] > 0
    assert "modified" in stats["vectorizer"]
    assert stats["matrix"] == {"exists": False}
