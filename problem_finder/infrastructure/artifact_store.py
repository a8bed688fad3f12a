# problem_finder/infrastructure/artifact_store.py

import json
from datetime import datetime
from pathlib import Path
from typing import List, Tuple

import numpy as np

from problem_finder.config import MAX_MATRIX_BYTES
from problem_finder.domain.interfaces import MatrixLoaderPort
from problem_finder.domain.models import DataStatus, MatrixLoadResult, ProblemRecord
from problem_finder.infrastructure.problem_table import read_problem_records
from problem_finder.infrastructure.tfidf_vectorizer import TfidfVectorizer


# ── Constants ─────────────────────────────────────────────────────────────────

VECTORIZER_FILENAME = "vectorizer.json"
MATRIX_FILENAME = "matrix.npz"
PROBLEM_TABLE_FILENAME = "problem.csv"
RAW_PROBLEM_TABLE_FILENAME = "problems.csv"


def format_bytes(size: int) -> str:
    if size == 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB", "TB"]
    value = float(size)
    exponent = 0
    while value >= 1024 and exponent < len(units) - 1:
        value /= 1024
        exponent += 1
    return f"{round(value, 2):g} {units[exponent]}"


# ─── Matrix Loaders ───────────────────────────────────────────────────────────

class FullMatrixLoader(MatrixLoaderPort):
    """Reads the whole matrix into memory and checks it against its recorded shape."""

    def load(self, path: Path) -> MatrixLoadResult:
        with np.load(path) as archive:
            data = np.asarray(archive["data"], dtype=np.float64)
            rows = int(archive["rows"])
            columns = int(archive["columns"])

        if data.ndim != 2 or data.shape != (rows, columns):
            raise ValueError(
                f"Matrix file {path} is corrupt: recorded {rows}x{columns}, "
                f"found shape {data.shape}"
            )

        print(f"[ArtifactStore] Matrix loaded from {path} ({rows}x{columns})")
        return MatrixLoadResult(matrix=data)


class PlaceholderMatrixLoader(MatrixLoaderPort):
    """
    Never touches the file. Returns a 1x1 zero matrix flagged as degraded so
    the caller can serve substring matches instead of vector scores.
    """

    def __init__(self, reason: str):
        self._reason = reason

    def load(self, path: Path) -> MatrixLoadResult:
        print(f"[ArtifactStore] ⚠ {self._reason}")
        print("[ArtifactStore] ⚠ Skipping matrix loading, serving fallback search.")
        return MatrixLoadResult(
            matrix=np.zeros((1, 1), dtype=np.float64),
            degraded=True,
            reason=self._reason,
        )


def select_matrix_loader(path: Path, max_bytes: int = MAX_MATRIX_BYTES) -> MatrixLoaderPort:
    """Pre-flight size check choosing between the full and placeholder loaders."""
    size = Path(path).stat().st_size
    if size > max_bytes:
        return PlaceholderMatrixLoader(
            f"Large matrix file detected ({format_bytes(size)} > {format_bytes(max_bytes)})."
        )
    return FullMatrixLoader()


# ─── Platform Artifact Store ──────────────────────────────────────────────────

class PlatformArtifactStore:
    """
    File-backed storage for one platform's index:

        <platform_dir>/problems.csv     raw scraped table
        <platform_dir>/problem.csv      cleaned table, row i == matrix row i
        <platform_dir>/vectorizer.json  vocabulary pairs, idf pairs, fitted flag
        <platform_dir>/matrix.npz       row-major TF-IDF matrix plus rows/columns

    The matrix is written once by the offline indexer and only read afterwards.
    """

    def __init__(self, platform_dir: str | Path, max_matrix_bytes: int = MAX_MATRIX_BYTES):
        self._platform_dir = Path(platform_dir)
        self._max_matrix_bytes = max_matrix_bytes

    @property
    def platform_dir(self) -> Path:
        return self._platform_dir

    @property
    def vectorizer_path(self) -> Path:
        return self._platform_dir / VECTORIZER_FILENAME

    @property
    def matrix_path(self) -> Path:
        return self._platform_dir / MATRIX_FILENAME

    @property
    def problem_table_path(self) -> Path:
        return self._platform_dir / PROBLEM_TABLE_FILENAME

    @property
    def raw_problem_table_path(self) -> Path:
        return self._platform_dir / RAW_PROBLEM_TABLE_FILENAME

    # ── Readiness ─────────────────────────────────────────────────────────────

    def check(self) -> DataStatus:
        return DataStatus(
            vectorizer=self.vectorizer_path.is_file(),
            matrix=self.matrix_path.is_file(),
            problems=self.problem_table_path.is_file(),
        )

    def file_stats(self) -> dict:
        files = {
            "vectorizer": self.vectorizer_path,
            "matrix": self.matrix_path,
            "problems": self.problem_table_path,
        }
        stats = {}
        for key, path in files.items():
            try:
                if path.is_file():
                    stat = path.stat()
                    stats[key] = {
                        "exists": True,
                        "size": stat.st_size,
                        "size_human": format_bytes(stat.st_size),
                        "modified": datetime.fromtimestamp(stat.st_mtime).isoformat(),
                    }
                else:
                    stats[key] = {"exists": False}
            except OSError as error:
                stats[key] = {"exists": False, "error": str(error)}
        return stats

    # ── Writing ───────────────────────────────────────────────────────────────

    def save_vectorizer(self, vectorizer: TfidfVectorizer) -> None:
        self._platform_dir.mkdir(parents=True, exist_ok=True)
        self.vectorizer_path.write_text(json.dumps(vectorizer.to_dict()), encoding="utf-8")
        print(f"[ArtifactStore] Vectorizer saved to {self.vectorizer_path}")

    def save_matrix(self, matrix: np.ndarray) -> None:
        matrix = np.asarray(matrix, dtype=np.float64)
        if matrix.ndim != 2:
            raise ValueError(f"Expected a 2-D matrix, got shape {matrix.shape}")

        self._platform_dir.mkdir(parents=True, exist_ok=True)
        with open(self.matrix_path, "wb") as f:
            np.savez(f, data=matrix, rows=matrix.shape[0], columns=matrix.shape[1])
        print(
            f"[ArtifactStore] Matrix saved to {self.matrix_path} "
            f"({matrix.shape[0]}x{matrix.shape[1]})"
        )

    def save(self, vectorizer: TfidfVectorizer, matrix: np.ndarray) -> None:
        self.save_vectorizer(vectorizer)
        self.save_matrix(matrix)
        print(f"[ArtifactStore] Platform data saved to {self._platform_dir}")

    # ── Reading ───────────────────────────────────────────────────────────────

    def load_vectorizer(self) -> TfidfVectorizer:
        if not self.vectorizer_path.is_file():
            raise FileNotFoundError(f"Vectorizer file not found: {self.vectorizer_path}")

        data = json.loads(self.vectorizer_path.read_text(encoding="utf-8"))
        vectorizer = TfidfVectorizer.from_dict(data)
        print(f"[ArtifactStore] Vectorizer loaded from {self.vectorizer_path}")
        return vectorizer

    def load_matrix(self) -> MatrixLoadResult:
        if not self.matrix_path.is_file():
            raise FileNotFoundError(f"Matrix file not found: {self.matrix_path}")

        loader = select_matrix_loader(self.matrix_path, self._max_matrix_bytes)
        return loader.load(self.matrix_path)

    def load(self) -> Tuple[TfidfVectorizer, MatrixLoadResult]:
        vectorizer = self.load_vectorizer()
        matrix = self.load_matrix()
        print(f"[ArtifactStore] Platform data loaded from {self._platform_dir}")
        return vectorizer, matrix

    def load_problems(self) -> List[ProblemRecord]:
        return read_problem_records(self.problem_table_path)
