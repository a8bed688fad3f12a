# problem_finder/domain/models.py

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import numpy as np


class Platform(str, Enum):
    """
    A judge site with its own corpus and index.
    The value doubles as the data sub-directory and the HTTP route segment.
    """
    CODEFORCES = "codeforce"
    LEETCODE = "leetcode"
    ATCODER = "atcoder"
    DMOJ = "dmoj"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    Platform.CODEFORCES: "Codeforces",
    Platform.LEETCODE: "LeetCode",
    Platform.ATCODER: "AtCoder",
    Platform.DMOJ: "DMOJ",
}


@dataclass
class ProblemRecord:
    """
    One scraped problem. Its position in the problem table is its identity
    and must match the row index of its vector in the document-term matrix.
    """
    name: str
    url: str
    tag: str = ""
    difficulty: str = ""
    text: str = ""


@dataclass(frozen=True)
class ScoredIndex:
    index: int
    score: float


@dataclass(frozen=True)
class QueryResult:
    """A ranked problem returned to the caller."""
    name: str
    url: str
    score: float

    def to_dict(self) -> dict:
        return {"name": self.name, "url": self.url, "score": self.score}


@dataclass
class MatrixLoadResult:
    """
    Outcome of loading a persisted document-term matrix.

    When degraded is True the matrix is a 1x1 placeholder that must never be
    used for vector math; the caller switches to substring scoring instead.
    """
    matrix: np.ndarray = field(repr=False)
    degraded: bool = False
    reason: Optional[str] = None

    @property
    def shape(self) -> tuple:
        return self.matrix.shape


@dataclass(frozen=True)
class DataStatus:
    vectorizer: bool
    matrix: bool
    problems: bool

    @property
    def all_ready(self) -> bool:
        return self.vectorizer and self.matrix and self.problems

    def missing(self) -> list[str]:
        return [
            name
            for name, present in (
                ("vectorizer", self.vectorizer),
                ("matrix", self.matrix),
                ("problems", self.problems),
            )
            if not present
        ]


@dataclass
class PlatformStatus:
    platform: str
    initialized: bool
    data_ready: bool = False
    problem_count: int = 0
    vocabulary_size: int = 0
    degraded: bool = False
    error: Optional[str] = None


@dataclass
class CleaningStats:
    total: int = 0
    empty_names: int = 0
    empty_urls: int = 0
    empty_texts: int = 0
    valid_problems: int = 0


@dataclass
class TrainingStats:
    problem_count: int
    vocabulary_size: int
    matrix_rows: int
    matrix_columns: int
    documents_processed: int
