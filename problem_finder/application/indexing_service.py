# problem_finder/application/indexing_service.py

import time
from dataclasses import dataclass, field
from typing import Optional

from problem_finder.config import TITLE_WEIGHT
from problem_finder.domain.models import CleaningStats, TrainingStats
from problem_finder.infrastructure.artifact_store import PlatformArtifactStore
from problem_finder.infrastructure.corpus_builder import build_corpus
from problem_finder.infrastructure.problem_table import (
    clean_problems,
    read_problem_records,
    validate_cleaned_data,
    write_problem_records,
)
from problem_finder.infrastructure.tfidf_vectorizer import TfidfVectorizer


@dataclass
class StepResult:
    success: bool
    seconds: float
    error: Optional[str] = None
    stats: Optional[object] = None


@dataclass
class PipelineResult:
    platform: str
    success: bool = False
    steps: dict = field(default_factory=dict)
    total_seconds: float = 0.0
    error: Optional[str] = None


class IndexingService:
    """
    Offline batch job turning a platform's scraped problem table into the
    artifacts the query service loads:

        problems.csv ─clean→ problem.csv ─corpus→ fit_transform ─save→ vectorizer.json + matrix.npz

    Single writer. Row order of problem.csv is the row order of the matrix.
    """

    def __init__(
        self,
        platform_name: str,
        artifact_store: PlatformArtifactStore,
        title_weight: int = TITLE_WEIGHT,
    ):
        self._platform_name = platform_name
        self._store = artifact_store
        self._title_weight = title_weight

    def clean(self) -> CleaningStats:
        """Clean the raw table into the table the index is trained on."""
        source = self._store.raw_problem_table_path
        print(f"[Indexer] Reading problems from: {source}")
        records = read_problem_records(source)
        if not records:
            raise ValueError(f"No problems found in {source}")

        cleaned = clean_problems(records)
        stats = validate_cleaned_data(cleaned)
        write_problem_records(self._store.problem_table_path, cleaned)
        print(f"[Indexer] Cleaned data saved to: {self._store.problem_table_path} ({stats})")
        return stats

    def train(self) -> TrainingStats:
        """Fit the vectorizer on the cleaned table and persist vectorizer + matrix."""
        source = self._store.problem_table_path
        print(f"[Indexer] Training TF-IDF for {self._platform_name} from: {source}")
        records = read_problem_records(source)
        if not records:
            raise ValueError(f"No problems found in {source}")

        documents = build_corpus(
            [r.name for r in records],
            [r.text for r in records],
            title_weight=self._title_weight,
        )

        vectorizer = TfidfVectorizer()
        matrix = vectorizer.fit_transform(documents)
        print(
            f"[Indexer] TF-IDF matrix created: {matrix.shape[0]} x {matrix.shape[1]} "
            f"(vocabulary: {vectorizer.vocabulary_size})"
        )

        self._store.save(vectorizer, matrix)

        stats = TrainingStats(
            problem_count=len(records),
            vocabulary_size=vectorizer.vocabulary_size,
            matrix_rows=matrix.shape[0],
            matrix_columns=matrix.shape[1],
            documents_processed=len(documents),
        )
        print(f"[Indexer] Vocabulary stats: {vectorizer.vocabulary_stats()}")
        return stats

    def run(self, clean: bool = True) -> PipelineResult:
        """
        Run clean (when a raw table exists) then train.
        Failures are recorded in the result rather than raised.
        """
        print(f"[Indexer] {'=' * 50}")
        print(f"[Indexer] PREPROCESSING {self._platform_name.upper()}")
        started = time.perf_counter()
        result = PipelineResult(platform=self._platform_name)

        try:
            if clean:
                step_start = time.perf_counter()
                if self._store.raw_problem_table_path.is_file():
                    stats = self.clean()
                    result.steps["cleaning"] = StepResult(
                        success=True, seconds=time.perf_counter() - step_start, stats=stats
                    )
                else:
                    print("[Indexer] No raw problem table found, skipping cleaning step")
                    result.steps["cleaning"] = StepResult(
                        success=False,
                        seconds=time.perf_counter() - step_start,
                        error="Input file not found",
                    )

            step_start = time.perf_counter()
            training = self.train()
            result.steps["tfidf"] = StepResult(
                success=True, seconds=time.perf_counter() - step_start, stats=training
            )
            result.success = True
            print(f"[Indexer] ✓ {self._platform_name} preprocessing completed")

        except (OSError, ValueError) as error:
            result.error = str(error)
            print(f"[Indexer] ✗ {self._platform_name} preprocessing failed: {error}")

        result.total_seconds = time.perf_counter() - started
        return result
