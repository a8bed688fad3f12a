# problem_finder/application/platform_service.py

import asyncio
from enum import Enum
from typing import List, Optional

from problem_finder.config import DEFAULT_THRESHOLD, FALLBACK_RESULT_LIMIT, SIGNIFICANT_SCORE
from problem_finder.domain.errors import ArtifactMismatchError, DataNotReadyError
from problem_finder.domain.interfaces import PlatformSearchPort
from problem_finder.domain.models import (
    MatrixLoadResult,
    Platform,
    PlatformStatus,
    ProblemRecord,
    QueryResult,
    ScoredIndex,
)
from problem_finder.infrastructure.artifact_store import PlatformArtifactStore
from problem_finder.infrastructure.similarity import cosine_similarity_matrix, get_top_similar
from problem_finder.infrastructure.text_preprocessor import preprocess
from problem_finder.infrastructure.tfidf_vectorizer import TfidfVectorizer


class ServiceState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


class PlatformQueryService(PlatformSearchPort):
    """
    Serves keyword queries for one platform from its persisted index.

    Lifecycle:
    - UNINITIALIZED → INITIALIZING → READY   artifacts loaded, queries scored by cosine
    - UNINITIALIZED → INITIALIZING → FAILED  artifacts missing or unreadable

    A FAILED service retries on the next initialize()/query(), so running the
    indexer while the process is up is enough to bring the platform online.

    Loaded state is assigned once, under the lock, and read-only afterwards;
    concurrent queries on a READY service need no further synchronisation.
    """

    def __init__(
        self,
        platform: Platform,
        artifact_store: PlatformArtifactStore,
        fallback_limit: int = FALLBACK_RESULT_LIMIT,
    ):
        self._platform = platform
        self._store = artifact_store
        self._fallback_limit = fallback_limit

        self._state = ServiceState.UNINITIALIZED
        self._init_lock = asyncio.Lock()

        self._vectorizer: Optional[TfidfVectorizer] = None
        self._matrix: Optional[MatrixLoadResult] = None
        self._problems: List[ProblemRecord] = []

    # ─── Properties ───────────────────────────────────────────────────────────

    @property
    def name(self) -> str:
        return self._platform.display_name

    @property
    def platform(self) -> Platform:
        return self._platform

    @property
    def state(self) -> ServiceState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is ServiceState.READY

    @property
    def is_degraded(self) -> bool:
        return self._matrix is not None and self._matrix.degraded

    @property
    def artifact_store(self) -> PlatformArtifactStore:
        return self._store

    # ─── Lifecycle ────────────────────────────────────────────────────────────

    async def initialize(self) -> None:
        if self.is_ready:
            return

        # One in-flight load per platform; late arrivals see READY and return.
        async with self._init_lock:
            if self.is_ready:
                return

            self._state = ServiceState.INITIALIZING
            print(f"[{self.name}] Initializing module...")
            try:
                data_status = self._store.check()
                if not data_status.all_ready:
                    print(f"[{self.name}] ⚠ Data not ready. Missing: {data_status.missing()}")
                    raise DataNotReadyError(
                        f"{self.name} preprocessed data not found. Please run preprocessing first."
                    )

                vectorizer, matrix = await asyncio.to_thread(self._store.load)
                problems = await asyncio.to_thread(self._store.load_problems)

                if not matrix.degraded and matrix.shape[0] != len(problems):
                    raise ArtifactMismatchError(
                        f"{self.name} matrix has {matrix.shape[0]} rows but the problem "
                        f"table has {len(problems)} entries. Re-run preprocessing."
                    )

                self._vectorizer = vectorizer
                self._matrix = matrix
                self._problems = problems
                self._state = ServiceState.READY
                print(f"[{self.name}] Module initialized with {len(problems)} problems")

            except Exception as error:
                self._state = ServiceState.FAILED
                print(f"[{self.name}] ✗ Initialization failed: {error}")
                raise

    # ─── Queries ──────────────────────────────────────────────────────────────

    async def query(self, text: str, threshold: float = DEFAULT_THRESHOLD) -> List[QueryResult]:
        if not isinstance(text, str) or not text.strip():
            return []

        try:
            await self.initialize()
            print(f"[{self.name}] Query: \"{text}\"")

            if self.is_degraded:
                print(f"[{self.name}] ⚠ TF-IDF matrix not available. Using text matching fallback.")
                return self.fallback_search(text, threshold)

            similarities = cosine_similarity_matrix(self._matrix.matrix, self._vectorize(text))
            top_results = get_top_similar(similarities, k=-1, threshold=threshold)
            results = self._to_results(top_results)

            print(f"[{self.name}] Found {len(results)} matching problems")
            return results

        except Exception as error:
            print(f"[{self.name}] ⚠ Query failed: {error}")
            return []

    def fallback_search(self, text: str, threshold: float = DEFAULT_THRESHOLD) -> List[QueryResult]:
        """
        Substring scoring over problem names, used when the matrix is a placeholder.

        Each query term longer than 2 characters earns 0.5 when it appears in the
        name, plus 0.2 when its shortened prefix (last two characters dropped,
        at least 3 kept) appears. The sum is divided by the number of terms.
        """
        if not self._problems:
            return []

        terms = [term for term in text.lower().split() if len(term) > 2]
        if not terms:
            return []

        scored: List[ScoredIndex] = []
        for i, problem in enumerate(self._problems):
            problem_name = problem.name.lower()
            score = 0.0
            for term in terms:
                if term in problem_name:
                    score += 0.5
                if term[:max(3, len(term) - 2)] in problem_name:
                    score += 0.2
            score /= len(terms)

            if score >= threshold:
                scored.append(ScoredIndex(index=i, score=score))

        scored.sort(key=lambda item: item.score, reverse=True)
        results = self._to_results(scored[:self._fallback_limit])

        print(f"[{self.name}] Fallback search found {len(results)} matches for \"{text}\"")
        return results

    async def analyze_query(self, text: str) -> Optional[dict]:
        """Diagnostics for one query against the loaded index. None when unavailable."""
        try:
            await self.initialize()
            if self.is_degraded:
                return None

            query_vector = self._vectorize(text)
            similarities = cosine_similarity_matrix(self._matrix.matrix, query_vector)
            if similarities.size == 0:
                return None

            return {
                "query": text,
                "query_terms": preprocess(text),
                "non_zero_features": int((query_vector > 0).sum()),
                "total_features": int(query_vector.shape[0]),
                "max_similarity": float(similarities.max()),
                "min_similarity": float(similarities.min()),
                "avg_similarity": float(similarities.mean()),
                "above_threshold": int((similarities >= DEFAULT_THRESHOLD).sum()),
                "significant_matches": int((similarities >= SIGNIFICANT_SCORE).sum()),
            }
        except Exception as error:
            print(f"[{self.name}] ⚠ Query analysis failed: {error}")
            return None

    async def get_status(self) -> PlatformStatus:
        try:
            data_status = self._store.check()
            return PlatformStatus(
                platform=self.name,
                initialized=self.is_ready,
                data_ready=data_status.all_ready,
                problem_count=len(self._problems),
                vocabulary_size=self._vectorizer.vocabulary_size if self._vectorizer else 0,
                degraded=self.is_degraded,
            )
        except Exception as error:
            return PlatformStatus(platform=self.name, initialized=False, error=str(error))

    def file_stats(self) -> dict:
        return self._store.file_stats()

    # ─── Helpers ──────────────────────────────────────────────────────────────

    def _vectorize(self, text: str):
        return self._vectorizer.transform([text.lower()])[0]

    def _to_results(self, ranked: List[ScoredIndex]) -> List[QueryResult]:
        return [
            QueryResult(
                name=self._problems[item.index].name,
                url=self._problems[item.index].url,
                score=round(item.score, 3),
            )
            for item in ranked
        ]
