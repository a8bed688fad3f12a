# problem_finder/application/search_service.py

import asyncio
from pathlib import Path
from typing import Dict, List, Optional

from problem_finder.config import DATA_DIRECTORY, DEFAULT_THRESHOLD, MAX_MATRIX_BYTES
from problem_finder.domain.interfaces import PlatformSearchPort
from problem_finder.domain.models import Platform, PlatformStatus, QueryResult
from problem_finder.application.platform_service import PlatformQueryService
from problem_finder.infrastructure.artifact_store import PlatformArtifactStore


class ProblemSearchService:
    """
    Core use case: find problems matching a free-text query on one platform
    or across all of them.

    Platforms are independent. A failing platform contributes no results and
    never aborts the aggregated search.

    This service never builds indexes. That is the offline indexer's job
    (main.py index).
    """

    def __init__(
        self,
        platforms: Dict[Platform, PlatformSearchPort],
        threshold: float = DEFAULT_THRESHOLD,
    ):
        self._platforms = dict(platforms)
        self._threshold = threshold

    @classmethod
    def from_data_directory(
        cls,
        data_directory: str | Path = DATA_DIRECTORY,
        max_matrix_bytes: int = MAX_MATRIX_BYTES,
    ) -> "ProblemSearchService":
        """One query service per platform over <data_directory>/<platform>/."""
        data_dir = Path(data_directory)
        return cls({
            platform: PlatformQueryService(
                platform,
                PlatformArtifactStore(data_dir / platform.value, max_matrix_bytes),
            )
            for platform in Platform
        })

    @property
    def platforms(self) -> Dict[Platform, PlatformSearchPort]:
        return dict(self._platforms)

    def get_platform(self, platform: Platform) -> PlatformSearchPort:
        try:
            return self._platforms[platform]
        except KeyError:
            raise ValueError(f"Platform '{platform}' is not configured.") from None

    async def search(
        self,
        query: str,
        platform: Optional[Platform] = None,
        limit: int = -1,
    ) -> List[QueryResult]:
        """
        Ranked results, best first. limit <= 0 means unbounded.
        """
        if platform is not None:
            results = await self.get_platform(platform).query(query, self._threshold)
        else:
            results = await self._search_all(query)

        if 0 < limit < len(results):
            return results[:limit]
        return results

    async def _search_all(self, query: str) -> List[QueryResult]:
        services = list(self._platforms.values())
        outcomes = await asyncio.gather(
            *(service.query(query, self._threshold) for service in services),
            return_exceptions=True,
        )

        merged: List[QueryResult] = []
        for service, outcome in zip(services, outcomes):
            if isinstance(outcome, BaseException):
                print(f"[SearchService] ⚠ {service.name} failed during aggregated search: {outcome}")
                continue
            merged.extend(outcome)

        merged.sort(key=lambda result: result.score, reverse=True)
        return merged

    async def get_statuses(self) -> List[PlatformStatus]:
        return list(await asyncio.gather(
            *(service.get_status() for service in self._platforms.values())
        ))

    def get_file_stats(self) -> List[dict]:
        """Artifact file stats per platform, in the same order as get_statuses()."""
        return [service.file_stats() for service in self._platforms.values()]

    async def warm_up(self) -> None:
        """Load every platform up front. Platforms without data stay offline."""
        for service in self._platforms.values():
            try:
                await service.initialize()
            except Exception as error:
                print(f"[SearchService] ⚠ {service.name} not ready: {error}")
