# problem_finder/domain/interfaces.py

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from .models import MatrixLoadResult, PlatformStatus, QueryResult


class MatrixLoaderPort(ABC):
    """
    Port for reading a persisted document-term matrix.
    Implementations decide how much of the artifact is actually read.
    """

    @abstractmethod
    def load(self, path: Path) -> MatrixLoadResult: ...


class PlatformSearchPort(ABC):
    """
    Port for a single platform's query service.
    The aggregated search only talks to platforms through this interface.
    """

    @property
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    async def initialize(self) -> None: ...

    @abstractmethod
    async def query(self, text: str, threshold: float = 0.01) -> List[QueryResult]:
        """
        Return every problem scoring at or above threshold, best first.
        Must never raise: failures are reported as an empty list.
        """
        ...

    @abstractmethod
    async def get_status(self) -> PlatformStatus:
        """Read-only introspection. Must never raise."""
        ...

    @abstractmethod
    def file_stats(self) -> dict:
        """Existence, size and mtime of each persisted artifact."""
        ...
