# problem_finder/domain/errors.py


class ProblemFinderError(Exception):
    """Base error for the search core."""


class DataNotReadyError(ProblemFinderError):
    """Raised when a platform's persisted artifacts are missing. Run the indexer first."""


class ArtifactMismatchError(DataNotReadyError):
    """Raised when the matrix rows and the problem table are not aligned."""


class VectorizerNotFittedError(ProblemFinderError, RuntimeError):
    """Raised when transform() is called on a vectorizer that was never fitted."""
