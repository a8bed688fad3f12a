# problem_finder/infrastructure/tfidf_vectorizer.py

import math
from collections import Counter
from typing import Dict, Iterable, List, Sequence

import numpy as np

from problem_finder.domain.errors import VectorizerNotFittedError
from problem_finder.infrastructure.text_preprocessor import preprocess


def build_vocabulary(documents: Iterable[str]) -> Dict[str, int]:
    """
    Map every surviving token to a dense index, in first-seen order
    across the document collection.
    """
    vocabulary: Dict[str, int] = {}
    for doc in documents:
        for token in preprocess(doc):
            if token not in vocabulary:
                vocabulary[token] = len(vocabulary)
    return vocabulary


def calculate_idf(documents: Sequence[str], vocabulary: Dict[str, int]) -> Dict[str, float]:
    """
    idf(term) = ln(doc_count / df(term)), or 0 when the term never occurs.

    No smoothing: a term present in every document weighs ln(1) = 0 and
    cannot influence ranking.
    """
    doc_count = len(documents)
    term_doc_count: Counter = Counter()
    for doc in documents:
        term_doc_count.update(set(preprocess(doc)))

    idf: Dict[str, float] = {}
    for term in vocabulary:
        doc_freq = term_doc_count.get(term, 0)
        idf[term] = math.log(doc_count / doc_freq) if doc_freq > 0 else 0.0
    return idf


class TfidfVectorizer:
    """
    TF-IDF vectorizer over the shared text preprocessor.

    - tf is the raw count divided by the document's token count
    - vectors are dense and NOT L2-normalized
    - tokens outside the fitted vocabulary are silently ignored
    """

    def __init__(self):
        self.vocabulary: Dict[str, int] = {}
        self.idf: Dict[str, float] = {}
        self.fitted = False

    @property
    def vocabulary_size(self) -> int:
        return len(self.vocabulary)

    @property
    def feature_names(self) -> List[str]:
        # dicts keep insertion order, which is index order
        return list(self.vocabulary.keys())

    # ─── Fitting ──────────────────────────────────────────────────────────────

    def fit(self, documents: Sequence[str]) -> "TfidfVectorizer":
        documents = list(documents)
        self.vocabulary = build_vocabulary(documents)
        self.idf = calculate_idf(documents, self.vocabulary)
        self.fitted = True
        return self

    def transform(self, documents: Sequence[str]) -> np.ndarray:
        if not self.fitted:
            raise VectorizerNotFittedError("Vectorizer must be fitted before transform")

        rows = [self.document_to_vector(doc) for doc in documents]
        if not rows:
            return np.zeros((0, self.vocabulary_size), dtype=np.float64)
        return np.vstack(rows)

    def fit_transform(self, documents: Sequence[str]) -> np.ndarray:
        documents = list(documents)
        return self.fit(documents).transform(documents)

    # ─── Vectors ──────────────────────────────────────────────────────────────

    @staticmethod
    def calculate_tf(tokens: List[str]) -> Dict[str, float]:
        if not tokens:
            return {}
        total = len(tokens)
        return {token: count / total for token, count in Counter(tokens).items()}

    def document_to_vector(self, doc: str) -> np.ndarray:
        vector = np.zeros(self.vocabulary_size, dtype=np.float64)
        for token, tf_value in self.calculate_tf(preprocess(doc)).items():
            index = self.vocabulary.get(token)
            if index is not None:
                vector[index] = tf_value * self.idf.get(token, 0.0)
        return vector

    # ─── Introspection ────────────────────────────────────────────────────────

    def vocabulary_stats(self) -> dict:
        idf_values = list(self.idf.values())
        if not idf_values:
            return {
                "total_terms": 0,
                "average_idf": 0.0,
                "max_idf": 0.0,
                "min_idf": 0.0,
                "sample_terms": [],
            }
        return {
            "total_terms": self.vocabulary_size,
            "average_idf": sum(idf_values) / len(idf_values),
            "max_idf": max(idf_values),
            "min_idf": min(idf_values),
            "sample_terms": self.feature_names[:10],
        }

    # ─── Serialization ────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        return {
            "vocabulary": [[term, index] for term, index in self.vocabulary.items()],
            "idf": [[term, weight] for term, weight in self.idf.items()],
            "fitted": self.fitted,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TfidfVectorizer":
        vectorizer = cls()
        vectorizer.vocabulary = {term: int(index) for term, index in data["vocabulary"]}
        vectorizer.idf = {term: float(weight) for term, weight in data["idf"]}
        vectorizer.fitted = bool(data.get("fitted", False))
        return vectorizer
