# problem_finder/infrastructure/corpus_builder.py

from typing import List, Optional, Sequence

from problem_finder.config import TITLE_WEIGHT


PROGRESS_EVERY = 100


def build_document(name: Optional[str], text: Optional[str], title_weight: int = TITLE_WEIGHT) -> str:
    """
    Repeat the problem name in front of the lowercased body so title terms
    carry title_weight times the raw frequency of body terms.
    """
    return ((name or "") + " ") * title_weight + (text or "").lower()


def build_corpus(
    names: Sequence[Optional[str]],
    texts: Sequence[Optional[str]],
    title_weight: int = TITLE_WEIGHT,
) -> List[str]:
    """
    One weighted document per problem, index-aligned with the problem table.
    """
    if len(names) != len(texts):
        raise ValueError(
            f"names and texts must be index-aligned (got {len(names)} names, {len(texts)} texts)"
        )

    print("[CorpusBuilder] Creating document corpus...")
    documents: List[str] = []
    for i, (name, text) in enumerate(zip(names, texts)):
        documents.append(build_document(name, text, title_weight))
        if (i + 1) % PROGRESS_EVERY == 0:
            print(f"[CorpusBuilder] Processed {i + 1}/{len(names)} documents")

    print(f"[CorpusBuilder] Document corpus created with {len(documents)} documents")
    return documents
