"""
Similarity ranking: normalization, cosine similarity and hybrid lexical scoring.

Ranking is a full linear scan over every stored document (O(n * d)). An
approximate index could sit behind top_k without changing callers.
"""

import re
from typing import Iterable, List, Sequence, Union

import numpy as np

from ..core.config import LEXICAL_BOOST_WEIGHT
from ..core.errors import EmbeddingDimensionMismatch
from .types import Document, RetrievalScore

Vector = Union[Sequence[float], np.ndarray]

_TOKEN_SPLIT = re.compile(r"\W+")
MIN_TOKEN_LENGTH = 3


def normalize(v: Vector) -> np.ndarray:
    """Scale a vector to unit length. A zero vector is returned unchanged."""
    arr = np.asarray(v, dtype=np.float32)
    norm = np.linalg.norm(arr)
    if norm == 0:
        return arr
    return (arr / norm).astype(np.float32)


def cosine(a: Vector, b: Vector) -> float:
    """Cosine similarity of two equal-length vectors; 0.0 if either norm is zero."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        raise EmbeddingDimensionMismatch(expected=b.size, actual=a.size)

    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    return float(np.dot(a, b) / (norm_a * norm_b))


def query_tokens(query: str) -> List[str]:
    """Distinct lower-cased word tokens of at least three characters."""
    tokens = []
    for token in _TOKEN_SPLIT.split(query.lower()):
        if len(token) >= MIN_TOKEN_LENGTH and token not in tokens:
            tokens.append(token)
    return tokens


def lexical_boost(tokens: Iterable[str], content: str, weight: float = LEXICAL_BOOST_WEIGHT) -> float:
    """Additive bonus per query token found as a substring of the content."""
    haystack = content.lower()
    return weight * sum(1 for token in set(tokens) if token in haystack)


def score(query_vector: Vector, document: Document, tokens: Iterable[str] = (),
          weight: float = LEXICAL_BOOST_WEIGHT) -> RetrievalScore:
    """Score one document against a query: cosine of the normalized query plus lexical boost."""
    return RetrievalScore(
        document_id=document.id,
        content=document.content,
        cosine_similarity=cosine(normalize(query_vector), document.embedding),
        lexical_boost=lexical_boost(tokens, document.content, weight),
    )


def top_k(query_vector: Vector, documents: Sequence[Document], k: int = 3,
          query_text: str = "", weight: float = LEXICAL_BOOST_WEIGHT) -> List[RetrievalScore]:
    """
    Rank documents by final score, highest first.

    The sort is stable, so equal scores keep store order (first inserted wins).

    Args:
        query_vector: Embedding of the query (normalized here)
        documents: Candidate documents in store order
        k: Maximum number of results
        query_text: Raw query text, source of the lexical boost tokens

    Returns:
        Up to k RetrievalScore objects
    """
    if k <= 0 or not documents:
        return []

    tokens = query_tokens(query_text) if query_text else []
    scored = [score(query_vector, document, tokens, weight) for document in documents]
    scored.sort(key=lambda s: s.final_score, reverse=True)
    return scored[:k]
