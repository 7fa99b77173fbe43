"""
Record types for the long-term vector memory.
"""

from dataclasses import dataclass

import numpy as np


@dataclass
class Document:
    """A stored document and its (normalized) embedding."""

    id: int
    """Monotonic identifier, reflects insertion order"""

    content: str
    """Original document text"""

    embedding: np.ndarray
    """float32 embedding vector"""


@dataclass
class RetrievalScore:
    """Represents a ranked match for a query. Never persisted."""

    document_id: int
    """Identifier of the matching document"""

    content: str
    """Content of the matching document"""

    cosine_similarity: float
    """Cosine between normalized query and document vectors (-1 to 1)"""

    lexical_boost: float
    """Additive bonus for literal query-token overlap"""

    @property
    def final_score(self) -> float:
        return self.cosine_similarity + self.lexical_boost

    def to_dict(self):
        return {
            "document_id": self.document_id,
            "content": self.content,
            "cosine_similarity": self.cosine_similarity,
            "lexical_boost": self.lexical_boost,
            "final_score": self.final_score,
        }
