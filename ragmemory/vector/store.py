"""
Long-term vector memory: append-only stores of (content, embedding) pairs.
"""

import threading
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Union

import numpy as np

from ..core.db import get_db, init_db, health_check
from ..core.errors import EmbeddingDimensionMismatch, ValidationFault
from ..util.logging import logger
from .codec import decode_embedding, encode_embedding
from .types import Document


class IVectorStore(ABC):
    """Abstract interface for document vector storage operations."""

    def __init__(self, dimension: Optional[int] = None):
        self._lock = threading.Lock()
        self._configured_dimension = dimension
        self._dimension = dimension

    @property
    def dimension(self) -> Optional[int]:
        """Fixed embedding dimension, or None until the first insert."""
        return self._dimension

    def insert(self, content: str, embedding: Union[Sequence[float], np.ndarray]) -> None:
        """Append a document. No deduplication."""
        if not content or not content.strip():
            raise ValidationFault("Document content cannot be empty")

        vector = np.asarray(embedding, dtype=np.float32)
        if vector.ndim != 1 or vector.size == 0:
            raise ValidationFault("Embedding must be a non-empty one-dimensional vector")

        with self._lock:
            if self._dimension is not None and vector.size != self._dimension:
                raise EmbeddingDimensionMismatch(expected=self._dimension, actual=vector.size)
            self._insert(content, vector)
            self._dimension = vector.size

    def get_all(self) -> List[Document]:
        """Return every stored document in insertion order."""
        with self._lock:
            return self._get_all()

    def count(self) -> int:
        """Number of stored documents."""
        with self._lock:
            return self._count()

    def clear(self) -> None:
        """Remove all documents. Idempotent."""
        with self._lock:
            self._clear()
            self._dimension = self._configured_dimension

    @abstractmethod
    def _insert(self, content: str, vector: np.ndarray) -> None:
        pass

    @abstractmethod
    def _get_all(self) -> List[Document]:
        pass

    @abstractmethod
    def _count(self) -> int:
        pass

    @abstractmethod
    def _clear(self) -> None:
        pass

    def health_check(self) -> bool:
        return True


class SQLiteVectorStore(IVectorStore):
    """Durable store backed by the `documents` table of a SQLite file."""

    def __init__(self, db_path: str, dimension: Optional[int] = None):
        super().__init__(dimension)
        self.db_path = db_path
        init_db(db_path)

        # Recover the fixed dimension from existing rows
        if self._dimension is None:
            with get_db(self.db_path) as conn:
                row = conn.execute(
                    "SELECT embedding FROM documents ORDER BY id LIMIT 1"
                ).fetchone()
            if row:
                self._dimension = len(row[0]) // 4
                logger.log_document_operation("open", details={
                    "db_path": db_path,
                    "dimension": self._dimension,
                })

    def _insert(self, content: str, vector: np.ndarray) -> None:
        with get_db(self.db_path) as conn:
            conn.execute(
                "INSERT INTO documents (content, embedding) VALUES (?, ?)",
                (content, encode_embedding(vector))
            )
            conn.commit()

    def _get_all(self) -> List[Document]:
        with get_db(self.db_path) as conn:
            rows = conn.execute(
                "SELECT id, content, embedding FROM documents ORDER BY id"
            ).fetchall()

        return [
            Document(id=doc_id, content=content, embedding=decode_embedding(blob))
            for doc_id, content, blob in rows
        ]

    def _count(self) -> int:
        with get_db(self.db_path) as conn:
            return conn.execute("SELECT COUNT(*) FROM documents").fetchone()[0]

    def _clear(self) -> None:
        with get_db(self.db_path) as conn:
            conn.execute("DELETE FROM documents")
            conn.commit()

    def health_check(self) -> bool:
        return health_check(self.db_path)


class InMemoryVectorStore(IVectorStore):
    """Volatile implementation of IVectorStore, for tests and throwaway sessions."""

    def __init__(self, dimension: Optional[int] = None):
        super().__init__(dimension)
        self._documents: List[Document] = []
        self._next_id = 1

    def _insert(self, content: str, vector: np.ndarray) -> None:
        self._documents.append(Document(id=self._next_id, content=content, embedding=vector.copy()))
        self._next_id += 1

    def _get_all(self) -> List[Document]:
        return list(self._documents)

    def _count(self) -> int:
        return len(self._documents)

    def _clear(self) -> None:
        self._documents.clear()
