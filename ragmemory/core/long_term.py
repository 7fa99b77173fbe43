"""
Long-term memory: embeds documents into the vector store and ranks them against queries.
"""

from typing import List

import numpy as np

from .config import LEXICAL_BOOST_WEIGHT, DEFAULT_TOP_K
from .errors import EmptyKnowledgeFault, MemoryFault, ProviderUnavailableFault
from .providers import ProviderHandle
from ..util.logging import logger
from ..vector.embeddings import IEmbeddingProvider
from ..vector.ranking import normalize, top_k
from ..vector.store import IVectorStore
from ..vector.types import RetrievalScore


class LongTermMemory:
    """
    Durable document memory queried by similarity rather than recency.
    Integrates embedding generation with vector storage and ranking.
    """

    def __init__(self, store: IVectorStore, embedder: ProviderHandle[IEmbeddingProvider],
                 lexical_weight: float = LEXICAL_BOOST_WEIGHT):
        self.store = store
        self.embedder = embedder
        self.lexical_weight = lexical_weight

    def embed(self, text: str) -> np.ndarray:
        """Embed text through the provider handle (re-initializing on failure)."""
        def _embed(provider: IEmbeddingProvider):
            try:
                return provider.embed_text(text)
            except MemoryFault:
                raise
            except Exception as e:
                raise ProviderUnavailableFault(self.embedder.name, f"Embedding failed: {e}") from e

        return np.asarray(self.embedder.call(_embed), dtype=np.float32)

    def add(self, content: str) -> int:
        """Embed, normalize and store a document. Returns the new document count."""
        vector = normalize(self.embed(content))
        self.store.insert(content, vector)
        total = self.store.count()
        logger.log_document_operation("insert", content, {"total_documents": total})
        return total

    def search(self, query: str, k: int = DEFAULT_TOP_K) -> List[RetrievalScore]:
        """
        Rank every stored document against the query.

        Args:
            query: The search query string
            k: Maximum number of results to return

        Returns:
            Up to k RetrievalScore objects, best first; empty if the store is empty
        """
        documents = self.store.get_all()
        if not documents:
            logger.log_retrieval(query, 0, status="empty")
            return []

        query_vector = self.embed(query)
        results = top_k(query_vector, documents, k, query_text=query, weight=self.lexical_weight)

        best_score = results[0].final_score if results else None
        logger.log_retrieval(query, len(results), best_score)
        return results

    def best_match(self, query: str) -> RetrievalScore:
        """Single best document for the query; EmptyKnowledgeFault if nothing is stored."""
        results = self.search(query, 1)
        if not results:
            raise EmptyKnowledgeFault()
        return results[0]

    def count(self) -> int:
        return self.store.count()

    def clear(self) -> None:
        self.store.clear()
        logger.log_document_operation("clear")
