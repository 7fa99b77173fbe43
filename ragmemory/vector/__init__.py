"""
Long-term vector memory - embeddings, on-disk encoding, storage and ranking.
"""

# Package initialization for vector module
from .store import IVectorStore, SQLiteVectorStore, InMemoryVectorStore
from .types import Document, RetrievalScore
from .codec import encode_embedding, decode_embedding
from .ranking import normalize, cosine, query_tokens, lexical_boost, score, top_k
from .embeddings import IEmbeddingProvider, DeterministicHashEmbedding, SentenceTransformerEmbedding

__all__ = [
    'IVectorStore',
    'SQLiteVectorStore',
    'InMemoryVectorStore',
    'Document',
    'RetrievalScore',
    'encode_embedding',
    'decode_embedding',
    'normalize',
    'cosine',
    'query_tokens',
    'lexical_boost',
    'score',
    'top_k',
    'IEmbeddingProvider',
    'DeterministicHashEmbedding',
    'SentenceTransformerEmbedding'
]
