"""
RAG memory engine - embedding retrieval and dual-memory context assembly.
"""

__version__ = "1.0.0"
