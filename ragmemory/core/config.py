"""
Runtime configuration for the RAG memory engine.
All settings come from environment variables (optionally via a .env file).
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Database path configuration
DB_PATH = os.getenv("DB_PATH", "./data/rag.db")

DEBUG = os.getenv("DEBUG", "true").lower() == "true"

# Embedding collaborator
EMBED_PROVIDER = os.getenv("EMBED_PROVIDER", "hash")  # hash|sentence_transformers
EMBED_MODEL_NAME = os.getenv("EMBED_MODEL_NAME", "all-MiniLM-L6-v2")
EMBED_DIM = int(os.getenv("EMBED_DIM", "384"))

# Generation collaborator
GENERATOR_PROVIDER = os.getenv("GENERATOR_PROVIDER", "ollama")  # ollama|mock
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "gemma3:2b")
OLLAMA_HOST = os.getenv("OLLAMA_HOST")
OLLAMA_TIMEOUT_SEC = float(os.getenv("OLLAMA_TIMEOUT_SEC", "120"))

# Short-term memory and prompt budgets
MAX_SHORT_TERM_ITEMS = int(os.getenv("MAX_SHORT_TERM_ITEMS", "20"))
MAX_TOKENS_SHORT_TERM = int(os.getenv("MAX_TOKENS_SHORT_TERM", "1000"))
MAX_TOKENS_LONG_TERM = int(os.getenv("MAX_TOKENS_LONG_TERM", "300"))
LONG_TERM_CHAR_CAP = int(os.getenv("LONG_TERM_CHAR_CAP", "300"))

# Retrieval
LEXICAL_BOOST_WEIGHT = float(os.getenv("LEXICAL_BOOST_WEIGHT", "0.05"))
DEFAULT_TOP_K = int(os.getenv("DEFAULT_TOP_K", "3"))

PROVIDER_MAX_RETRIES = int(os.getenv("PROVIDER_MAX_RETRIES", "2"))

VERSION = "1.0.0"


def get_embedding_provider():
    """Get configured embedding provider implementation."""
    if EMBED_PROVIDER == "sentence_transformers":
        from ..vector.embeddings import SentenceTransformerEmbedding
        return SentenceTransformerEmbedding(EMBED_MODEL_NAME)

    from ..vector.embeddings import DeterministicHashEmbedding
    return DeterministicHashEmbedding(dimension=EMBED_DIM)


def get_generator():
    """Get configured generator implementation."""
    if GENERATOR_PROVIDER == "mock":
        from ..agents.mock_generator import MockGenerator
        return MockGenerator()

    from ..agents.ollama_generator import OllamaGenerator
    return OllamaGenerator(OLLAMA_MODEL, host=OLLAMA_HOST, timeout=OLLAMA_TIMEOUT_SEC)


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "true").lower() == "true"


def ensure_db_directory(db_path: str = None):
    """Ensure the database directory exists."""
    Path(db_path or DB_PATH).parent.mkdir(parents=True, exist_ok=True)


def validate_config():
    """Validate configuration and return any issues."""
    issues = []

    if EMBED_PROVIDER not in ["hash", "sentence_transformers"]:
        issues.append(f"Invalid EMBED_PROVIDER: {EMBED_PROVIDER}")

    if GENERATOR_PROVIDER not in ["ollama", "mock"]:
        issues.append(f"Invalid GENERATOR_PROVIDER: {GENERATOR_PROVIDER}")

    if EMBED_DIM < 1:
        issues.append("EMBED_DIM must be >= 1")

    if MAX_SHORT_TERM_ITEMS < 1:
        issues.append("MAX_SHORT_TERM_ITEMS must be >= 1")

    if MAX_TOKENS_SHORT_TERM < 0 or MAX_TOKENS_LONG_TERM < 0:
        issues.append("Token budgets must be >= 0")

    if LONG_TERM_CHAR_CAP < 1:
        issues.append("LONG_TERM_CHAR_CAP must be >= 1")

    if PROVIDER_MAX_RETRIES < 0:
        issues.append("PROVIDER_MAX_RETRIES must be >= 0")

    return issues
