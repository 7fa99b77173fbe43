"""
MemoryService - the explicit context object owned by the host application.

Create it at startup (MemoryService.from_config()), pass it to every
operation, close() it at shutdown. It holds the short-term buffer, the
long-term store and the lazily built collaborators.
"""

import json
from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, List, Optional

from . import config
from .assembler import AskOptions, AskOutcome, ContextAssembler, MemoryMode
from .errors import MemoryFault, ProviderUnavailableFault, ValidationFault
from .long_term import LongTermMemory
from .providers import ProviderHandle
from .short_term import ShortTermMemory
from ..agents.generator import IGenerator
from ..util.logging import logger
from ..vector.embeddings import IEmbeddingProvider
from ..vector.store import IVectorStore, SQLiteVectorStore
from ..vector.types import RetrievalScore


@dataclass
class AddDocumentResult:
    status: str  # "stored", "rejected" or "error"
    length: int
    total_documents: int
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def looks_like_serialized_error(content: str) -> bool:
    """True for payloads that are an error object rather than a document."""
    text = content.strip()
    if text == "[object Object]":
        return True
    if not text.startswith("{"):
        return False

    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        return False

    return isinstance(payload, dict) and ("error" in payload or payload.get("status") == "error")


class MemoryService:
    """Public operation surface over short-term and long-term memory."""

    def __init__(self, store: IVectorStore,
                 embedder_factory: Callable[[], IEmbeddingProvider],
                 generator_factory: Callable[[], IGenerator],
                 short_term: Optional[ShortTermMemory] = None,
                 max_retries: int = config.PROVIDER_MAX_RETRIES,
                 char_cap: int = config.LONG_TERM_CHAR_CAP,
                 lexical_weight: float = config.LEXICAL_BOOST_WEIGHT):
        self.embedder = ProviderHandle("embedder", embedder_factory, max_retries)
        self.generator = ProviderHandle("generator", generator_factory, max_retries)
        self.short_term = short_term or ShortTermMemory()
        self.long_term = LongTermMemory(store, self.embedder, lexical_weight)
        self.assembler = ContextAssembler(self.short_term, self.long_term, self.generator, char_cap)

    @classmethod
    def from_config(cls, db_path: Optional[str] = None) -> "MemoryService":
        """Build a service from environment configuration."""
        issues = config.validate_config()
        for issue in issues:
            logger.warning(f"Configuration issue: {issue}")

        store = SQLiteVectorStore(db_path or config.DB_PATH)
        return cls(
            store=store,
            embedder_factory=config.get_embedding_provider,
            generator_factory=config.get_generator,
            short_term=ShortTermMemory(config.MAX_SHORT_TERM_ITEMS),
        )

    @property
    def store(self) -> IVectorStore:
        return self.long_term.store

    # Long-term memory

    def add_document(self, content: str) -> AddDocumentResult:
        """Embed and persist a document; rejections come back as a structured result."""
        content = content if isinstance(content, str) else ""
        try:
            if not content.strip():
                raise ValidationFault("Document content cannot be empty")
            if looks_like_serialized_error(content):
                raise ValidationFault("Document content looks like a serialized error object")
            total = self.long_term.add(content)
        except ValidationFault as e:
            logger.log_document_operation("insert", content, {"reason": e.message}, status="rejected")
            return AddDocumentResult("rejected", len(content), self.long_term.count(), e.message)
        except ProviderUnavailableFault as e:
            logger.log_document_operation("insert", content, {"reason": e.message}, status="failed")
            return AddDocumentResult("error", len(content), self.long_term.count(), e.message)

        return AddDocumentResult("stored", len(content), total)

    def retrieve_scored(self, query: str, k: int = config.DEFAULT_TOP_K) -> List[RetrievalScore]:
        if not query or not query.strip():
            raise ValidationFault("query cannot be empty")
        return self.long_term.search(query, k)

    def retrieve_top_k(self, query: str, k: int = config.DEFAULT_TOP_K) -> List[str]:
        """Content of the k best documents, best first."""
        return [result.content for result in self.retrieve_scored(query, k)]

    def clear_store(self) -> Dict[str, str]:
        self.long_term.clear()
        return {"status": "success"}

    def get_stats(self) -> Dict[str, int]:
        return {"document_count": self.long_term.count()}

    # Asking

    def ask(self, question: str, mode: MemoryMode, options: Optional[AskOptions] = None) -> AskOutcome:
        return self.assembler.ask(question, mode, options)

    def ask_with_memory(self, question: str, options: Optional[AskOptions] = None) -> AskOutcome:
        """Short-term history plus the best long-term document."""
        return self.assembler.ask(question, MemoryMode.BOTH, options)

    def ask_with_short_term_only(self, question: str, options: Optional[AskOptions] = None) -> AskOutcome:
        """Chat history only; no retrieval."""
        return self.assembler.ask(question, MemoryMode.SHORT_TERM_ONLY, options)

    def ask_with_long_term_only(self, question: str, options: Optional[AskOptions] = None) -> AskOutcome:
        """Knowledge lookup only; never written to short-term memory."""
        return self.assembler.ask(question, MemoryMode.LONG_TERM_ONLY, options)

    def generate_text(self, prompt: str) -> AskOutcome:
        """Plain generation with no memory involved."""
        if not prompt or not prompt.strip():
            return AskOutcome.from_fault(ValidationFault("prompt cannot be empty"), "text")
        try:
            response = self.assembler.generate(prompt, "text")
        except MemoryFault as e:
            return AskOutcome.from_fault(e, "text")
        return AskOutcome(status="success", mode="text", response=response, prompt_length=len(prompt))

    def embed_probe(self, text: str) -> Dict[str, Any]:
        """Embedding diagnostic: vector length and the first few values."""
        vector = self.long_term.embed(text)
        return {"length": int(vector.size), "sample": [float(x) for x in vector[:5]]}

    # Diagnostics and lifecycle

    def export_memory(self) -> Dict[str, Any]:
        """Read-only snapshot of both memory tiers."""
        return {
            "short_term": [turn.to_dict() for turn in self.short_term.snapshot()],
            "short_term_token_count": self.short_term.token_count(),
            "long_term_doc_count": self.long_term.count(),
        }

    def reset_all_memory(self) -> None:
        """Clear the short-term buffer and the long-term store together."""
        self.short_term.clear()
        self.long_term.clear()
        logger.log_memory_operation("reset_all")

    def health(self) -> Dict[str, Any]:
        store_health = self.store.health_check()
        return {
            "status": "healthy" if store_health else "unhealthy",
            "version": config.VERSION,
            "store_health": store_health,
            "document_count": self.long_term.count() if store_health else 0,
            "embedder": self.embedder.get_status(),
            "generator": self.generator.get_status(),
        }

    def close(self) -> None:
        self.embedder.reset()
        self.generator.reset()
