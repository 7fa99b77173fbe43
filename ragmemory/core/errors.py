"""
Fault taxonomy for the retrieval and context assembly engine.
Every fault is recoverable at the call boundary; none should terminate the host.
"""

from typing import Any, Dict, Optional


class MemoryFault(Exception):
    """Base class for all memory engine faults."""

    code = "memory_fault"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        data = {"error_type": self.code, "message": self.message}
        if self.details:
            data["details"] = self.details
        return data


class ValidationFault(MemoryFault):
    """Empty or malformed input; caller-correctable."""

    code = "validation_error"


class EmbeddingDimensionMismatch(MemoryFault):
    """Stored and freshly computed vectors disagree in length."""

    code = "embedding_dimension_mismatch"

    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"Embedding dimension mismatch: expected {expected}, got {actual}",
            {"expected": expected, "actual": actual},
        )
        self.expected = expected
        self.actual = actual


class ProviderUnavailableFault(MemoryFault):
    """Embedding or generation collaborator is not ready."""

    code = "provider_unavailable"

    def __init__(self, provider: str, message: str = ""):
        super().__init__(
            message or f"Provider '{provider}' is not available",
            {"provider": provider},
        )
        self.provider = provider


class EmptyKnowledgeFault(MemoryFault):
    """Long-term retrieval requested with zero stored documents."""

    code = "empty_knowledge"

    def __init__(self, message: str = "No documents in long-term memory"):
        super().__init__(message)


class GenerationFault(MemoryFault):
    """The generator failed to produce a completion."""

    code = "generation_error"
