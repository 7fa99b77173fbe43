"""
Structured logging for document ingestion, retrieval, generation and memory operations.
"""

import logging
from typing import Any, Dict


def _truncate(text: str, limit: int = 50) -> str:
    return text[:limit] + "..." if len(text) > limit else text


class StructuredLogger:
    """Structured logger for memory engine operations."""

    def __init__(self, name: str = "ragmemory"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None, level: int = logging.INFO):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        self.logger.log(level, message)

    def log_document_operation(self, operation: str, content: str = None, details: Dict[str, Any] = None, status: str = "success"):
        """Log a long-term store operation."""
        log_details = {}
        if content is not None:
            log_details["content"] = _truncate(content)
            log_details["length"] = len(content)
        if details:
            log_details.update(details)

        level = logging.WARNING if status in ("rejected", "failed") else logging.INFO
        self.log_operation(f"documents.{operation}", status, log_details, level)

    def log_retrieval(self, query: str, result_count: int, best_score: float = None, status: str = "success"):
        """Log a similarity retrieval."""
        log_details = {"query": _truncate(query), "results": result_count}
        if best_score is not None:
            log_details["best_score"] = round(best_score, 4)

        self.log_operation("retrieval.top_k", status, log_details)

    def log_generation(self, mode: str, prompt_length: int, duration_ms: float, status: str = "success", details: Dict[str, Any] = None):
        """Log a generator call."""
        log_details = {
            "mode": mode,
            "prompt_length": prompt_length,
            "duration_ms": round(duration_ms, 2),
        }
        if details:
            log_details.update(details)

        level = logging.ERROR if status == "failed" else logging.INFO
        self.log_operation("generation", status, log_details, level)

    def log_memory_operation(self, operation: str, details: Dict[str, Any] = None, status: str = "success"):
        """Log a short-term memory operation."""
        self.log_operation(f"memory.{operation}", status, details)

    def log_provider_event(self, provider: str, event: str, details: Dict[str, Any] = None, status: str = "success"):
        """Log collaborator lifecycle events (initialization, retry, reset)."""
        log_details = {"provider": provider}
        if details:
            log_details.update(details)

        level = logging.WARNING if status in ("retry", "failed") else logging.INFO
        self.log_operation(f"provider.{event}", status, log_details, level)

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)


# Global logger instance
logger = StructuredLogger()
