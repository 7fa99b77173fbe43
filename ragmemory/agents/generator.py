"""
Base generator interface consumed by the context assembler.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class IGenerator(ABC):
    """
    Abstract interface for text generators.
    generate() is a blocking call and may take seconds.
    """

    def __init__(self, model_name: str):
        self.model_name = model_name

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """
        Produce a completion for a fully assembled prompt.

        Raises:
            ProviderUnavailableFault: the backend cannot be reached
            GenerationFault: the backend failed to produce a completion
        """
        pass

    def close(self) -> None:
        """Release backend resources. Default is a no-op."""

    def get_status(self) -> Dict[str, Any]:
        """Get current status of this generator."""
        return {
            "model_name": self.model_name,
            "generator_type": self.__class__.__name__,
            "status": "ready"
        }
