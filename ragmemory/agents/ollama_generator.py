"""
Ollama-backed generator that talks to a local Ollama instance.
"""

from typing import Any, Dict, Optional

import ollama

from ..core.errors import GenerationFault, ProviderUnavailableFault
from .generator import IGenerator


class OllamaGenerator(IGenerator):
    """
    Generator implementation that uses Ollama models.
    """

    def __init__(self, model_name: str, host: Optional[str] = None, timeout: Optional[float] = None,
                 options: Optional[Dict[str, Any]] = None):
        super().__init__(model_name)
        self.client = ollama.Client(host=host, timeout=timeout)
        self.options = options or {
            'temperature': 0.7,
            'top_p': 0.9
        }

    def generate(self, prompt: str) -> str:
        try:
            response = self.client.generate(
                model=self.model_name,
                prompt=prompt,
                options=self.options
            )
        except ollama.ResponseError as e:
            raise GenerationFault(f"Ollama model error: {e.error}", {"status_code": e.status_code}) from e
        except ConnectionError as e:
            raise ProviderUnavailableFault("ollama", f"Ollama is not reachable: {e}") from e

        content = response['response']
        if not content:
            raise GenerationFault("Ollama returned an empty response", {"model": self.model_name})

        return content

    def get_status(self) -> Dict[str, Any]:
        """Get current status with Ollama-specific information."""
        status = super().get_status()
        status['ollama_available'] = self._check_ollama_health()
        return status

    def _check_ollama_health(self) -> bool:
        """Check if Ollama is reachable."""
        try:
            self.client.list()
            return True
        except (ollama.ResponseError, ConnectionError):
            return False
