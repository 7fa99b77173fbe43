"""
Mock generator that answers without external dependencies.
Used for testing, development, and when Ollama is unavailable.
"""

from typing import Any, Dict, List

from .generator import IGenerator


class MockGenerator(IGenerator):
    """
    Deterministic generator that echoes the question it was asked.
    Keeps every prompt it receives so tests can inspect assembled context.
    """

    def __init__(self, model_name: str = "mock-model"):
        super().__init__(model_name)
        self.prompts: List[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return f"[{self.model_name}] {self._extract_question(prompt)}"

    @staticmethod
    def _extract_question(prompt: str) -> str:
        for line in reversed(prompt.splitlines()):
            if line.startswith("Question: "):
                return "Answering: " + line[len("Question: "):]
        if not prompt.strip():
            return "No prompt"
        return "Answering: " + prompt.strip().splitlines()[-1]

    @property
    def last_prompt(self) -> str:
        return self.prompts[-1] if self.prompts else ""

    def get_status(self) -> Dict[str, Any]:
        status = super().get_status()
        status['prompts_served'] = len(self.prompts)
        return status
