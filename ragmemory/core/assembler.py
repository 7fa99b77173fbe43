"""
Dual-memory context assembly.

Three modes over a single request:

| mode            | reads                         | writes to short-term      |
|-----------------|-------------------------------|---------------------------|
| both            | short-term render + top-1 doc | user turn, assistant turn |
| short-term-only | short-term render             | user turn, assistant turn |
| long-term-only  | top-1 doc                     | nothing                   |

Budgets are applied before rendering and the retrieved document is truncated
before it is embedded in the prompt, so the generator never sees an
over-budget prompt. Turns are written only after a successful generation.
"""

import time
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, Optional

from .config import MAX_TOKENS_SHORT_TERM, MAX_TOKENS_LONG_TERM, LONG_TERM_CHAR_CAP
from .errors import (
    EmbeddingDimensionMismatch,
    GenerationFault,
    MemoryFault,
    ValidationFault,
)
from .long_term import LongTermMemory
from .providers import ProviderHandle
from .short_term import ShortTermMemory
from ..agents.generator import IGenerator
from ..util.logging import logger


class MemoryMode(str, Enum):
    BOTH = "both"
    SHORT_TERM_ONLY = "short-term-only"
    LONG_TERM_ONLY = "long-term-only"

    @property
    def uses_short_term(self) -> bool:
        return self is not MemoryMode.LONG_TERM_ONLY

    @property
    def uses_long_term(self) -> bool:
        return self is not MemoryMode.SHORT_TERM_ONLY

    @property
    def writes_short_term(self) -> bool:
        # Knowledge lookups never pollute conversational history
        return self is not MemoryMode.LONG_TERM_ONLY


DEFAULT_SYSTEM_PROMPTS = {
    MemoryMode.BOTH: "You are a helpful assistant with memory.",
    MemoryMode.SHORT_TERM_ONLY: "You are a helpful assistant.",
    MemoryMode.LONG_TERM_ONLY: "You are a knowledgeable assistant.",
}


@dataclass
class AskOptions:
    """Per-call prompt budget. system_prompt=None means the mode's default."""
    max_short_term_tokens: int = MAX_TOKENS_SHORT_TERM
    max_long_term_tokens: int = MAX_TOKENS_LONG_TERM
    system_prompt: Optional[str] = None

    def __post_init__(self):
        if self.max_short_term_tokens < 0:
            raise ValidationFault("max_short_term_tokens must be >= 0")
        if self.max_long_term_tokens < 0:
            raise ValidationFault("max_long_term_tokens must be >= 0")

    def system_prompt_for(self, mode: MemoryMode) -> str:
        if self.system_prompt is not None:
            return self.system_prompt
        return DEFAULT_SYSTEM_PROMPTS[mode]


@dataclass
class AssembledPrompt:
    mode: MemoryMode
    prompt: str
    context_used: Optional[str] = None
    best_score: Optional[float] = None


@dataclass
class AskOutcome:
    """Result of an ask call: a response, or an inspectable fault."""
    status: str  # "success" or "error"
    mode: Optional[str] = None
    response: Optional[str] = None
    fault: Optional[str] = None
    message: Optional[str] = None
    context_used: Optional[str] = None
    best_score: Optional[float] = None
    prompt_length: int = 0
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "success"

    @classmethod
    def from_fault(cls, fault: MemoryFault, mode: Optional[str] = None) -> "AskOutcome":
        return cls(status="error", mode=mode, fault=fault.code, message=fault.message, details=fault.details)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def truncate_context(content: str, max_tokens: int, char_cap: int = LONG_TERM_CHAR_CAP) -> str:
    """Clip a retrieved document to the character cap and the token budget."""
    return content[:min(char_cap, max_tokens * 4)]


class ContextAssembler:
    """
    Composes short-term and long-term context into a final prompt and
    records completed exchanges back into short-term memory.
    Owns neither memory; holds no state between calls.
    """

    def __init__(self, short_term: ShortTermMemory, long_term: LongTermMemory,
                 generator: ProviderHandle[IGenerator], char_cap: int = LONG_TERM_CHAR_CAP):
        self.short_term = short_term
        self.long_term = long_term
        self.generator = generator
        self.char_cap = char_cap

    def assemble(self, question: str, mode: MemoryMode, options: Optional[AskOptions] = None) -> AssembledPrompt:
        """
        Build the prompt for one request.

        Raises:
            ValidationFault: empty question
            EmptyKnowledgeFault: long-term mode with an empty store
            EmbeddingDimensionMismatch: query and stored vectors disagree
        """
        if not question or not question.strip():
            raise ValidationFault("question cannot be empty")

        mode = MemoryMode(mode)
        options = options or AskOptions()

        header = options.system_prompt_for(mode)
        if mode.uses_short_term:
            short_context = self.short_term.render(options.max_short_term_tokens)
            if short_context:
                header += f"\nRecent conversation:\n{short_context}"

        if not mode.uses_long_term:
            return AssembledPrompt(mode=mode, prompt=f"{header}\n\nQuestion: {question}".strip())

        best = self.long_term.best_match(question)
        context = truncate_context(best.content, options.max_long_term_tokens, self.char_cap)
        prompt = f"{header}\n\nContext: {context}\n\nQuestion: {question}\n\nAnswer:".strip()

        return AssembledPrompt(mode=mode, prompt=prompt, context_used=context, best_score=best.final_score)

    def ask(self, question: str, mode: MemoryMode, options: Optional[AskOptions] = None) -> AskOutcome:
        """
        Assemble, generate and (mode permitting) remember one exchange.

        Faults come back as an error AskOutcome; a dimension mismatch is a
        configuration error and propagates. On any failure neither memory is
        modified.
        """
        mode = MemoryMode(mode)
        try:
            assembled = self.assemble(question, mode, options)
        except EmbeddingDimensionMismatch:
            raise
        except MemoryFault as e:
            logger.log_operation(f"ask.{mode.value}", "rejected", e.to_dict())
            return AskOutcome.from_fault(e, mode.value)

        try:
            response = self.generate(assembled.prompt, mode.value)
        except MemoryFault as e:
            return AskOutcome.from_fault(e, mode.value)

        if mode.writes_short_term:
            self.short_term.add_exchange(question, response)
            logger.log_memory_operation("append_exchange", {"mode": mode.value, "turns": len(self.short_term)})

        return AskOutcome(
            status="success",
            mode=mode.value,
            response=response,
            context_used=assembled.context_used,
            best_score=assembled.best_score,
            prompt_length=len(assembled.prompt),
        )

    def generate(self, prompt: str, label: str = "text") -> str:
        """Blocking generator call; failures surface as GenerationFault or ProviderUnavailableFault."""
        start_time = time.time()

        def _generate(generator: IGenerator) -> str:
            try:
                return generator.generate(prompt)
            except MemoryFault:
                raise
            except Exception as e:
                raise GenerationFault(f"Generation failed: {e}") from e

        try:
            # A failed engine is dropped so the next call starts from a fresh instance
            response = self.generator.call(_generate, drop_on=(GenerationFault,))
        except MemoryFault as e:
            logger.log_generation(label, len(prompt), (time.time() - start_time) * 1000, "failed", {"error": e.message})
            raise

        logger.log_generation(label, len(prompt), (time.time() - start_time) * 1000,
                              details={"response_length": len(response)})
        return response
