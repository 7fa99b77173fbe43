"""
Short-term memory: a bounded, ordered buffer of recent conversation turns.

Rendering is token-budgeted. Turns are walked newest to oldest and accepted
while the running estimate stays within budget; the first turn that would
overflow stops the walk, so the rendered block never exceeds the budget and
always keeps the most recent turns.
"""

import math
import threading
from collections import deque
from dataclasses import dataclass, asdict
from typing import Any, Dict, List

from .config import MAX_SHORT_TERM_ITEMS, MAX_TOKENS_SHORT_TERM
from .errors import ValidationFault

VALID_ROLES = ("user", "assistant", "system")


def estimate_tokens(text: str) -> int:
    """Rough estimate: 1 token is about 4 characters."""
    return math.ceil(len(text) / 4)


@dataclass
class MemoryTurn:
    """One conversation turn."""
    role: str  # "user", "assistant", or "system"
    content: str

    def render(self) -> str:
        return f"{self.role.upper()}: {self.content}"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ShortTermMemory:
    """
    Volatile conversation buffer with oldest-first eviction.

    Features:
    - Item-count ceiling independent of token budget
    - Token-budgeted rendering that prefers recent turns
    - Thread-safe
    """

    def __init__(self, max_items: int = MAX_SHORT_TERM_ITEMS):
        if max_items < 1:
            raise ValueError("max_items must be >= 1")
        self.max_items = max_items
        self._turns = deque(maxlen=max_items)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._turns)

    def add(self, role: str, content: str) -> None:
        """Append a turn, evicting the oldest beyond the item ceiling."""
        turn = self._make_turn(role, content)
        with self._lock:
            self._turns.append(turn)

    def add_exchange(self, question: str, response: str) -> None:
        """Append a user turn then an assistant turn as one unit."""
        user_turn = self._make_turn("user", question)
        assistant_turn = self._make_turn("assistant", response)
        with self._lock:
            self._turns.append(user_turn)
            self._turns.append(assistant_turn)

    def clear(self) -> None:
        with self._lock:
            self._turns.clear()

    def snapshot(self) -> List[MemoryTurn]:
        """Copy of the buffer, oldest first."""
        with self._lock:
            return [MemoryTurn(t.role, t.content) for t in self._turns]

    def render(self, max_tokens: int = MAX_TOKENS_SHORT_TERM) -> str:
        """Render as many recent turns as fit in max_tokens, in chronological order."""
        with self._lock:
            turns = list(self._turns)

        lines = []
        token_count = 0
        for turn in reversed(turns):
            line = turn.render()
            tokens = estimate_tokens(line)
            if token_count + tokens > max_tokens:
                break
            lines.append(line)
            token_count += tokens

        lines.reverse()
        return "\n".join(lines)

    def token_count(self, max_tokens: int = MAX_TOKENS_SHORT_TERM) -> int:
        """Estimated tokens of the rendered block as a whole."""
        return estimate_tokens(self.render(max_tokens))

    @staticmethod
    def _make_turn(role: str, content: str) -> MemoryTurn:
        if role not in VALID_ROLES:
            raise ValidationFault(f"role must be one of: {list(VALID_ROLES)}", {"role": role})
        return MemoryTurn(role=role, content=content)
