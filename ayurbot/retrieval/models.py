"""Shared retrieval data models."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List


@dataclass(frozen=True, slots=True)
class ConversationTurn:
    role: str
    text: str

    def to_content(self) -> dict[str, Any]:
        """Render the turn in the generative service's ``{role, parts}`` shape."""

        return {"role": self.role, "parts": [{"text": self.text}]}


@dataclass(slots=True)
class RetrievedSnippet:
    text: str
    score: float


@dataclass(slots=True)
class ChatResult:
    answer: str
    standalone_question: str
    history: List[ConversationTurn]
    snippets: List[RetrievedSnippet]
