"""Canonicalization of client-supplied conversation history."""
from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional

from ayurbot.retrieval.models import ConversationTurn


def _first_text(entry: Mapping[str, Any]) -> Optional[str]:
    parts = entry.get("parts")
    if not isinstance(parts, list) or not parts:
        return None
    first = parts[0]
    if not isinstance(first, Mapping):
        return None
    text = first.get("text")
    if not isinstance(text, str) or not text:
        return None
    return text


def normalize_history(raw: Iterable[Any] | None) -> List[ConversationTurn]:
    """Keep well-formed turns in order, silently dropping the rest.

    Only the first text part of each entry survives.
    """

    turns: List[ConversationTurn] = []
    for entry in raw or []:
        if not isinstance(entry, Mapping):
            continue
        role = entry.get("role")
        if not isinstance(role, str) or not role:
            continue
        text = _first_text(entry)
        if text is None:
            continue
        turns.append(ConversationTurn(role=role, text=text))
    return turns


def user_texts(history: Iterable[ConversationTurn]) -> List[str]:
    return [turn.text for turn in history if turn.role == "user"]


def with_standalone_question(
    history: List[ConversationTurn], question: str
) -> List[ConversationTurn]:
    """Return history ending in ``question`` as the latest user turn.

    A trailing user turn is replaced, otherwise the question is appended.
    """

    updated = list(history)
    if updated and updated[-1].role == "user":
        updated.pop()
    updated.append(ConversationTurn(role="user", text=question))
    return updated
