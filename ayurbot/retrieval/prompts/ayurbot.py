"""Prompts for the AyurBot persona."""
from __future__ import annotations

from typing import Iterable, Mapping

NO_QUESTION_PLACEHOLDER = "No question generated."
NO_CONTEXT_PLACEHOLDER = "No relevant context found."
OUT_OF_CONTEXT_REPLY = (
    "I could not find the answer in the provided document. "
    "Would you like general Ayurvedic guidance instead?"
)
FALLBACK_ANSWER = "I'm here to guide you on Ayurveda, yoga, and holistic well-being."

REWRITE_INSTRUCTION = "\n".join(
    [
        "You are a helpful Ayurveda query rewriter.",
        "Rephrase the follow-up into a standalone question. Output only the rewritten question, no explanations.",
        "If it's a greeting (hi, hello, how can you help me), keep its meaning the same.",
    ]
)

PERSONA_TEMPLATE = "\n".join(
    [
        "You are AyurBot, a compassionate Ayurveda and yoga expert.",
        "You specialize in holistic healing, diet, lifestyle, herbs, meditation, and wellness.",
        "Use ONLY the provided context to answer.",
        f'If context lacks the answer, reply: "{OUT_OF_CONTEXT_REPLY}"',
        "Keep your tone warm, natural, and caring.",
        "Explain simply and safely without prescribing medicines.",
        "Context: {context}",
    ]
)


def build_rewrite_contents(question: str, previous_user_messages: Iterable[str]) -> list[Mapping[str, object]]:
    previous = "\n".join(previous_user_messages)
    text = f"Previous user messages:\n{previous}\nFollow-up question: {question}"
    return [{"role": "user", "parts": [{"text": text}]}]


def build_system_instruction(context: str, template: str = PERSONA_TEMPLATE) -> str:
    # str.replace keeps braces inside retrieved text intact
    return template.replace("{context}", context or NO_CONTEXT_PLACEHOLDER)
