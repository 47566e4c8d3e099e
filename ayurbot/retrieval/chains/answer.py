"""Chain producing the grounded AyurBot answer."""
from __future__ import annotations

import logging
from typing import Sequence

from ayurbot.infra.gemini_client import GeminiClient
from ayurbot.retrieval.chains import StageRunner, run_direct
from ayurbot.retrieval.models import ConversationTurn
from ayurbot.retrieval.prompts.ayurbot import FALLBACK_ANSWER, build_system_instruction

logger = logging.getLogger(__name__)


async def generate_answer(
    history: Sequence[ConversationTurn],
    context: str,
    *,
    gemini_client: GeminiClient,
    temperature: float = 0.7,
    model: str | None = None,
    run: StageRunner = run_direct,
) -> str:
    contents = [turn.to_content() for turn in history]
    system_instruction = build_system_instruction(context)
    text = await run(
        "generate",
        lambda: gemini_client.generate(
            contents,
            system_instruction=system_instruction,
            temperature=temperature,
            model=model,
        ),
    )
    if not text or not text.strip():
        logger.info("Generation returned no text; using fallback answer")
        return FALLBACK_ANSWER
    return text
