"""Chain turning a follow-up question into a standalone one."""
from __future__ import annotations

import logging
from typing import Sequence

from ayurbot.infra.gemini_client import GeminiClient
from ayurbot.retrieval.chains import StageRunner, run_direct
from ayurbot.retrieval.prompts.ayurbot import (
    NO_QUESTION_PLACEHOLDER,
    REWRITE_INSTRUCTION,
    build_rewrite_contents,
)

logger = logging.getLogger(__name__)


async def rewrite_question(
    question: str,
    previous_user_messages: Sequence[str],
    *,
    gemini_client: GeminiClient,
    model: str | None = None,
    run: StageRunner = run_direct,
) -> str:
    contents = build_rewrite_contents(question, previous_user_messages)
    rewritten = await run(
        "rewrite",
        lambda: gemini_client.generate(
            contents,
            system_instruction=REWRITE_INSTRUCTION,
            model=model,
        ),
    )
    rewritten = (rewritten or "").strip()
    standalone = rewritten or question or NO_QUESTION_PLACEHOLDER
    logger.info("Standalone question: %s", standalone)
    return standalone
