"""Service layer for the AyurBot chat pipeline."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Optional, TypeVar

from ayurbot.config import Settings
from ayurbot.infra.embedding_client import EmbeddingClient
from ayurbot.infra.gemini_client import GeminiClient
from ayurbot.infra.pinecone_client import PineconeClient
from ayurbot.retrieval.chains.answer import generate_answer
from ayurbot.retrieval.chains.query_rewrite import rewrite_question
from ayurbot.retrieval.errors import is_transient
from ayurbot.retrieval.history import normalize_history, user_texts, with_standalone_question
from ayurbot.retrieval.models import ChatResult
from ayurbot.retrieval.utils.retrievers import retrieve_context
from ayurbot.retrieval.utils.retry import retry_async, with_timeout

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    top_k: int = 10
    temperature: float = 0.7
    chat_model: Optional[str] = None
    rewrite_model: Optional[str] = None
    max_attempts: int = 3
    initial_delay: float = 1.0
    backoff_multiplier: float = 2.0
    stage_timeout: Optional[float] = 60.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "PipelineConfig":
        return cls(
            top_k=settings.retrieval_top_k,
            temperature=settings.answer_temperature,
            chat_model=settings.chat_model,
            rewrite_model=settings.rewrite_model,
            max_attempts=settings.retry_max_attempts,
            initial_delay=settings.retry_initial_delay_seconds,
            backoff_multiplier=settings.retry_backoff_multiplier,
            stage_timeout=settings.stage_timeout_seconds,
        )


class ChatService:
    """Rewrite -> retrieve -> generate, one independent run per request."""

    def __init__(
        self,
        *,
        gemini_client: GeminiClient,
        embedding_client: EmbeddingClient,
        pinecone_client: PineconeClient,
        config: PipelineConfig | None = None,
        retry_on: Callable[[Exception], bool] = is_transient,
    ) -> None:
        self.gemini_client = gemini_client
        self.embedding_client = embedding_client
        self.pinecone_client = pinecone_client
        self.config = config or PipelineConfig()
        self.retry_on = retry_on

    async def _run_stage(self, stage: str, func: Callable[[], Awaitable[T]]) -> T:
        return await retry_async(
            lambda: with_timeout(func(), timeout=self.config.stage_timeout, stage=stage),
            max_attempts=self.config.max_attempts,
            initial_delay=self.config.initial_delay,
            multiplier=self.config.backoff_multiplier,
            retry_on=self.retry_on,
            logger=logger,
            operation=stage,
        )

    async def answer(self, question: str, raw_history: Iterable[Any] | None) -> ChatResult:
        history = normalize_history(raw_history)
        logger.info("Chat request: question=%r history=%s turns", question, len(history))

        standalone = await rewrite_question(
            question,
            user_texts(history),
            gemini_client=self.gemini_client,
            model=self.config.rewrite_model,
            run=self._run_stage,
        )
        history = with_standalone_question(history, standalone)

        context, snippets = await retrieve_context(
            standalone,
            embedding_client=self.embedding_client,
            pinecone_client=self.pinecone_client,
            top_k=self.config.top_k,
            run=self._run_stage,
        )

        answer = await generate_answer(
            history,
            context,
            gemini_client=self.gemini_client,
            temperature=self.config.temperature,
            model=self.config.chat_model,
            run=self._run_stage,
        )
        logger.info("Answer: %s...", answer[:120])

        return ChatResult(
            answer=answer,
            standalone_question=standalone,
            history=history,
            snippets=snippets,
        )
