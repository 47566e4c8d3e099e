"""Chat endpoint: standalone rewrite, Pinecone retrieval, grounded answer."""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, Field

from ayurbot.config import settings
from ayurbot.core.providers import (
    get_embedding_client,
    get_gemini_client,
    get_pinecone_client,
    get_session_client,
)
from ayurbot.core.telemetry import chat_telemetry
from ayurbot.infra.session_client import SessionClient
from ayurbot.retrieval.errors import ChatFailure, classify_error
from ayurbot.retrieval.models import ChatResult
from ayurbot.retrieval.services.chat_service import ChatService, PipelineConfig

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])


class ChatRequest(BaseModel):
    question: Optional[str] = Field(None, description="Latest user question, possibly a follow-up")
    history: Optional[List[Any]] = Field(
        None, description="Prior turns as {role, parts: [{text}]}; malformed entries are ignored"
    )


class ChatResponse(BaseModel):
    answer: str


@lru_cache(maxsize=1)
def _build_chat_service() -> ChatService:
    return ChatService(
        gemini_client=get_gemini_client(),
        embedding_client=get_embedding_client(),
        pinecone_client=get_pinecone_client(),
        config=PipelineConfig.from_settings(settings),
    )


def get_chat_service() -> ChatService:
    """Lazy singleton used as a FastAPI dependency."""
    try:
        return _build_chat_service()
    except Exception as exc:
        logger.exception("Chat service could not be initialised")
        raise ChatFailure(classify_error(exc)) from exc


async def _log_session(request: Request, session_client: SessionClient) -> None:
    session = await session_client.get_session(request.headers.get("cookie"))
    if session:
        logger.info("Session: logged in as %s (%s)", session.email, session.role)
    else:
        logger.info("Session: anonymous user")


@router.post("/chat", response_model=ChatResponse, status_code=status.HTTP_200_OK)
async def chat(
    payload: ChatRequest,
    request: Request,
    service: ChatService = Depends(get_chat_service),
    session_client: SessionClient = Depends(get_session_client),
) -> ChatResponse:
    await _log_session(request, session_client)
    question = payload.question or ""

    try:
        result: ChatResult = await service.answer(question, payload.history)
    except Exception as exc:
        logger.exception("Chat pipeline failed")
        raise ChatFailure(classify_error(exc)) from exc

    await chat_telemetry.record_chat(
        trace_id=None,
        question_chars=len(question),
        history_turns=len(result.history),
        snippets=len(result.snippets),
        rewritten=result.standalone_question != question,
    )

    return ChatResponse(answer=result.answer)
