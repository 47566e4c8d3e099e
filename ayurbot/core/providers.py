"""Centralized dependency providers for the outbound clients.

Each handle is built once per process and shared read-only across requests.
"""
from __future__ import annotations

from functools import lru_cache

from ayurbot.config import settings
from ayurbot.infra.embedding_client import EmbeddingClient
from ayurbot.infra.gemini_client import GeminiClient
from ayurbot.infra.pinecone_client import PineconeClient
from ayurbot.infra.session_client import SessionClient


def _require_gemini_key() -> str:
    if not settings.gemini_api_key:
        raise RuntimeError("Gemini API key missing: set AYURBOT_GEMINI_API_KEY")
    return settings.gemini_api_key


@lru_cache(maxsize=1)
def get_gemini_client() -> GeminiClient:
    return GeminiClient(
        _require_gemini_key(),
        model=settings.chat_model,
        base_url=str(settings.gemini_base_url),
    )


@lru_cache(maxsize=1)
def get_embedding_client() -> EmbeddingClient:
    return EmbeddingClient(
        _require_gemini_key(),
        model=settings.embedding_model,
        dimensions=settings.embedding_dimensions,
        base_url=str(settings.gemini_base_url),
    )


@lru_cache(maxsize=1)
def get_pinecone_client() -> PineconeClient:
    if not settings.pinecone_api_key:
        raise RuntimeError("Pinecone API key missing: set AYURBOT_PINECONE_API_KEY")
    if not settings.pinecone_index_name and not settings.pinecone_index_host:
        raise RuntimeError("AYURBOT_PINECONE_INDEX_NAME or AYURBOT_PINECONE_INDEX_HOST is required")
    return PineconeClient(
        settings.pinecone_api_key,
        index_name=settings.pinecone_index_name,
        index_host=settings.pinecone_index_host,
        control_url=str(settings.pinecone_control_url),
    )


@lru_cache(maxsize=1)
def get_session_client() -> SessionClient:
    return SessionClient(settings.session_url)
