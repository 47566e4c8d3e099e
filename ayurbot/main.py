"""Entry point for the AyurBot FastAPI application."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import settings
from .core import providers
from .retrieval.api import router as chat_router
from .retrieval.errors import ChatFailure, classify_error

logger = logging.getLogger(__name__)

app = FastAPI(
    title="AyurBot API",
    version="0.1.0",
    summary="Retrieval-augmented Ayurveda chat over Gemini + Pinecone",
)


@app.exception_handler(ChatFailure)
async def chat_failure_handler(request: Request, exc: ChatFailure) -> JSONResponse:
    classified = exc.classified
    return JSONResponse(status_code=classified.status_code, content=classified.body)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Rejected malformed request body: %s", exc)
    classified = classify_error(exc)
    return JSONResponse(status_code=classified.status_code, content=classified.body)


async def _probe(check: Callable[[], Awaitable[Any]]) -> Dict[str, Any]:
    """Probe a downstream dependency and normalize the response."""

    try:
        details = await check()
        return {"status": "healthy", "details": details}
    except Exception as exc:
        return {"status": "unhealthy", "error": str(exc)}


async def _gemini_check() -> Dict[str, Any]:
    model = await providers.get_gemini_client().get_model()
    return {"model": model.get("name")}


async def _pinecone_check() -> Dict[str, Any]:
    stats = await providers.get_pinecone_client().describe_index_stats()
    return {"dimension": stats.get("dimension"), "vectors": stats.get("totalVectorCount")}


async def _langfuse_check() -> Dict[str, Any]:
    if not settings.langfuse_host:
        return {"message": "not configured"}
    url = f"{settings.langfuse_host.rstrip('/')}/api/public/health"
    async with httpx.AsyncClient(timeout=httpx.Timeout(3.0)) as client:
        response = await client.get(url)
        response.raise_for_status()
        try:
            return response.json()
        except ValueError:
            return {"message": response.text}


@app.get("/", tags=["meta"])
def index() -> Dict[str, Any]:
    """Basic service descriptor."""

    return {
        "service": "ayurbot-api",
        "environment": settings.app_env,
        "docs": "/docs",
        "health": "/healthz",
        "chat": "/api/chat",
    }


@app.get("/healthz", tags=["meta"])
async def healthz() -> Dict[str, Any]:
    """Aggregate health check for primary dependencies."""

    probes = await asyncio.gather(
        _probe(_gemini_check),
        _probe(_pinecone_check),
        _probe(_langfuse_check),
    )

    return {
        "status": "ok",
        "environment": settings.app_env,
        "dependencies": {
            "gemini": probes[0],
            "pinecone": probes[1],
            "langfuse": probes[2],
        },
    }


app.include_router(chat_router, prefix="/api")
