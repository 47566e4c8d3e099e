"""Routers for the chat endpoint."""
from __future__ import annotations

from fastapi import APIRouter

from .chat import router as chat_router

router = APIRouter()
router.include_router(chat_router)

__all__ = ["router"]
