"""Best-effort LangFuse telemetry for chat runs."""
from __future__ import annotations

import time
from typing import Any, Dict, Optional

import httpx

from ayurbot.config import settings


class ChatTelemetry:
    """Publishes chat pipeline metrics to LangFuse when configured."""

    def __init__(self) -> None:
        self.host = str(settings.langfuse_host).rstrip("/") if settings.langfuse_host else None
        self.public_key = settings.langfuse_public_key
        self.secret_key = settings.langfuse_secret_key
        self.dataset = settings.langfuse_chat_dataset
        self.enabled = bool(self.host and self.public_key and self.secret_key and self.dataset)
        self._endpoint = f"{self.host}/api/public/ingestion/events" if self.host else None

    async def record_chat(
        self,
        *,
        trace_id: Optional[str],
        question_chars: int,
        history_turns: int,
        snippets: int,
        rewritten: bool,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        if not self.enabled or not self._endpoint:
            return

        payload: Dict[str, Any] = {
            "traceId": trace_id,
            "name": "rag_chat",
            "timestamp": int(time.time() * 1000),
            "dataset": self.dataset,
            "metadata": {
                "question_chars": question_chars,
                "history_turns": history_turns,
                "snippets": snippets,
                "rewritten": rewritten,
                **(metadata or {}),
            },
        }

        headers = {
            "Content-Type": "application/json",
            "X-Langfuse-Public-Key": self.public_key,
            "X-Langfuse-Secret-Key": self.secret_key,
        }

        try:
            async with httpx.AsyncClient(timeout=settings.telemetry_timeout_seconds) as client:
                await client.post(self._endpoint, json=payload, headers=headers)
        except Exception:
            # Telemetry must never break a chat request.
            return


chat_telemetry = ChatTelemetry()
