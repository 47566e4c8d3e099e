"""Minimal Gemini generateContent client for server-side calls."""
from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional

import httpx

from ayurbot.infra.errors import raise_for_service


class GeminiClient:
    """Thin wrapper around the Gemini REST API."""

    def __init__(
        self,
        api_key: str,
        *,
        model: str = "gemini-2.5-flash",
        timeout: float = 120.0,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
    ) -> None:
        if not api_key:
            raise ValueError("Gemini API key is required")
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.base_url = str(base_url).rstrip("/")

    @property
    def headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json", "x-goog-api-key": self.api_key}

    async def generate(
        self,
        contents: Iterable[Mapping[str, Any]],
        *,
        system_instruction: str | None = None,
        temperature: float | None = None,
        model: str | None = None,
    ) -> Optional[str]:
        """Call generateContent and return the first candidate's text, if any."""

        payload: dict[str, object] = {"contents": list(contents)}
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        if temperature is not None:
            payload["generationConfig"] = {"temperature": temperature}

        resolved_model = model or self.model
        timeout_obj = httpx.Timeout(self.timeout, connect=10.0)
        async with httpx.AsyncClient(timeout=timeout_obj) as client:
            response = await client.post(
                f"{self.base_url}/models/{resolved_model}:generateContent",
                json=payload,
                headers=self.headers,
            )
            raise_for_service("gemini", response)
            data = response.json()

        candidates: Optional[List[Mapping[str, Any]]] = data.get("candidates")
        if not candidates:
            return None
        content = candidates[0].get("content") or {}
        parts = content.get("parts") if isinstance(content, Mapping) else None
        if not isinstance(parts, list):
            return None
        texts = [
            part["text"]
            for part in parts
            if isinstance(part, Mapping) and isinstance(part.get("text"), str) and not part.get("thought")
        ]
        text = "".join(texts)
        return text or None

    async def get_model(self, model: str | None = None) -> Mapping[str, Any]:
        """Fetch model metadata (used by the health probe)."""

        resolved_model = model or self.model
        timeout_obj = httpx.Timeout(self.timeout, connect=10.0)
        async with httpx.AsyncClient(timeout=timeout_obj) as client:
            response = await client.get(
                f"{self.base_url}/models/{resolved_model}", headers=self.headers
            )
            raise_for_service("gemini", response)
            return response.json()
