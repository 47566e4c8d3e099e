"""Async client for Gemini text embeddings."""
from __future__ import annotations

from typing import List

import httpx

from ayurbot.infra.errors import raise_for_service


class EmbeddingClient:
    """HTTP client for the Gemini embedContent endpoint."""

    def __init__(
        self,
        api_key: str,
        *,
        model: str = "text-embedding-004",
        dimensions: int = 768,
        timeout: float = 60.0,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
    ) -> None:
        if not api_key:
            raise ValueError("Gemini API key is required for embeddings")
        self.api_key = api_key
        self.model = model
        self.dimensions = dimensions
        self.timeout = timeout
        self.base_url = str(base_url).rstrip("/")

    @property
    def headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json", "x-goog-api-key": self.api_key}

    async def embed_query(self, text: str) -> List[float]:
        """Embed a single query string."""

        payload = {"model": f"models/{self.model}", "content": {"parts": [{"text": text}]}}
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                f"{self.base_url}/models/{self.model}:embedContent",
                json=payload,
                headers=self.headers,
            )
            raise_for_service("embeddings", response)
            data = response.json()

        values = (data.get("embedding") or {}).get("values")
        if not isinstance(values, list) or not values:
            raise RuntimeError("embedding service returned malformed payload")
        if self.dimensions and len(values) != self.dimensions:
            raise RuntimeError(
                f"embedding service returned {len(values)} dimensions, expected {self.dimensions}"
            )
        return [float(v) for v in values]
