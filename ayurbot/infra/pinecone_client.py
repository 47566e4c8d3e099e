"""Thin async wrapper for Pinecone's data-plane HTTP API."""
from __future__ import annotations

from typing import Any, List, Mapping, Sequence

import httpx

from ayurbot.infra.errors import raise_for_service

API_VERSION = "2024-07"


class PineconeClient:
    """Minimal client for the subset of Pinecone endpoints we need."""

    def __init__(
        self,
        api_key: str,
        *,
        index_name: str | None = None,
        index_host: str | None = None,
        control_url: str = "https://api.pinecone.io",
        timeout: float = 30.0,
    ) -> None:
        if not api_key:
            raise ValueError("Pinecone API key is required")
        if not index_name and not index_host:
            raise ValueError("either a Pinecone index name or host is required")
        self.index_name = index_name
        self.control_url = str(control_url).rstrip("/")
        self.timeout = timeout
        self.headers = {
            "Api-Key": api_key,
            "Content-Type": "application/json",
            "X-Pinecone-API-Version": API_VERSION,
        }
        self._host = self._normalize_host(index_host) if index_host else None

    @staticmethod
    def _normalize_host(host: str) -> str:
        host = host.rstrip("/")
        if not host.startswith(("http://", "https://")):
            host = f"https://{host}"
        return host

    async def resolve_host(self) -> str:
        """Return the index data-plane host, describing the index once if needed."""

        if self._host:
            return self._host

        async with httpx.AsyncClient(timeout=self.timeout, headers=self.headers) as client:
            response = await client.get(f"{self.control_url}/indexes/{self.index_name}")
            raise_for_service("pinecone", response)
            data = response.json()

        host = data.get("host")
        if not isinstance(host, str) or not host:
            raise RuntimeError(f"Pinecone index '{self.index_name}' has no host")
        self._host = self._normalize_host(host)
        return self._host

    async def query(
        self,
        vector: Sequence[float],
        *,
        top_k: int = 10,
        include_metadata: bool = True,
    ) -> List[Mapping[str, Any]]:
        """Nearest-neighbour search returning the ranked ``matches`` list."""

        if not vector:
            return []

        payload: dict[str, object] = {
            "vector": list(vector),
            "topK": top_k,
            "includeMetadata": include_metadata,
            "includeValues": False,
        }

        host = await self.resolve_host()
        async with httpx.AsyncClient(timeout=self.timeout, headers=self.headers) as client:
            response = await client.post(f"{host}/query", json=payload)
            raise_for_service("pinecone", response)
            data = response.json()
            return data.get("matches", []) or []

    async def describe_index_stats(self) -> Mapping[str, Any]:
        """Index statistics (dimension, vector counts); used by the health probe."""

        host = await self.resolve_host()
        async with httpx.AsyncClient(timeout=self.timeout, headers=self.headers) as client:
            response = await client.post(f"{host}/describe_index_stats", json={})
            raise_for_service("pinecone", response)
            return response.json()
