"""Retrieval helpers: embed the question, query Pinecone, assemble context."""
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Sequence, Tuple

from ayurbot.infra.embedding_client import EmbeddingClient
from ayurbot.infra.pinecone_client import PineconeClient
from ayurbot.retrieval.chains import StageRunner, run_direct
from ayurbot.retrieval.models import RetrievedSnippet

logger = logging.getLogger(__name__)

CONTEXT_SEPARATOR = "\n\n---\n\n"


def _metadata_text(match: Mapping[str, Any]) -> str:
    metadata = match.get("metadata")
    if not isinstance(metadata, Mapping):
        return ""
    value = metadata.get("text")
    return "" if value is None else str(value)


def snippets_from_matches(matches: Iterable[Mapping[str, Any]]) -> List[RetrievedSnippet]:
    """Keep matches with non-blank text, preserving rank order."""

    out: List[RetrievedSnippet] = []
    for match in matches:
        if not isinstance(match, Mapping):
            continue
        text = _metadata_text(match)
        if not text.strip():
            continue
        score = float(match.get("score") or 0.0)
        out.append(RetrievedSnippet(text=text, score=score))
    return out


def build_context(snippets: Iterable[RetrievedSnippet], separator: str = CONTEXT_SEPARATOR) -> str:
    return separator.join(snip.text for snip in snippets)


async def retrieve_context(
    question: str,
    *,
    embedding_client: EmbeddingClient,
    pinecone_client: PineconeClient,
    top_k: int = 10,
    run: StageRunner = run_direct,
) -> Tuple[str, List[RetrievedSnippet]]:
    vector: Sequence[float] = await run("embed", lambda: embedding_client.embed_query(question))
    matches = await run(
        "vector-query",
        lambda: pinecone_client.query(vector, top_k=top_k, include_metadata=True),
    )
    snippets = snippets_from_matches(matches)
    logger.info("Retrieved %s context snippets (%s matches)", len(snippets), len(matches))
    return build_context(snippets), snippets
