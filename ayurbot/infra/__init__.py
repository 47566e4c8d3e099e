"""Outbound HTTP clients for Gemini, Pinecone and the session endpoint."""
from ayurbot.infra.embedding_client import EmbeddingClient  # noqa: F401
from ayurbot.infra.errors import UpstreamServiceError  # noqa: F401
from ayurbot.infra.gemini_client import GeminiClient  # noqa: F401
from ayurbot.infra.pinecone_client import PineconeClient  # noqa: F401
from ayurbot.infra.session_client import SessionClient, SessionInfo  # noqa: F401
