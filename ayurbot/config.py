"""Runtime configuration for the AyurBot FastAPI service."""
from functools import lru_cache
from typing import Optional

from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    app_env: str = "development"
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    gemini_api_key: Optional[str] = None
    gemini_base_url: AnyHttpUrl = "https://generativelanguage.googleapis.com/v1beta"
    chat_model: str = "gemini-2.5-flash"
    rewrite_model: str = "gemini-2.5-flash"
    embedding_model: str = "text-embedding-004"
    embedding_dimensions: int = 768

    pinecone_api_key: Optional[str] = None
    pinecone_index_name: Optional[str] = None
    pinecone_index_host: Optional[str] = None
    pinecone_control_url: AnyHttpUrl = "https://api.pinecone.io"

    retrieval_top_k: int = 10
    answer_temperature: float = 0.7

    retry_max_attempts: int = 3
    retry_initial_delay_seconds: float = 1.0
    retry_backoff_multiplier: float = 2.0
    stage_timeout_seconds: Optional[float] = 60.0

    session_url: Optional[AnyHttpUrl] = None

    langfuse_host: Optional[str] = None
    langfuse_public_key: Optional[str] = None
    langfuse_secret_key: Optional[str] = None
    langfuse_chat_dataset: Optional[str] = "chat_runs"
    telemetry_timeout_seconds: float = 2.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="AYURBOT_",
        env_ignore_empty=True,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings accessor used across the codebase."""

    return Settings()  # type: ignore[arg-type]


settings = get_settings()
