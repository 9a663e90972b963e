"""Shared configuration loaded from environment / ``.env`` file."""

from __future__ import annotations

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class Settings(BaseSettings):
    """Application-wide settings, populated from ``DESK_ASSIST_*`` env vars or .env file."""

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Language model (any OpenAI-compatible endpoint; Ollama by default)
    llm_base_url: str = Field(
        default="http://localhost:11434/v1",
        description="Base URL of the OpenAI-compatible API serving both chat and embedding models.",
    )
    llm_api_key: str = Field(default="ollama", description="API key (Ollama ignores it, but it must be non-empty)")
    llm_model_name: str = Field(default="llama3.2", description="Model used to summarise documents")
    embedding_model: str = "nomic-embed-text"
    embedding_dim: int = Field(default=768, description="Vector length produced by ``embedding_model``")

    # Vector store
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    chroma_collection: str = "documents"
    distance_metric: str = "cosine"

    # Chunking
    chunk_size: int = 1000
    chunk_overlap: int = 200

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="DESK_ASSIST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def configure_logging(level: str | int = "INFO") -> None:
    """Initialise root logging once for the whole process.

    Later calls are no-ops because :func:`logging.basicConfig` does nothing
    when the root logger already has handlers.
    """
    logging.basicConfig(level=level, format=LOG_FORMAT)


# Singleton — import `settings` wherever needed.
settings = Settings()
