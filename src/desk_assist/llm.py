"""LLM initialisation — single place to swap providers.

Both the chat model (document summaries) and the embedding model talk to an
OpenAI-compatible API. By default that is a local Ollama server, which
exposes ``/v1/chat/completions`` and ``/v1/embeddings``, so ``ChatOpenAI``
and ``OpenAIEmbeddings`` work unchanged. Point ``DESK_ASSIST_LLM_BASE_URL``
at OpenAI, vLLM, or any other compatible server to switch providers.
"""

from __future__ import annotations

import logging

from langchain_openai import ChatOpenAI, OpenAIEmbeddings

from desk_assist.config import Settings, settings
from desk_assist.prompts import build_summary_prompt

logger = logging.getLogger(__name__)


def get_llm(config: Settings = settings, temperature: float = 0.0) -> ChatOpenAI:
    """Return the configured chat model."""
    logger.info("Using chat model %s at %s", config.llm_model_name, config.llm_base_url)
    return ChatOpenAI(
        model=config.llm_model_name,
        temperature=temperature,
        base_url=config.llm_base_url or None,
        # Local servers don't need a real key; LangChain requires a non-empty value.
        api_key=config.llm_api_key or "EMPTY",
    )


def get_embeddings(config: Settings = settings) -> OpenAIEmbeddings:
    """Return the configured embedding model."""
    return OpenAIEmbeddings(
        model=config.embedding_model,
        base_url=config.llm_base_url or None,
        api_key=config.llm_api_key or "EMPTY",
        # Send raw strings; non-OpenAI servers reject pre-tokenised input.
        check_embedding_ctx_length=False,
    )


class LanguageModelClient:
    """Language-model capability used by the ingestion pipeline.

    Parameters
    ----------
    chat_model:
        LangChain chat model used for summaries.
    embeddings:
        LangChain embeddings model used for chunk and query vectors.
    """

    def __init__(self, chat_model: ChatOpenAI, embeddings: OpenAIEmbeddings) -> None:
        self._chat_model = chat_model
        self._embeddings = embeddings

    @classmethod
    def from_settings(cls, config: Settings = settings) -> LanguageModelClient:
        return cls(get_llm(config), get_embeddings(config))

    async def summarize(self, text: str) -> str:
        """Summarise the full document *text*."""
        response = await self._chat_model.ainvoke(build_summary_prompt(text))
        return str(response.content)

    async def embed(self, text: str) -> list[float]:
        """Return the embedding vector of *text*."""
        return await self._embeddings.aembed_query(text)
