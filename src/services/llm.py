"""Language model and embedding clients.

Each capability has a configured variant backed by the OpenAI API and a no-op
variant used when no API key is set. Callers check ``is_available()`` and fall
back on their own; the no-op variants never raise on that check.
"""

import logging

from openai import AsyncOpenAI

from src.config import Settings, get_settings

logger = logging.getLogger(__name__)


class LLMUnavailableError(RuntimeError):
    """Raised when a no-op client is asked to do real work."""


class LLMService:
    """Chat completion interface."""

    def is_available(self) -> bool:
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release network resources; no-op by default."""

    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.3,
        max_tokens: int = 256,
    ) -> str:
        """Generate a response from the LLM."""
        raise NotImplementedError


class OpenAIChatService(LLMService):
    """Chat completions through the OpenAI API."""

    def __init__(self, client: AsyncOpenAI, model: str) -> None:
        self.client = client
        self.model = model

    def is_available(self) -> bool:
        return True

    async def aclose(self) -> None:
        await self.client.close()

    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.3,
        max_tokens: int = 256,
    ) -> str:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        response = await self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        if not response.choices:
            return ""
        return (response.choices[0].message.content or "").strip()


class NullLLMService(LLMService):
    """Stand-in used when no model is configured."""

    def is_available(self) -> bool:
        return False

    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.3,
        max_tokens: int = 256,
    ) -> str:
        raise LLMUnavailableError("No language model configured")


class EmbeddingService:
    """Text embedding interface."""

    def is_available(self) -> bool:
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release network resources; no-op by default."""

    async def embed(self, texts: list[str]) -> list[list[float]]:
        raise NotImplementedError

    async def embed_query(self, text: str) -> list[float]:
        vectors = await self.embed([text])
        return vectors[0]


class OpenAIEmbeddingService(EmbeddingService):
    """Embeddings through the OpenAI API."""

    def __init__(self, client: AsyncOpenAI, model: str) -> None:
        self.client = client
        self.model = model

    def is_available(self) -> bool:
        return True

    async def aclose(self) -> None:
        await self.client.close()

    async def embed(self, texts: list[str]) -> list[list[float]]:
        response = await self.client.embeddings.create(model=self.model, input=texts)
        return [item.embedding for item in response.data]


class NullEmbeddingService(EmbeddingService):
    """Stand-in used when no embedding model is configured."""

    def is_available(self) -> bool:
        return False

    async def embed(self, texts: list[str]) -> list[list[float]]:
        raise LLMUnavailableError("No embedding model configured")


def _openai_client(settings: Settings) -> AsyncOpenAI:
    return AsyncOpenAI(api_key=settings.openai_api_key, timeout=settings.openai_timeout)


def build_llm_service(settings: Settings | None = None) -> LLMService:
    """Pick the chat client for the current configuration."""
    settings = settings or get_settings()
    if not settings.openai_api_key:
        logger.debug("OPENAI_API_KEY not set - AI generation disabled")
        return NullLLMService()
    return OpenAIChatService(_openai_client(settings), settings.openai_model)


def build_embedding_service(settings: Settings | None = None) -> EmbeddingService:
    """Pick the embedding client for the current configuration."""
    settings = settings or get_settings()
    if not settings.openai_api_key:
        return NullEmbeddingService()
    return OpenAIEmbeddingService(_openai_client(settings), settings.openai_embedding_model)
