"""Resume retrieval via Pinecone vector similarity search."""

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from src.config import Settings, get_settings
from src.services.llm import EmbeddingService, build_embedding_service

logger = logging.getLogger(__name__)


@dataclass
class CandidateProfile:
    """A resume returned by the similarity search."""

    email: str | None
    resume: str
    name: str | None = None
    score: float | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class CandidateRetriever:
    """Similarity search interface over the resume corpus."""

    def is_available(self) -> bool:
        raise NotImplementedError

    async def search(self, query: str, k: int = 5) -> list[CandidateProfile]:
        raise NotImplementedError


class NullRetriever(CandidateRetriever):
    """Stand-in used when no resume index is configured."""

    def is_available(self) -> bool:
        return False

    async def search(self, query: str, k: int = 5) -> list[CandidateProfile]:
        return []


class PineconeRetriever(CandidateRetriever):
    """Queries a Pinecone index through its REST data plane.

    Resume text lives in the ``text`` metadata field next to ``name`` and
    ``email``; vectors come from the configured embedding service.
    """

    CONTROL_PLANE_URL = "https://api.pinecone.io"
    API_VERSION = "2024-07"

    def __init__(
        self,
        api_key: str,
        embeddings: EmbeddingService,
        index_name: str | None = None,
        index_host: str | None = None,
        namespace: str = "",
        timeout: float = 30.0,
    ) -> None:
        self.api_key = api_key
        self.embeddings = embeddings
        self.index_name = index_name
        self.index_host = self._normalize_host(index_host) if index_host else None
        self.namespace = namespace
        self.timeout = timeout

    @staticmethod
    def _normalize_host(host: str) -> str:
        host = host.rstrip("/")
        if not host.startswith(("http://", "https://")):
            host = f"https://{host}"
        return host

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Api-Key": self.api_key,
            "X-Pinecone-API-Version": self.API_VERSION,
        }

    def is_available(self) -> bool:
        return (
            bool(self.api_key)
            and bool(self.index_host or self.index_name)
            and self.embeddings.is_available()
        )

    async def _resolve_host(self, client: httpx.AsyncClient) -> str:
        """Look up the index host from its name once, then reuse it."""
        if self.index_host:
            return self.index_host

        response = await client.get(
            f"{self.CONTROL_PLANE_URL}/indexes/{self.index_name}", headers=self.headers
        )
        response.raise_for_status()
        self.index_host = self._normalize_host(response.json()["host"])
        return self.index_host

    @staticmethod
    def parse_matches(data: dict[str, Any]) -> list[CandidateProfile]:
        """Turn a Pinecone query response into candidate profiles."""
        candidates = []
        for match in data.get("matches", []):
            metadata = dict(match.get("metadata") or {})
            text = metadata.pop("text", "")
            candidates.append(
                CandidateProfile(
                    email=metadata.get("email"),
                    name=metadata.get("name"),
                    resume=text,
                    score=match.get("score"),
                    metadata=metadata,
                )
            )
        return candidates

    async def search(self, query: str, k: int = 5) -> list[CandidateProfile]:
        vector = await self.embeddings.embed_query(query)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            host = await self._resolve_host(client)
            response = await client.post(
                f"{host}/query",
                headers=self.headers,
                json={
                    "vector": vector,
                    "topK": k,
                    "includeMetadata": True,
                    "namespace": self.namespace,
                },
            )
            response.raise_for_status()
            data = response.json()

        candidates = self.parse_matches(data)
        logger.info(f"Resume search returned {len(candidates)} candidates (k={k})")
        return candidates

    async def upsert(self, records: list[dict[str, Any]]) -> int:
        """Embed and store resumes.

        Args:
            records: Dicts with ``id``, ``text`` and ``metadata`` (name, email, ...)

        Returns:
            Number of vectors Pinecone reports as upserted
        """
        if not records:
            return 0

        vectors = await self.embeddings.embed([record["text"] for record in records])
        payload = [
            {
                "id": record["id"],
                "values": values,
                "metadata": {**record.get("metadata", {}), "text": record["text"]},
            }
            for record, values in zip(records, vectors, strict=True)
        ]

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            host = await self._resolve_host(client)
            response = await client.post(
                f"{host}/vectors/upsert",
                headers=self.headers,
                json={"vectors": payload, "namespace": self.namespace},
            )
            response.raise_for_status()
            return response.json().get("upsertedCount", len(payload))


def build_retriever(
    settings: Settings | None = None,
    embeddings: EmbeddingService | None = None,
) -> CandidateRetriever:
    """Pick the retriever for the current configuration."""
    settings = settings or get_settings()
    if not settings.pinecone_api_key:
        logger.debug("PINECONE_API_KEY not set - resume search disabled")
        return NullRetriever()

    return PineconeRetriever(
        api_key=settings.pinecone_api_key,
        embeddings=embeddings or build_embedding_service(settings),
        index_name=settings.pinecone_index_name,
        index_host=settings.pinecone_index_host,
        namespace=settings.pinecone_namespace,
        timeout=settings.pinecone_timeout,
    )
