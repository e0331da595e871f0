"""Assignee suggestions: resume search followed by LLM re-ranking.

Suggestions are best-effort. Missing services, network errors and unusable
model output all produce an empty ``fallback`` suggestion instead of an error.
"""

import json
import logging
import re
import time
from dataclasses import dataclass, field

from src.services.llm import LLMService
from src.services.llm_prompts import RANKING_SYSTEM_PROMPT, get_ranking_prompt
from src.services.retrieval import CandidateRetriever

logger = logging.getLogger(__name__)

SOURCE_PIPELINE = "pinecone+llm"
SOURCE_FALLBACK = "fallback"

MAX_SUGGESTIONS = 3

_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


@dataclass
class AssigneeSuggestion:
    """Suggested assignee emails and where they came from."""

    emails: list[str] = field(default_factory=list)
    source: str = SOURCE_FALLBACK

    @classmethod
    def fallback(cls) -> "AssigneeSuggestion":
        return cls(emails=[], source=SOURCE_FALLBACK)


def parse_candidate_emails(raw: str) -> list[str]:
    """Extract emails from the model's JSON array of ``{"email": ...}`` objects.

    Markdown code fences are stripped first. Elements that are not objects
    with a non-empty string ``email`` are dropped.

    Raises:
        ValueError: if the text is not JSON or not a JSON array
    """
    cleaned = _CODE_FENCE.sub("", raw or "").strip()
    parsed = json.loads(cleaned)  # JSONDecodeError is a ValueError
    if not isinstance(parsed, list):
        raise ValueError(f"Expected a JSON array, got {type(parsed).__name__}")

    emails = []
    for item in parsed:
        if isinstance(item, dict):
            email = item.get("email")
            if isinstance(email, str) and email:
                emails.append(email)
    return emails


class AssignmentService:
    """Suggests up to three users for a task description."""

    def __init__(
        self,
        retriever: CandidateRetriever,
        llm: LLMService,
        top_k: int = 5,
        restrict_to_candidates: bool = False,
    ):
        self.retriever = retriever
        self.llm = llm
        self.top_k = top_k
        self.restrict_to_candidates = restrict_to_candidates

    def is_available(self) -> bool:
        return self.retriever.is_available() and self.llm.is_available()

    async def suggest_assignees(
        self, description: str, user_id: int | None = None
    ) -> AssigneeSuggestion:
        """Suggest assignees; never raises for service or model failures."""
        start = time.perf_counter()
        try:
            result = await self._run(description)
        except Exception as e:
            logger.error(f"Assignee suggestion failed, using fallback: {e!r}")
            result = AssigneeSuggestion.fallback()

        latency_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"AI assign-user latency_ms={latency_ms:.0f} user_id={user_id} "
            f"source={result.source} emails={result.emails}"
        )
        return result

    async def _run(self, description: str) -> AssigneeSuggestion:
        if not self.is_available():
            return AssigneeSuggestion.fallback()

        candidates = await self.retriever.search(description, k=self.top_k)
        if not candidates:
            logger.info("No similar resumes found")
            return AssigneeSuggestion.fallback()

        raw = await self.llm.generate(
            prompt=get_ranking_prompt(description, candidates, MAX_SUGGESTIONS),
            system_prompt=RANKING_SYSTEM_PROMPT,
            temperature=0.2,
            max_tokens=100,
        )
        logger.debug(f"Ranking response: {raw}")
        emails = parse_candidate_emails(raw)

        if self.restrict_to_candidates:
            known = {c.email for c in candidates if c.email}
            emails = [email for email in emails if email in known]

        return AssigneeSuggestion(emails=emails, source=SOURCE_PIPELINE)
