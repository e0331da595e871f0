"""Tests for assignee suggestions."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.api.dependencies import get_llm_service, get_retriever
from src.main import app
from src.services.assignment import (
    SOURCE_FALLBACK,
    SOURCE_PIPELINE,
    AssignmentService,
    parse_candidate_emails,
)
from src.services.llm import NullLLMService
from src.services.llm_prompts import get_ranking_prompt
from src.services.retrieval import CandidateProfile, NullRetriever

CANDIDATES = [
    CandidateProfile(email="a@x.com", name="Ann", resume="Backend engineer, Python and Postgres"),
    CandidateProfile(email="b@x.com", name="Bob", resume="Frontend developer, React"),
]


def make_retriever(candidates=None, error=None):
    retriever = MagicMock()
    retriever.is_available.return_value = True
    retriever.search = AsyncMock(return_value=candidates or [], side_effect=error)
    return retriever


def make_llm(response="[]", error=None):
    llm = MagicMock()
    llm.is_available.return_value = True
    llm.generate = AsyncMock(return_value=response, side_effect=error)
    return llm


class TestParseCandidateEmails:
    """Tests for reading the model's JSON answer."""

    def test_plain_array(self):
        assert parse_candidate_emails('[{"email": "a@x.com"}, {"email": "b@x.com"}]') == [
            "a@x.com",
            "b@x.com",
        ]

    def test_code_fences_are_stripped(self):
        raw = '```json\n[{"email":"a@x.com"},{"email":"b@x.com"}]\n```'
        assert parse_candidate_emails(raw) == ["a@x.com", "b@x.com"]

    def test_empty_array(self):
        assert parse_candidate_emails("[]") == []

    def test_malformed_elements_are_dropped(self):
        raw = '[{"email": "a@x.com"}, "b@x.com", {"name": "Bob"}, {"email": ""}, {"email": 3}]'
        assert parse_candidate_emails(raw) == ["a@x.com"]

    def test_prose_raises(self):
        with pytest.raises(ValueError):
            parse_candidate_emails("I would pick Ann and Bob.")

    def test_non_array_raises(self):
        with pytest.raises(ValueError):
            parse_candidate_emails('{"email": "a@x.com"}')


class TestAssignmentService:
    """Tests for the retrieval + ranking pipeline."""

    @pytest.mark.asyncio
    async def test_ranked_emails(self):
        retriever = make_retriever(CANDIDATES)
        llm = make_llm('```json\n[{"email":"a@x.com"},{"email":"b@x.com"}]\n```')
        service = AssignmentService(retriever, llm, top_k=5)

        result = await service.suggest_assignees("Build the billing API")

        assert result.emails == ["a@x.com", "b@x.com"]
        assert result.source == SOURCE_PIPELINE
        retriever.search.assert_awaited_once_with("Build the billing API", k=5)

        kwargs = llm.generate.await_args.kwargs
        assert kwargs["temperature"] == 0.2
        assert "Build the billing API" in kwargs["prompt"]
        assert "a@x.com" in kwargs["prompt"]

    @pytest.mark.asyncio
    async def test_no_candidates_skips_model(self):
        llm = make_llm()
        service = AssignmentService(make_retriever([]), llm)

        result = await service.suggest_assignees("Anything")

        assert result.emails == []
        assert result.source == SOURCE_FALLBACK
        llm.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_prose_answer_falls_back(self):
        service = AssignmentService(make_retriever(CANDIDATES), make_llm("Ann seems best."))

        result = await service.suggest_assignees("Anything")

        assert result.emails == []
        assert result.source == SOURCE_FALLBACK

    @pytest.mark.asyncio
    async def test_retriever_error_falls_back(self):
        retriever = make_retriever(error=RuntimeError("index unreachable"))
        service = AssignmentService(retriever, make_llm())

        result = await service.suggest_assignees("Anything")

        assert result.source == SOURCE_FALLBACK

    @pytest.mark.asyncio
    async def test_model_error_falls_back(self):
        llm = make_llm(error=TimeoutError("model timed out"))
        service = AssignmentService(make_retriever(CANDIDATES), llm)

        result = await service.suggest_assignees("Anything")

        assert result.source == SOURCE_FALLBACK

    @pytest.mark.asyncio
    async def test_unconfigured_services(self):
        service = AssignmentService(NullRetriever(), NullLLMService())

        assert service.is_available() is False
        result = await service.suggest_assignees("Anything")
        assert result.emails == []
        assert result.source == SOURCE_FALLBACK

    @pytest.mark.asyncio
    async def test_unknown_emails_kept_by_default(self):
        llm = make_llm('[{"email": "a@x.com"}, {"email": "ghost@x.com"}]')
        service = AssignmentService(make_retriever(CANDIDATES), llm)

        result = await service.suggest_assignees("Anything")

        assert result.emails == ["a@x.com", "ghost@x.com"]

    @pytest.mark.asyncio
    async def test_restrict_to_candidates(self):
        llm = make_llm('[{"email": "a@x.com"}, {"email": "ghost@x.com"}]')
        service = AssignmentService(make_retriever(CANDIDATES), llm, restrict_to_candidates=True)

        result = await service.suggest_assignees("Anything")

        assert result.emails == ["a@x.com"]
        assert result.source == SOURCE_PIPELINE


def test_ranking_prompt_lists_candidates():
    """Test the ranking prompt numbers every candidate."""
    prompt = get_ranking_prompt("Ship the release", CANDIDATES, max_candidates=3)
    assert "Ship the release" in prompt
    assert "Candidate 1:\nName: Ann\nEmail: a@x.com" in prompt
    assert "Candidate 2:" in prompt
    assert "top 3" in prompt


def test_assign_user_endpoint(client, auth_headers):
    """Test the endpoint returns ranked emails from the pipeline."""
    app.dependency_overrides[get_retriever] = lambda: make_retriever(CANDIDATES)
    app.dependency_overrides[get_llm_service] = lambda: make_llm('[{"email": "b@x.com"}]')

    response = client.post(
        "/api/ai/assign-user", headers=auth_headers, json={"description": "Build a React page"}
    )
    assert response.status_code == 200
    assert response.json() == {"suggestion": ["b@x.com"], "source": "pinecone+llm"}


def test_assign_user_endpoint_unconfigured(client, auth_headers):
    """Test the endpoint degrades to an empty fallback without AI services."""
    app.dependency_overrides[get_retriever] = lambda: NullRetriever()
    app.dependency_overrides[get_llm_service] = lambda: NullLLMService()

    response = client.post(
        "/api/ai/assign-user", headers=auth_headers, json={"description": "Anything"}
    )
    assert response.status_code == 200
    assert response.json() == {"suggestion": [], "source": "fallback"}


def test_assign_user_requires_description(client, auth_headers):
    """Test a blank description is rejected."""
    response = client.post(
        "/api/ai/assign-user", headers=auth_headers, json={"description": "   "}
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Description is required for assigning user"

    response = client.post("/api/ai/assign-user", headers=auth_headers, json={})
    assert response.status_code == 400
