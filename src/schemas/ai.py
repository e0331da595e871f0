"""AI suggestion schemas."""

from typing import Literal

from pydantic import Field

from src.schemas.base import APIModel


class SuggestRequest(APIModel):
    """Request a generated suggestion."""

    type: Literal["description"]
    title: str | None = Field(None, max_length=200)


class SuggestResponse(APIModel):
    """Generated task description."""

    type: Literal["description"] = "description"
    title: str
    suggestion: str
    source: Literal["openai", "fallback"]


class AssignUserRequest(APIModel):
    """Request assignee suggestions for a task description."""

    description: str


class AssignUserResponse(APIModel):
    """Suggested assignee emails."""

    suggestion: list[str]
    source: Literal["pinecone+llm", "fallback"]
