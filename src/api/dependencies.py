"""FastAPI dependencies for authentication, database and services."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.config import get_settings
from src.database import get_db
from src.models.user import User
from src.services.assignment import AssignmentService
from src.services.auth import get_user_from_token
from src.services.authorization import Action, authorize, enforce
from src.services.description import DescriptionService
from src.services.llm import (
    EmbeddingService,
    LLMService,
    build_embedding_service,
    build_llm_service,
)
from src.services.retrieval import CandidateRetriever, build_retriever
from src.services.task_service import TaskService
from src.services.user_service import UserService

# Optional so that cookie sessions work without a header
security = HTTPBearer(auto_error=False)


def get_session_token(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str | None:
    """Session token from the Authorization header, else from the session cookie."""
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get(get_settings().session_cookie_name)


def get_optional_user(
    token: Annotated[str | None, Depends(get_session_token)],
    db: Annotated[Session, Depends(get_db)],
) -> User | None:
    """Resolve the caller, or None when there is no valid session."""
    if not token:
        return None
    return get_user_from_token(db, token)


def get_current_user(
    user: Annotated[User | None, Depends(get_optional_user)],
) -> User:
    """Get the current authenticated user, rejecting anonymous requests."""
    enforce(authorize(user, Action.ACCESS))
    return user


def get_current_admin(
    user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Get the current user if they may manage users."""
    enforce(authorize(user, Action.MANAGE_USERS))
    return user


def get_task_service(
    db: Annotated[Session, Depends(get_db)],
) -> TaskService:
    """Get task service with dependencies."""
    return TaskService(db)


def get_user_service(
    db: Annotated[Session, Depends(get_db)],
) -> UserService:
    """Get user service with dependencies."""
    return UserService(db)


@lru_cache
def get_llm_service() -> LLMService:
    """Get the process-wide LLM service."""
    return build_llm_service()


@lru_cache
def get_embedding_service() -> EmbeddingService:
    """Get the process-wide embedding service."""
    return build_embedding_service()


@lru_cache
def get_retriever() -> CandidateRetriever:
    """Get the process-wide resume retriever (keeps its resolved index host)."""
    return build_retriever(embeddings=get_embedding_service())


async def close_ai_services() -> None:
    """Close the cached AI clients that were built and forget them."""
    if get_llm_service.cache_info().currsize:
        await get_llm_service().aclose()
    if get_embedding_service.cache_info().currsize:
        await get_embedding_service().aclose()

    get_retriever.cache_clear()
    get_embedding_service.cache_clear()
    get_llm_service.cache_clear()


def get_description_service(
    llm: Annotated[LLMService, Depends(get_llm_service)],
) -> DescriptionService:
    """Get description suggestion service."""
    return DescriptionService(llm)


def get_assignment_service(
    retriever: Annotated[CandidateRetriever, Depends(get_retriever)],
    llm: Annotated[LLMService, Depends(get_llm_service)],
) -> AssignmentService:
    """Get assignee suggestion service."""
    settings = get_settings()
    return AssignmentService(
        retriever,
        llm,
        top_k=settings.assignment_top_k,
        restrict_to_candidates=settings.assignment_restrict_to_candidates,
    )
