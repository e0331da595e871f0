"""AI-assisted suggestion endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import get_assignment_service, get_current_user, get_description_service
from src.models.user import User
from src.schemas.ai import AssignUserRequest, AssignUserResponse, SuggestRequest, SuggestResponse
from src.services.assignment import AssignmentService
from src.services.description import DescriptionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["ai"])


@router.post("/suggest", response_model=SuggestResponse)
async def suggest(
    request: SuggestRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[DescriptionService, Depends(get_description_service)],
):
    """Suggest a description for a task title."""
    title = (request.title or "").strip()
    if not title:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Title is required for description suggestions",
        )

    logger.info(f"AI request: description user_id={current_user.id}")
    result = await service.suggest(title)
    return SuggestResponse(title=title, suggestion=result.text, source=result.source)


@router.post("/assign-user", response_model=AssignUserResponse)
async def assign_user(
    request: AssignUserRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[AssignmentService, Depends(get_assignment_service)],
):
    """Suggest up to three users suited to a task description."""
    description = request.description.strip()
    if not description:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Description is required for assigning user",
        )

    result = await service.suggest_assignees(description, user_id=current_user.id)
    return AssignUserResponse(suggestion=result.emails, source=result.source)
