"""
Rating submission endpoint for GetStreetCred.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status

from streetcred.api.deps import Caller, get_storage, get_token_caller, resolve_caller
from streetcred.core.errors import ValidationError
from streetcred.schemas.common import ErrorResponse
from streetcred.schemas.rating import RatingCreate, RatingResult, RatingSubmission
from streetcred.storage.base import StorageBackend

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=RatingResult,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        404: {"model": ErrorResponse, "description": "Project or user not found"},
    },
    summary="Rate a project",
)
async def submit_rating(
    data: RatingCreate,
    storage: StorageBackend = Depends(get_storage),
    token_caller: Optional[Caller] = Depends(get_token_caller),
) -> RatingResult:
    """
    Submit a 1-5 rating with optional review.

    The rating is stored and the project's rating/ratingCount are
    recomputed from all of its ratings in the same transaction; the
    response carries both the new rating and the updated project.
    """
    caller = resolve_caller(token_caller, data.user_id, None)
    if caller.user_id is None:
        raise ValidationError("userId is required")

    rating, project = await storage.submit_rating(
        RatingSubmission(
            project_id=data.project_id,
            user_id=caller.user_id,
            rating=data.rating,
            review=data.review,
        )
    )
    return RatingResult(rating=rating, updated_project=project)
