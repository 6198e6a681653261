"""Review endpoints."""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from gamehive.models.review import Review
from gamehive.models.user import UserPublic
from gamehive.repositories.review_repo import ReviewRepository
from gamehive.server.deps import get_current_user, get_review_repo
from gamehive.server.schemas import AddReviewRequest, AddReviewResponse

router = APIRouter(tags=["reviews"])
logger = logging.getLogger(__name__)


@router.post("/add-review", response_model=AddReviewResponse, status_code=status.HTTP_201_CREATED)
async def add_review(
    request: AddReviewRequest,
    current_user: UserPublic = Depends(get_current_user),
    review_repo: ReviewRepository = Depends(get_review_repo),
) -> AddReviewResponse:
    """리뷰를 등록합니다. 작성자는 토큰의 사용자명."""
    review = Review(
        gameId=request.gameId,
        username=current_user.username,
        reviewText=request.reviewText,
    )
    try:
        saved = await review_repo.add(review)
    except Exception as exc:
        logger.error("Error adding review for game %s: %s", request.gameId, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to add review",
        ) from exc

    return AddReviewResponse(review=saved)


@router.get("/reviews/{game_id}", response_model=List[Review])
async def list_reviews(
    game_id: str,
    review_repo: ReviewRepository = Depends(get_review_repo),
) -> List[Review]:
    """게임의 리뷰 목록 (최신순)"""
    try:
        return await review_repo.list_for_game(game_id)
    except Exception as exc:
        logger.error("Error fetching reviews for game %s: %s", game_id, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch reviews",
        ) from exc
