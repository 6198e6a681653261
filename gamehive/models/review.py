"""Review model."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import BaseModel, Field


class Review(BaseModel):
    """게임 리뷰.

    Attributes:
        reviewId: 리뷰 ID
        gameId: 대상 게임 ID (카탈로그 gameId 또는 RAWG ID/slug)
        username: 작성자 (토큰 클레임에서 복사)
        reviewText: 리뷰 본문
        createdAt: 작성 시각 (ISO-8601, UTC)
    """
    reviewId: str = Field(default_factory=lambda: uuid.uuid4().hex)
    gameId: str
    username: str
    reviewText: str
    createdAt: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    @classmethod
    def from_backend(cls, review_id: str, payload: Dict[str, Any]) -> "Review":
        data = {k: v for k, v in payload.items() if k not in ("_id", "reviewId")}
        return cls(reviewId=str(review_id), **data)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"reviewId"})
