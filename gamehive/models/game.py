"""Catalog entry model.

RAWG 게임 레코드에 추가자 정보(addedBy, addedAt)를 더한 추천 게임 항목입니다.
"""
from __future__ import annotations

import random
import string
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_game_id() -> str:
    """``game_<epoch-ms>_<9 base36 chars>`` 형식의 ID 생성"""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"game_{int(time.time() * 1000)}_{suffix}"


class GameEntry(BaseModel):
    """Suggested game stored in the catalog.

    Attributes:
        gameId: 카탈로그 항목 ID
        id: RAWG 게임 ID
        slug: RAWG slug (고유)
        name: 게임 이름 (고유)
        description: 설명 (description_raw 우선)
        background_image: 대표 이미지 URL
        genres: RAWG 장르 목록
        platforms: RAWG 플랫폼 목록
        rating: 평점
        released: 출시일
        website: 공식 웹사이트
        addedBy: 추가한 사용자명
        addedAt: 추가 시각 (ISO-8601, UTC)
    """
    gameId: str = Field(default_factory=generate_game_id)
    id: Optional[int] = None
    slug: str
    name: str
    description: Optional[str] = None
    background_image: Optional[str] = None
    genres: List[Any] = Field(default_factory=list)
    platforms: List[Any] = Field(default_factory=list)
    rating: Optional[float] = None
    released: Optional[str] = None
    website: Optional[str] = None
    addedBy: str
    addedAt: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    @classmethod
    def from_game_data(cls, game_data: Dict[str, Any], added_by: str) -> "GameEntry":
        """Build a catalog entry from a RAWG-shaped game payload."""
        return cls(
            id=game_data.get("id"),
            slug=game_data["slug"],
            name=game_data["name"],
            description=game_data.get("description_raw") or game_data.get("description"),
            background_image=game_data.get("background_image"),
            genres=game_data.get("genres") or [],
            platforms=game_data.get("platforms") or [],
            rating=game_data.get("rating"),
            released=game_data.get("released"),
            website=game_data.get("website"),
            addedBy=added_by,
        )

    @classmethod
    def from_backend(cls, game_id: str, payload: Dict[str, Any]) -> "GameEntry":
        data = {k: v for k, v in payload.items() if k not in ("_id", "gameId")}
        return cls(gameId=str(game_id), **data)

    def to_document(self) -> Dict[str, Any]:
        """저장용 dict (gameId는 키/필드로 별도 저장)"""
        return self.model_dump(exclude={"gameId"})


def sort_newest_first(entries: List[Any], field: str = "addedAt") -> List[Any]:
    """최신순 정렬. 시각이 같으면 나중에 추가된 항목이 먼저."""
    indexed = sorted(
        enumerate(entries),
        key=lambda pair: (parse_timestamp(getattr(pair[1], field)), pair[0]),
        reverse=True,
    )
    return [entry for _, entry in indexed]


def parse_timestamp(value: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return datetime.min.replace(tzinfo=timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
