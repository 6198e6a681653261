"""Pydantic schemas for request/response models.

이 파일은 FastAPI 엔드포인트의 요청/응답 모델을 정의합니다.
필수 필드가 빠지거나 비어 있으면 검증 오류가 나고, main.py의 핸들러가 400으로 응답합니다.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from gamehive.models.game import GameEntry
from gamehive.models.review import Review
from gamehive.models.user import UserPublic


# ============================================================================
# User & Auth 관련 스키마
# ============================================================================

class RegisterRequest(BaseModel):
    """회원가입 요청.

    Attributes:
        username: 사용자명 (고유)
        email: 이메일 (고유)
        password: 비밀번호
    """
    username: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    """로그인 요청. ``usernameOrEmail`` 은 사용자명 또는 이메일."""
    usernameOrEmail: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class MessageResponse(BaseModel):
    message: str


class LoginResponse(BaseModel):
    """로그인 성공 응답.

    Example:
        >>> LoginResponse(
        ...     message="Login successful",
        ...     user=UserPublic(uid="abc", username="parkj", email="parkj@example.com"),
        ...     token="eyJ...",
        ... )
    """
    message: str = Field(default="Login successful")
    user: UserPublic
    token: str


# ============================================================================
# Game 관련 스키마
# ============================================================================

class GameData(BaseModel):
    """RAWG 형식 게임 데이터.

    카탈로그에 저장하는 필드는 타입을 검사하고(잘못되면 400), 나머지 RAWG 필드는 무시합니다.
    """
    model_config = ConfigDict(extra="allow")

    id: Optional[int] = None
    slug: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    description_raw: Optional[str] = None
    background_image: Optional[str] = None
    genres: Optional[List[Any]] = None
    platforms: Optional[List[Any]] = None
    rating: Optional[float] = None
    released: Optional[str] = None
    website: Optional[str] = None


class SaveGameRequest(BaseModel):
    """카탈로그 저장 요청.

    ``userId`` 는 이전 클라이언트 호환용으로 받기만 하고, 추가자는 토큰에서 정합니다.
    """
    gameData: GameData
    userId: Optional[str] = None


class SaveGameResponse(BaseModel):
    message: str = Field(default="Game saved successfully")
    gameId: str


class AddYoursRequest(BaseModel):
    """``gamename`` 으로 RAWG 조회. Bearer 토큰이 없으면 자격 증명 필요."""
    gamename: str = Field(..., min_length=1)
    usernameOrEmail: Optional[str] = None
    password: Optional[str] = None


class AddYoursResponse(BaseModel):
    success: bool = True
    data: Dict[str, Any]


class FetchGameDetailsRequest(BaseModel):
    slug: str = Field(..., min_length=1)


SuggestedGames = List[GameEntry]


# ============================================================================
# Review 관련 스키마
# ============================================================================

class AddReviewRequest(BaseModel):
    # RAWG 숫자 ID도 허용
    model_config = ConfigDict(coerce_numbers_to_str=True)

    gameId: str = Field(..., min_length=1)
    reviewText: str = Field(..., min_length=1)


class AddReviewResponse(BaseModel):
    message: str = Field(default="Review added successfully")
    review: Review
