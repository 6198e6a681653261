"""Dependency injection for FastAPI routes.

저장소 백엔드(STORAGE_BACKEND)에 맞는 repository 묶음을 지연 생성하고,
Bearer 토큰으로 현재 사용자를 확인하는 의존성을 제공합니다.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from gamehive.models.user import UserPublic
from gamehive.repositories.game_repo import (
    FirebaseGameRepository,
    GameRepository,
    MemoryGameRepository,
    MongoGameRepository,
)
from gamehive.repositories.review_repo import (
    FirebaseReviewRepository,
    MemoryReviewRepository,
    MongoReviewRepository,
    ReviewRepository,
)
from gamehive.repositories.user_repo import (
    FirebaseUserRepository,
    MemoryUserRepository,
    MongoUserRepository,
    UserRepository,
)
from gamehive.server.security import TokenError, decode_access_token
from gamehive.server.settings import settings

logger = logging.getLogger(__name__)

STORAGE_BACKENDS = ("firebase", "mongo", "memory")

# auto_error=False: 헤더 누락도 403이 아닌 401로 응답하기 위함
security = HTTPBearer(auto_error=False)


@dataclass
class Repositories:
    users: UserRepository
    games: GameRepository
    reviews: ReviewRepository


_repositories: Optional[Repositories] = None


def build_repositories(backend: str) -> Repositories:
    """Create the repository set for a storage backend."""
    if backend == "firebase":
        return Repositories(
            users=FirebaseUserRepository(),
            games=FirebaseGameRepository(),
            reviews=FirebaseReviewRepository(),
        )

    if backend == "mongo":
        from gamehive.adapters.mongo import ensure_indexes, get_database

        db = get_database()
        ensure_indexes(db)
        return Repositories(
            users=MongoUserRepository(db["users"]),
            games=MongoGameRepository(db["suggested_games"]),
            reviews=MongoReviewRepository(db["reviews"]),
        )

    if backend == "memory":
        logger.warning("Using in-memory storage. Data is lost on restart.")
        return Repositories(
            users=MemoryUserRepository(),
            games=MemoryGameRepository(),
            reviews=MemoryReviewRepository(),
        )

    raise ValueError(
        f"Unknown STORAGE_BACKEND {backend!r}; expected one of {', '.join(STORAGE_BACKENDS)}"
    )


def get_repositories() -> Repositories:
    global _repositories

    if _repositories is None:
        _repositories = build_repositories(settings.STORAGE_BACKEND)
        logger.info("Storage backend initialized: %s", settings.STORAGE_BACKEND)
    return _repositories


def reset_repositories() -> None:
    global _repositories
    _repositories = None


def get_user_repo(repos: Repositories = Depends(get_repositories)) -> UserRepository:
    return repos.users


def get_game_repo(repos: Repositories = Depends(get_repositories)) -> GameRepository:
    return repos.games


def get_review_repo(repos: Repositories = Depends(get_repositories)) -> ReviewRepository:
    return repos.reviews


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _user_from_token(token: str) -> UserPublic:
    try:
        payload = decode_access_token(token)
    except TokenError as exc:
        raise _unauthorized("Invalid or expired token") from exc

    return UserPublic(
        uid=payload["sub"],
        username=payload["username"],
        email=payload["email"],
    )


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[UserPublic]:
    """Bearer 토큰이 있으면 검증하고, 없으면 None."""
    if credentials is None:
        return None
    return _user_from_token(credentials.credentials)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> UserPublic:
    """JWT로 현재 사용자를 인증합니다.

    Returns:
        토큰 클레임으로 만든 UserPublic

    Raises:
        HTTPException: 401 - 토큰 누락, 형식 오류, 서명/만료 검증 실패
    """
    if credentials is None:
        logger.warning("Request rejected: missing bearer token")
        raise _unauthorized("Authorization token required")
    return _user_from_token(credentials.credentials)
