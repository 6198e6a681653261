"""Suggested-games catalog and RAWG lookup endpoints.

엔드포인트:
- POST /save-game: 카탈로그에 게임 추가 (인증 필요)
- GET /suggested-games: 카탈로그 전체, 최신순
- POST /addyours: 게임 이름으로 RAWG 상세 조회 (토큰 또는 자격 증명)
- POST /fetch-game-details: slug로 RAWG 상세 조회
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from gamehive.adapters import rawg
from gamehive.models.game import GameEntry
from gamehive.models.user import UserPublic
from gamehive.repositories.base import (
    DuplicateGameError,
    InvalidCredentialsError,
    UserNotFoundError,
)
from gamehive.repositories.game_repo import GameRepository
from gamehive.repositories.user_repo import UserRepository
from gamehive.server.deps import (
    get_current_user,
    get_game_repo,
    get_optional_user,
    get_user_repo,
)
from gamehive.server.schemas import (
    AddYoursRequest,
    AddYoursResponse,
    FetchGameDetailsRequest,
    SaveGameRequest,
    SaveGameResponse,
    SuggestedGames,
)

router = APIRouter(tags=["games"])
logger = logging.getLogger(__name__)


@router.post("/save-game", response_model=SaveGameResponse, status_code=status.HTTP_201_CREATED)
async def save_game(
    request: SaveGameRequest,
    current_user: UserPublic = Depends(get_current_user),
    game_repo: GameRepository = Depends(get_game_repo),
) -> SaveGameResponse:
    """게임을 추천 카탈로그에 저장합니다.

    이름이나 slug가 같은 게임이 이미 있으면 400을 반환합니다.
    추가자(addedBy)는 토큰의 사용자명입니다.
    """
    entry = GameEntry.from_game_data(request.gameData.model_dump(), added_by=current_user.username)

    try:
        saved = await game_repo.add(entry)
    except DuplicateGameError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="This game is already added to the database",
        ) from exc
    except Exception as exc:
        logger.error("Error saving game %s: %s", entry.slug, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save game",
        ) from exc

    return SaveGameResponse(gameId=saved.gameId)


@router.get("/suggested-games", response_model=SuggestedGames)
async def suggested_games(
    game_repo: GameRepository = Depends(get_game_repo),
) -> SuggestedGames:
    """추천 게임 목록 (addedAt 기준 최신순)"""
    try:
        return await game_repo.list_newest_first()
    except Exception as exc:
        logger.error("Error fetching suggested games: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch suggested games",
        ) from exc


async def _authenticate_addyours(
    request: AddYoursRequest,
    token_user: Optional[UserPublic],
    user_repo: UserRepository,
) -> UserPublic:
    if token_user is not None:
        return token_user

    if not request.usernameOrEmail or not request.password:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization token or username/email and password required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user = await user_repo.authenticate(request.usernameOrEmail, request.password)
    except (UserNotFoundError, InvalidCredentialsError) as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        ) from exc
    return user.to_public()


@router.post("/addyours", response_model=AddYoursResponse)
async def add_yours(
    request: AddYoursRequest,
    token_user: Optional[UserPublic] = Depends(get_optional_user),
    user_repo: UserRepository = Depends(get_user_repo),
) -> AddYoursResponse:
    """게임 이름으로 RAWG 상세 정보를 가져옵니다.

    클라이언트는 결과를 확인한 뒤 /save-game 으로 저장합니다.
    """
    try:
        user = await _authenticate_addyours(request, token_user, user_repo)
        data = await rawg.fetch_game_details(rawg.to_slug(request.gamename))
    except HTTPException:
        raise
    except rawg.GameProviderError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch game details",
        ) from exc
    except Exception as exc:
        logger.error("Error in /addyours route: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from exc

    logger.info("User %s looked up game %s", user.username, request.gamename)
    return AddYoursResponse(data=data)


@router.post("/fetch-game-details")
async def fetch_game_details(request: FetchGameDetailsRequest) -> Dict[str, Any]:
    """slug로 RAWG 원본 게임 레코드를 반환합니다.

    RAWG가 모르는 slug이거나 호출이 실패하면 500.
    """
    try:
        return await rawg.fetch_game_details(request.slug)
    except rawg.GameProviderError as exc:
        logger.error("Failed to fetch game details for %s: %s", request.slug, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch game details",
        ) from exc
