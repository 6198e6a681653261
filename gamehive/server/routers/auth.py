"""Registration, login and user lookup endpoints.

엔드포인트:
- POST /register: 사용자 생성
- POST /login: 사용자명 또는 이메일 + 비밀번호로 로그인, Bearer 토큰 발급
- GET /check-user: 사용자명 또는 이메일로 사용자 조회
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from gamehive.models.user import UserPublic
from gamehive.repositories.base import (
    DuplicateUserError,
    InvalidCredentialsError,
    UserNotFoundError,
)
from gamehive.repositories.user_repo import UserRepository
from gamehive.server.deps import get_user_repo
from gamehive.server.schemas import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
)
from gamehive.server.security import create_access_token

router = APIRouter(tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    user_repo: UserRepository = Depends(get_user_repo),
) -> MessageResponse:
    """사용자를 등록합니다.

    Raises:
        HTTPException: 400 - 사용자명 또는 이메일 중복, 500 - 저장소 오류
    """
    try:
        await user_repo.create(request.username, request.email, request.password)
    except DuplicateUserError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username or email is already registered",
        ) from exc
    except Exception as exc:
        logger.error("Error registering user %s: %s", request.username, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to register user",
        ) from exc

    return MessageResponse(message="User registered successfully")


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    user_repo: UserRepository = Depends(get_user_repo),
) -> LoginResponse:
    """사용자명 또는 이메일로 로그인하고 7일짜리 Bearer 토큰을 발급합니다.

    Raises:
        HTTPException: 404 - 사용자 없음, 401 - 비밀번호 불일치, 500 - 저장소 오류
    """
    try:
        user = await user_repo.authenticate(request.usernameOrEmail, request.password)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found") from exc
    except InvalidCredentialsError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        ) from exc
    except Exception as exc:
        logger.error("Error logging in %s: %s", request.usernameOrEmail, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to log in",
        ) from exc

    token = create_access_token(user.uid, user.username, user.email)
    logger.info("User %s logged in", user.username)
    return LoginResponse(user=user.to_public(), token=token)


@router.get("/check-user", response_model=UserPublic)
async def check_user(
    login: str = Query(..., min_length=1, description="Username or email"),
    user_repo: UserRepository = Depends(get_user_repo),
) -> UserPublic:
    """사용자명 또는 이메일로 사용자 존재 여부를 확인합니다."""
    try:
        user = await user_repo.find_by_identifier(login)
    except Exception as exc:
        logger.error("Error checking user %s: %s", login, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to look up user",
        ) from exc

    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user.to_public()
