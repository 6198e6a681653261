"""Security utilities: password hashing and bearer token issue/verify.

Tokens are HS256 JWTs signed with ``JWT_SECRET``. They carry the user id
(``sub``), ``username`` and ``email`` and expire after ``JWT_EXPIRES_DAYS``.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

import jwt
from jwt import InvalidTokenError
from werkzeug.security import check_password_hash, generate_password_hash

from gamehive.server.settings import DEFAULT_JWT_SECRET, settings

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ("sub", "username", "email", "exp")


class TokenError(Exception):
    """Raised when a bearer token cannot be verified."""


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    if not password_hash:
        return False
    return check_password_hash(password_hash, password)


def _get_algorithms() -> List[str]:
    algorithms = [
        alg.strip()
        for alg in settings.JWT_ALGORITHM.split(",")
        if alg.strip()
    ]
    return algorithms or ["HS256"]


def create_access_token(user_id: str, username: str, email: str) -> str:
    """Issue a signed bearer token for the given user.

    Args:
        user_id: 사용자 ID (stored as ``sub``)
        username: 사용자명
        email: 이메일

    Returns:
        Encoded JWT string
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "username": username,
        "email": email,
        "iat": now,
        "exp": now + timedelta(days=settings.JWT_EXPIRES_DAYS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=_get_algorithms()[0])


def decode_access_token(token: str) -> Dict[str, Any]:
    """Verify a bearer token and return its claims.

    Raises:
        TokenError: signature, expiry or claim check failed
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=_get_algorithms(),
            options={"require": list(REQUIRED_CLAIMS)},
        )
    except InvalidTokenError as exc:
        logger.warning("JWT verification failed: %s", exc)
        raise TokenError(str(exc)) from exc


def warn_if_default_secret() -> bool:
    """Log a warning when tokens are signed with the built-in development secret.

    Returns:
        True if the default secret is in use
    """
    if settings.JWT_SECRET != DEFAULT_JWT_SECRET:
        return False
    logger.warning(
        "JWT_SECRET is the built-in development value; tokens can be forged. "
        "Set JWT_SECRET before deploying (STORAGE_BACKEND=%s).",
        settings.STORAGE_BACKEND,
    )
    return True
