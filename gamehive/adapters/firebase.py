"""Async helpers for the Firebase Authentication and Realtime Database REST APIs."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Tuple

import httpx

from gamehive.server.settings import settings

logger = logging.getLogger(__name__)

# RTDB 키에 허용되지 않는 문자
_FORBIDDEN_KEY_CHARS = {".": "%2E", "$": "%24", "#": "%23", "[": "%5B", "]": "%5D", "/": "%2F"}


class FirebaseError(RuntimeError):
    """Raised when a Firebase REST call fails.

    ``code`` holds the Firebase error message (e.g. ``EMAIL_EXISTS``) when
    the response carried one.
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class PreconditionFailed(FirebaseError):
    """Conditional write lost the race (HTTP 412)."""


def escape_key(value: str) -> str:
    """Escape a string so it is usable as a single RTDB path segment."""
    escaped = value.replace("%", "%25")
    for char, replacement in _FORBIDDEN_KEY_CHARS.items():
        escaped = escaped.replace(char, replacement)
    return escaped


def _database_url(path: str) -> str:
    if not settings.FIREBASE_DATABASE_URL:
        raise FirebaseError("FIREBASE_DATABASE_URL is not configured.")
    base = settings.FIREBASE_DATABASE_URL.rstrip("/")
    return f"{base}/{path.strip('/')}.json"


def _auth_url(action: str) -> str:
    if not settings.FIREBASE_API_KEY:
        raise FirebaseError("FIREBASE_API_KEY is not configured.")
    base = settings.FIREBASE_AUTH_URL.rstrip("/")
    return f"{base}/accounts:{action}"


def _error_code(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except json.JSONDecodeError:
        return None
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return error.get("message")
    if isinstance(error, str):
        return error
    return None


async def _send(
    method: str,
    url: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    json_body: Any = None,
    headers: Optional[Dict[str, str]] = None,
) -> httpx.Response:
    try:
        async with httpx.AsyncClient(timeout=settings.FIREBASE_TIMEOUT or 10.0) as client:
            response = await client.request(
                method,
                url,
                params=params,
                json=json_body,
                headers=headers,
            )
            response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        status_code = exc.response.status_code
        code = _error_code(exc.response)
        if status_code == 412:
            raise PreconditionFailed(
                "Conditional write rejected", status_code=status_code, code=code
            ) from exc
        logger.error(
            "Firebase responded with status %s for %s %s: %s",
            status_code,
            method,
            url.split("?")[0],
            code or exc.response.text[:200],
        )
        raise FirebaseError(
            f"Firebase request failed with status {status_code}",
            status_code=status_code,
            code=code,
        ) from exc
    except httpx.HTTPError as exc:
        logger.error("Firebase request failed for %s %s: %s", method, url.split("?")[0], exc)
        raise FirebaseError("Firebase request failed") from exc
    return response


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except json.JSONDecodeError as exc:
        logger.error("Failed to decode Firebase JSON response: %s", response.text[:200])
        raise FirebaseError("Invalid JSON response from Firebase") from exc


def _database_params() -> Dict[str, str]:
    if settings.FIREBASE_DATABASE_AUTH:
        return {"auth": settings.FIREBASE_DATABASE_AUTH}
    return {}


# ============================================================================
# Authentication (Identity Toolkit)
# ============================================================================

async def sign_up(email: str, password: str) -> Dict[str, Any]:
    """Create an email/password account. Returns the Identity Toolkit payload (``localId`` 포함)."""
    response = await _send(
        "POST",
        _auth_url("signUp"),
        params={"key": settings.FIREBASE_API_KEY},
        json_body={"email": email, "password": password, "returnSecureToken": True},
    )
    return _decode(response) or {}


async def sign_in(email: str, password: str) -> Dict[str, Any]:
    """Verify an email/password pair. Raises FirebaseError on bad credentials."""
    response = await _send(
        "POST",
        _auth_url("signInWithPassword"),
        params={"key": settings.FIREBASE_API_KEY},
        json_body={"email": email, "password": password, "returnSecureToken": True},
    )
    return _decode(response) or {}


async def delete_account(id_token: str) -> None:
    """Delete the account that owns ``id_token`` (가입 롤백용)."""
    await _send(
        "POST",
        _auth_url("delete"),
        params={"key": settings.FIREBASE_API_KEY},
        json_body={"idToken": id_token},
    )


# ============================================================================
# Realtime Database
# ============================================================================

async def get(path: str) -> Any:
    """Read the value at ``path`` (None when the location is empty)."""
    response = await _send("GET", _database_url(path), params=_database_params())
    return _decode(response)


async def get_with_etag(path: str) -> Tuple[Any, Optional[str]]:
    """Read the value at ``path`` together with its ETag for a conditional write."""
    response = await _send(
        "GET",
        _database_url(path),
        params=_database_params(),
        headers={"X-Firebase-ETag": "true"},
    )
    return _decode(response), response.headers.get("ETag")


async def put(path: str, value: Any, *, if_match: Optional[str] = None) -> Any:
    """Write ``value`` at ``path``.

    ``if_match`` 가 주어지면 조건부 쓰기: ETag가 바뀌었으면 PreconditionFailed.
    """
    headers = {"if-match": if_match} if if_match else None
    response = await _send(
        "PUT",
        _database_url(path),
        params=_database_params(),
        json_body=value,
        headers=headers,
    )
    return _decode(response)


async def push(path: str, value: Any) -> str:
    """Append ``value`` under ``path`` with a generated key and return the key."""
    response = await _send("POST", _database_url(path), params=_database_params(), json_body=value)
    data = _decode(response) or {}
    key = data.get("name")
    if not key:
        raise FirebaseError("Push response missing generated key")
    return key


async def delete(path: str) -> None:
    await _send("DELETE", _database_url(path), params=_database_params())
