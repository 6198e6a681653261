"""Async client for the RAWG game metadata API."""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from gamehive.server.settings import settings

logger = logging.getLogger(__name__)

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


class GameProviderError(RuntimeError):
    """Raised when RAWG cannot return a game record."""


def to_slug(name: str) -> str:
    """게임 이름을 RAWG slug 형식으로 변환 ("The Witcher 3" -> "the-witcher-3")"""
    return _NON_SLUG_CHARS.sub("-", name.strip().lower()).strip("-")


def _build_url(path: str) -> str:
    base = settings.RAWG_API_URL.rstrip("/")
    if not path.startswith("/"):
        path = f"/{path}"
    return f"{base}{path}"


def _default_timeout() -> float:
    return settings.RAWG_TIMEOUT or 10.0


async def _request(
    path: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    timeout: Optional[float] = None,
) -> Dict[str, Any]:
    if not settings.RAWG_API_KEY:
        raise GameProviderError("RAWG_API_KEY is not configured.")

    url = _build_url(path)
    query = {"key": settings.RAWG_API_KEY}
    if params:
        query.update(params)

    try:
        async with httpx.AsyncClient(timeout=timeout or _default_timeout()) as client:
            response = await client.get(
                url,
                params=query,
                headers={"Accept": "application/json"},
            )
            response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        logger.error(
            "RAWG responded with status %s for %s: %s",
            exc.response.status_code,
            url,
            exc.response.text[:500],
        )
        raise GameProviderError(
            f"RAWG request failed with status {exc.response.status_code}"
        ) from exc
    except httpx.HTTPError as exc:
        logger.error("RAWG request failed for %s: %s", url, exc)
        raise GameProviderError("RAWG request failed") from exc

    try:
        data = response.json()
    except json.JSONDecodeError as exc:
        logger.error("Failed to decode RAWG JSON response from %s: %s", url, response.text[:200])
        raise GameProviderError("Invalid JSON response from RAWG") from exc

    if not isinstance(data, dict) or not data:
        raise GameProviderError("Empty game record from RAWG")
    return data


async def fetch_game_details(slug: str) -> Dict[str, Any]:
    """Fetch the full RAWG record for a game.

    Args:
        slug: RAWG slug (또는 숫자 ID)

    Returns:
        RAWG 게임 레코드 (가공하지 않은 JSON)

    Raises:
        GameProviderError: 알 수 없는 slug, 네트워크 오류, 잘못된 응답
    """
    slug = slug.strip()
    # 빈 slug나 "."/".." 는 목록 등 다른 엔드포인트로 요청됨
    if slug in ("", ".", ".."):
        raise GameProviderError(f"Invalid game slug: {slug!r}")

    logger.info("Fetching game details from RAWG: %s", slug)
    return await _request(f"/games/{quote(slug, safe='')}")
