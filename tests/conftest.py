"""Pytest configuration and fixtures.

이 모듈은 모든 테스트에서 공유되는 pytest fixture들을 정의합니다.

주요 Fixture:
- repos: 테스트마다 새로 만드는 in-memory repository 묶음
- client: repos에 연결된 FastAPI 테스트 클라이언트
- registered_user: 미리 가입된 사용자 자격 증명
- auth_headers: registered_user의 Bearer 토큰 헤더
- mock_rawg: RAWG 어댑터 mock
- mock_httpx_client: httpx.AsyncClient mock (어댑터 단위 테스트용)

각 fixture는 실제 Firebase/MongoDB/RAWG를 호출하지 않습니다.
"""
import httpx
import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, patch
from typing import Any, Dict

from gamehive.server.main import app
from gamehive.server.deps import build_repositories, get_repositories
from gamehive.server.security import create_access_token


RAWG_GAME: Dict[str, Any] = {
    "id": 3328,
    "slug": "the-witcher-3-wild-hunt",
    "name": "The Witcher 3: Wild Hunt",
    "description": "<p>The third game in a series.</p>",
    "description_raw": "The third game in a series.",
    "background_image": "https://media.rawg.io/media/games/618/618c2031a07bbff6b4f611f10b6bcdbc.jpg",
    "genres": [{"id": 4, "name": "Action", "slug": "action"}],
    "platforms": [{"platform": {"id": 4, "name": "PC", "slug": "pc"}}],
    "rating": 4.66,
    "released": "2015-05-18",
    "website": "https://thewitcher.com/en/witcher3",
}


@pytest.fixture
def repos():
    """테스트마다 비어 있는 in-memory 저장소."""
    return build_repositories("memory")


@pytest.fixture
def client(repos):
    """FastAPI 테스트 클라이언트를 생성합니다.

    설명:
        - 실제 HTTP 서버를 시작하지 않고 테스트
        - get_repositories 의존성을 repos fixture로 교체
    """
    app.dependency_overrides[get_repositories] = lambda: repos
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def registered_user(client):
    """가입된 사용자 (username, email, password)."""
    credentials = {
        "username": "testuser",
        "email": "testuser@example.com",
        "password": "s3cret-pass",
    }
    response = client.post("/register", json=credentials)
    assert response.status_code == 201
    return credentials


@pytest.fixture
def auth_headers(client, registered_user):
    """로그인해서 받은 토큰으로 Authorization 헤더를 만듭니다."""
    response = client.post(
        "/login",
        json={
            "usernameOrEmail": registered_user["username"],
            "password": registered_user["password"],
        },
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def other_auth_headers():
    """저장소에 없는 두 번째 사용자의 유효한 토큰."""
    token = create_access_token("other-uid", "otheruser", "other@example.com")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def mock_rawg():
    """RAWG 어댑터를 mocking합니다.

    Yields:
        AsyncMock: fetch_game_details mock (기본값: RAWG_GAME 반환)
    """
    with patch("gamehive.adapters.rawg.fetch_game_details", new_callable=AsyncMock) as mock_fetch:
        mock_fetch.return_value = dict(RAWG_GAME)
        yield mock_fetch


@pytest.fixture
def mock_httpx_client():
    """httpx.AsyncClient를 mocking합니다.

    Yields:
        AsyncMock: ``request`` / ``get`` 응답을 테스트에서 지정하는 mock 인스턴스
    """
    with patch("httpx.AsyncClient") as mock_client:
        mock_instance = AsyncMock()
        mock_instance.__aenter__ = AsyncMock(return_value=mock_instance)
        mock_instance.__aexit__ = AsyncMock(return_value=False)
        mock_client.return_value = mock_instance
        yield mock_instance


def make_response(status_code: int = 200, json_body: Any = None, headers: Dict[str, str] = None):
    """httpx.Response 생성 헬퍼 (raise_for_status가 동작하도록 request 포함)."""
    request = httpx.Request("GET", "https://example.test")
    return httpx.Response(
        status_code,
        json=json_body,
        headers=headers,
        request=request,
    )
