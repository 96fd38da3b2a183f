from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from planmate.core.config import Settings
from planmate.core.context import AppContext
from planmate.core.security import TokenService
from planmate.main import create_app
from planmate.schemas import User, ProfileUpdateRequest
from planmate.services import auth_service, profile_service
from planmate.stores import Stores, create_memory_stores

TEST_PASSWORD = "Abc123"


@pytest.fixture
def settings() -> Settings:
    """테스트용 설정 (.env 무시, 메모리 저장소)"""
    return Settings(
        _env_file=None,
        secret_key="test-secret-key",
        algorithm="HS256",
        store_backend="memory",
        debug=True
    )


@pytest.fixture
def stores() -> Stores:
    """테스트마다 새로 만드는 메모리 저장소"""
    return create_memory_stores()


@pytest.fixture
def tokens(settings) -> TokenService:
    return TokenService.from_settings(settings)


@pytest.fixture
def context(settings, stores) -> AppContext:
    return AppContext.create(settings, stores)


@pytest_asyncio.fixture
async def client(settings, stores) -> AsyncGenerator[AsyncClient, None]:
    """테스트용 비동기 HTTP 클라이언트"""
    app = create_app(settings=settings, stores=stores)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def call_operation(client):
    """단일 엔드포인트로 오퍼레이션 호출"""
    async def _call(operation: str, variables: Optional[dict] = None, token: Optional[str] = None):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        return await client.post(
            "/api",
            json={"operation": operation, "variables": variables or {}},
            headers=headers
        )
    return _call


@pytest.fixture
def register_user(stores):
    """회원가입 후 닉네임까지 설정한 사용자 생성"""
    async def _register(email: str, nickname: Optional[str] = None) -> User:
        result = await auth_service.sign_up(stores, email, TEST_PASSWORD, TEST_PASSWORD)
        assert result.success, result.errors
        user = await stores.credentials.find_by_email(email)
        if nickname:
            await profile_service.update_profile(stores, user, ProfileUpdateRequest(nickname=nickname))
        return user
    return _register


@pytest_asyncio.fixture
async def alice(register_user) -> User:
    return await register_user("alice@test.com", "alice")


@pytest_asyncio.fixture
async def bob(register_user) -> User:
    return await register_user("bob@test.com", "bob")


@pytest_asyncio.fixture
async def carol(register_user) -> User:
    return await register_user("carol@test.com", "carol")
