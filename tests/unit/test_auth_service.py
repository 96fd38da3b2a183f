import pytest

from planmate.core.errors import AuthenticationException
from planmate.core.security import get_password_hash
from planmate.services import auth_service


class TestSignUp:
    """회원가입 테스트"""

    @pytest.mark.asyncio
    async def test_sign_up_creates_linked_records(self, stores):
        result = await auth_service.sign_up(stores, "user@test.com", "Abc123", "Abc123")

        assert result.success is True
        assert result.errors == []

        user = await stores.credentials.find_by_email("user@test.com")
        assert user is not None
        assert user.password_hash != "Abc123"

        profile = await stores.profiles.find_by_user_id(user.id)
        schedule = await stores.schedules.find_by_user_id(user.id)
        graph = await stores.friend_graphs.find_by_user_id(user.id)

        assert profile.user_id == user.id
        assert profile.nickname is None
        assert schedule.user_id == user.id
        assert schedule.entries == []
        assert graph.user_id == user.id
        assert graph.friends == set()
        assert graph.pending_requests == set()

    @pytest.mark.asyncio
    async def test_sign_up_validation_failure_returns_payload(self, stores):
        result = await auth_service.sign_up(stores, "bad-email", "Abc123", "Xyz789")

        assert result.success is False
        assert {error.field for error in result.errors} == {"email", "confirm_password"}
        assert await stores.credentials.find_by_email("bad-email") is None

    @pytest.mark.asyncio
    async def test_sign_up_duplicate_email_returns_payload(self, stores):
        await auth_service.sign_up(stores, "user@test.com", "Abc123", "Abc123")
        result = await auth_service.sign_up(stores, "user@test.com", "Abc456", "Abc456")

        assert result.success is False
        assert result.message == "Email already registered"
        assert result.errors[0].field == "email"

    @pytest.mark.asyncio
    async def test_email_is_case_sensitive(self, stores):
        await auth_service.sign_up(stores, "user@test.com", "Abc123", "Abc123")

        assert await auth_service.is_email_exists(stores, "user@test.com") is True
        assert await auth_service.is_email_exists(stores, "USER@test.com") is False


class TestSignIn:
    """로그인 테스트"""

    @pytest.mark.asyncio
    async def test_sign_in_returns_token_with_email_claim(self, stores, tokens):
        await auth_service.sign_up(stores, "user@test.com", "Abc123", "Abc123")

        result = await auth_service.sign_in(stores, tokens, "user@test.com", "Abc123")

        assert result.success is True
        assert result.token_type == "bearer"
        assert result.expires_in == 24 * 60 * 60
        assert tokens.verify(result.token)["email"] == "user@test.com"

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_are_indistinguishable(self, stores, tokens):
        await auth_service.sign_up(stores, "user@test.com", "Abc123", "Abc123")

        with pytest.raises(AuthenticationException) as wrong_password:
            await auth_service.sign_in(stores, tokens, "user@test.com", "Wrong123")

        with pytest.raises(AuthenticationException) as unknown_email:
            await auth_service.sign_in(stores, tokens, "nobody@test.com", "Abc123")

        assert wrong_password.value.to_dict() == unknown_email.value.to_dict()
        assert wrong_password.value.message == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_sign_in_creates_missing_friend_graph(self, stores, tokens):
        """친구 그래프가 없던 기존 계정은 로그인 시 빈 그래프 생성"""
        user = await stores.credentials.create("legacy@test.com", get_password_hash("Abc123"))
        assert await stores.friend_graphs.find_by_user_id(user.id) is None

        await auth_service.sign_in(stores, tokens, "legacy@test.com", "Abc123")

        graph = await stores.friend_graphs.find_by_user_id(user.id)
        assert graph is not None
        assert graph.friends == set()
        assert graph.pending_requests == set()
