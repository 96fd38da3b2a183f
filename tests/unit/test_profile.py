import pytest

from planmate.core.errors import ConflictException, ValidationException
from planmate.schemas import Gender, ProfileUpdateRequest
from planmate.services import profile_service


class TestProfileService:
    """프로필 서비스 테스트"""

    @pytest.mark.asyncio
    async def test_new_profile_is_empty(self, stores, register_user):
        user = await register_user("plain@test.com")

        profile = await profile_service.get_profile(stores, user)

        assert profile.email == "plain@test.com"
        assert profile.nickname is None
        assert profile.gender is None

    @pytest.mark.asyncio
    async def test_partial_update(self, stores, alice):
        await profile_service.update_profile(
            stores,
            alice,
            ProfileUpdateRequest(phone_number="010-1234-5678", age=30, gender="Female")
        )
        result = await profile_service.update_profile(
            stores,
            alice,
            ProfileUpdateRequest(address="Seoul", profile_image="avatars/alice.png")
        )

        assert result.success is True
        profile = await profile_service.get_profile(stores, alice)
        assert profile.nickname == "alice"
        assert profile.phone_number == "010-1234-5678"
        assert profile.age == 30
        assert profile.gender == Gender.FEMALE
        assert profile.address == "Seoul"
        assert profile.profile_image == "avatars/alice.png"

    @pytest.mark.asyncio
    async def test_nickname_taken_by_other_user(self, stores, alice, bob):
        with pytest.raises(ConflictException, match="Nickname already taken"):
            await profile_service.update_profile(stores, bob, ProfileUpdateRequest(nickname="alice"))

        profile = await profile_service.get_profile(stores, bob)
        assert profile.nickname == "bob"

    @pytest.mark.asyncio
    async def test_keeping_own_nickname_is_allowed(self, stores, alice):
        result = await profile_service.update_profile(stores, alice, ProfileUpdateRequest(nickname="alice", age=20))

        assert result.success is True

    @pytest.mark.asyncio
    async def test_invalid_values_rejected(self, stores, alice):
        with pytest.raises(ValidationException):
            await profile_service.update_profile(stores, alice, ProfileUpdateRequest(age=-1, gender="Unknown"))

        profile = await profile_service.get_profile(stores, alice)
        assert profile.age is None
        assert profile.gender is None

    @pytest.mark.asyncio
    async def test_explicit_null_clears_field(self, stores, alice):
        await profile_service.update_profile(
            stores,
            alice,
            ProfileUpdateRequest(address="Seoul", profile_image="avatars/alice.png")
        )

        await profile_service.update_profile(stores, alice, ProfileUpdateRequest(address=None))

        profile = await profile_service.get_profile(stores, alice)
        assert profile.address is None
        assert profile.profile_image == "avatars/alice.png"
        assert profile.nickname == "alice"
