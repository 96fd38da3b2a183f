from planmate.core.errors import nickname_already_exists_error
from planmate.core.logging import get_logger
from planmate.core.validators import validate_profile_update
from planmate.schemas import User, Profile, Gender, ProfileResponse, ProfileUpdateRequest, MutationResult
from planmate.stores.base import Stores

logger = get_logger(__name__)


async def get_profile(stores: Stores, user: User) -> ProfileResponse:
    """내 프로필 조회 (프로필 레코드가 없으면 빈 값)"""
    profile = await stores.profiles.find_by_user_id(user.id) or Profile(user_id=user.id)
    return ProfileResponse(email=user.email, **profile.model_dump(exclude={"user_id", "updated_at"}))


async def update_profile(stores: Stores, user: User, request: ProfileUpdateRequest) -> MutationResult:
    """
    프로필 부분 수정

    전달된 필드만 변경하며, 명시적으로 null 을 보낸 필드는 비웁니다.
    닉네임은 친구 기능의 공개 식별자이므로 다른 사용자가 이미 사용 중이면 거부합니다.
    """
    changes = request.model_dump(exclude_unset=True)

    validated = validate_profile_update(
        nickname=changes.get("nickname"),
        phone_number=changes.get("phone_number"),
        age=changes.get("age"),
        gender=changes.get("gender"),
        address=changes.get("address")
    )

    if changes.get("nickname") is not None:
        # validate_nickname 은 앞뒤 공백을 제거한 값을 반환
        changes["nickname"] = validated[0]
        owner = await stores.profiles.find_by_nickname(changes["nickname"])
        if owner is not None and owner.user_id != user.id:
            raise nickname_already_exists_error()

    if changes.get("gender") is not None:
        changes["gender"] = Gender(changes["gender"])

    profile = await stores.profiles.find_by_user_id(user.id) or Profile(user_id=user.id)
    updated = profile.model_copy(update=changes)
    await stores.profiles.upsert(updated)

    logger.info("Profile updated", extra={"user": user.id, "fields": sorted(changes)})
    return MutationResult(success=True, message="Profile updated")
