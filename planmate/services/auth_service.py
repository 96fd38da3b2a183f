"""
계정 서비스: 회원가입, 로그인(토큰 발급), 이메일 조회
"""

from typing import Optional

from planmate.core.errors import (
    ValidationException,
    ConflictException,
    email_already_exists_error,
    invalid_credentials_error
)
from planmate.core.logging import get_logger, log_authentication_event
from planmate.core.security import TokenService, get_password_hash, verify_password
from planmate.core.validators import validate_sign_up
from planmate.schemas import User, Profile, SignUpResult, SignInResult, FieldError
from planmate.stores.base import Stores

logger = get_logger(__name__)


async def find_user_by_email(stores: Stores, email: str) -> Optional[User]:
    """이메일로 사용자 조회"""
    return await stores.credentials.find_by_email(email)


async def is_email_exists(stores: Stores, email: str) -> bool:
    """이메일 존재 여부 확인"""
    return await find_user_by_email(stores, email) is not None


async def sign_up(
    stores: Stores,
    email: str,
    password: str,
    confirm_password: str
) -> SignUpResult:
    """
    회원가입

    검증 실패와 이메일 중복은 예외 대신 실패 페이로드로 반환합니다.
    성공 시 계정, 빈 프로필, 빈 일정, 빈 친구 그래프가 같은 사용자 ID로 생성됩니다.
    """
    try:
        validate_sign_up(email, password, confirm_password)
    except ValidationException as e:
        log_authentication_event(logger, "sign_up", email=email, success=False, reason="validation")
        return SignUpResult(
            success=False,
            message=e.message,
            errors=[FieldError(field=error.field, message=error.message) for error in e.validation_errors]
        )

    try:
        if await is_email_exists(stores, email):
            raise email_already_exists_error()
        user = await stores.credentials.create(email, get_password_hash(password))
    except ConflictException as e:
        log_authentication_event(logger, "sign_up", email=email, success=False, reason="duplicate_email")
        return SignUpResult(
            success=False,
            message=e.message,
            errors=[FieldError(field="email", message=e.message)]
        )

    await stores.profiles.upsert(Profile(user_id=user.id))
    await stores.schedules.create_empty(user.id)
    await stores.friend_graphs.create_empty(user.id)

    log_authentication_event(logger, "sign_up", email=email, user=user.id)
    return SignUpResult(success=True, message="Sign up completed")


async def authenticate_user_by_email(stores: Stores, email: str, password: str) -> Optional[User]:
    """이메일/비밀번호 인증 (존재하지 않는 이메일도 동일한 비용으로 검증)"""
    user = await find_user_by_email(stores, email)
    if not verify_password(password, user.password_hash if user else None):
        return None
    return user


async def sign_in(stores: Stores, tokens: TokenService, email: str, password: str) -> SignInResult:
    """
    로그인 후 24시간 유효한 토큰 발급

    이메일 미존재와 비밀번호 불일치는 같은 에러로 처리합니다.
    친구 그래프가 없는 기존 계정은 이 시점에 빈 그래프를 생성합니다.
    """
    user = await authenticate_user_by_email(stores, email, password)
    if not user:
        log_authentication_event(logger, "sign_in", email=email, success=False)
        raise invalid_credentials_error()

    if await stores.friend_graphs.find_by_user_id(user.id) is None:
        logger.info("Creating missing friend graph on sign in", extra={"user": user.id})
        await stores.friend_graphs.create_empty(user.id)

    token = tokens.issue({"email": user.email})
    log_authentication_event(logger, "sign_in", email=email, user=user.id)

    return SignInResult(
        success=True,
        message="Signed in",
        token=token,
        expires_in=int(tokens.ttl.total_seconds())
    )
