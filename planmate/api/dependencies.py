from typing import Optional

from fastapi import Request

from planmate.core.context import AppContext
from planmate.core.errors import unauthenticated_error, invalid_token_error, user_not_found_error
from planmate.core.logging import get_logger, log_security_event, set_user_context
from planmate.core.security import TokenService
from planmate.schemas import User
from planmate.stores.base import Stores

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "


def get_context(request: Request) -> AppContext:
    """lifespan 에서 만든 애플리케이션 컨텍스트"""
    return request.app.state.context


class Authorizer:
    """
    Bearer 토큰 인증 게이트

    회원가입, 로그인, 이메일 조회를 제외한 모든 오퍼레이션은 저장소에
    접근하기 전에 이 게이트를 통과해야 합니다.
    """

    def __init__(self, stores: Stores, tokens: TokenService):
        self.stores = stores
        self.tokens = tokens

    @staticmethod
    def extract_token(authorization: Optional[str]) -> str:
        """'Bearer <token>' 헤더에서 토큰 추출"""
        if not authorization or not authorization.startswith(BEARER_PREFIX):
            raise unauthenticated_error()

        token = authorization.removeprefix(BEARER_PREFIX).strip()
        if not token:
            raise unauthenticated_error()
        return token

    async def authenticate(self, authorization: Optional[str]) -> User:
        """헤더를 검증하고 토큰의 email 클레임을 사용자로 해석"""
        token = self.extract_token(authorization)

        try:
            payload = self.tokens.verify(token)
        except Exception:
            log_security_event(logger, "invalid_token", severity="low")
            raise

        email = payload.get("email")
        if not email:
            raise invalid_token_error()

        user = await self.stores.credentials.find_by_email(email)
        if user is None:
            # 토큰 발급 후 계정이 삭제된 경우
            raise user_not_found_error(email)

        set_user_context(user.id)
        return user

