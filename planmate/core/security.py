from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from planmate.core.config import Settings
from planmate.core.errors import invalid_token_error

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# 존재하지 않는 이메일로 로그인 시에도 동일한 검증 비용을 치르기 위한 해시
_DUMMY_HASH = pwd_context.hash("planmate-dummy-password")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """비밀번호 검증 (bcrypt 상수 시간 비교)"""
    if hashed_password is None:
        pwd_context.verify(plain_password, _DUMMY_HASH)
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


class TokenService:
    """
    Bearer 토큰 발급/검증 서비스

    서명 키는 시작 시점에 명시적으로 주입됩니다. 테스트에서는
    서로 다른 키를 가진 인스턴스를 만들어 사용할 수 있습니다.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", ttl: timedelta = timedelta(hours=24)):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.ttl = ttl

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret_key=settings.secret_key,
            algorithm=settings.algorithm,
            ttl=timedelta(hours=settings.access_token_expire_hours)
        )

    def issue(self, claims: Dict[str, Any], ttl: Optional[timedelta] = None) -> str:
        """클레임에 만료 시간을 더해 서명된 토큰 발급"""
        to_encode = claims.copy()
        expire = datetime.now(timezone.utc) + (ttl or self.ttl)
        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Dict[str, Any]:
        """
        토큰 검증 후 클레임 반환

        서명 오류, 형식 오류, 만료는 구분하지 않고 모두 invalid_token_error 로 처리합니다.
        """
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            raise invalid_token_error()
