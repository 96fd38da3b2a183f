from dataclasses import dataclass

from planmate.core.config import Settings
from planmate.core.security import TokenService
from planmate.stores.base import Stores


@dataclass
class AppContext:
    """애플리케이션 수명 동안 공유되는 읽기 전용 의존성"""
    settings: Settings
    stores: Stores
    tokens: TokenService

    @classmethod
    def create(cls, settings: Settings, stores: Stores) -> "AppContext":
        return cls(settings=settings, stores=stores, tokens=TokenService.from_settings(settings))
