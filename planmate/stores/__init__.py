from planmate.core.config import Settings
from .base import Stores, CredentialStore, ProfileStore, ScheduleStore, FriendGraphStore
from .memory import create_memory_stores


def build_stores(settings: Settings) -> Stores:
    """설정된 백엔드에 맞는 저장소 묶음 생성"""
    if settings.store_backend == "memory":
        return create_memory_stores()
    if settings.store_backend == "mongo":
        from .mongo import create_mongo_stores
        return create_mongo_stores()
    raise ValueError(f"Unknown store backend: {settings.store_backend}")


__all__ = [
    "Stores",
    "CredentialStore",
    "ProfileStore",
    "ScheduleStore",
    "FriendGraphStore",
    "build_stores",
    "create_memory_stores",
]
