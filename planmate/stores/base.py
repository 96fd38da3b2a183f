"""
저장소 인터페이스

서비스 계층은 아래 프로토콜만 사용합니다. 구현체는 MongoDB(Beanie)와
프로세스 메모리 두 가지가 있으며, 설정의 store_backend 로 선택합니다.
"""

from dataclasses import dataclass
from typing import Optional, Protocol

from planmate.schemas import User, Profile, Schedule, ScheduleEntry, FriendGraph, FriendField


class CredentialStore(Protocol):
    async def find_by_email(self, email: str) -> Optional[User]: ...

    async def create(self, email: str, password_hash: str) -> User:
        """이메일 중복 시 email_already_exists_error 발생"""
        ...


class ProfileStore(Protocol):
    async def find_by_user_id(self, user_id: str) -> Optional[Profile]: ...

    async def find_by_nickname(self, nickname: str) -> Optional[Profile]:
        """중복 닉네임이 있으면 첫 번째 레코드 반환"""
        ...

    async def upsert(self, profile: Profile) -> Profile: ...


class ScheduleStore(Protocol):
    async def find_by_user_id(self, user_id: str) -> Optional[Schedule]: ...

    async def create_empty(self, user_id: str) -> Schedule: ...

    async def append_entry(self, user_id: str, entry: ScheduleEntry) -> None: ...

    async def replace_entry_by_key(self, user_id: str, key: str, entry: ScheduleEntry) -> bool:
        """키가 일치하는 항목을 교체하고 교체 여부 반환"""
        ...

    async def remove_entry_by_key(self, user_id: str, key: str) -> bool:
        """키가 일치하는 항목을 삭제하고 삭제 여부 반환"""
        ...


class FriendGraphStore(Protocol):
    async def find_by_user_id(self, user_id: str) -> Optional[FriendGraph]: ...

    async def create_empty(self, user_id: str) -> FriendGraph: ...

    async def add_to_set(self, user_id: str, field: FriendField, peer_id: str) -> None:
        """집합에 추가 (레코드가 없으면 빈 그래프로 생성)"""
        ...

    async def remove_from_set(self, user_id: str, field: FriendField, peer_id: str) -> None: ...


class StoreHealth(Protocol):
    async def ping(self) -> bool: ...


@dataclass
class Stores:
    """서비스 계층에 전달되는 저장소 묶음"""
    credentials: CredentialStore
    profiles: ProfileStore
    schedules: ScheduleStore
    friend_graphs: FriendGraphStore
    health: StoreHealth
