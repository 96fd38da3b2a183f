"""
프로세스 메모리 저장소

로컬 실행(store_backend=memory)과 테스트에서 사용합니다. 재시작 시 데이터가 사라집니다.
"""

import uuid
from typing import Dict, List, Optional

from planmate.core.errors import email_already_exists_error
from planmate.schemas import User, Profile, Schedule, ScheduleEntry, FriendGraph, FriendField
from planmate.stores.base import Stores


class InMemoryCredentialStore:
    def __init__(self):
        self._users: Dict[str, User] = {}

    async def find_by_email(self, email: str) -> Optional[User]:
        for user in self._users.values():
            if user.email == email:
                return user.model_copy(deep=True)
        return None

    async def create(self, email: str, password_hash: str) -> User:
        if await self.find_by_email(email):
            raise email_already_exists_error()

        user = User(id=uuid.uuid4().hex, email=email, password_hash=password_hash)
        self._users[user.id] = user
        return user.model_copy(deep=True)

    async def delete(self, user_id: str) -> None:
        self._users.pop(user_id, None)


class InMemoryProfileStore:
    def __init__(self):
        # dict 는 삽입 순서를 유지하므로 "첫 번째 일치" 가 결정적
        self._profiles: Dict[str, Profile] = {}

    async def find_by_user_id(self, user_id: str) -> Optional[Profile]:
        profile = self._profiles.get(user_id)
        return profile.model_copy(deep=True) if profile else None

    async def find_by_nickname(self, nickname: str) -> Optional[Profile]:
        for profile in self._profiles.values():
            if profile.nickname == nickname:
                return profile.model_copy(deep=True)
        return None

    async def upsert(self, profile: Profile) -> Profile:
        self._profiles[profile.user_id] = profile.model_copy(deep=True)
        return profile


class InMemoryScheduleStore:
    def __init__(self):
        self._schedules: Dict[str, List[ScheduleEntry]] = {}

    async def find_by_user_id(self, user_id: str) -> Optional[Schedule]:
        if user_id not in self._schedules:
            return None
        entries = [entry.model_copy() for entry in self._schedules[user_id]]
        return Schedule(user_id=user_id, entries=entries)

    async def create_empty(self, user_id: str) -> Schedule:
        self._schedules.setdefault(user_id, [])
        return Schedule(user_id=user_id)

    async def append_entry(self, user_id: str, entry: ScheduleEntry) -> None:
        self._schedules.setdefault(user_id, []).append(entry.model_copy())

    async def replace_entry_by_key(self, user_id: str, key: str, entry: ScheduleEntry) -> bool:
        entries = self._schedules.get(user_id, [])
        for index, existing in enumerate(entries):
            if existing.key == key:
                entries[index] = entry.model_copy()
                return True
        return False

    async def remove_entry_by_key(self, user_id: str, key: str) -> bool:
        entries = self._schedules.get(user_id, [])
        remaining = [entry for entry in entries if entry.key != key]
        if len(remaining) == len(entries):
            return False
        self._schedules[user_id] = remaining
        return True


class InMemoryFriendGraphStore:
    def __init__(self):
        self._graphs: Dict[str, FriendGraph] = {}

    async def find_by_user_id(self, user_id: str) -> Optional[FriendGraph]:
        graph = self._graphs.get(user_id)
        return graph.model_copy(deep=True) if graph else None

    async def create_empty(self, user_id: str) -> FriendGraph:
        graph = self._graphs.setdefault(user_id, FriendGraph(user_id=user_id))
        return graph.model_copy(deep=True)

    async def add_to_set(self, user_id: str, field: FriendField, peer_id: str) -> None:
        # 레코드가 없으면 빈 그래프로 생성 (Mongo upsert 와 동일)
        graph = self._graphs.setdefault(user_id, FriendGraph(user_id=user_id))
        getattr(graph, field.value).add(peer_id)

    async def remove_from_set(self, user_id: str, field: FriendField, peer_id: str) -> None:
        graph = self._graphs.get(user_id)
        if graph is not None:
            getattr(graph, field.value).discard(peer_id)


class InMemoryHealth:
    async def ping(self) -> bool:
        return True


def create_memory_stores() -> Stores:
    return Stores(
        credentials=InMemoryCredentialStore(),
        profiles=InMemoryProfileStore(),
        schedules=InMemoryScheduleStore(),
        friend_graphs=InMemoryFriendGraphStore(),
        health=InMemoryHealth(),
    )
