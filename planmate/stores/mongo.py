"""
MongoDB 저장소 구현 (Beanie Document + Motor 컬렉션 연산)

집합/배열 변경은 $addToSet, $pull, $push 단일 문서 업데이트로 수행합니다.
드라이버 오류(PyMongoError)는 모두 StoreFailureException 으로 변환됩니다.
"""

import functools
import logging
from typing import Optional

from pymongo.errors import DuplicateKeyError, PyMongoError

from planmate.core.errors import StoreFailureException, email_already_exists_error
from planmate.database.mongodb import check_mongo_connection
from planmate.models import UserDocument, ProfileDocument, ScheduleDocument, FriendGraphDocument
from planmate.schemas import User, Profile, Schedule, ScheduleEntry, FriendGraph, FriendField
from planmate.stores.base import Stores

logger = logging.getLogger(__name__)


def store_operation(collection: str):
    """드라이버 예외를 StoreFailureException 으로 변환"""
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except PyMongoError as e:
                logger.error(
                    f"MongoDB operation failed on {collection}: {e}",
                    extra={"collection": collection, "operation": func.__name__}
                )
                raise StoreFailureException(collection) from e
        return wrapper
    return decorator


class MongoCredentialStore:
    @store_operation("users")
    async def find_by_email(self, email: str) -> Optional[User]:
        document = await UserDocument.find_one(UserDocument.email == email)
        if document is None:
            return None
        return User(
            id=str(document.id),
            email=document.email,
            password_hash=document.password_hash,
            created_at=document.created_at
        )

    @store_operation("users")
    async def create(self, email: str, password_hash: str) -> User:
        document = UserDocument(email=email, password_hash=password_hash)
        try:
            await document.insert()
        except DuplicateKeyError:
            raise email_already_exists_error()
        return User(
            id=str(document.id),
            email=document.email,
            password_hash=document.password_hash,
            created_at=document.created_at
        )


def _to_profile(document: ProfileDocument) -> Profile:
    return Profile.model_validate(document.model_dump(exclude={"id", "revision_id"}))


class MongoProfileStore:
    @store_operation("profiles")
    async def find_by_user_id(self, user_id: str) -> Optional[Profile]:
        document = await ProfileDocument.find_one(ProfileDocument.user_id == user_id)
        return _to_profile(document) if document else None

    @store_operation("profiles")
    async def find_by_nickname(self, nickname: str) -> Optional[Profile]:
        # 중복이 있으면 _id 순서상 첫 번째 레코드
        document = await ProfileDocument.find(
            ProfileDocument.nickname == nickname
        ).sort("_id").first_or_none()
        return _to_profile(document) if document else None

    @store_operation("profiles")
    async def upsert(self, profile: Profile) -> Profile:
        fields = profile.model_dump(mode="json", exclude={"user_id", "updated_at"})
        fields["updated_at"] = profile.updated_at
        await ProfileDocument.get_motor_collection().update_one(
            {"user_id": profile.user_id},
            {"$set": fields, "$setOnInsert": {"user_id": profile.user_id}},
            upsert=True
        )
        return profile


class MongoScheduleStore:
    @store_operation("schedules")
    async def find_by_user_id(self, user_id: str) -> Optional[Schedule]:
        document = await ScheduleDocument.find_one(ScheduleDocument.user_id == user_id)
        if document is None:
            return None
        return Schedule(
            user_id=document.user_id,
            entries=[ScheduleEntry.model_validate(entry.model_dump()) for entry in document.entries]
        )

    @store_operation("schedules")
    async def create_empty(self, user_id: str) -> Schedule:
        await ScheduleDocument.get_motor_collection().update_one(
            {"user_id": user_id},
            {"$setOnInsert": {"user_id": user_id, "entries": []}},
            upsert=True
        )
        return Schedule(user_id=user_id)

    @store_operation("schedules")
    async def append_entry(self, user_id: str, entry: ScheduleEntry) -> None:
        await ScheduleDocument.get_motor_collection().update_one(
            {"user_id": user_id},
            {"$push": {"entries": entry.model_dump()}}
        )

    @store_operation("schedules")
    async def replace_entry_by_key(self, user_id: str, key: str, entry: ScheduleEntry) -> bool:
        result = await ScheduleDocument.get_motor_collection().update_one(
            {"user_id": user_id, "entries.key": key},
            {"$set": {"entries.$": entry.model_dump()}}
        )
        return result.matched_count > 0

    @store_operation("schedules")
    async def remove_entry_by_key(self, user_id: str, key: str) -> bool:
        result = await ScheduleDocument.get_motor_collection().update_one(
            {"user_id": user_id},
            {"$pull": {"entries": {"key": key}}}
        )
        return result.modified_count > 0


class MongoFriendGraphStore:
    @store_operation("friend_graphs")
    async def find_by_user_id(self, user_id: str) -> Optional[FriendGraph]:
        document = await FriendGraphDocument.find_one(FriendGraphDocument.user_id == user_id)
        if document is None:
            return None
        return FriendGraph(
            user_id=document.user_id,
            friends=set(document.friends),
            pending_requests=set(document.pending_requests)
        )

    @store_operation("friend_graphs")
    async def create_empty(self, user_id: str) -> FriendGraph:
        await FriendGraphDocument.get_motor_collection().update_one(
            {"user_id": user_id},
            {"$setOnInsert": {"user_id": user_id, "friends": [], "pending_requests": []}},
            upsert=True
        )
        return FriendGraph(user_id=user_id)

    @store_operation("friend_graphs")
    async def add_to_set(self, user_id: str, field: FriendField, peer_id: str) -> None:
        await FriendGraphDocument.get_motor_collection().update_one(
            {"user_id": user_id},
            {"$addToSet": {field.value: peer_id}, "$setOnInsert": {field.other.value: []}},
            upsert=True
        )

    @store_operation("friend_graphs")
    async def remove_from_set(self, user_id: str, field: FriendField, peer_id: str) -> None:
        await FriendGraphDocument.get_motor_collection().update_one(
            {"user_id": user_id},
            {"$pull": {field.value: peer_id}}
        )


class MongoHealth:
    async def ping(self) -> bool:
        return await check_mongo_connection()


def create_mongo_stores() -> Stores:
    return Stores(
        credentials=MongoCredentialStore(),
        profiles=MongoProfileStore(),
        schedules=MongoScheduleStore(),
        friend_graphs=MongoFriendGraphStore(),
        health=MongoHealth(),
    )
