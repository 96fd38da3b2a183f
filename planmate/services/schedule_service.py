import uuid
from typing import List

from planmate.core.logging import get_logger
from planmate.core.validators import validate_schedule_entry
from planmate.schemas import (
    User,
    ScheduleEntry,
    ScheduleCreateRequest,
    ScheduleUpdateRequest,
    MutationResult,
    ScheduleCreateResult
)
from planmate.stores.base import Stores

logger = get_logger(__name__)


def _validate(request: ScheduleCreateRequest):
    validate_schedule_entry(
        request.work,
        request.place,
        request.date,
        request.start_time,
        request.end_time
    )


async def list_entries(stores: Stores, user_id: str) -> List[ScheduleEntry]:
    """사용자 일정 전체 조회 (삽입 순서)"""
    schedule = await stores.schedules.find_by_user_id(user_id)
    return schedule.entries if schedule else []


async def create_entry(stores: Stores, user: User, request: ScheduleCreateRequest) -> ScheduleCreateResult:
    """일정 추가 (키는 서버에서 생성)"""
    _validate(request)

    if await stores.schedules.find_by_user_id(user.id) is None:
        await stores.schedules.create_empty(user.id)

    entry = ScheduleEntry(key=uuid.uuid4().hex, **request.model_dump())
    await stores.schedules.append_entry(user.id, entry)

    logger.info("Schedule entry created", extra={"user": user.id, "key": entry.key})
    return ScheduleCreateResult(success=True, message="Schedule created", key=entry.key)


async def update_entry(stores: Stores, user: User, request: ScheduleUpdateRequest) -> MutationResult:
    """
    키로 일정 교체

    일치하는 키가 없으면 아무것도 변경하지 않고 성공을 반환합니다.
    """
    _validate(request)

    entry = ScheduleEntry(**request.model_dump())
    replaced = await stores.schedules.replace_entry_by_key(user.id, request.key, entry)
    if not replaced:
        logger.info("Schedule update matched no entry", extra={"user": user.id, "key": request.key})

    return MutationResult(success=True, message="Schedule updated")


async def delete_entry(stores: Stores, user: User, key: str) -> MutationResult:
    """
    키로 일정 삭제

    일치하는 키가 없으면 아무것도 변경하지 않고 성공을 반환합니다.
    """
    removed = await stores.schedules.remove_entry_by_key(user.id, key)
    if not removed:
        logger.info("Schedule delete matched no entry", extra={"user": user.id, "key": key})

    return MutationResult(success=True, message="Schedule deleted")
