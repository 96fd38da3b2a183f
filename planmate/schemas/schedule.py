from typing import List
from pydantic import BaseModel, Field


class ScheduleEntry(BaseModel):
    """일정 항목"""
    key: str = Field(..., description="서버에서 생성한 항목 키")
    work: str = Field(..., description="할 일")
    place: str = Field(default="", description="장소")
    date: str = Field(..., description="날짜 (YYYY-MM-DD)")
    start_time: str = Field(..., description="시작 시간 (HH:MM)")
    end_time: str = Field(..., description="종료 시간 (HH:MM)")


class Schedule(BaseModel):
    """사용자 일정 (사용자당 1개, 삽입 순서 유지)"""
    user_id: str
    entries: List[ScheduleEntry] = Field(default_factory=list)


class ScheduleCreateRequest(BaseModel):
    work: str = Field(..., description="할 일")
    place: str = Field(default="", description="장소")
    date: str = Field(..., description="날짜 (YYYY-MM-DD)")
    start_time: str = Field(..., description="시작 시간 (HH:MM)")
    end_time: str = Field(..., description="종료 시간 (HH:MM)")


class ScheduleUpdateRequest(ScheduleCreateRequest):
    key: str = Field(..., min_length=1, description="수정할 항목 키")


class ScheduleDeleteRequest(BaseModel):
    key: str = Field(..., min_length=1, description="삭제할 항목 키")
