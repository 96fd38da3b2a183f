from enum import Enum
from typing import Optional, Set
from pydantic import BaseModel, Field


class FriendField(str, Enum):
    """친구 그래프 레코드의 집합 필드"""
    FRIENDS = "friends"
    PENDING_REQUESTS = "pending_requests"

    @property
    def other(self) -> "FriendField":
        return FriendField.PENDING_REQUESTS if self is FriendField.FRIENDS else FriendField.FRIENDS


class FriendGraph(BaseModel):
    """사용자별 친구 그래프 (확정된 친구 / 받은 요청)"""
    user_id: str
    friends: Set[str] = Field(default_factory=set, description="친구 사용자 ID 집합")
    pending_requests: Set[str] = Field(default_factory=set, description="받은 친구 요청 사용자 ID 집합")


class FriendSummary(BaseModel):
    """친구/요청 목록 항목 (조회 실패 시 null)"""
    nickname: Optional[str] = None
    profile_image: Optional[str] = None


class NicknameRequest(BaseModel):
    nickname: str = Field(..., min_length=1, description="대상 사용자 닉네임")
