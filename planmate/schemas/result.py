from typing import List, Optional
from pydantic import BaseModel, Field


class MutationResult(BaseModel):
    """뮤테이션 공통 결과"""
    success: bool
    message: str


class FieldError(BaseModel):
    field: str
    message: str


class SignUpResult(MutationResult):
    """회원가입 결과 (실패도 예외 대신 페이로드로 반환)"""
    errors: List[FieldError] = Field(default_factory=list)


class SignInResult(MutationResult):
    token: Optional[str] = None
    token_type: str = "bearer"
    expires_in: Optional[int] = None


class ScheduleCreateResult(MutationResult):
    key: Optional[str] = None


class EmailLookupResult(BaseModel):
    exists: bool
