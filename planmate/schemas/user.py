from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    HIDE = "Hide"


class User(BaseModel):
    """계정 (인증 정보)"""
    id: str = Field(..., description="사용자 ID")
    email: str = Field(..., description="이메일 (저장된 그대로, 대소문자 구분)")
    password_hash: str = Field(..., description="bcrypt 해시")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Profile(BaseModel):
    """사용자 프로필 (사용자당 1개)"""
    user_id: str = Field(..., description="사용자 ID")
    nickname: Optional[str] = Field(None, description="공개 닉네임")
    phone_number: Optional[str] = Field(None, description="전화번호")
    age: Optional[int] = Field(None, description="나이")
    gender: Optional[Gender] = Field(None, description="성별")
    address: Optional[str] = Field(None, description="주소")
    profile_image: Optional[str] = Field(None, description="프로필 이미지 참조")
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ProfileResponse(BaseModel):
    """내 프로필 조회 응답"""
    model_config = ConfigDict(from_attributes=True)

    email: str
    nickname: Optional[str] = None
    phone_number: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[Gender] = None
    address: Optional[str] = None
    profile_image: Optional[str] = None


class SignUpRequest(BaseModel):
    """회원가입 요청 (형식 검증은 서비스에서 수행하여 실패 페이로드로 반환)"""
    email: str = Field(..., description="이메일")
    password: str = Field(..., description="비밀번호")
    confirm_password: str = Field(..., description="비밀번호 확인")


class SignInRequest(BaseModel):
    email: str = Field(..., description="이메일")
    password: str = Field(..., description="비밀번호")


class EmailLookupRequest(BaseModel):
    email: str = Field(..., description="조회할 이메일")


class ProfileUpdateRequest(BaseModel):
    """프로필 수정 요청 (전달된 필드만 변경)"""
    nickname: Optional[str] = Field(None, description="닉네임 (2-20자)")
    phone_number: Optional[str] = Field(None, description="전화번호")
    age: Optional[int] = Field(None, description="나이 (0-150)")
    gender: Optional[str] = Field(None, description="성별: Male, Female, Hide")
    address: Optional[str] = Field(None, max_length=200, description="주소")
    profile_image: Optional[str] = Field(None, max_length=500, description="프로필 이미지 참조")
