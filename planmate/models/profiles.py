from datetime import datetime, timezone
from typing import Optional
from beanie import Document
from pydantic import Field
from pymongo import ASCENDING, IndexModel


class ProfileDocument(Document):
    user_id: str = Field(..., description="Owning user ID")
    nickname: Optional[str] = Field(None, description="Public nickname")
    phone_number: Optional[str] = Field(None, description="Phone number")
    age: Optional[int] = Field(None, description="Age")
    gender: Optional[str] = Field(None, description="Male, Female or Hide")
    address: Optional[str] = Field(None, description="Address")
    profile_image: Optional[str] = Field(None, description="Profile image reference")
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "profiles"
        indexes = [
            IndexModel([("user_id", ASCENDING)], unique=True),
            [("nickname", ASCENDING)],  # For friend lookups by nickname
        ]

    def __repr__(self):
        return f"<ProfileDocument(user_id={self.user_id}, nickname={self.nickname})>"
