from datetime import datetime, timezone
from beanie import Document
from pydantic import Field
from pymongo import ASCENDING, IndexModel


class UserDocument(Document):
    email: str = Field(..., description="User email, unique as stored")
    password_hash: str = Field(..., description="bcrypt password hash")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "users"
        indexes = [
            IndexModel([("email", ASCENDING)], unique=True),
        ]

    def __repr__(self):
        return f"<UserDocument(id={self.id}, email={self.email})>"
