from typing import List
from beanie import Document
from pydantic import Field
from pymongo import ASCENDING, IndexModel


class FriendGraphDocument(Document):
    user_id: str = Field(..., description="Owning user ID")
    friends: List[str] = Field(default_factory=list, description="Confirmed friend user IDs")
    pending_requests: List[str] = Field(default_factory=list, description="User IDs with an unanswered request")

    class Settings:
        name = "friend_graphs"
        indexes = [
            IndexModel([("user_id", ASCENDING)], unique=True),
        ]

    def __repr__(self):
        return f"<FriendGraphDocument(user_id={self.user_id}, friends={len(self.friends)}, pending={len(self.pending_requests)})>"
