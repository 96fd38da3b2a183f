from typing import List
from beanie import Document
from pydantic import BaseModel, Field
from pymongo import ASCENDING, IndexModel


class ScheduleEntryModel(BaseModel):
    key: str = Field(..., description="Server generated entry key")
    work: str
    place: str = ""
    date: str
    start_time: str
    end_time: str


class ScheduleDocument(Document):
    user_id: str = Field(..., description="Owning user ID")
    entries: List[ScheduleEntryModel] = Field(default_factory=list, description="Entries in insertion order")

    class Settings:
        name = "schedules"
        indexes = [
            IndexModel([("user_id", ASCENDING)], unique=True),
        ]

    def __repr__(self):
        return f"<ScheduleDocument(user_id={self.user_id}, entries={len(self.entries)})>"
