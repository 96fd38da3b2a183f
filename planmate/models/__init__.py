from .users import UserDocument
from .profiles import ProfileDocument
from .schedules import ScheduleDocument, ScheduleEntryModel
from .friend_graphs import FriendGraphDocument

DOCUMENT_MODELS = [
    UserDocument,
    ProfileDocument,
    ScheduleDocument,
    FriendGraphDocument,
]

__all__ = [
    "UserDocument",
    "ProfileDocument",
    "ScheduleDocument",
    "ScheduleEntryModel",
    "FriendGraphDocument",
    "DOCUMENT_MODELS",
]
