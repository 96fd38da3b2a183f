from .user import User, Profile, Gender, ProfileResponse, ProfileUpdateRequest, SignUpRequest, SignInRequest, EmailLookupRequest
from .schedule import Schedule, ScheduleEntry, ScheduleCreateRequest, ScheduleUpdateRequest, ScheduleDeleteRequest
from .friendship import FriendGraph, FriendField, FriendSummary, NicknameRequest
from .result import MutationResult, SignUpResult, SignInResult, FieldError, EmailLookupResult, ScheduleCreateResult

__all__ = [
    "User",
    "Profile",
    "Gender",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "SignUpRequest",
    "SignInRequest",
    "EmailLookupRequest",
    "Schedule",
    "ScheduleEntry",
    "ScheduleCreateRequest",
    "ScheduleUpdateRequest",
    "ScheduleDeleteRequest",
    "FriendGraph",
    "FriendField",
    "FriendSummary",
    "NicknameRequest",
    "MutationResult",
    "SignUpResult",
    "SignInResult",
    "FieldError",
    "EmailLookupResult",
    "ScheduleCreateResult",
]
