"""
Services layer for data access and domain rules.

This layer handles:
- Account creation and token issuance
- Profile updates
- Schedule entry management
- The friend-relationship state machine
"""

from . import auth_service
from . import profile_service
from . import schedule_service
from .friendship_service import FriendshipService

__all__ = [
    "auth_service",
    "profile_service",
    "schedule_service",
    "FriendshipService",
]
