"""Persistent domain entities.

Importing this package registers every table on ``SQLModel.metadata``.
"""

from .activity_log import ActivityLogEntry, ActivityType
from .session import Session
from .user import User

__all__ = ["ActivityLogEntry", "ActivityType", "Session", "User"]
