from .activity_log_repository import ActivityLogRepository
from .user_repository import UserRepository

__all__ = ["ActivityLogRepository", "UserRepository"]
