"""
Database repositories for SmartHire data access.

This module provides repository classes for all database collections,
implementing the repository pattern for clean data access.
"""

# Base repository
from .base import BaseRepository, DuplicateRecordError

# Entity repositories
from .application_repository import ApplicationRepository, get_application_repository
from .job_repository import JobRepository, get_job_repository
from .user_repository import UserRepository, get_user_repository
from .notification_repository import NotificationRepository, get_notification_repository

__all__ = [
    # Base
    "BaseRepository",
    "DuplicateRecordError",
    # Application
    "ApplicationRepository",
    "get_application_repository",
    # Job
    "JobRepository",
    "get_job_repository",
    # User
    "UserRepository",
    "get_user_repository",
    # Notification
    "NotificationRepository",
    "get_notification_repository",
]
