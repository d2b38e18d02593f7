"""
Notification data model for SmartHire.
"""

from pydantic import Field

from smarthire.utils.constants import NotificationType

from .base import BaseDocument, PyObjectId


class Notification(BaseDocument):
    """In-app notification stored for a recipient."""

    user_id: PyObjectId
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.APPLICATION_UPDATE
    read: bool = False

    class Settings:
        """MongoDB collection settings."""

        name = "notifications"
        indexes = [[("user_id", 1), ("created_at", -1)]]
