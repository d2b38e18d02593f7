"""
Notification repository for SmartHire.
"""

from typing import Optional

from bson import ObjectId

from smarthire.data.models.notification import Notification

from .base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """Repository for notification document operations."""

    @property
    def collection_name(self) -> str:
        return "notifications"

    @property
    def model_class(self) -> type[Notification]:
        return Notification

    def get_for_user(
        self,
        user_id: str | ObjectId,
        unread_only: bool = False,
        limit: int = 50,
    ) -> list[Notification]:
        query: dict = {"user_id": self._to_object_id(user_id)}
        if unread_only:
            query["read"] = False
        return self.find(query, limit=limit, sort_by="created_at", sort_order=-1)

    def mark_as_read(self, notification_id: str | ObjectId) -> Optional[Notification]:
        return self.update(notification_id, {"read": True})


# Singleton instance
_notification_repository: Optional[NotificationRepository] = None


def get_notification_repository() -> NotificationRepository:
    """Get the notification repository singleton instance."""
    global _notification_repository
    if _notification_repository is None:
        _notification_repository = NotificationRepository()
    return _notification_repository
