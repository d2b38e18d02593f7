"""
User repository for SmartHire.

Read access to users and their declared skills.
"""

from typing import Optional

from bson import ObjectId

from smarthire.data.models.user import User

from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for user document operations."""

    @property
    def collection_name(self) -> str:
        return "users"

    @property
    def model_class(self) -> type[User]:
        return User

    def get_skills(self, user_id: str | ObjectId) -> Optional[list[str]]:
        """Skills from the user's profile, or None if the user does not exist."""
        collection = self._get_sync_collection()
        document = collection.find_one(
            {"_id": self._to_object_id(user_id)},
            {"profile.skills": 1},
        )
        if document is None:
            return None
        return list((document.get("profile") or {}).get("skills") or [])


# Singleton instance
_user_repository: Optional[UserRepository] = None


def get_user_repository() -> UserRepository:
    """Get the user repository singleton instance."""
    global _user_repository
    if _user_repository is None:
        _user_repository = UserRepository()
    return _user_repository
