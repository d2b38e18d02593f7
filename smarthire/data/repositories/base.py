"""
Base repository class providing common CRUD operations.

All entity-specific repositories inherit from this base class.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

from bson import ObjectId
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

from smarthire.data.database import get_database_manager
from smarthire.data.models.base import BaseDocument, utc_now
from smarthire.utils.logger import get_logger

logger = get_logger(__name__)

# Type variable for document models
T = TypeVar("T", bound=BaseDocument)


class DuplicateRecordError(Exception):
    """
    A write violated a unique index.

    Raised instead of pymongo's DuplicateKeyError so callers can tell
    uniqueness violations apart from other write failures without
    depending on the driver.
    """

    def __init__(self, collection: str, key: Optional[dict[str, Any]] = None) -> None:
        self.collection = collection
        self.key = key or {}
        super().__init__(f"Duplicate record in {collection}: {self.key}")


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository providing common database operations.

    Subclasses must define the collection name and model class.
    """

    @property
    @abstractmethod
    def collection_name(self) -> str:
        """Name of the MongoDB collection."""

    @property
    @abstractmethod
    def model_class(self) -> type[T]:
        """Pydantic model class for this repository."""

    def __init__(self) -> None:
        self._db_manager = get_database_manager()

    # -------------------------------------------------------------------------
    # Collection Access
    # -------------------------------------------------------------------------

    def _get_sync_collection(self) -> Collection:
        return self._db_manager.get_sync_collection(self.collection_name)

    # -------------------------------------------------------------------------
    # Document Conversion
    # -------------------------------------------------------------------------

    def _to_model(self, document: Optional[dict[str, Any]]) -> Optional[T]:
        if document is None:
            return None
        return self.model_class.model_validate(document)

    def _to_models(self, documents: list[dict[str, Any]]) -> list[T]:
        return [self._to_model(doc) for doc in documents if doc is not None]

    def _to_document(self, model: T) -> dict[str, Any]:
        return model.model_dump_mongo()

    @staticmethod
    def _to_object_id(id_value: str | ObjectId) -> ObjectId:
        if isinstance(id_value, ObjectId):
            return id_value
        return ObjectId(id_value)

    # -------------------------------------------------------------------------
    # CRUD Operations
    # -------------------------------------------------------------------------

    def create(self, model: T) -> T:
        """
        Insert a new document.

        Raises:
            DuplicateRecordError: if the document violates a unique index
        """
        collection = self._get_sync_collection()
        now = utc_now()
        model.created_at = now
        model.updated_at = now
        document = self._to_document(model)

        try:
            result: InsertOneResult = collection.insert_one(document)
        except DuplicateKeyError as e:
            key = (e.details or {}).get("keyValue")
            logger.warning(f"Duplicate key on {self.collection_name}: {key}")
            raise DuplicateRecordError(self.collection_name, key) from e

        model.id = result.inserted_id
        logger.debug(f"Created {self.collection_name} document: {result.inserted_id}")
        return model

    def get_by_id(self, id_value: str | ObjectId) -> Optional[T]:
        collection = self._get_sync_collection()
        document = collection.find_one({"_id": self._to_object_id(id_value)})
        return self._to_model(document)

    def find(
        self,
        query: dict[str, Any],
        skip: int = 0,
        limit: int = 100,
        sort_by: Optional[str] = None,
        sort_order: int = -1,
    ) -> list[T]:
        """
        Find documents matching a query.

        A ``limit`` of 0 returns every matching document.
        """
        collection = self._get_sync_collection()
        cursor = collection.find(query).skip(skip).limit(limit)
        cursor = cursor.sort(sort_by or "created_at", sort_order)
        return self._to_models(list(cursor))

    def find_one(self, query: dict[str, Any]) -> Optional[T]:
        collection = self._get_sync_collection()
        return self._to_model(collection.find_one(query))

    def update(self, id_value: str | ObjectId, update_data: dict[str, Any]) -> Optional[T]:
        """Set fields on a document by ID; returns the updated model or None."""
        collection = self._get_sync_collection()
        update_data["updated_at"] = utc_now()

        result: UpdateResult = collection.update_one(
            {"_id": self._to_object_id(id_value)},
            {"$set": update_data},
        )

        if result.matched_count > 0:
            logger.debug(f"Updated {self.collection_name} document: {id_value}")
            return self.get_by_id(id_value)
        return None

    def delete(self, id_value: str | ObjectId) -> bool:
        collection = self._get_sync_collection()
        result: DeleteResult = collection.delete_one(
            {"_id": self._to_object_id(id_value)}
        )
        if result.deleted_count > 0:
            logger.debug(f"Deleted {self.collection_name} document: {id_value}")
            return True
        return False

    def count(self, query: Optional[dict[str, Any]] = None) -> int:
        collection = self._get_sync_collection()
        return collection.count_documents(query or {})

    def exists(self, query: dict[str, Any]) -> bool:
        collection = self._get_sync_collection()
        return collection.count_documents(query, limit=1) > 0
