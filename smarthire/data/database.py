"""
Database connection manager for SmartHire.

Provides MongoDB connection management with both synchronous (PyMongo)
and asynchronous (Motor) client support. Request-level operations use the
synchronous client; index management runs through Motor.
"""

from typing import Any, Optional
from urllib.parse import quote_plus

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

from smarthire.utils.config import get_settings
from smarthire.utils.logger import get_logger

logger = get_logger(__name__)


class DatabaseManager:
    """
    Manages MongoDB database connections.

    Clients are created lazily, so constructing the manager never touches
    the network. Implements singleton pattern for connection reuse.
    """

    _instance: Optional["DatabaseManager"] = None
    _sync_client: Optional[MongoClient] = None
    _async_client: Optional[AsyncIOMotorClient] = None

    def __new__(cls) -> "DatabaseManager":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if getattr(self, "_initialized", False):
            return

        self._settings = get_settings()
        self._db_name = self._settings.database.name
        self._uri = self._build_uri()
        self._initialized = True

    def _build_uri(self) -> str:
        """Build the connection URI with URL-encoded credentials."""
        db_settings = self._settings.database

        host = db_settings.host.strip()
        if not host or any(c in host for c in [";", "&", "|", "$", "`"]):
            raise ValueError(f"Invalid database host: {host}")

        auth = ""
        if db_settings.username and db_settings.password:
            auth = f"{quote_plus(db_settings.username)}:{quote_plus(db_settings.password)}@"

        return f"mongodb://{auth}{host}:{db_settings.port}"

    @property
    def database_name(self) -> str:
        return self._db_name

    # -------------------------------------------------------------------------
    # Synchronous Client
    # -------------------------------------------------------------------------

    def get_sync_client(self) -> MongoClient:
        """Get or create synchronous MongoDB client."""
        if self._sync_client is None:
            logger.info("Creating synchronous MongoDB client")
            try:
                self._sync_client = MongoClient(
                    self._uri,
                    serverSelectionTimeoutMS=5000,
                    connectTimeoutMS=5000,
                    maxPoolSize=50,
                    tz_aware=True,
                )
            except Exception as e:
                self._sync_client = None
                logger.error(f"Failed to create sync client: {e}")
                raise
        return self._sync_client

    def get_sync_database(self) -> Database:
        return self.get_sync_client()[self._db_name]

    def get_sync_collection(self, collection_name: str) -> Any:
        return self.get_sync_database()[collection_name]

    def check_sync_connection(self) -> bool:
        """Check if synchronous connection is healthy."""
        try:
            self.get_sync_client().admin.command("ping")
            return True
        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            logger.error(f"Sync connection check failed: {e}")
            self._sync_client = None
            return False

    # -------------------------------------------------------------------------
    # Asynchronous Client
    # -------------------------------------------------------------------------

    def get_async_client(self) -> AsyncIOMotorClient:
        """Get or create asynchronous MongoDB client."""
        if self._async_client is None:
            logger.info("Creating asynchronous MongoDB client")
            self._async_client = AsyncIOMotorClient(
                self._uri,
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=5000,
                maxPoolSize=10,
                tz_aware=True,
            )
        return self._async_client

    def get_async_database(self) -> AsyncIOMotorDatabase:
        return self.get_async_client()[self._db_name]

    def get_async_collection(self, collection_name: str) -> Any:
        return self.get_async_database()[collection_name]

    # -------------------------------------------------------------------------
    # Lifecycle Management
    # -------------------------------------------------------------------------

    def close_all(self) -> None:
        """Close all database connections."""
        if self._sync_client:
            logger.info("Closing synchronous MongoDB client")
            self._sync_client.close()
            self._sync_client = None
        if self._async_client:
            logger.info("Closing asynchronous MongoDB client")
            self._async_client.close()
            self._async_client = None

    # -------------------------------------------------------------------------
    # Index Management
    # -------------------------------------------------------------------------

    async def ensure_indexes(self) -> None:
        """
        Create indexes for all collections.

        The unique (job_id, applicant_id) index on applications is what
        rejects duplicate submissions that race past the pre-check.
        """
        logger.info("Ensuring database indexes")

        users = self.get_async_collection("users")
        await users.create_index("email", unique=True)

        jobs = self.get_async_collection("jobs")
        await jobs.create_index("posted_by")
        await jobs.create_index("created_at")

        applications = self.get_async_collection("applications")
        await applications.create_index(
            [("job_id", ASCENDING), ("applicant_id", ASCENDING)],
            unique=True,
            name="job_applicant_unique",
        )
        await applications.create_index("applicant_id")
        await applications.create_index("current_stage")
        await applications.create_index([("match_score", DESCENDING)])

        notifications = self.get_async_collection("notifications")
        await notifications.create_index(
            [("user_id", ASCENDING), ("created_at", DESCENDING)]
        )

        logger.info("Database indexes created successfully")


# Global database manager instance
_db_manager: Optional[DatabaseManager] = None


def get_database_manager() -> DatabaseManager:
    """Get the global database manager instance."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


def get_sync_db() -> Database:
    """Convenience function to get synchronous database."""
    return get_database_manager().get_sync_database()
