"""
Base model classes for SmartHire documents.

Provides the ObjectId field type, timestamps and MongoDB conversion
shared by every stored document.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class PyObjectId(ObjectId):
    """ObjectId type usable as a Pydantic v2 field."""

    @classmethod
    def __get_pydantic_core_schema__(cls, _source_type: Any, _handler: Any) -> Any:
        from pydantic_core import core_schema

        return core_schema.union_schema(
            [
                core_schema.is_instance_schema(ObjectId),
                core_schema.chain_schema(
                    [
                        core_schema.str_schema(),
                        core_schema.no_info_plain_validator_function(cls.validate),
                    ]
                ),
            ],
            serialization=core_schema.to_string_ser_schema(),
        )

    @classmethod
    def validate(cls, value: Any) -> ObjectId:
        """Validate and convert string to ObjectId."""
        if isinstance(value, ObjectId):
            return value
        if isinstance(value, str) and ObjectId.is_valid(value):
            return ObjectId(value)
        raise ValueError(f"Invalid ObjectId: {value}")


class TimestampMixin(BaseModel):
    """Creation and modification timestamps."""

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class BaseDocument(TimestampMixin):
    """
    Base model for documents stored in their own collection.

    Enum fields are stored by value, and ``id`` maps to MongoDB's ``_id``.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        use_enum_values=True,
        validate_default=True,
        validate_assignment=True,
    )

    id: Optional[PyObjectId] = Field(default=None, alias="_id")

    def model_dump_mongo(self) -> dict[str, Any]:
        """Convert model to a MongoDB-ready dictionary."""
        data = self.model_dump(by_alias=True, exclude_none=True)
        if data.get("_id") is None:
            data.pop("_id", None)
        return data


class EmbeddedModel(BaseModel):
    """Base model for subdocuments embedded in a parent document."""

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        use_enum_values=True,
        validate_default=True,
    )
