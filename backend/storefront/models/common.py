"""Shared model helpers for MongoDB documents."""

from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, Field

# ObjectId values from MongoDB are exposed as plain strings
ObjectIdStr = Annotated[str, BeforeValidator(str)]


class MongoModel(BaseModel):
    """Base for models loaded from MongoDB documents keyed by ``_id``."""

    id: Optional[ObjectIdStr] = Field(None, alias="_id", description="Document identifier")

    model_config = {"populate_by_name": True}


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


def to_document(model: BaseModel, **kwargs: Any) -> dict[str, Any]:
    """Dump a model for MongoDB: enums become their values, datetimes stay native."""
    return _plain(model.model_dump(exclude={"id"}, **kwargs))
