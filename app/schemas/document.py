"""
app/schemas/document.py

Purpose: Base for rendering Mongo documents in API responses

- ObjectId values become strings, `_id` is kept as the id key
- Snake_case storage fields are rendered camelCase
"""

from datetime import datetime
from typing import Any, Dict, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def stringify_ids(value: Any) -> Any:
    """Recursively converts ObjectId values to their hex string."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, list):
        return [stringify_ids(item) for item in value]
    if isinstance(value, dict):
        return {key: stringify_ids(item) for key, item in value.items()}
    return value


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class DocumentOut(CamelModel):
    id: str = Field(alias="_id")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, document: Dict[str, Any]):
        return cls.model_validate(stringify_ids(document))

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")
