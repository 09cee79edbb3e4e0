"""
app/services/common.py

Purpose: Helpers shared by the services

- Id parsing that raises the API's ValidationError
"""

from typing import Any

from bson import ObjectId

from app.core.exceptions import ValidationError
from utils.constants import MSG_INVALID_ID
from utils.validation_utils import parse_object_id


def require_object_id(value: Any, field: str) -> ObjectId:
    """
    Parses an id from a path or body.

    Raises:
        ValidationError: If the value is not a valid id
    """
    oid = parse_object_id(value)
    if oid is None:
        raise ValidationError(MSG_INVALID_ID.format(field=field), details={"field": field})
    return oid
