"""
app/services/customer_service.py

Purpose: Per-account customer directory
"""

from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import DESCENDING

from app.core.exceptions import ResourceNotFoundError, ValidationError
from app.core.logging import get_logger
from app.db.mongo import get_customers_collection
from app.services.common import require_object_id
from utils.constants import (
    MSG_CUSTOMER_NAME_REQUIRED,
    MSG_CUSTOMER_NOT_FOUND,
    MSG_CUSTOMER_NUMBER_REQUIRED,
)
from utils.time_utils import utcnow
from utils.validation_utils import sanitize_input

logger = get_logger(__name__)


async def create_customer(
    account_id: ObjectId,
    name: Optional[str],
    address: Optional[str],
    number: Optional[str]
) -> Dict[str, Any]:
    name = sanitize_input(name)
    if not name:
        raise ValidationError(MSG_CUSTOMER_NAME_REQUIRED)

    number = sanitize_input(number, max_length=20)
    if not number:
        raise ValidationError(MSG_CUSTOMER_NUMBER_REQUIRED)

    now = utcnow()
    customer = {
        "name": name,
        "address": sanitize_input(address, max_length=500) or None,
        "number": number,
        "user": account_id,
        "created_at": now,
        "updated_at": now,
    }

    customers = get_customers_collection()
    result = await customers.insert_one(customer)
    customer["_id"] = result.inserted_id

    logger.info(
        f"Customer created: {name}",
        extra={"account_id": account_id, "customer_id": customer["_id"]}
    )
    return customer


async def get_my_customers(account_id: ObjectId) -> List[Dict[str, Any]]:
    """
    All of the account's customers, newest first.
    """
    customers = get_customers_collection()
    cursor = customers.find({"user": account_id}).sort([("created_at", DESCENDING), ("_id", DESCENDING)])
    return await cursor.to_list(length=None)


async def get_owned_customer(account_id: ObjectId, customer_id: Any) -> Dict[str, Any]:
    """
    Raises:
        ResourceNotFoundError: If the customer is absent or belongs to another account
    """
    oid = require_object_id(customer_id, "customer id")
    customers = get_customers_collection()
    customer = await customers.find_one({"_id": oid, "user": account_id})
    if not customer:
        raise ResourceNotFoundError(MSG_CUSTOMER_NOT_FOUND)
    return customer
