"""
app/services/catalog_service.py

Purpose: Category → SubCategory → Product hierarchy

- Create / list / get for each level
- Every read and write is scoped to the owning account
- Parents must belong to the caller before children are attached
"""

from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from app.core.exceptions import ConflictError, ResourceNotFoundError, ValidationError
from app.core.logging import get_logger, LogContext
from app.db.mongo import (
    get_categories_collection,
    get_products_collection,
    get_sub_categories_collection,
)
from app.services.common import require_object_id
from utils.constants import (
    DEFAULT_PRODUCT_TYPE,
    DEFAULT_PRODUCT_UNIT,
    MSG_CATEGORY_EXISTS,
    MSG_CATEGORY_NAME_REQUIRED,
    MSG_CATEGORY_NOT_FOUND,
    MSG_INVALID_PRICE,
    MSG_PRODUCT_IDS_REQUIRED,
    MSG_PRODUCT_REQUIRED,
    MSG_SUB_CATEGORY_NOT_FOUND,
    MSG_SUB_CATEGORY_REQUIRED,
)
from utils.time_utils import utcnow
from utils.validation_utils import is_finite_number, sanitize_input

logger = get_logger(__name__)


# ==============================================
# CATEGORIES
# ==============================================

async def create_category(account_id: ObjectId, name: Optional[str], desc: Optional[str] = None) -> Dict[str, Any]:
    """
    Creates a category. Names are unique per account.

    Raises:
        ValidationError: If the name is missing
        ConflictError: If the account already has a category with this name
    """
    name = sanitize_input(name)
    if not name:
        raise ValidationError(MSG_CATEGORY_NAME_REQUIRED)

    categories = get_categories_collection()

    with LogContext(account_id=account_id):
        if await categories.find_one({"user": account_id, "name": name}):
            logger.warning(f"Duplicate category name rejected: {name}")
            raise ConflictError(MSG_CATEGORY_EXISTS)

        now = utcnow()
        category = {
            "name": name,
            "desc": sanitize_input(desc, max_length=500) or None,
            "user": account_id,
            "created_at": now,
            "updated_at": now,
        }

        try:
            result = await categories.insert_one(category)
        except DuplicateKeyError:
            # Lost a race against the unique (user, name) index
            raise ConflictError(MSG_CATEGORY_EXISTS)

        category["_id"] = result.inserted_id
        logger.info(f"Category created: {name}")

    return category


async def get_all_categories(account_id: ObjectId) -> List[Dict[str, Any]]:
    categories = get_categories_collection()
    return await categories.find({"user": account_id}).to_list(length=None)


async def get_category_by_id(account_id: ObjectId, category_id: Any) -> Dict[str, Any]:
    oid = require_object_id(category_id, "category id")
    categories = get_categories_collection()
    category = await categories.find_one({"_id": oid, "user": account_id})
    if not category:
        raise ResourceNotFoundError(MSG_CATEGORY_NOT_FOUND)
    return category


# ==============================================
# SUB-CATEGORIES
# ==============================================

async def create_sub_category(account_id: ObjectId, name: Optional[str], category_id: Any) -> Dict[str, Any]:
    """
    Creates a sub-category (a "row") under one of the caller's categories.
    """
    name = sanitize_input(name)
    if not name or not category_id:
        raise ValidationError(MSG_SUB_CATEGORY_REQUIRED)

    category = await get_category_by_id(account_id, category_id)

    now = utcnow()
    sub_category = {
        "name": name,
        "category": category["_id"],
        "user": account_id,
        "created_at": now,
        "updated_at": now,
    }

    sub_categories = get_sub_categories_collection()
    result = await sub_categories.insert_one(sub_category)
    sub_category["_id"] = result.inserted_id

    logger.info(f"Sub-category created: {name}", extra={"account_id": account_id})
    return sub_category


async def get_sub_categories_for_category(account_id: ObjectId, category_id: Any) -> List[Dict[str, Any]]:
    oid = require_object_id(category_id, "category id")
    sub_categories = get_sub_categories_collection()
    return await sub_categories.find({"category": oid, "user": account_id}).to_list(length=None)


async def get_sub_category_by_id(account_id: ObjectId, sub_category_id: Any) -> Dict[str, Any]:
    oid = require_object_id(sub_category_id, "sub-category id")
    sub_categories = get_sub_categories_collection()
    sub_category = await sub_categories.find_one({"_id": oid, "user": account_id})
    if not sub_category:
        raise ResourceNotFoundError(MSG_SUB_CATEGORY_NOT_FOUND)
    return sub_category


# ==============================================
# PRODUCTS
# ==============================================

def _price(value: Any) -> Optional[float]:
    if value is None:
        return None
    if not is_finite_number(value) or value < 0:
        raise ValidationError(MSG_INVALID_PRICE)
    return value


async def create_product(
    account_id: ObjectId,
    label: Optional[str],
    sub_category_id: Any,
    unit: Optional[str] = None,
    input_type: Optional[str] = None,
    selling_price: Any = None,
    cost_price: Any = None
) -> Dict[str, Any]:
    """
    Creates a product under one of the caller's sub-categories.

    Defaults: unit "pcs", input type "number", selling price 0,
    cost price equal to the selling price.
    """
    label = sanitize_input(label)
    if not label or not sub_category_id:
        raise ValidationError(MSG_PRODUCT_REQUIRED)

    selling_price = _price(selling_price)
    cost_price = _price(cost_price)
    if selling_price is None:
        selling_price = 0
    if cost_price is None:
        cost_price = selling_price

    sub_category = await get_sub_category_by_id(account_id, sub_category_id)

    now = utcnow()
    product = {
        "label": label,
        "unit": sanitize_input(unit, max_length=20) or DEFAULT_PRODUCT_UNIT,
        "type": sanitize_input(input_type, max_length=20) or DEFAULT_PRODUCT_TYPE,
        "selling_price": selling_price,
        "cost_price": cost_price,
        "sub_category": sub_category["_id"],
        "user": account_id,
        "created_at": now,
        "updated_at": now,
    }

    products = get_products_collection()
    result = await products.insert_one(product)
    product["_id"] = result.inserted_id

    logger.info(f"Product created: {label} @ {selling_price}", extra={"account_id": account_id})
    return product


async def get_products_for_sub_category(account_id: ObjectId, sub_category_id: Any) -> List[Dict[str, Any]]:
    oid = require_object_id(sub_category_id, "sub-category id")
    products = get_products_collection()
    return await products.find({"sub_category": oid, "user": account_id}).to_list(length=None)


async def find_owned_products(account_id: ObjectId, product_ids: List[ObjectId], projection: Optional[Dict[str, int]] = None) -> List[Dict[str, Any]]:
    """
    Fetches the caller's products among `product_ids`; unknown or
    foreign ids are silently absent from the result.
    """
    products = get_products_collection()
    cursor = products.find({"_id": {"$in": product_ids}, "user": account_id}, projection)
    return await cursor.to_list(length=None)


async def get_products_for_list(account_id: ObjectId, product_ids: Optional[List[Any]]) -> List[Dict[str, Any]]:
    """
    Label and current price for each product of a draft list.
    """
    if not product_ids or not isinstance(product_ids, list):
        raise ValidationError(MSG_PRODUCT_IDS_REQUIRED)

    oids = [require_object_id(product_id, "product id") for product_id in product_ids]
    return await find_owned_products(account_id, oids, {"label": 1, "selling_price": 1})
