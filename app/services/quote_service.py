"""
app/services/quote_service.py

Purpose: Quotation engine

- Re-prices a client draft list ({productId: quantity}) from stored products
- Snapshots label and price per line, computes the total server-side
- Debits one credit with the quote insert (refunded if the insert fails)
- Optional idempotency key so a retried submission is not billed twice
"""

from numbers import Real
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.core.exceptions import InvalidStateError, ResourceNotFoundError, ValidationError
from app.core.logging import get_logger, LogContext
from app.db.mongo import get_customers_collection, get_quotes_collection
from app.models.quote import QuoteStatus
from app.services import user_service
from app.services.catalog_service import find_owned_products
from app.services.common import require_object_id
from app.services.customer_service import get_owned_customer
from utils.constants import (
    MSG_INVALID_QUANTITY,
    MSG_NO_VALID_ITEMS,
    MSG_QUOTE_INPUT_REQUIRED,
    MSG_QUOTE_NOT_FOUND,
)
from utils.time_utils import utcnow
from utils.validation_utils import is_finite_number

logger = get_logger(__name__)


def parse_items_list(items_list: Any) -> Dict[ObjectId, Real]:
    """
    Validates a draft list and keys it by ObjectId (client order kept).

    Raises:
        ValidationError: Empty list, malformed product id, or non-numeric quantity
    """
    if not isinstance(items_list, dict) or not items_list:
        raise ValidationError(MSG_QUOTE_INPUT_REQUIRED)

    parsed = {}
    for product_id, quantity in items_list.items():
        oid = require_object_id(product_id, "product id")
        if not is_finite_number(quantity):
            raise ValidationError(MSG_INVALID_QUANTITY, details={"product": product_id})
        if 0 < quantity < 1:
            raise ValidationError(MSG_INVALID_QUANTITY, details={"product": product_id})
        parsed[oid] = quantity
    return parsed


def build_quote_items(products: List[Dict[str, Any]], quantities: Dict[ObjectId, Real]) -> Tuple[List[Dict[str, Any]], Real]:
    """
    Builds line snapshots from stored products.

    Only the stored selling price is used. Lines with quantity <= 0 and
    ids with no matching product are dropped.

    Returns:
        (items, total_amount)
    """
    by_id = {product["_id"]: product for product in products}

    items = []
    total_amount = 0
    for product_id, quantity in quantities.items():
        product = by_id.get(product_id)
        if product is None or quantity <= 0:
            continue

        selling_price = product.get("selling_price", 0)
        items.append({
            "product": product_id,
            "product_label": product["label"],
            "selling_price": selling_price,
            "quantity": quantity,
        })
        total_amount += selling_price * quantity

    return items, total_amount


async def _find_by_idempotency_key(account_id: ObjectId, key: str) -> Optional[Dict[str, Any]]:
    quotes = get_quotes_collection()
    return await quotes.find_one({"user": account_id, "idempotency_key": key})


async def create_quote(
    account_id: ObjectId,
    customer_id: Any,
    items_list: Any,
    idempotency_key: Optional[str] = None
) -> Tuple[Dict[str, Any], Optional[int]]:
    """
    Creates a Draft quote for one of the caller's customers and bills one credit.

    Nothing is written and no credit is taken unless at least one line
    survives pricing.

    Returns:
        (quote document, new credit balance)

    Raises:
        ValidationError: Missing customer, empty or malformed draft list
        ResourceNotFoundError: Customer absent or owned by another account
        InvalidStateError: No line with a known product and positive quantity
        ForbiddenError: No credits left
    """
    if not customer_id:
        raise ValidationError(MSG_QUOTE_INPUT_REQUIRED)

    quantities = parse_items_list(items_list)

    with LogContext(account_id=account_id, customer_id=customer_id):
        customer = await get_owned_customer(account_id, customer_id)

        if idempotency_key:
            existing = await _find_by_idempotency_key(account_id, idempotency_key)
            if existing:
                logger.info("Replayed quote submission; returning stored quote")
                return existing, await user_service.get_credit(account_id)

        products = await find_owned_products(
            account_id,
            list(quantities.keys()),
            {"label": 1, "selling_price": 1}
        )
        items, total_amount = build_quote_items(products, quantities)

        if not items:
            logger.warning("Quote rejected: no valid items")
            raise InvalidStateError(MSG_NO_VALID_ITEMS)

        new_credit = await user_service.use_credit(account_id)

        now = utcnow()
        quote = {
            "user": account_id,
            "customer": customer["_id"],
            "items": items,
            "total_amount": total_amount,
            "status": QuoteStatus.DRAFT.value,
            "created_at": now,
            "updated_at": now,
        }
        if idempotency_key:
            quote["idempotency_key"] = idempotency_key

        quotes = get_quotes_collection()
        try:
            result = await quotes.insert_one(quote)
        except DuplicateKeyError:
            # Same key raced in from a parallel submission; that one was billed
            await user_service.refund_credit(account_id)
            existing = await _find_by_idempotency_key(account_id, idempotency_key)
            if existing is None:
                raise
            return existing, await user_service.get_credit(account_id)
        except PyMongoError:
            logger.error("Quote insert failed; refunding credit", exc_info=True)
            await user_service.refund_credit(account_id)
            raise

        quote["_id"] = result.inserted_id
        logger.info(
            f"Quote created: {len(items)} items, total {total_amount}",
            extra={"quote_id": quote["_id"]}
        )

    return quote, new_credit


async def _populate_customers(quotes: List[Dict[str, Any]], fields: Dict[str, int]):
    customer_ids = list({quote["customer"] for quote in quotes})
    if not customer_ids:
        return
    customers = get_customers_collection()
    found = await customers.find({"_id": {"$in": customer_ids}}, fields).to_list(length=None)
    by_id = {customer["_id"]: customer for customer in found}
    for quote in quotes:
        if quote["customer"] in by_id:
            quote["customer"] = by_id[quote["customer"]]


async def get_my_quotes(account_id: ObjectId) -> List[Dict[str, Any]]:
    """
    The account's quotes, newest first, with customer name and number.
    """
    quotes = get_quotes_collection()
    cursor = quotes.find({"user": account_id}).sort([("created_at", DESCENDING), ("_id", DESCENDING)])
    result = await cursor.to_list(length=None)
    await _populate_customers(result, {"name": 1, "number": 1})
    return result


async def get_quote_by_id(account_id: ObjectId, quote_id: Any) -> Dict[str, Any]:
    oid = require_object_id(quote_id, "quote id")
    quotes = get_quotes_collection()
    quote = await quotes.find_one({"_id": oid, "user": account_id})
    if not quote:
        raise ResourceNotFoundError(MSG_QUOTE_NOT_FOUND)
    await _populate_customers([quote], {"name": 1, "number": 1, "address": 1})
    return quote
