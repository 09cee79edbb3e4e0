"""
app/api/quote.py

Purpose: Quote endpoints (session required)

- Create: submit a draft list once, get the priced quote and new credit
- History list and single-quote view
"""

from bson import ObjectId
from fastapi import APIRouter, Depends

from app.api.deps import get_current_account_id
from app.schemas.quote import QuoteCreateRequest, QuoteOut
from app.services import quote_service
from utils.constants import MSG_QUOTE_CREATED

router = APIRouter()


@router.post("/create", status_code=201)
async def create_quote(
    body: QuoteCreateRequest,
    account_id: ObjectId = Depends(get_current_account_id)
):
    quote, new_credit = await quote_service.create_quote(
        account_id,
        body.customer_id,
        body.items_list,
        idempotency_key=body.idempotency_key,
    )
    return {
        "success": True,
        "message": MSG_QUOTE_CREATED,
        "quote": QuoteOut.from_document(quote).to_response(),
        "newCredit": new_credit,
    }


@router.get("/get-my-quotes")
async def get_my_quotes(account_id: ObjectId = Depends(get_current_account_id)):
    quotes = await quote_service.get_my_quotes(account_id)
    return {
        "success": True,
        "quotes": [QuoteOut.from_document(q).to_response() for q in quotes],
    }


# Declared last: "/{quote_id}" would otherwise shadow "/get-my-quotes"
@router.get("/{quote_id}")
async def get_quote(quote_id: str, account_id: ObjectId = Depends(get_current_account_id)):
    quote = await quote_service.get_quote_by_id(account_id, quote_id)
    return {"success": True, "quote": QuoteOut.from_document(quote).to_response()}
