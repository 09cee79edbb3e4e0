"""
app/schemas/quote.py

Purpose: Quote request/response schemas

- Create body: customer id + draft list {productId: quantity}
- Quote rendering with line snapshots and (optionally) populated customer
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import Field

from app.models.quote import QuoteStatus
from app.schemas.document import CamelModel, DocumentOut


class QuoteCreateRequest(CamelModel):
    customer_id: Optional[str] = None
    items_list: Optional[Dict[str, Any]] = None
    idempotency_key: Optional[str] = Field(default=None, max_length=128)


class QuoteItemOut(CamelModel):
    product: str
    product_label: str
    selling_price: Union[int, float]
    quantity: Union[int, float]


class CustomerSummary(CamelModel):
    id: str = Field(alias="_id")
    name: str
    number: Optional[str] = None
    address: Optional[str] = None


class QuoteOut(DocumentOut):
    user: str
    customer: Union[CustomerSummary, str]
    items: List[QuoteItemOut]
    total_amount: Union[int, float]
    status: QuoteStatus
