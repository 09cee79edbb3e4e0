"""
app/schemas/customer.py

Purpose: Customer directory schemas
"""

from typing import Optional

from app.schemas.document import CamelModel, DocumentOut


class CustomerCreateRequest(CamelModel):
    name: Optional[str] = None
    address: Optional[str] = None
    number: Optional[str] = None


class CustomerOut(DocumentOut):
    name: str
    address: Optional[str] = None
    number: str
    user: str
