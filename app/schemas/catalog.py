"""
app/schemas/catalog.py

Purpose: Category / SubCategory / Product schemas
"""

from typing import Any, List, Optional, Union

from app.schemas.document import CamelModel, DocumentOut


class CategoryCreateRequest(CamelModel):
    name: Optional[str] = None
    desc: Optional[str] = None


class SubCategoryCreateRequest(CamelModel):
    name: Optional[str] = None
    category: Optional[str] = None


class ProductCreateRequest(CamelModel):
    label: Optional[str] = None
    unit: Optional[str] = None
    type: Optional[str] = None
    selling_price: Optional[Union[int, float]] = None
    cost_price: Optional[Union[int, float]] = None
    sub_category: Optional[str] = None


class ProductListRequest(CamelModel):
    product_ids: Optional[List[Any]] = None


class CategoryOut(DocumentOut):
    name: str
    desc: Optional[str] = None
    user: str


class SubCategoryOut(DocumentOut):
    name: str
    category: str
    user: str


class ProductOut(DocumentOut):
    label: str
    unit: str
    type: str
    selling_price: Union[int, float]
    cost_price: Union[int, float]
    sub_category: str
    user: str


class ProductPriceOut(DocumentOut):
    """Trimmed product view used to render a draft list."""

    label: str
    selling_price: Union[int, float]
