"""
app/api/product.py

Purpose: Product endpoints (session required)
"""

from bson import ObjectId
from fastapi import APIRouter, Depends

from app.api.deps import get_current_account_id
from app.schemas.catalog import ProductCreateRequest, ProductListRequest, ProductOut, ProductPriceOut
from app.services import catalog_service
from utils.constants import MSG_PRODUCT_CREATED

router = APIRouter()


@router.post("/create", status_code=201)
async def create_product(
    body: ProductCreateRequest,
    account_id: ObjectId = Depends(get_current_account_id)
):
    product = await catalog_service.create_product(
        account_id,
        label=body.label,
        sub_category_id=body.sub_category,
        unit=body.unit,
        input_type=body.type,
        selling_price=body.selling_price,
        cost_price=body.cost_price,
    )
    return {
        "success": True,
        "message": MSG_PRODUCT_CREATED,
        "product": ProductOut.from_document(product).to_response(),
    }


@router.post("/get-for-subcategory/{sub_category_id}")
async def get_products_for_sub_category(
    sub_category_id: str,
    account_id: ObjectId = Depends(get_current_account_id)
):
    products = await catalog_service.get_products_for_sub_category(account_id, sub_category_id)
    return {
        "success": True,
        "products": [ProductOut.from_document(p).to_response() for p in products],
    }


@router.post("/get-details-for-list")
async def get_details_for_list(
    body: ProductListRequest,
    account_id: ObjectId = Depends(get_current_account_id)
):
    products = await catalog_service.get_products_for_list(account_id, body.product_ids)
    return {
        "success": True,
        "products": [ProductPriceOut.from_document(p).to_response() for p in products],
    }
