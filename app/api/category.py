"""
app/api/category.py

Purpose: Category and sub-category endpoints (session required)
"""

from bson import ObjectId
from fastapi import APIRouter, Depends

from app.api.deps import get_current_account_id
from app.schemas.catalog import CategoryCreateRequest, CategoryOut, SubCategoryCreateRequest, SubCategoryOut
from app.services import catalog_service
from utils.constants import MSG_CATEGORY_CREATED, MSG_SUB_CATEGORY_CREATED

router = APIRouter()
sub_category_router = APIRouter()


@router.post("/create", status_code=201)
async def create_category(
    body: CategoryCreateRequest,
    account_id: ObjectId = Depends(get_current_account_id)
):
    category = await catalog_service.create_category(account_id, body.name, body.desc)
    return {
        "success": True,
        "message": MSG_CATEGORY_CREATED,
        "category": CategoryOut.from_document(category).to_response(),
    }


@router.get("/get-all")
async def get_all_categories(account_id: ObjectId = Depends(get_current_account_id)):
    categories = await catalog_service.get_all_categories(account_id)
    return {
        "success": True,
        "categories": [CategoryOut.from_document(c).to_response() for c in categories],
    }


@router.get("/get/{category_id}")
async def get_category(category_id: str, account_id: ObjectId = Depends(get_current_account_id)):
    category = await catalog_service.get_category_by_id(account_id, category_id)
    return {"success": True, "category": CategoryOut.from_document(category).to_response()}


@sub_category_router.post("/create", status_code=201)
async def create_sub_category(
    body: SubCategoryCreateRequest,
    account_id: ObjectId = Depends(get_current_account_id)
):
    sub_category = await catalog_service.create_sub_category(account_id, body.name, body.category)
    return {
        "success": True,
        "message": MSG_SUB_CATEGORY_CREATED,
        "subCategory": SubCategoryOut.from_document(sub_category).to_response(),
    }


@sub_category_router.get("/get-for-category/{category_id}")
async def get_sub_categories_for_category(
    category_id: str,
    account_id: ObjectId = Depends(get_current_account_id)
):
    sub_categories = await catalog_service.get_sub_categories_for_category(account_id, category_id)
    return {
        "success": True,
        "subCategories": [SubCategoryOut.from_document(s).to_response() for s in sub_categories],
    }


@sub_category_router.get("/get/{sub_category_id}")
async def get_sub_category(sub_category_id: str, account_id: ObjectId = Depends(get_current_account_id)):
    sub_category = await catalog_service.get_sub_category_by_id(account_id, sub_category_id)
    return {"success": True, "subCategory": SubCategoryOut.from_document(sub_category).to_response()}
