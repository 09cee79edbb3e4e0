"""
app/api/customer.py

Purpose: Customer directory endpoints (session required)
"""

from bson import ObjectId
from fastapi import APIRouter, Depends

from app.api.deps import get_current_account_id
from app.schemas.customer import CustomerCreateRequest, CustomerOut
from app.services import customer_service
from utils.constants import MSG_CUSTOMER_CREATED

router = APIRouter()


@router.post("/create", status_code=201)
async def create_customer(
    body: CustomerCreateRequest,
    account_id: ObjectId = Depends(get_current_account_id)
):
    customer = await customer_service.create_customer(account_id, body.name, body.address, body.number)
    return {
        "success": True,
        "message": MSG_CUSTOMER_CREATED,
        "customer": CustomerOut.from_document(customer).to_response(),
    }


@router.get("/get-my-customers")
async def get_my_customers(account_id: ObjectId = Depends(get_current_account_id)):
    customers = await customer_service.get_my_customers(account_id)
    return {
        "success": True,
        "customers": [CustomerOut.from_document(c).to_response() for c in customers],
    }
