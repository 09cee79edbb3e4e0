"""
app/api/user.py

Purpose: Identity endpoints

- OTP login (send / verify) - the only routes without a session
- Profile completion and retrieval
- Standalone credit use, logout
"""

from bson import ObjectId
from fastapi import APIRouter, Depends, Response

from app.api.deps import get_current_account_id
from app.core.security import clear_session_cookie, set_session_cookie
from app.schemas.user import AccountOut, SendOtpRequest, UpdateDetailsRequest, VerifyOtpRequest
from app.services import user_service
from utils.constants import (
    MSG_CREDIT_USED,
    MSG_LOGGED_OUT,
    MSG_LOGIN_SUCCESS,
    MSG_OTP_SENT,
    MSG_PROFILE_UPDATED,
)

router = APIRouter()


@router.post("/send-otp")
async def send_otp(body: SendOtpRequest):
    await user_service.send_otp(body.number)
    return {"success": True, "message": MSG_OTP_SENT}


@router.post("/verify-otp")
async def verify_otp(body: VerifyOtpRequest, response: Response):
    account, token, is_new_user = await user_service.verify_otp(body.number, body.otp)
    set_session_cookie(response, token)
    return {
        "success": True,
        "message": MSG_LOGIN_SUCCESS,
        "token": token,
        "user": AccountOut.from_document(account).to_response(),
        "isNewUser": is_new_user,
    }


@router.post("/update-details")
async def update_details(
    body: UpdateDetailsRequest,
    account_id: ObjectId = Depends(get_current_account_id)
):
    account = await user_service.update_user_details(account_id, body.name, body.address, body.pin)
    return {
        "success": True,
        "message": MSG_PROFILE_UPDATED,
        "user": AccountOut.from_document(account).to_response(),
    }


@router.get("/profile")
async def get_profile(account_id: ObjectId = Depends(get_current_account_id)):
    account = await user_service.get_user_profile(account_id)
    return {"success": True, "user": AccountOut.from_document(account).to_response()}


@router.post("/use-credit")
async def use_credit(account_id: ObjectId = Depends(get_current_account_id)):
    new_credit = await user_service.use_credit(account_id)
    return {"success": True, "message": MSG_CREDIT_USED, "newCredit": new_credit}


@router.post("/logout")
async def logout(response: Response, account_id: ObjectId = Depends(get_current_account_id)):
    clear_session_cookie(response)
    return {"success": True, "message": MSG_LOGGED_OUT}
