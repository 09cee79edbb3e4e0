"""
app/services/user_service.py

Purpose: Account (identity) management

- OTP issuance and verification for phone-number login
- Profile completion (name, address, PIN)
- Quote credit debit / refund
"""

import secrets
from typing import Any, Dict, Optional, Tuple

from bson import ObjectId
from pymongo import ReturnDocument

from app.core.config import settings
from app.core.exceptions import (
    AuthenticationError,
    ExternalServiceError,
    ForbiddenError,
    ResourceNotFoundError,
    ValidationError,
)
from app.core.logging import get_logger, LogContext
from app.core.security import create_session_token
from app.db.mongo import get_users_collection
from app.models.user import new_account_document
from app.services.sms_service import sms_service
from utils.constants import (
    MSG_INVALID_NUMBER,
    MSG_INVALID_OTP,
    MSG_INVALID_PIN,
    MSG_NAME_REQUIRED,
    MSG_NO_CREDITS,
    MSG_OTP_REQUIRED,
    MSG_USER_NOT_FOUND,
    OTP_SMS_TEMPLATE,
)
from utils.time_utils import calculate_otp_expiry, is_otp_expired, utcnow
from utils.validation_utils import sanitize_input, validate_account_number, validate_otp_format, validate_pin

logger = get_logger(__name__)


def generate_otp(length: Optional[int] = None) -> str:
    """
    Generates a numeric OTP with no leading zero.
    """
    length = length or settings.OTP_LENGTH
    low = 10 ** (length - 1)
    return str(low + secrets.randbelow(9 * low))


async def deliver_otp(number: str, otp: str):
    """
    Sends the OTP by SMS. Without an SMS gateway (development) the OTP
    is written to the log instead.

    Raises:
        ExternalServiceError: If the gateway rejects the message
    """
    text = OTP_SMS_TEMPLATE.format(number=number, otp=otp, minutes=settings.OTP_TTL_MINUTES)

    if not sms_service.is_configured():
        if settings.is_production:
            raise ExternalServiceError("OTP delivery is not configured.")
        logger.warning(f"SMS gateway not configured; OTP for {number} is {otp}")
        return

    result = await sms_service.send_message(number, text)
    if not result.get("success"):
        raise ExternalServiceError(
            "Could not send OTP. Please try again.",
            details={"reason": result.get("error")}
        )


async def send_otp(number: Optional[str]) -> Dict[str, Any]:
    """
    Issues a fresh OTP for a number, creating the account on first use.

    Args:
        number: 10-digit mobile number

    Returns:
        The account document (with the new OTP stored)
    """
    if not validate_account_number(number):
        raise ValidationError(MSG_INVALID_NUMBER)

    users = get_users_collection()
    now = utcnow()
    otp = generate_otp()
    otp_expiry = calculate_otp_expiry(now, settings.OTP_TTL_MINUTES)

    account = await users.find_one({"number": number})

    if not account:
        logger.info(f"Creating new account for {number}")
        account = new_account_document(number, otp, otp_expiry, settings.DEFAULT_CREDIT, now)
        result = await users.insert_one(account)
        account["_id"] = result.inserted_id
    else:
        await users.update_one(
            {"_id": account["_id"]},
            {
                "$set": {
                    "otp": otp,
                    "otp_expiry": otp_expiry,
                    "updated_at": now
                }
            }
        )
        account.update({"otp": otp, "otp_expiry": otp_expiry, "updated_at": now})

    with LogContext(account_id=account["_id"]):
        await deliver_otp(number, otp)
        logger.info("OTP issued")

    return account


async def verify_otp(number: Optional[str], otp: Optional[str]) -> Tuple[Dict[str, Any], str, bool]:
    """
    Verifies an OTP and opens a session.

    A mismatched or expired OTP leaves the stored OTP in place.

    Returns:
        (account document, session token, is_new_user)
    """
    if not number or not otp:
        raise ValidationError(MSG_OTP_REQUIRED)

    users = get_users_collection()
    account = await users.find_one({"number": number})

    if not account:
        raise ResourceNotFoundError(MSG_USER_NOT_FOUND)

    with LogContext(account_id=account["_id"]):
        otp = otp.strip()
        stored_otp = account.get("otp")
        if not validate_otp_format(otp, settings.OTP_LENGTH):
            logger.warning("Rejected malformed OTP")
            raise AuthenticationError(MSG_INVALID_OTP)
        if not stored_otp or stored_otp != otp or is_otp_expired(account.get("otp_expiry")):
            logger.warning("Rejected OTP verification")
            raise AuthenticationError(MSG_INVALID_OTP)

        is_new_user = not account.get("is_verified", False)
        now = utcnow()

        # Conditional on the OTP so a code can only be consumed once
        updated = await users.find_one_and_update(
            {"_id": account["_id"], "otp": stored_otp},
            {
                "$set": {
                    "otp": None,
                    "otp_expiry": None,
                    "is_verified": True,
                    "updated_at": now
                }
            },
            return_document=ReturnDocument.AFTER
        )

        if not updated:
            logger.warning("OTP consumed by a concurrent verification")
            raise AuthenticationError(MSG_INVALID_OTP)

        token = create_session_token(str(updated["_id"]))
        logger.info(f"Login successful (new_user={is_new_user})")

    return updated, token, is_new_user


async def get_user_profile(account_id: ObjectId) -> Dict[str, Any]:
    users = get_users_collection()
    account = await users.find_one({"_id": account_id})
    if not account:
        raise ResourceNotFoundError(MSG_USER_NOT_FOUND)
    return account


async def update_user_details(
    account_id: ObjectId,
    name: Optional[str],
    address: Optional[str],
    pin: Any
) -> Dict[str, Any]:
    """
    Completes (or edits) the profile: name, optional address, 4-digit PIN.
    """
    name = sanitize_input(name)
    if not name:
        raise ValidationError(MSG_NAME_REQUIRED)

    if not validate_pin(pin):
        raise ValidationError(MSG_INVALID_PIN)

    fields = {
        "name": name,
        "pin": int(str(pin).strip()),
        "updated_at": utcnow()
    }
    address = sanitize_input(address, max_length=500)
    if address:
        fields["address"] = address

    with LogContext(account_id=account_id):
        users = get_users_collection()
        account = await users.find_one_and_update(
            {"_id": account_id},
            {"$set": fields},
            return_document=ReturnDocument.AFTER
        )

        if not account:
            raise ResourceNotFoundError(MSG_USER_NOT_FOUND)

        logger.info("Profile details updated")

    return account


async def use_credit(account_id: ObjectId) -> int:
    """
    Debits exactly one credit if any are left.

    Returns:
        The new credit balance

    Raises:
        ForbiddenError: If the balance is already zero (left unchanged)
        ResourceNotFoundError: If the account does not exist
    """
    users = get_users_collection()

    with LogContext(account_id=account_id):
        account = await users.find_one_and_update(
            {"_id": account_id, "credit": {"$gt": 0}},
            {
                "$inc": {"credit": -1},
                "$set": {"updated_at": utcnow()}
            },
            return_document=ReturnDocument.AFTER
        )

        if account:
            logger.info(f"Credit used, {account['credit']} left")
            return account["credit"]

        if not await users.find_one({"_id": account_id}, {"_id": 1}):
            raise ResourceNotFoundError(MSG_USER_NOT_FOUND)

        logger.warning("Credit debit refused: no credits left")
        raise ForbiddenError(MSG_NO_CREDITS)


async def refund_credit(account_id: ObjectId) -> Optional[int]:
    """
    Gives back one credit (compensates a debit whose quote was not saved).
    """
    users = get_users_collection()
    account = await users.find_one_and_update(
        {"_id": account_id},
        {
            "$inc": {"credit": 1},
            "$set": {"updated_at": utcnow()}
        },
        return_document=ReturnDocument.AFTER
    )
    if not account:
        logger.error("Credit refund failed: account missing", extra={"account_id": account_id})
        return None

    logger.info("Credit refunded", extra={"account_id": account_id})
    return account["credit"]


async def get_credit(account_id: ObjectId) -> Optional[int]:
    users = get_users_collection()
    account = await users.find_one({"_id": account_id}, {"credit": 1})
    return account.get("credit") if account else None
