"""
app/models/user.py

Purpose: Account document model

- Phone number (unique key), display name, address
- Transient OTP + expiry, verification flag
- Profile PIN and quote credit balance
- Onboarding stage derived from the stored fields
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict


class OnboardingStage(str, Enum):
    """
    Where an account is in the login/onboarding flow.
    Derived from the document, never stored.
    """

    OTP_SENT = "OTP_SENT"
    VERIFIED = "VERIFIED"
    PROFILE_COMPLETE = "PROFILE_COMPLETE"


def new_account_document(number: str, otp: str, otp_expiry: datetime, credit: int, now: datetime) -> Dict[str, Any]:
    """
    Builds the document for a first OTP request (signup).
    """
    return {
        "number": number,
        "name": None,
        "address": None,
        "otp": otp,
        "otp_expiry": otp_expiry,
        "is_verified": False,
        "pin": None,
        "credit": credit,
        "created_at": now,
        "updated_at": now,
    }


def onboarding_stage(account: Dict[str, Any]) -> OnboardingStage:
    if not account.get("is_verified"):
        return OnboardingStage.OTP_SENT
    if account.get("name") and account.get("pin") is not None:
        return OnboardingStage.PROFILE_COMPLETE
    return OnboardingStage.VERIFIED
