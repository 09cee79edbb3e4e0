"""
app/schemas/user.py

Purpose: Identity request/response schemas

- OTP request and verification bodies
- Profile completion body
- Account rendering (never exposes OTP or PIN)
"""

from typing import Any, Dict, Optional, Union

from app.models.user import OnboardingStage, onboarding_stage
from app.schemas.document import CamelModel, DocumentOut, stringify_ids


class SendOtpRequest(CamelModel):
    number: Optional[str] = None


class VerifyOtpRequest(CamelModel):
    number: Optional[str] = None
    otp: Optional[str] = None


class UpdateDetailsRequest(CamelModel):
    name: Optional[str] = None
    address: Optional[str] = None
    pin: Optional[Union[int, str]] = None


class AccountOut(DocumentOut):
    number: str
    name: Optional[str] = None
    address: Optional[str] = None
    is_verified: bool = False
    credit: int = 0
    has_pin: bool = False
    stage: OnboardingStage = OnboardingStage.OTP_SENT

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "AccountOut":
        data = stringify_ids(document)
        data["has_pin"] = document.get("pin") is not None
        data["stage"] = onboarding_stage(document)
        return cls.model_validate(data)
