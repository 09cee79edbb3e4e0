"""
utils/time_utils.py

Purpose: Time and expiry helpers

- Naive-UTC "now" matching what pymongo hands back
- OTP expiry checks
- Sweep cutoffs
"""

from datetime import datetime, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    """
    Current time as naive UTC (the form BSON dates round-trip as).
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def calculate_otp_expiry(issued_at: datetime, validity_minutes: int = 5) -> datetime:
    """
    Calculates OTP expiry timestamp.
    """
    return issued_at + timedelta(minutes=validity_minutes)


def is_otp_expired(otp_expiry: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """
    Checks if an OTP has expired. A missing expiry counts as expired.
    """
    if not otp_expiry:
        return True
    return (now or utcnow()) > otp_expiry


def cutoff_before(hours: int, now: Optional[datetime] = None) -> datetime:
    """
    Returns the instant `hours` before now.
    """
    return (now or utcnow()) - timedelta(hours=hours)
