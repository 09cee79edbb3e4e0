"""
utils/validation_utils.py

Purpose: Input validation

- Account number, OTP and PIN format checks
- Finite-number check for prices and quantities
- ObjectId parsing for path and body identifiers
- Input sanitization
"""

import math
import re
from numbers import Real
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId


def validate_account_number(number: str) -> bool:
    """
    Validates an account's mobile number (exactly 10 digits).

    Args:
        number: Mobile number as entered

    Returns:
        True if it is ten digits and nothing else
    """
    if not number or not isinstance(number, str):
        return False

    return bool(re.match(r"^\d{10}$", number))


def validate_otp_format(otp: str, length: int = 6) -> bool:
    """
    Validates OTP format (exactly `length` digits).

    Args:
        otp: OTP string
        length: Expected digit count

    Returns:
        True if valid numeric OTP
    """
    if not otp or not isinstance(otp, str):
        return False

    return bool(re.match(rf"^\d{{{length}}}$", otp.strip()))


def validate_pin(pin: Any) -> bool:
    """
    Validates a profile PIN: four digits, first digit not zero.

    Accepts the PIN as a string or an int (clients send either).
    """
    if isinstance(pin, bool) or pin is None:
        return False
    return bool(re.match(r"^[1-9]\d{3}$", str(pin).strip()))


def is_finite_number(value: Any) -> bool:
    """
    True for real JSON numbers. Booleans, strings, NaN and +/-Infinity
    (which the JSON parser accepts as bare tokens) are rejected.
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(value)


def parse_object_id(value: Any) -> Optional[ObjectId]:
    """
    Parses a 24-char hex id into an ObjectId.

    Returns:
        ObjectId, or None if the value is not a valid id
    """
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str):
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None




def sanitize_input(text: Optional[str], max_length: int = 200) -> str:
    """
    Trims and normalizes free-text input (names, labels, addresses).

    Args:
        text: Input text
        max_length: Maximum allowed length

    Returns:
        Sanitized text ("" for None)
    """
    if not text:
        return ""

    text = str(text)[:max_length]

    # Remove markup-ish characters
    text = re.sub(r"[<>{}\[\]]", "", text)

    # Normalize whitespace
    text = " ".join(text.split())

    return text.strip()
