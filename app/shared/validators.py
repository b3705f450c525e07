"""Shared validation utilities"""

import re
from typing import Optional, Union

FULL_NAME_MAX_LENGTH = 100
PHONE_MAX_LENGTH = 20

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def normalize_sms_phone(phone: Optional[str]) -> Optional[str]:
    """
    Normalize a stored phone number to E.164 for SMS.

    Numbers already starting with "+" keep their country code. Bare 10-digit
    numbers (or 11 digits with a leading 1) are treated as US numbers.

    Returns:
        E.164 phone number, or None if it can't be normalized
    """
    if not phone:
        return None

    digits = re.sub(r"\D", "", phone)

    if phone.strip().startswith("+"):
        return f"+{digits}" if 8 <= len(digits) <= 15 else None

    if digits.startswith("1") and len(digits) == 11:
        digits = digits[1:]

    if len(digits) != 10:
        return None

    return f"+1{digits}"


def validate_full_name(name: Optional[str]) -> str:
    """
    Validate a profile display name.

    Raises:
        ValueError: If the trimmed name is empty or too long
    """
    name = (name or "").strip()
    if not name:
        raise ValueError("Name is required")
    if len(name) > FULL_NAME_MAX_LENGTH:
        raise ValueError(f"Name must be less than {FULL_NAME_MAX_LENGTH} characters")
    return name


def validate_profile_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate a profile phone number. Blank is stored as null.

    Raises:
        ValueError: If the trimmed phone is too long
    """
    phone = (phone or "").strip()
    if len(phone) > PHONE_MAX_LENGTH:
        raise ValueError(f"Phone must be less than {PHONE_MAX_LENGTH} characters")
    return phone or None


def parse_optional_price(value: Union[str, float, int, None]) -> Optional[float]:
    """
    Parse a price form field. Blank means "inherit the product price".

    Accepts a leading numeric prefix the way browser number inputs send it
    ("12.50", "12.5usd").

    Raises:
        ValueError: If a non-blank value has no numeric prefix
    """
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)

    text = str(value).strip()
    if not text:
        return None

    match = _LEADING_FLOAT.match(text)
    if not match:
        raise ValueError("Price must be a number")
    return float(match.group(1))


def parse_stock_quantity(value: Union[str, int, float, None]) -> int:
    """Parse a stock form field. Blank or unparseable becomes 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)

    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def get_initials(full_name: Optional[str], email: Optional[str] = None) -> str:
    """
    Two-letter initials for a reviewer.

    First letters of the first two name words, else the first two letters of
    the name, else the first two letters of the email.
    """
    words = (full_name or "").split()
    if len(words) >= 2:
        return (words[0][0] + words[1][0]).upper()
    if words:
        return words[0][:2].upper()
    if email:
        return email[:2].upper()
    return ""
