"""Shared validation utilities"""

import re
from typing import Optional


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize a phone number.

    Accepts local and international formats with spaces, dots, dashes or
    parentheses as separators.

    Returns:
        The number with separators removed (a leading + is kept)

    Raises:
        ValueError: If the number does not have 8 to 15 digits
    """
    if not phone:
        return phone

    phone = phone.strip()
    prefix = "+" if phone.startswith("+") else ""
    digits = re.sub(r"[\s.\-()]", "", phone.lstrip("+"))

    if not digits.isdigit() or not 8 <= len(digits) <= 15:
        raise ValueError("Phone number must contain 8 to 15 digits")

    return f"{prefix}{digits}"


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_slug(slug: str) -> str:
    """Lowercase URL slug: letters, digits and single dashes"""
    slug = slug.strip().lower()
    if not re.match(r"^[a-z0-9]+(-[a-z0-9]+)*$", slug):
        raise ValueError("Slug may only contain letters, digits and dashes")
    return slug
