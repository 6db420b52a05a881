"""
Field validators for user records.

Used by the credential store on both create and update, so the two write
paths can never disagree about what a valid profile looks like.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Dict, Optional

from utils.errors import ValidationError
from utils.sanitise import is_invalid


USERNAME_RE = re.compile(r"^[A-Za-z0-9_.-]{3,30}$")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_RE = re.compile(r"^[0-9]{10}$")


def validate_username(value: Optional[str]) -> str:
    """Trim, then require 3–30 safe chars and no whitespace / emoji."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Username is required")
    username = value.strip()
    if is_invalid(username) or not USERNAME_RE.fullmatch(username):
        raise ValidationError(
            "Username cannot contain spaces, emoji, and must be 3–30 safe chars"
        )
    return username


def validate_email(value: Optional[str]) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Email is required")
    email = value.strip().lower()
    if not EMAIL_RE.fullmatch(email):
        raise ValidationError("Email address is malformed")
    return email


def validate_phone(value: Optional[str]) -> Optional[str]:
    """Phone is optional; when given it must be exactly 10 digits."""
    if value is None or value == "":
        return None
    if not isinstance(value, str) or not PHONE_RE.fullmatch(value):
        raise ValidationError("Phone number must be exactly 10 digits")
    return value


def validate_dob(value: Any) -> date:
    """Accept a ``date``, a ``datetime`` or an ISO-8601 string."""
    if value is None or value == "":
        raise ValidationError("Date of birth is required")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            try:
                return datetime.fromisoformat(value).date()
            except ValueError:
                pass
    raise ValidationError("Date of birth is not a valid date")


def validate_profile_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate and normalise the profile part of a user record.

    Returns a new dict with ``username``, ``email``, ``phone`` and ``dob``
    in their stored form.  Raises ``ValidationError`` on the first bad field.
    """
    return {
        "username": validate_username(fields.get("username")),
        "email": validate_email(fields.get("email")),
        "phone": validate_phone(fields.get("phone")),
        "dob": validate_dob(fields.get("dob")),
    }
