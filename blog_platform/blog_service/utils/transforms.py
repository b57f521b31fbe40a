"""
Write-time field transforms applied by the data-access layer.
"""
from typing import Optional

from email_validator import validate_email, EmailNotValidError

from ..errors import ValidationError


def capitalize(value: Optional[str]) -> str:
    """Upper-case the first letter and lower-case the rest ("jANE" -> "Jane")."""
    if not value:
        return ""
    return value[:1].upper() + value[1:].lower()


def check_email(email: Optional[str]) -> str:
    """
    Reject missing or syntactically invalid email addresses.

    Deliverability is not checked, so no DNS lookups happen.

    Raises:
        ValidationError: If the address is empty or malformed
    """
    if not email:
        raise ValidationError("email is required")
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValidationError(f"Validation isEmail on email failed: {exc}") from exc
    return email
