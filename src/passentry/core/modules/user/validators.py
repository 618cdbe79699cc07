from email_validator import EmailNotValidError, validate_email

from passentry.errors import ValidationError
from passentry.utils import normalize_email


def is_valid_email(email: str) -> bool:
    """Syntax-only email check, no DNS lookups."""
    try:
        validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_email_address(email: str) -> str:
    """Validate email syntax and return the normalized address.

    Raises:
        ValidationError: If the address is not a syntactically valid email
    """
    if not is_valid_email(email):
        raise ValidationError(f"Invalid email address: '{email}'")
    return normalize_email(email)


def validate_display_name(display_name: str) -> str:
    """Validate display name and return it stripped.

    Requirements:
    - Not blank
    - At most 100 characters

    Raises:
        ValidationError: If display name doesn't meet requirements
    """
    display_name = display_name.strip()
    if not display_name:
        raise ValidationError("Display name cannot be empty")
    if len(display_name) > 100:
        raise ValidationError("Display name must be at most 100 characters long")
    return display_name
