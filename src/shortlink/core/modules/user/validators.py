import re

from shortlink.errors import ValidationError

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_BYTES = 72  # bcrypt only reads the first 72 bytes


def validate_email(email: str) -> str:
    """Validate email format and return it normalized to lowercase.

    Raises:
        ValidationError: If the address is not of the form local@domain.tld
    """
    email = email.strip().lower()
    if not EMAIL_RE.fullmatch(email):
        raise ValidationError("Invalid email")
    return email


def username_from_email(email: str) -> str:
    """Username is the local part of the email address."""
    return email.split("@", 1)[0]


def validate_password(password: str) -> None:
    """Validate password meets requirements.

    Requirements:
    - No whitespace characters
    - At least 8 characters
    - At most 72 bytes when UTF-8 encoded

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")

    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValidationError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes long")

    if any(char.isspace() for char in password):
        raise ValidationError("Password cannot contain whitespace characters")
