"""
core/validators.py

Password and code validators shared by auth, staff and company schemas.
"""

import string
from typing import Final

# -------------------------------
# Constants
# -------------------------------
MIN_PASSWORD_LENGTH: Final[int] = 6
MAX_PASSWORD_LENGTH: Final[int] = 128
COMPANY_CODE_LENGTH: Final[int] = 6


# -------------------------------
# Validator Functions
# -------------------------------
def password_validator(password: str) -> str:
    """
    Validates a password.

    Rules:
    - Must contain only ASCII characters
    - Length must be between MIN_PASSWORD_LENGTH and MAX_PASSWORD_LENGTH

    Raises:
        ValueError: If any rule is violated
    """
    if not password.isascii():
        raise ValueError("Password must contain only ASCII characters.")

    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    if len(password) > MAX_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_LENGTH} characters long.")

    return password


def company_code_validator(code: str) -> str:
    """Normalizes a company code to upper case and checks its alphabet."""
    normalized = code.strip().upper()
    allowed = set(string.ascii_uppercase + string.digits)
    if not normalized or any(c not in allowed for c in normalized):
        raise ValueError("Company code must contain only letters and digits.")
    return normalized
