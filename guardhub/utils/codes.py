"""
utils/codes.py

Random identifiers printed on physical or financial artefacts
(checkpoint QR payloads, invoice and transaction numbers).
"""

import secrets
import string

BASE36_UPPER = string.digits + string.ascii_uppercase


def random_base36(length: int = 6) -> str:
    """Random upper-case base-36 string."""
    return "".join(secrets.choice(BASE36_UPPER) for _ in range(length))
