"""
guardhub/core/limiter.py

Rate Limiter Configuration

SlowAPI limiter keyed on the remote address. Disabled through
RATE_LIMIT_ENABLED (the test suite turns it off).
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from guardhub.core.config import settings

# ---------------------------------------------------
# Rate Limiter Initialization
# ---------------------------------------------------
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
