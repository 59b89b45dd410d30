"""
Shared rate limiter for API routes.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from cropguard.config import settings

limiter = Limiter(key_func=get_remote_address)

# Per-client limit applied to every v1 route
DEFAULT_RATE_LIMIT = f"{settings.rate_limit_requests}/minute"
