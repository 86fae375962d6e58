"""
Request throttling for routes that call the paid image-description service.

The limiter is attached to the FastAPI app in main.py; POST /posts/ and
PUT /posts/{id} are decorated with the configured limit.
"""

from __future__ import annotations

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import get_settings

settings = get_settings()

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)
