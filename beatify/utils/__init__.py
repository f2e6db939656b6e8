"""Shared utilities (caching, throttling)."""

from .cache import TTLCache, MISSING
from .rate_limit import RateLimiter

__all__ = ["TTLCache", "MISSING", "RateLimiter"]
