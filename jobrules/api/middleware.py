"""Rate limiter applied to every route (keyed by client address)."""

from slowapi import Limiter
from slowapi.util import get_remote_address


def build_limiter(rate_limit: str) -> Limiter:
    """One limiter per app, so its counters and limit follow that app's settings."""
    return Limiter(key_func=get_remote_address, default_limits=[rate_limit])
