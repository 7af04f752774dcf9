from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import Settings

def build_limiter(settings: Settings) -> Limiter:
    # one limiter per app so separate instances never share counters
    return Limiter(key_func=get_remote_address, default_limits=[settings.RATE_LIMIT_DEFAULT])
