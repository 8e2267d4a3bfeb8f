"""
Global slowapi rate limiter.

Imported by social_graph/router.py for per-endpoint limits. Mounted onto
app.state in main.py so the slowapi middleware can find it.

Storage defaults to in-process memory; point RATE_LIMIT_STORAGE_URI at Redis
when running more than one worker.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from inkwell.config import get_settings

_settings = get_settings()

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=_settings.rate_limit_storage_uri,
    enabled=_settings.rate_limit_enabled,
)

# Per-route limit strings, resolved once at import time
FOLLOW_RATE_LIMIT = _settings.follow_rate_limit
