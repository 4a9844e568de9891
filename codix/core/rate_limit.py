"""Ограничение частоты запросов."""
from slowapi import Limiter
from slowapi.util import get_remote_address

from codix.core.config import get_settings

AUTH_LIMIT = "100/15minutes"
STRICT_LIMIT = "5/hour"

limiter = Limiter(key_func=get_remote_address, enabled=get_settings().rate_limit_enabled)
