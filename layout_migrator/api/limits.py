"""Rate limiter shared by the app factory and the routers (global, per-IP)."""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)
