"""Rate limiter shared by the account endpoints (register, login, recovery)."""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)
