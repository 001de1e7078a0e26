"""
Shared slowapi rate limiter.

Registered on the FastAPI app in main.py; routers decorate endpoints with
@limiter.limit(...). Decorated endpoints must accept a `request: Request`
argument.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address


limiter = Limiter(key_func=get_remote_address)
