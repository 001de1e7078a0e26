"""
Request dependencies shared by API routers.
"""

from backend.src.middleware.auth import get_current_user

__all__ = ["get_current_user"]
