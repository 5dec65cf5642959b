"""Auth domain - registration, login and the current user"""

from .router import router

__all__ = ["router"]
