"""Tasks domain - staff agenda"""

from .router import router

__all__ = ["router"]
