"""Gallery domain - dated albums and their public share links"""

from .router import router

__all__ = ["router"]
