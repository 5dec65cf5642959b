"""Protocols domain - reusable training programs"""

from .router import router

__all__ = ["router"]
