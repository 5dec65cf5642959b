"""Portals domain - client self-service and teacher views"""

from .router import router

__all__ = ["router"]
