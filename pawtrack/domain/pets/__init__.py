"""Pets domain - pet types, dogs and complete dog records"""

from .router import router

__all__ = ["router"]
