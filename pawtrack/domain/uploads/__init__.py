"""Uploads domain - object storage endpoints"""

from .router import router

__all__ = ["router"]
