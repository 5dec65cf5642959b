"""Packages domain - prepaid session bundles"""

from .router import router

__all__ = ["router"]
