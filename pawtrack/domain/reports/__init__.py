"""Reports domain - dashboard metrics and financial summary"""

from .router import router

__all__ = ["router"]
