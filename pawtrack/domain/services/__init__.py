"""Services domain - the catalog of bookable services"""

from .router import router

__all__ = ["router"]
