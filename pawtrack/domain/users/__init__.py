"""Users domain - admin management of staff and client portal accounts"""

from .router import router

__all__ = ["router"]
