"""Clients domain - dog owners of a business"""

from .router import router

__all__ = ["router"]
