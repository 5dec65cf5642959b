"""Records domain - medical, training, evidence, progress and assessment history of each dog"""

from .router import router

__all__ = ["router"]
