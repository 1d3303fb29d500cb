"""
API service route modules.

Each module handles a specific area of functionality.
"""

from .profiles import router as profiles_router
from .contacts import router as contacts_router
from .ai import router as ai_router

__all__ = [
    "profiles_router",
    "contacts_router",
    "ai_router",
]
