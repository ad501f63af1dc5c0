"""
API route handlers for the Realty Staff API.
"""

from .properties import router as properties_router
from .users import router as users_router
from .health import router as health_router

__all__ = ["properties_router", "users_router", "health_router"]
