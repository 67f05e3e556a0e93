"""API routers."""

from .account import router as account_router
from .pantry import router as pantry_router
from .preferences import router as preferences_router
from .recipes import router as recipes_router

__all__ = ["account_router", "pantry_router", "preferences_router", "recipes_router"]
