"""
API routers.
"""

from .users import router as users_router
from .areas import router as areas_router
from .developers import router as developers_router
from .projects import router as projects_router
from .properties import router as properties_router

__all__ = [
    "users_router",
    "areas_router",
    "developers_router",
    "projects_router",
    "properties_router",
]
