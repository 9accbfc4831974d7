# Routers package
from . import inbox_router

__all__ = [
    "inbox_router",
]
