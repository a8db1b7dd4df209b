"""
Application core: lifespan, exception handlers, CORS and middlewares.
"""

from .lifespan import lifespan
from .errors import register_exception_handlers
from .cors import configure_cors
from .middlewares import register_middlewares

__all__ = [
    "lifespan",
    "register_exception_handlers",
    "configure_cors",
    "register_middlewares",
]
