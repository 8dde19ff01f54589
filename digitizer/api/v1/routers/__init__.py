"""API v1 routers package."""

from . import batch, exports, pages, uploads

__all__ = [
    "batch",
    "exports",
    "pages",
    "uploads",
]
