"""Domain repository interfaces."""

from .session_repository import PagesTransform, PageTransform, SessionRepository

__all__ = ["PagesTransform", "PageTransform", "SessionRepository"]
