"""Application DTOs."""

from .page_dto import PageDTO, SessionDTO

__all__ = ["PageDTO", "SessionDTO"]
