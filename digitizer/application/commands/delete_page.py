"""DeletePage Command - removes a page from the session.

Deletion is allowed in any state. A page deleted mid-extraction stays
deleted: its late result is dropped by the store.
"""
from dataclasses import dataclass
from typing import Any, Dict

from digitizer.domain.exceptions import EntityNotFoundError
from digitizer.domain.repositories.session_repository import SessionRepository


@dataclass(frozen=True)
class DeletePageCommand:
    page_id: str


class DeletePageHandler:
    """Handles DeletePage commands."""

    def __init__(self, session_repository: SessionRepository):
        self._session = session_repository

    def handle(self, command: DeletePageCommand) -> Dict[str, Any]:
        if not self._session.delete_page(command.page_id):
            raise EntityNotFoundError("PageRecord", command.page_id)
        return {"page_id": command.page_id, "deleted": True}


@dataclass(frozen=True)
class ClearSessionCommand:
    pass


class ClearSessionHandler:
    """Removes every page, starting a fresh session."""

    def __init__(self, session_repository: SessionRepository):
        self._session = session_repository

    def handle(self, command: ClearSessionCommand) -> Dict[str, Any]:
        return {"deleted": self._session.clear()}
