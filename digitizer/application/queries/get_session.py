"""
GetSession Query - Retrieves the session snapshot and single pages.
"""
from dataclasses import dataclass

from digitizer.application.dto.page_dto import PageDTO, SessionDTO
from digitizer.domain.entities.page_record import PageRecord
from digitizer.domain.exceptions import EntityNotFoundError
from digitizer.domain.repositories.session_repository import SessionRepository


@dataclass(frozen=True)
class GetSessionQuery:
    pass


@dataclass(frozen=True)
class GetPageQuery:
    page_id: str


class GetSessionHandler:
    """Handles GetSession and GetPage queries."""

    def __init__(self, session_repository: SessionRepository):
        self._session = session_repository

    def handle(self, query: GetSessionQuery) -> SessionDTO:
        return SessionDTO.from_state(self._session.snapshot())

    def get_page(self, query: GetPageQuery) -> PageDTO:
        return PageDTO.from_record(self.get_record(query.page_id))

    def get_record(self, page_id: str) -> PageRecord:
        """
        Return the raw record, used to serve image bytes.

        Raises:
            EntityNotFoundError: If page not found
        """
        page = self._session.find_page(page_id)
        if page is None:
            raise EntityNotFoundError("PageRecord", page_id)
        return page
