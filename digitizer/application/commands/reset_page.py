"""ResetPage Command - returns a finished page to idle."""
from dataclasses import dataclass

from digitizer.domain.entities.page_record import PageRecord
from digitizer.domain.exceptions import EntityNotFoundError, InvalidPageTransitionError
from digitizer.domain.repositories.session_repository import SessionRepository
from digitizer.domain.value_objects.page_status import PageState


@dataclass(frozen=True)
class ResetPageCommand:
    page_id: str


class ResetPageHandler:
    """Clears rows, error and warning; the processed image is kept."""

    def __init__(self, session_repository: SessionRepository):
        self._session = session_repository

    def handle(self, command: ResetPageCommand) -> PageRecord:
        def _reset(page: PageRecord) -> PageRecord:
            if not page.status.can_transition_to(PageState.IDLE):
                raise InvalidPageTransitionError(page.id, page.status.state.value, PageState.IDLE.value)
            return page.reset()

        updated = self._session.update_page(command.page_id, _reset)
        if updated is None:
            raise EntityNotFoundError("PageRecord", command.page_id)
        return updated
