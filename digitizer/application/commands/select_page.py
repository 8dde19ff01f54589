"""SelectPage Command - changes the page shown in the workspace."""
from dataclasses import dataclass
from typing import Optional

from digitizer.domain.repositories.session_repository import SessionRepository


@dataclass(frozen=True)
class SelectPageCommand:
    page_id: Optional[str]


class SelectPageHandler:
    def __init__(self, session_repository: SessionRepository):
        self._session = session_repository

    def handle(self, command: SelectPageCommand) -> Optional[str]:
        self._session.select_page(command.page_id)
        return command.page_id
