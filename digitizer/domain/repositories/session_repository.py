"""Session repository interface (Abstract Base Class)."""

from abc import ABC, abstractmethod
from typing import Callable, Iterable, List, Optional, Sequence

from digitizer.domain.entities.page_record import PageRecord
from digitizer.domain.entities.session_state import SessionState
from digitizer.domain.value_objects.global_status import GlobalStatus

PagesTransform = Callable[[List[PageRecord]], Sequence[PageRecord]]
PageTransform = Callable[[PageRecord], PageRecord]


class SessionRepository(ABC):
    """Authoritative store of the session's page records.

    Implementations replace whole records (or the whole sequence) on every
    write, so readers never observe a partially updated record.
    """

    @abstractmethod
    def add_pages(self, pages: Iterable[PageRecord]) -> None:
        """Append newly ingested pages and select the first if none is selected."""

    @abstractmethod
    def find_page(self, page_id: str) -> Optional[PageRecord]:
        """Return the page with the given identifier, if it exists."""

    @abstractmethod
    def list_pages(self) -> List[PageRecord]:
        """Return every page in upload order."""

    @abstractmethod
    def update_page(self, page_id: str, transform: PageTransform) -> Optional[PageRecord]:
        """Atomically replace a page with ``transform(current)``.

        Read, check and write happen under one lock, so the transform always
        sees the latest record. Returns the stored record, or ``None`` without
        writing when the page no longer exists; a late result never resurrects
        a deleted page. Exceptions raised by ``transform`` propagate and leave
        the page unchanged.
        """

    @abstractmethod
    def delete_page(self, page_id: str) -> bool:
        """Delete a page; return True if removed."""

    @abstractmethod
    def apply(self, transform: PagesTransform) -> List[PageRecord]:
        """Atomically replace the page sequence with ``transform(pages)``."""

    @abstractmethod
    def select_page(self, page_id: Optional[str]) -> None:
        """Set the selected page; ``None`` clears the selection."""

    @abstractmethod
    def selected_page_id(self) -> Optional[str]:
        """Return the selected page identifier."""

    @abstractmethod
    def begin_activity(self, status: GlobalStatus) -> None:
        """Register an in-flight ingestion or batch."""

    @abstractmethod
    def end_activity(self, status: GlobalStatus) -> None:
        """Mark an in-flight ingestion or batch as settled."""

    @abstractmethod
    def global_status(self) -> GlobalStatus:
        """Return the session-wide activity indicator."""

    @abstractmethod
    def snapshot(self) -> SessionState:
        """Return a consistent immutable view of the whole session."""

    @abstractmethod
    def clear(self) -> int:
        """Remove every page; return the number removed."""
