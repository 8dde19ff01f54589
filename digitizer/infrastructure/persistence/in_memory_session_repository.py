"""In-memory implementation of SessionRepository."""
from __future__ import annotations

import logging
from collections import Counter
from threading import Lock
from typing import Dict, Iterable, List, Optional

from digitizer.domain.entities.page_record import PageRecord
from digitizer.domain.entities.session_state import SessionState
from digitizer.domain.exceptions import EntityNotFoundError
from digitizer.domain.repositories.session_repository import PagesTransform, PageTransform, SessionRepository
from digitizer.domain.value_objects.global_status import GlobalStatus

logger = logging.getLogger(__name__)


class InMemorySessionRepository(SessionRepository):
    """Lock-guarded page table addressed by identifier.

    FastAPI runs sync endpoints on a thread pool, so every access goes
    through a single lock; all writes are whole-record replacements.
    """

    def __init__(self) -> None:
        self._pages: Dict[str, PageRecord] = {}
        self._order: List[str] = []
        self._selected_page_id: Optional[str] = None
        self._activity: Counter = Counter()
        self._lock = Lock()

    def add_pages(self, pages: Iterable[PageRecord]) -> None:
        new_pages = list(pages)
        with self._lock:
            for page in new_pages:
                if page.id in self._pages:
                    raise ValueError(f"Duplicate page id {page.id}")
            for page in new_pages:
                self._pages[page.id] = page
                self._order.append(page.id)
            if self._selected_page_id is None and new_pages:
                self._selected_page_id = new_pages[0].id

    def find_page(self, page_id: str) -> Optional[PageRecord]:
        with self._lock:
            return self._pages.get(page_id)

    def list_pages(self) -> List[PageRecord]:
        with self._lock:
            return [self._pages[page_id] for page_id in self._order]

    def update_page(self, page_id: str, transform: PageTransform) -> Optional[PageRecord]:
        with self._lock:
            current = self._pages.get(page_id)
            if current is None:
                logger.info("Dropping write for removed page", extra={"page_id": page_id})
                return None
            updated = transform(current)
            if updated.id != page_id:
                raise ValueError("Page transforms must keep page identity")
            self._pages[page_id] = updated
            return updated

    def delete_page(self, page_id: str) -> bool:
        with self._lock:
            if self._pages.pop(page_id, None) is None:
                return False
            self._order.remove(page_id)
            if self._selected_page_id == page_id:
                self._selected_page_id = None
            return True

    def apply(self, transform: PagesTransform) -> List[PageRecord]:
        with self._lock:
            current = [self._pages[page_id] for page_id in self._order]
            updated = list(transform(current))
            if [page.id for page in updated] != self._order:
                raise ValueError("Page transforms must keep page identity and order")
            self._pages = {page.id: page for page in updated}
            return updated

    def select_page(self, page_id: Optional[str]) -> None:
        with self._lock:
            if page_id is not None and page_id not in self._pages:
                raise EntityNotFoundError("PageRecord", page_id)
            self._selected_page_id = page_id

    def selected_page_id(self) -> Optional[str]:
        with self._lock:
            return self._selected_page_id

    def begin_activity(self, status: GlobalStatus) -> None:
        if status == GlobalStatus.IDLE:
            return
        with self._lock:
            self._activity[status] += 1

    def end_activity(self, status: GlobalStatus) -> None:
        if status == GlobalStatus.IDLE:
            return
        with self._lock:
            if self._activity[status] > 0:
                self._activity[status] -= 1

    def global_status(self) -> GlobalStatus:
        with self._lock:
            return self._global_status_locked()

    def snapshot(self) -> SessionState:
        with self._lock:
            return SessionState(
                pages=tuple(self._pages[page_id] for page_id in self._order),
                selected_page_id=self._selected_page_id,
                global_status=self._global_status_locked(),
            )

    def clear(self) -> int:
        with self._lock:
            removed = len(self._order)
            self._pages = {}
            self._order = []
            self._selected_page_id = None
            return removed

    def _global_status_locked(self) -> GlobalStatus:
        if self._activity[GlobalStatus.EXTRACTING] > 0:
            return GlobalStatus.EXTRACTING
        if self._activity[GlobalStatus.UPLOADING] > 0:
            return GlobalStatus.UPLOADING
        return GlobalStatus.IDLE
