"""
Data Transfer Objects for page and session queries.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from digitizer.domain.entities.page_record import PageRecord, Row
from digitizer.domain.entities.session_state import SessionState


@dataclass(frozen=True)
class PageDTO:
    """Read projection of a page record, without image bytes."""

    page_id: str
    name: str
    status: str
    extracted_data: Optional[List[Row]]
    error_message: Optional[str]
    consistency_warning: Optional[str]
    row_count: int
    has_processed_image: bool
    created_at: datetime

    @classmethod
    def from_record(cls, page: PageRecord) -> "PageDTO":
        rows = page.extracted_data
        return cls(
            page_id=page.id,
            name=page.name,
            status=page.status.state.value,
            extracted_data=[dict(row) for row in rows] if rows is not None else None,
            error_message=page.error_message,
            consistency_warning=page.consistency_warning,
            row_count=page.row_count,
            has_processed_image=page.processed_image is not None
            and page.processed_image != page.original_image,
            created_at=page.created_at,
        )


@dataclass(frozen=True)
class SessionDTO:
    pages: List[PageDTO] = field(default_factory=list)
    selected_page_id: Optional[str] = None
    global_status: str = "idle"

    @classmethod
    def from_state(cls, state: SessionState) -> "SessionDTO":
        return cls(
            pages=[PageDTO.from_record(page) for page in state.pages],
            selected_page_id=state.selected_page_id,
            global_status=state.global_status.value,
        )
