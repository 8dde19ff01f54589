"""
PageRecord Entity - one uploaded image or rasterized PDF page.

PageRecord is immutable; every lifecycle step returns a new record so the
store can swap whole records and never exposes a half-updated one.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from digitizer.domain.value_objects.page_status import PageState, PageStatus

Scalar = Union[str, int, float, bool, None]
Row = Dict[str, Scalar]

_SCALAR_TYPES = (str, int, float, bool)


def _validate_rows(rows: Sequence[Mapping[str, Any]]) -> List[Row]:
    validated: List[Row] = []
    for index, row in enumerate(rows):
        if not isinstance(row, Mapping):
            raise ValueError(f"Row {index} must be a mapping, got {type(row).__name__}")
        clean: Row = {}
        for key, value in row.items():
            if not isinstance(key, str):
                raise ValueError(f"Row {index} has a non-string column name: {key!r}")
            if value is not None and not isinstance(value, _SCALAR_TYPES):
                raise ValueError(f"Row {index} column {key!r} holds a non-scalar value")
            clean[key] = value
        validated.append(clean)
    return validated


@dataclass(frozen=True)
class PageRecord:
    """
    Per-page unit of state tracking one document image through the pipeline.

    ``retained_rows`` holds the rows of the last successful extraction. They
    are only exposed through ``extracted_data`` while the page is complete, so
    a failed re-run hides them without erasing them.
    """

    id: str
    name: str
    original_image: bytes
    original_mime: str
    processed_image: Optional[bytes] = None
    processed_mime: Optional[str] = None
    status: PageStatus = field(default_factory=PageStatus.idle)
    retained_rows: Optional[List[Row]] = None
    consistency_warning: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if not self.id:
            raise ValueError("id is required")
        if self.status.is_complete() and self.retained_rows is None:
            raise ValueError("A complete page must carry extracted rows")
        if self.consistency_warning is not None and not self.status.is_complete():
            raise ValueError("consistency_warning may only be set on a complete page")
        if self.retained_rows is not None:
            object.__setattr__(self, "retained_rows", _validate_rows(self.retained_rows))

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------
    @property
    def extracted_data(self) -> Optional[List[Row]]:
        """Rows visible to readers; non-null iff the page is complete."""
        if self.status.is_complete():
            return self.retained_rows
        return None

    @property
    def error_message(self) -> Optional[str]:
        return self.status.error_message

    @property
    def image_payload(self) -> Optional[bytes]:
        """Image to send for extraction: the processed one, else the original."""
        return self.processed_image or self.original_image or None

    @property
    def payload_mime(self) -> str:
        if self.processed_image:
            return self.processed_mime or self.original_mime
        return self.original_mime

    @property
    def row_count(self) -> int:
        rows = self.extracted_data
        return len(rows) if rows is not None else 0

    def is_eligible(self) -> bool:
        """Complete with rows: participates in reconciliation and export."""
        return self.status.is_complete() and self.retained_rows is not None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start_extraction(self) -> "PageRecord":
        """Move to extracting, dropping any prior error and warning."""
        status = self.status.transition_to(PageState.EXTRACTING)
        return replace(self, status=status, consistency_warning=None)

    def complete_extraction(self, rows: Sequence[Mapping[str, Any]]) -> "PageRecord":
        status = self.status.transition_to(PageState.COMPLETE)
        return replace(self, status=status, retained_rows=list(rows), consistency_warning=None)

    def fail_extraction(self, message: str) -> "PageRecord":
        """Record a failure; rows from an earlier success are kept on the record."""
        status = self.status.transition_to(PageState.ERROR, error_message=message)
        return replace(self, status=status, consistency_warning=None)

    def reset(self) -> "PageRecord":
        status = self.status.transition_to(PageState.IDLE)
        return replace(self, status=status, retained_rows=None, consistency_warning=None)

    def with_processed_image(self, data: bytes, mime: str) -> "PageRecord":
        return replace(self, processed_image=data, processed_mime=mime)

    def with_rows(self, rows: Sequence[Mapping[str, Any]]) -> "PageRecord":
        """Replace the rows of a complete page (manual edits, reconciliation)."""
        if not self.status.is_complete():
            raise ValueError(f"Rows can only be replaced on a complete page, page is {self.status.state.value}")
        return replace(self, retained_rows=list(rows))

    def with_warning(self, warning: Optional[str]) -> "PageRecord":
        return replace(self, consistency_warning=warning)

    @classmethod
    def create(cls, name: str, image: bytes, mime: str) -> "PageRecord":
        """Create a new idle page whose processed image starts as the original."""
        return cls(
            id=uuid.uuid4().hex,
            name=name,
            original_image=image,
            original_mime=mime,
            processed_image=image,
            processed_mime=mime,
            status=PageStatus.idle(),
        )
