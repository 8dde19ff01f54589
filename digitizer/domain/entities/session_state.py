"""Immutable snapshot of the digitization session."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from digitizer.domain.entities.page_record import PageRecord
from digitizer.domain.value_objects.global_status import GlobalStatus


@dataclass(frozen=True)
class SessionState:
    pages: Tuple[PageRecord, ...] = field(default_factory=tuple)
    selected_page_id: Optional[str] = None
    global_status: GlobalStatus = GlobalStatus.IDLE
