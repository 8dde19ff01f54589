"""Session-wide activity indicator."""
from __future__ import annotations

from enum import Enum


class GlobalStatus(str, Enum):
    """Summarizes whether an ingestion or an extraction batch is in flight."""
    IDLE = "idle"
    UPLOADING = "uploading"
    EXTRACTING = "extracting"
