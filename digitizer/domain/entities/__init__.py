"""Domain entities package"""

from .page_record import PageRecord, Row, Scalar
from .session_state import SessionState

__all__ = ["PageRecord", "Row", "Scalar", "SessionState"]
