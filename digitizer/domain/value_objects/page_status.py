"""
PageStatus value object

Represents where a single page is in the extraction lifecycle.
Enforces valid state transitions.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class PageState(str, Enum):
    """Valid page states."""
    IDLE = "idle"
    EXTRACTING = "extracting"
    COMPLETE = "complete"
    ERROR = "error"


_VALID_TRANSITIONS = {
    PageState.IDLE: {PageState.EXTRACTING},
    PageState.EXTRACTING: {PageState.COMPLETE, PageState.ERROR},
    PageState.COMPLETE: {PageState.EXTRACTING, PageState.IDLE},
    PageState.ERROR: {PageState.EXTRACTING, PageState.IDLE},
}


@dataclass(frozen=True)
class PageStatus:
    """
    Immutable page status with state transition validation.

    ``error_message`` is carried only by the ``error`` state.
    """
    state: PageState
    error_message: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.state, PageState):
            object.__setattr__(self, 'state', PageState(self.state))

        if self.state == PageState.ERROR:
            if not self.error_message:
                object.__setattr__(self, 'error_message', "Extraction failed")
        elif self.error_message is not None:
            raise ValueError(f"error_message is only allowed in the error state, not {self.state.value}")

    def __eq__(self, other: object) -> bool:
        """Support comparisons with PageStatus, PageState, and string states."""
        if isinstance(other, PageStatus):
            return self.state == other.state and self.error_message == other.error_message
        if isinstance(other, PageState):
            return self.state == other
        if isinstance(other, str):
            return self.state.value == other.lower()
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.state, self.error_message))

    @classmethod
    def idle(cls) -> PageStatus:
        return cls(state=PageState.IDLE)

    @classmethod
    def extracting(cls) -> PageStatus:
        return cls(state=PageState.EXTRACTING)

    @classmethod
    def complete(cls) -> PageStatus:
        return cls(state=PageState.COMPLETE)

    @classmethod
    def error(cls, message: str) -> PageStatus:
        """Create an error status with a human-readable message."""
        return cls(state=PageState.ERROR, error_message=message)

    def can_transition_to(self, new_state: PageState) -> bool:
        """
        Check if transition to new state is valid.

        Valid transitions:
        - IDLE → EXTRACTING
        - EXTRACTING → COMPLETE, ERROR
        - COMPLETE → EXTRACTING (re-run), IDLE (reset)
        - ERROR → EXTRACTING (retry), IDLE (reset)
        """
        return new_state in _VALID_TRANSITIONS.get(self.state, set())

    def transition_to(self, new_state: PageState, error_message: Optional[str] = None) -> PageStatus:
        """
        Create new PageStatus with transitioned state.

        Raises:
            ValueError: If transition is invalid

        Examples:
            >>> PageStatus.idle().transition_to(PageState.EXTRACTING).state
            <PageState.EXTRACTING: 'extracting'>
        """
        if not self.can_transition_to(new_state):
            raise ValueError(
                f"Invalid state transition from {self.state.value} to {new_state.value}"
            )
        return PageStatus(state=new_state, error_message=error_message)

    def is_idle(self) -> bool:
        return self.state == PageState.IDLE

    def is_extracting(self) -> bool:
        return self.state == PageState.EXTRACTING

    def is_complete(self) -> bool:
        return self.state == PageState.COMPLETE

    def is_failed(self) -> bool:
        return self.state == PageState.ERROR

    def is_pending(self) -> bool:
        """Pages a batch run picks up: never attempted or last attempt failed."""
        return self.state in {PageState.IDLE, PageState.ERROR}

    def __str__(self) -> str:
        if self.error_message:
            return f"{self.state.value}: {self.error_message}"
        return self.state.value
