"""Domain exceptions."""


class DomainException(Exception):
    """Base exception for domain layer errors."""
    pass


class EntityNotFoundError(DomainException):
    """Exception raised when an entity is not found in the store."""

    def __init__(self, entity_type: str, entity_id: str, *, message: str | None = None):
        final_message = message or f"{entity_type} not found: {entity_id}"
        super().__init__(final_message)
        self.entity_type = entity_type
        self.entity_id = entity_id


class EntityValidationError(DomainException):
    """Exception raised when an operation is not valid for the entity's state."""

    def __init__(self, entity_type: str, errors: dict):
        message = f"Validation failed for {entity_type}: {errors}"
        super().__init__(message)
        self.entity_type = entity_type
        self.errors = errors


class InvalidPageTransitionError(EntityValidationError):
    """Raised when a page is asked to move to a state its current state forbids."""

    def __init__(self, page_id: str, current_state: str, requested_state: str):
        super().__init__(
            "PageRecord",
            {"status": f"Cannot move page {page_id} from {current_state} to {requested_state}"},
        )
        self.page_id = page_id
        self.current_state = current_state
        self.requested_state = requested_state


class DomainValidationError(DomainException):
    """Exception raised when validation fails at the domain boundary."""

    def __init__(self, message: str):
        super().__init__(message)


class NothingToExportError(DomainException):
    """Raised when an export is requested but no page has extracted rows."""
