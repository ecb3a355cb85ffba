"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class ValidationError(Exception):
    """Raised when an edit would break a store invariant.

    The store is left unchanged; retrying with corrected input always works.
    """


class EmptyIdError(ValidationError):
    """Raised when a product id would become empty."""

    def __init__(self, current_id: str):
        self.current_id = current_id
        super().__init__(f"Product id cannot be empty (kept '{current_id}')")


class IdConflictError(ValidationError):
    """Raised when a product id is already held by another product."""

    def __init__(self, current_id: str, requested_id: str):
        self.current_id = current_id
        self.requested_id = requested_id
        super().__init__(
            f"Product id '{requested_id}' already exists (kept '{current_id}')"
        )


class ParseFailureError(Exception):
    """Raised when an import payload or stored snapshot cannot be decoded."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class PersistenceFailureError(Exception):
    """Raised when the snapshot slot cannot be read or written.

    In-memory state stays authoritative; the write can be retried.
    """

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"Snapshot {operation} failed: {message}")


class ImportInProgressError(Exception):
    """Raised when an import is started while another is still in flight."""

    def __init__(self, plan_id: str | None = None):
        self.plan_id = plan_id
        if plan_id:
            message = f"Import '{plan_id}' is still awaiting confirmation"
        else:
            message = "Another import is still running"
        super().__init__(message)
