class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""


class InvalidStatusTransition(ValidationError):
    """Raised when an invoice status change is not allowed."""


class NumberAllocationExhausted(DomainError):
    """Raised when no free invoice number was found within the attempt limit."""

    def __init__(self, base_number: str, attempts: int):
        super().__init__(f"Invoice number collision limit exceeded for {base_number} after {attempts} attempts")
        self.base_number = base_number
        self.attempts = attempts


class StoreError(DomainError):
    """Base class for record store failures."""


class StoreConflict(StoreError):
    """A record with the same (id, partition key) already exists."""

    def __init__(self, collection: str, record_id: str, partition_key: str):
        super().__init__(f"{collection}: record {record_id!r} already exists in partition {partition_key!r}")
        self.collection = collection
        self.record_id = record_id
        self.partition_key = partition_key


class StoreNotFound(StoreError):
    """The addressed record does not exist."""

    def __init__(self, collection: str, record_id: str, partition_key: str):
        super().__init__(f"{collection}: record {record_id!r} not found in partition {partition_key!r}")
        self.collection = collection
        self.record_id = record_id
        self.partition_key = partition_key
