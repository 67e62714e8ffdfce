"""
Typed Exception Hierarchy for the Recognition Kernel.

Every error raised by the kernel or the modules built on it is a subclass
of ``RecognitionError``.  Each class carries a machine-readable ``code``
class attribute and stores its context as attributes, so callers catch by
type and read structured data instead of parsing messages.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    RecognitionError (base)
    |
    +-- NotFoundError
    |   +-- ScheduleNotFoundError
    |   +-- EntryNotFoundError
    |   +-- AssetNotFoundError
    |
    +-- ValidationError
    |   +-- DuplicateScheduleCodeError
    |
    +-- InvalidStateError
    |   +-- EntryNotPendingError
    |   +-- ScheduleNotActiveError
    |   +-- ScheduleHasPostedEntriesError
    |
    +-- ConcurrencyError
    |   +-- OptimisticLockError
    |
    +-- LedgerPostingError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Lookup          | NOT_FOUND                   | Identifier does not resolve
                | SCHEDULE_NOT_FOUND          | Schedule id/code unknown
                | ENTRY_NOT_FOUND             | Entry id unknown
                | ASSET_NOT_FOUND             | Asset id/code unknown
----------------|-----------------------------|-----------------------------------------
Validation      | VALIDATION_ERROR            | Malformed creation input
                | DUPLICATE_SCHEDULE_CODE     | Schedule code already used
----------------|-----------------------------|-----------------------------------------
Lifecycle       | INVALID_STATE               | Operation illegal for current status
                | ENTRY_NOT_PENDING           | Post/skip of a non-PENDING entry
                | SCHEDULE_NOT_ACTIVE         | Mutating a COMPLETED/CANCELLED schedule
                | SCHEDULE_HAS_POSTED_ENTRIES | Update/delete after posting began
----------------|-----------------------------|-----------------------------------------
Concurrency     | OPTIMISTIC_LOCK_CONFLICT    | Row version changed underneath us
----------------|-----------------------------|-----------------------------------------
Ledger          | LEDGER_POSTING_FAILED       | Posting collaborator rejected request

===============================================================================
HANDLING PATTERNS
===============================================================================

    try:
        entry_service.post_entry(entry_id)
    except EntryNotPendingError as e:
        log.info(f"Entry {e.entity_id} already {e.current_status}")
    except NotFoundError as e:
        return {"error": e.code, "id": e.identifier}

``NotFoundError`` and ``ValidationError`` are always surfaced to the caller.
Bulk operations collect ``RecognitionError`` instances per item instead of
raising them.
"""


class RecognitionError(Exception):
    """
    Base exception for all recognition kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "RECOGNITION_ERROR"


# Lookup exceptions


class NotFoundError(RecognitionError):
    """An identifier did not resolve to a stored record."""

    code: str = "NOT_FOUND"

    def __init__(self, entity_type: str, identifier: str, message: str | None = None):
        self.entity_type = entity_type
        self.identifier = str(identifier)
        super().__init__(message or f"{entity_type} not found: {identifier}")


class ScheduleNotFoundError(NotFoundError):
    """Amortization schedule with given id or code was not found."""

    code: str = "SCHEDULE_NOT_FOUND"

    def __init__(self, identifier: str, field: str = "id"):
        self.field = field
        super().__init__(
            "AmortizationSchedule",
            identifier,
            f"Amortization schedule not found with {field}: {identifier}",
        )


class EntryNotFoundError(NotFoundError):
    """Amortization entry with given id was not found."""

    code: str = "ENTRY_NOT_FOUND"

    def __init__(self, identifier: str):
        super().__init__(
            "AmortizationEntry",
            identifier,
            f"Amortization entry not found with id: {identifier}",
        )


class AssetNotFoundError(NotFoundError):
    """Fixed asset with given id or code was not found."""

    code: str = "ASSET_NOT_FOUND"

    def __init__(self, identifier: str):
        super().__init__("FixedAsset", identifier)


# Validation exceptions


class ValidationError(RecognitionError):
    """Creation or configuration input is malformed."""

    code: str = "VALIDATION_ERROR"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid {field}: {reason}")


class DuplicateScheduleCodeError(ValidationError):
    """Another schedule already uses this code."""

    code: str = "DUPLICATE_SCHEDULE_CODE"

    def __init__(self, schedule_code: str):
        self.schedule_code = schedule_code
        super().__init__("code", f"schedule code already exists: {schedule_code}")


# Lifecycle exceptions


class InvalidStateError(RecognitionError):
    """Operation is not legal for the entity's current lifecycle status."""

    code: str = "INVALID_STATE"

    def __init__(
        self,
        entity_type: str,
        entity_id: str,
        current_status: str,
        operation: str,
    ):
        self.entity_type = entity_type
        self.entity_id = str(entity_id)
        self.current_status = current_status
        self.operation = operation
        super().__init__(
            f"Cannot {operation} {entity_type} {entity_id} "
            f"with status: {current_status}"
        )


class EntryNotPendingError(InvalidStateError):
    """Entry has already been posted or skipped."""

    code: str = "ENTRY_NOT_PENDING"

    def __init__(self, entry_id: str, current_status: str, operation: str):
        super().__init__("AmortizationEntry", entry_id, current_status, operation)


class ScheduleNotActiveError(InvalidStateError):
    """Schedule is COMPLETED or CANCELLED."""

    code: str = "SCHEDULE_NOT_ACTIVE"

    def __init__(self, schedule_id: str, current_status: str, operation: str):
        super().__init__("AmortizationSchedule", schedule_id, current_status, operation)


class ScheduleHasPostedEntriesError(InvalidStateError):
    """Schedule terms are frozen once any entry has been posted."""

    code: str = "SCHEDULE_HAS_POSTED_ENTRIES"

    def __init__(self, schedule_id: str, posted_count: int, operation: str):
        self.posted_count = posted_count
        super().__init__(
            "AmortizationSchedule",
            schedule_id,
            f"{posted_count} posted entries",
            operation,
        )


# Concurrency exceptions


class ConcurrencyError(RecognitionError):
    """Base exception for concurrency-related errors."""

    code: str = "CONCURRENCY_ERROR"


class OptimisticLockError(ConcurrencyError):
    """Optimistic locking conflict detected."""

    code: str = "OPTIMISTIC_LOCK_CONFLICT"

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = str(entity_id)
        super().__init__(
            f"Optimistic lock conflict on {entity_type} {entity_id}: "
            "entity was modified by another transaction"
        )


# Ledger collaborator exceptions


class LedgerPostingError(RecognitionError):
    """The downstream ledger rejected or failed a posting request."""

    code: str = "LEDGER_POSTING_FAILED"

    def __init__(self, entry_id: str, reason: str):
        self.entry_id = str(entry_id)
        self.reason = reason
        super().__init__(f"Ledger posting failed for entry {entry_id}: {reason}")
