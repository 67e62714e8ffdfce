"""
Amortization Domain Models.

The nouns of amortization: schedules, entries, and batch posting outcomes.
Status transitions are explicit tables checked at the boundary; an illegal
transition raises ``InvalidStateError`` (or one of its subclasses).
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from recognition_kernel.domain.calendar import PeriodUnit
from recognition_kernel.exceptions import (
    EntryNotPendingError,
    InvalidStateError,
    ScheduleNotActiveError,
)


class ScheduleStatus(Enum):
    """Schedule lifecycle states.  COMPLETED and CANCELLED are terminal."""
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class EntryStatus(Enum):
    """Entry lifecycle states.  POSTED and SKIPPED are terminal."""
    PENDING = "pending"
    POSTED = "posted"
    SKIPPED = "skipped"


class ScheduleType(Enum):
    """What the schedule recognizes; decides the posting orientation."""
    PREPAID_EXPENSE = "prepaid_expense"
    UNEARNED_REVENUE = "unearned_revenue"
    INTANGIBLE_ASSET = "intangible_asset"
    ACCRUED_REVENUE = "accrued_revenue"


_SCHEDULE_TRANSITIONS: dict[ScheduleStatus, frozenset[ScheduleStatus]] = {
    ScheduleStatus.ACTIVE: frozenset({ScheduleStatus.COMPLETED, ScheduleStatus.CANCELLED}),
    ScheduleStatus.COMPLETED: frozenset(),
    ScheduleStatus.CANCELLED: frozenset(),
}

_ENTRY_TRANSITIONS: dict[EntryStatus, frozenset[EntryStatus]] = {
    EntryStatus.PENDING: frozenset({EntryStatus.POSTED, EntryStatus.SKIPPED}),
    EntryStatus.POSTED: frozenset(),
    EntryStatus.SKIPPED: frozenset(),
}


def transition_schedule(
    schedule_id: UUID,
    current: ScheduleStatus,
    target: ScheduleStatus,
    operation: str,
) -> ScheduleStatus:
    """Return *target* if the move is legal, else raise ``InvalidStateError``."""
    if target not in _SCHEDULE_TRANSITIONS[current]:
        if current is not ScheduleStatus.ACTIVE:
            raise ScheduleNotActiveError(str(schedule_id), current.value, operation)
        raise InvalidStateError(
            "AmortizationSchedule", str(schedule_id), current.value, operation,
        )
    return target


def transition_entry(
    entry_id: UUID,
    current: EntryStatus,
    target: EntryStatus,
    operation: str,
) -> EntryStatus:
    """Return *target* if the move is legal, else raise ``EntryNotPendingError``."""
    if target not in _ENTRY_TRANSITIONS[current]:
        raise EntryNotPendingError(str(entry_id), current.value, operation)
    return target


def ensure_schedule_active(
    schedule_id: UUID, current: ScheduleStatus, operation: str,
) -> None:
    if current is not ScheduleStatus.ACTIVE:
        raise ScheduleNotActiveError(str(schedule_id), current.value, operation)


def period_label(period_start: date) -> str:
    """Human-readable period name, e.g. ``JANUARY 2025``."""
    return f"{calendar.month_name[period_start.month].upper()} {period_start.year}"


@dataclass(frozen=True)
class AmortizationSchedule:
    """A plan recognizing ``principal`` over ``term`` periods."""
    id: UUID
    code: str
    name: str
    principal: Decimal
    start_date: date
    term: int
    period_unit: PeriodUnit
    schedule_type: ScheduleType
    source_account_code: str
    target_account_code: str
    status: ScheduleStatus = ScheduleStatus.ACTIVE
    auto_post: bool = False
    description: str | None = None
    end_date: date | None = None
    completed_periods: int = 0
    amortized_amount: Decimal = Decimal("0")
    remaining_amount: Decimal = Decimal("0")

    @property
    def progress_percentage(self) -> Decimal:
        if self.term <= 0:
            return Decimal("0.00")
        return (Decimal(self.completed_periods) * 100 / self.term).quantize(Decimal("0.01"))


@dataclass(frozen=True)
class AmortizationEntry:
    """One scheduled installment of an amortization schedule."""
    id: UUID
    schedule_id: UUID
    sequence: int
    period_start: date
    period_end: date
    due_date: date
    amount: Decimal
    status: EntryStatus = EntryStatus.PENDING
    posted_at: datetime | None = None
    ledger_reference: str | None = None

    @property
    def period_label(self) -> str:
        return period_label(self.period_start)


@dataclass(frozen=True)
class EntryPlanLine:
    """One line of a generated entry plan, before persistence."""
    sequence: int
    period_start: date
    period_end: date
    due_date: date
    amount: Decimal


@dataclass(frozen=True)
class PostingFailure:
    """An entry that could not be posted during a batch run."""
    entry_id: UUID
    error_code: str
    message: str


@dataclass(frozen=True)
class BatchPostingResult:
    """
    Per-entry outcomes of a batch posting run.

    Each entry posts in its own unit of work, so ``posted`` entries stay
    posted regardless of later ``failures``.
    """
    posted: tuple[AmortizationEntry, ...] = field(default_factory=tuple)
    failures: tuple[PostingFailure, ...] = field(default_factory=tuple)

    @property
    def posted_count(self) -> int:
        return len(self.posted)

    @property
    def failed_count(self) -> int:
        return len(self.failures)

    @property
    def is_clean(self) -> bool:
        return not self.failures
