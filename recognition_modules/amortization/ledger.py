"""
Ledger Posting Port (``recognition_modules.amortization.ledger``).

Responsibility
--------------
Defines the contract between the entry service and the downstream ledger:
a ``PostingRequest`` goes in, a ``LedgerReceipt`` comes back, and any
rejection surfaces as ``LedgerPostingError``.  The ledger's own schema is
not modelled here.

``InMemoryLedger`` is the default collaborator.  It records every request
and refuses a second posting for the same entry id, so an entry reaches
the ledger at most once.

Orientation
-----------
PREPAID_EXPENSE / INTANGIBLE_ASSET  -> debit target, credit source
UNEARNED_REVENUE / ACCRUED_REVENUE  -> debit source, credit target
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from recognition_kernel.exceptions import LedgerPostingError
from recognition_kernel.logging_config import get_logger
from recognition_modules.amortization.models import (
    AmortizationEntry,
    AmortizationSchedule,
    ScheduleType,
    period_label,
)

logger = get_logger("modules.amortization.ledger")

_DEBIT_TARGET_TYPES = frozenset({ScheduleType.PREPAID_EXPENSE, ScheduleType.INTANGIBLE_ASSET})


@dataclass(frozen=True)
class PostingRequest:
    """What the ledger needs to recognize one entry."""
    entry_id: UUID
    schedule_code: str
    sequence: int
    amount: Decimal
    due_date: date
    debit_account_code: str
    credit_account_code: str
    description: str


@dataclass(frozen=True)
class LedgerReceipt:
    """Acknowledgement returned by the ledger for an accepted request."""
    entry_id: UUID
    reference: str


def posting_accounts(
    schedule_type: ScheduleType,
    source_account_code: str,
    target_account_code: str,
) -> tuple[str, str]:
    """Return ``(debit_account_code, credit_account_code)``."""
    if schedule_type in _DEBIT_TARGET_TYPES:
        return target_account_code, source_account_code
    return source_account_code, target_account_code


def build_posting_request(
    schedule: AmortizationSchedule,
    entry: AmortizationEntry,
) -> PostingRequest:
    debit, credit = posting_accounts(
        schedule.schedule_type,
        schedule.source_account_code,
        schedule.target_account_code,
    )
    return PostingRequest(
        entry_id=entry.id,
        schedule_code=schedule.code,
        sequence=entry.sequence,
        amount=entry.amount,
        due_date=entry.due_date,
        debit_account_code=debit,
        credit_account_code=credit,
        description=(
            f"Amortization {schedule.code} {entry.sequence}/{schedule.term} - "
            f"{period_label(entry.period_start)}"
        ),
    )


class LedgerPoster(ABC):
    """Downstream ledger collaborator."""

    @abstractmethod
    def post(self, request: PostingRequest) -> LedgerReceipt:
        """
        Recognize *request* in the ledger.

        Raises:
            LedgerPostingError: If the ledger rejects or fails the request.
        """


class InMemoryLedger(LedgerPoster):
    """Process-local ledger that keeps accepted requests in memory."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._requests: dict[UUID, PostingRequest] = {}
        self._counter = 0

    def post(self, request: PostingRequest) -> LedgerReceipt:
        with self._lock:
            if request.entry_id in self._requests:
                raise LedgerPostingError(str(request.entry_id), "entry already posted to ledger")
            self._counter += 1
            self._requests[request.entry_id] = request
            reference = f"AMZ-{self._counter:06d}"

        logger.info("ledger_request_accepted", extra={
            "entry_id": str(request.entry_id),
            "schedule_code": request.schedule_code,
            "amount": str(request.amount),
            "reference": reference,
        })
        return LedgerReceipt(entry_id=request.entry_id, reference=reference)

    @property
    def requests(self) -> tuple[PostingRequest, ...]:
        with self._lock:
            return tuple(self._requests.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._requests)
