"""
Amortization Entry Service (``recognition_modules.amortization.entry_service``).

Responsibility
--------------
Queries and transitions individual amortization entries: lookups, due-date
and auto-post scans, posting, skipping, and batch posting.

Architecture position
---------------------
**Modules layer** -- owns the transaction boundary.  Every post or skip is
its own unit of work: ``commit`` on success, ``rollback`` and re-raise on
any exception.

Invariants enforced
-------------------
* An entry is posted at most once.  The entry row is locked
  (``SELECT ... FOR UPDATE``) and re-read before its status is checked, and
  the version counter rejects any write based on a stale read.  Two
  concurrent posts of one entry yield one success and one
  ``EntryNotPendingError``.
* The ledger is called only after the PENDING -> POSTED write has been
  flushed; a ledger rejection rolls the entry back to PENDING.
* Lock order is entry, then schedule, on every path.
* Batch runs post each entry in its own unit of work; failures are
  collected per entry and never undo earlier posts in the batch.

Failure modes
-------------
* Unknown entry id  -> ``EntryNotFoundError``.
* Entry not PENDING  -> ``EntryNotPendingError``.
* Owning schedule not ACTIVE  -> ``ScheduleNotActiveError``.
* Ledger rejection or ledger failure of any kind  -> ``LedgerPostingError``.
* Version conflict while the entry is still PENDING
  -> ``OptimisticLockError``.
"""

from __future__ import annotations

from datetime import date
from typing import Callable
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from recognition_kernel.domain.clock import Clock, SystemClock
from recognition_kernel.exceptions import (
    EntryNotFoundError,
    EntryNotPendingError,
    LedgerPostingError,
    OptimisticLockError,
    RecognitionError,
    ScheduleNotFoundError,
)
from recognition_kernel.logging_config import LogContext, get_logger
from recognition_modules.amortization.engine import AmortizationScheduleEngine
from recognition_modules.amortization.ledger import (
    InMemoryLedger,
    LedgerPoster,
    build_posting_request,
)
from recognition_modules.amortization.models import (
    AmortizationEntry,
    BatchPostingResult,
    EntryStatus,
    PostingFailure,
    ScheduleStatus,
    ensure_schedule_active,
    transition_entry,
)
from recognition_modules.amortization.orm import (
    AmortizationEntryModel,
    AmortizationScheduleModel,
)
from recognition_modules.amortization.selectors import EntrySelector

logger = get_logger("modules.amortization.entry_service")

_PAST_TENSE = {"post": "posted", "skip": "skipped"}


def _run_id() -> str:
    """Correlation id for a batch run: the caller's if one is bound, else a new one."""
    return LogContext.get_all().get("correlation_id") or str(uuid4())


class AmortizationEntryService:
    """
    Entry queries and lifecycle commands.

    Scans (``find_by_schedule_id``, ``find_pending_*``, ``post_all_pending``)
    return empty results for an unknown schedule; only direct entry-id
    operations raise ``EntryNotFoundError``.
    """

    def __init__(
        self,
        session: Session,
        ledger: LedgerPoster | None = None,
        clock: Clock | None = None,
    ):
        self._session = session
        self._ledger = ledger if ledger is not None else InMemoryLedger()
        self._clock = clock if clock is not None else SystemClock()
        self._engine = AmortizationScheduleEngine(session)
        self._entries = EntrySelector(session)

    # =========================================================================
    # Queries
    # =========================================================================

    def find_by_id(self, entry_id: UUID) -> AmortizationEntry:
        return self._entries.find_by_id(entry_id)

    def find_by_schedule_id(self, schedule_id: UUID) -> list[AmortizationEntry]:
        return self._entries.find_by_schedule_id(schedule_id)

    def find_pending_by_schedule_id(self, schedule_id: UUID) -> list[AmortizationEntry]:
        return self._entries.find_by_schedule_id(schedule_id, EntryStatus.PENDING)

    def find_pending_entries_due_by_date(self, as_of: date) -> list[AmortizationEntry]:
        return self._entries.find_pending_due_by(as_of)

    def find_pending_auto_post_entries_due_by_date(self, as_of: date) -> list[AmortizationEntry]:
        """Due PENDING entries of ACTIVE schedules flagged for auto-post."""
        return self._entries.find_pending_due_by(as_of, auto_post_only=True)

    def count_pending_entries(self) -> int:
        return self._entries.count_by_status(EntryStatus.PENDING)

    # =========================================================================
    # Commands
    # =========================================================================

    def post_entry(self, entry_id: UUID) -> AmortizationEntry:
        """PENDING -> POSTED, recognized in the ledger exactly once."""
        return self._transition(entry_id, "post", self._post_locked)

    def skip_entry(self, entry_id: UUID) -> AmortizationEntry:
        """PENDING -> SKIPPED.  Nothing is sent to the ledger."""
        return self._transition(entry_id, "skip", self._skip_locked)

    def post_all_pending(self, schedule_id: UUID) -> BatchPostingResult:
        """
        Post every PENDING entry of a schedule in sequence order.

        Each entry is its own unit of work.  An unknown schedule, or one
        with nothing pending, yields an empty result.
        """
        with LogContext.bind(schedule_id=schedule_id, correlation_id=_run_id()):
            pending = self.find_pending_by_schedule_id(schedule_id)
            result = self._post_each([entry.id for entry in pending])
            logger.info("amortization_batch_posted", extra={
                "posted_count": result.posted_count,
                "failed_count": result.failed_count,
            })
            return result

    def auto_post_due_entries(self, as_of: date | None = None) -> BatchPostingResult:
        """Post every auto-post entry due by *as_of* (default: today)."""
        as_of = as_of or self._clock.today()
        with LogContext.bind(correlation_id=_run_id()):
            due = self.find_pending_auto_post_entries_due_by_date(as_of)
            result = self._post_each([entry.id for entry in due])
            logger.info("amortization_auto_post_completed", extra={
                "as_of": as_of.isoformat(),
                "posted_count": result.posted_count,
                "failed_count": result.failed_count,
            })
            return result

    # =========================================================================
    # Internals
    # =========================================================================

    def _post_each(self, entry_ids: list[UUID]) -> BatchPostingResult:
        posted: list[AmortizationEntry] = []
        failures: list[PostingFailure] = []
        for entry_id in entry_ids:
            try:
                posted.append(self.post_entry(entry_id))
            except RecognitionError as exc:
                failures.append(PostingFailure(
                    entry_id=entry_id,
                    error_code=exc.code,
                    message=str(exc),
                ))
        return BatchPostingResult(posted=tuple(posted), failures=tuple(failures))

    def _transition(
        self,
        entry_id: UUID,
        operation: str,
        action: Callable[[UUID], AmortizationEntryModel],
    ) -> AmortizationEntry:
        with LogContext.bind(entry_id=entry_id):
            try:
                model = action(entry_id)
                self._session.commit()
            except StaleDataError as exc:
                self._session.rollback()
                conflict = self._classify_conflict(entry_id, operation)
                logger.warning(f"amortization_entry_{operation}_conflict", extra={
                    "error_code": conflict.code,
                })
                raise conflict from exc
            except Exception:
                self._session.rollback()
                logger.warning(f"amortization_entry_{operation}_rolled_back", exc_info=True)
                raise

            logger.info(f"amortization_entry_{_PAST_TENSE[operation]}", extra={
                "schedule_id": str(model.schedule_id),
                "sequence": model.sequence,
                "amount": str(model.amount),
                "ledger_reference": model.ledger_reference,
            })
            return model.to_dto()

    def _post_locked(self, entry_id: UUID) -> AmortizationEntryModel:
        entry, schedule = self._lock_for_transition(entry_id, EntryStatus.POSTED, "post")
        entry.posted_at = self._clock.now()
        self._session.flush()

        request = build_posting_request(schedule.to_dto(), entry.to_dto())
        try:
            receipt = self._ledger.post(request)
        except RecognitionError:
            raise
        except Exception as exc:
            raise LedgerPostingError(str(entry_id), f"{type(exc).__name__}: {exc}") from exc
        entry.ledger_reference = receipt.reference
        self._session.flush()
        self._engine.complete_if_all_posted(schedule)
        return entry

    def _skip_locked(self, entry_id: UUID) -> AmortizationEntryModel:
        entry, schedule = self._lock_for_transition(entry_id, EntryStatus.SKIPPED, "skip")
        self._session.flush()
        self._engine.complete_if_all_posted(schedule)
        return entry

    def _lock_for_transition(
        self,
        entry_id: UUID,
        target: EntryStatus,
        operation: str,
    ) -> tuple[AmortizationEntryModel, AmortizationScheduleModel]:
        entry = self._session.scalars(
            select(AmortizationEntryModel)
            .where(AmortizationEntryModel.id == entry_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).first()
        if entry is None:
            raise EntryNotFoundError(str(entry_id))
        new_status = transition_entry(entry.id, EntryStatus(entry.status), target, operation)

        schedule = self._session.scalars(
            select(AmortizationScheduleModel)
            .where(AmortizationScheduleModel.id == entry.schedule_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).first()
        if schedule is None:
            raise ScheduleNotFoundError(str(entry.schedule_id))
        ensure_schedule_active(schedule.id, ScheduleStatus(schedule.status), operation)

        entry.status = new_status.value
        return entry, schedule

    def _classify_conflict(self, entry_id: UUID, operation: str) -> RecognitionError:
        """Explain a version conflict: lost race to a post/skip, or a plain conflict."""
        try:
            current = self._session.scalars(
                select(AmortizationEntryModel.status)
                .where(AmortizationEntryModel.id == entry_id)
            ).first()
        finally:
            self._session.rollback()
        if current is not None and EntryStatus(current) is not EntryStatus.PENDING:
            return EntryNotPendingError(str(entry_id), current, operation)
        return OptimisticLockError("AmortizationEntry", str(entry_id))
