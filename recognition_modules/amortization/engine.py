"""
Amortization Schedule Engine (``recognition_modules.amortization.engine``).

Responsibility
--------------
Owns the schedule lifecycle: activation (validation plus one-time entry
generation), cancellation, and completion once no entry is left PENDING.
Also keeps the schedule's progress counters in step with its entries.

Architecture position
---------------------
**Modules layer** -- flush-only engine.  Participates in the caller's unit
of work; the schedule and entry services own commit/rollback.

Invariants enforced
-------------------
* Entries are generated exactly once per schedule and never regenerated.
* ACTIVE -> COMPLETED happens only when no PENDING entries remain.
* ACTIVE -> CANCELLED leaves every entry untouched.
* COMPLETED and CANCELLED are terminal.
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import func, select

from recognition_kernel.db.types import round_money
from recognition_kernel.domain.calendar import PeriodUnit
from recognition_kernel.exceptions import InvalidStateError
from recognition_kernel.logging_config import get_logger
from recognition_kernel.services.base import BaseService
from recognition_modules.amortization.calculations import (
    build_entry_plan,
    schedule_end_date,
    validate_terms,
)
from recognition_modules.amortization.models import (
    EntryStatus,
    ScheduleStatus,
    transition_schedule,
)
from recognition_modules.amortization.orm import (
    AmortizationEntryModel,
    AmortizationScheduleModel,
)

logger = get_logger("modules.amortization.engine")


class AmortizationScheduleEngine(BaseService[AmortizationScheduleModel]):
    """Schedule lifecycle and entry generation.  Never commits."""

    def generate(self, schedule: AmortizationScheduleModel) -> list[AmortizationEntryModel]:
        """
        Create the schedule's entries from its terms.

        Raises:
            ValidationError: If the terms cannot produce a plan.
            InvalidStateError: If the schedule already has entries.
        """
        existing = self.session.scalar(
            select(func.count())
            .select_from(AmortizationEntryModel)
            .where(AmortizationEntryModel.schedule_id == schedule.id)
        )
        if existing:
            raise InvalidStateError(
                "AmortizationSchedule", str(schedule.id), schedule.status, "generate",
            )

        plan = build_entry_plan(
            schedule.principal,
            schedule.start_date,
            schedule.term,
            PeriodUnit(schedule.period_unit),
        )
        entries = [
            AmortizationEntryModel(
                schedule_id=schedule.id,
                sequence=line.sequence,
                period_start=line.period_start,
                period_end=line.period_end,
                due_date=line.due_date,
                amount=line.amount,
                status=EntryStatus.PENDING.value,
            )
            for line in plan
        ]
        self.session.add_all(entries)
        self.session.flush()

        logger.info("amortization_entries_generated", extra={
            "schedule_id": str(schedule.id),
            "schedule_code": schedule.code,
            "entry_count": len(entries),
            "first_due_date": plan[0].due_date.isoformat(),
            "last_due_date": plan[-1].due_date.isoformat(),
        })
        return entries

    def activate(self, schedule: AmortizationScheduleModel) -> list[AmortizationEntryModel]:
        """
        Put a newly created schedule into service and generate its entries.

        Raises:
            ValidationError: If ``term <= 0`` or ``principal <= 0``.
        """
        validate_terms(schedule.principal, schedule.term)
        schedule.status = ScheduleStatus.ACTIVE.value
        schedule.end_date = schedule_end_date(
            schedule.start_date, schedule.term, PeriodUnit(schedule.period_unit),
        )
        schedule.completed_periods = 0
        schedule.amortized_amount = Decimal("0")
        schedule.remaining_amount = schedule.principal
        self.session.flush()

        entries = self.generate(schedule)
        logger.info("amortization_schedule_activated", extra={
            "schedule_id": str(schedule.id),
            "schedule_code": schedule.code,
            "principal": str(schedule.principal),
            "term": schedule.term,
            "period_unit": schedule.period_unit,
        })
        return entries

    def cancel(self, schedule: AmortizationScheduleModel) -> None:
        """ACTIVE -> CANCELLED.  Entries are left as they are."""
        schedule.status = transition_schedule(
            schedule.id,
            ScheduleStatus(schedule.status),
            ScheduleStatus.CANCELLED,
            "cancel",
        ).value
        self.session.flush()
        logger.info("amortization_schedule_cancelled", extra={
            "schedule_id": str(schedule.id),
            "schedule_code": schedule.code,
        })

    def refresh_counters(self, schedule: AmortizationScheduleModel) -> None:
        """Recompute progress counters from the POSTED entries."""
        self.session.flush()
        posted_count, posted_sum = self.session.execute(
            select(func.count(), func.coalesce(func.sum(AmortizationEntryModel.amount), 0))
            .where(
                AmortizationEntryModel.schedule_id == schedule.id,
                AmortizationEntryModel.status == EntryStatus.POSTED.value,
            )
        ).one()
        amortized = round_money(Decimal(str(posted_sum)))
        schedule.completed_periods = posted_count
        schedule.amortized_amount = amortized
        schedule.remaining_amount = schedule.principal - amortized

    def complete_if_all_posted(self, schedule: AmortizationScheduleModel) -> bool:
        """
        Refresh counters and complete the schedule if nothing is PENDING.

        Returns True if the schedule moved to COMPLETED on this call.
        """
        self.refresh_counters(schedule)
        pending = self.session.scalar(
            select(func.count())
            .select_from(AmortizationEntryModel)
            .where(
                AmortizationEntryModel.schedule_id == schedule.id,
                AmortizationEntryModel.status == EntryStatus.PENDING.value,
            )
        )
        completed = False
        if not pending and ScheduleStatus(schedule.status) is ScheduleStatus.ACTIVE:
            schedule.status = transition_schedule(
                schedule.id,
                ScheduleStatus.ACTIVE,
                ScheduleStatus.COMPLETED,
                "complete",
            ).value
            completed = True
            logger.info("amortization_schedule_completed", extra={
                "schedule_id": str(schedule.id),
                "schedule_code": schedule.code,
                "completed_periods": schedule.completed_periods,
                "amortized_amount": str(schedule.amortized_amount),
            })
        self.session.flush()
        return completed
