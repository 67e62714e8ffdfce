"""
Amortization Schedule Service (``recognition_modules.amortization.schedule_service``).

Responsibility
--------------
Schedule-level commands (create, update, cancel, delete) and queries
(lookup, listing, filtering, counts).  Commands delegate lifecycle changes
to ``AmortizationScheduleEngine``; queries delegate to ``ScheduleSelector``.

Architecture position
---------------------
**Modules layer** -- owns the transaction boundary for schedule commands
(``commit`` on success, ``rollback`` and re-raise on any exception).

Failure modes
-------------
* Unknown id or code  -> ``ScheduleNotFoundError``.
* Malformed input or duplicate code  -> ``ValidationError`` /
  ``DuplicateScheduleCodeError``.
* Update/delete after posting began  -> ``ScheduleHasPostedEntriesError``.
* Update/cancel of a COMPLETED or CANCELLED schedule
  -> ``ScheduleNotActiveError``.

Usage::

    service = AmortizationScheduleService(session)
    schedule = service.create(
        code="PPD-2025-001", name="Office rent prepaid",
        principal=Decimal("1200000"), start_date=date(2025, 1, 1), term=12,
        source_account_code="1400", target_account_code="6100",
    )
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from recognition_kernel.domain.calendar import PeriodUnit
from recognition_kernel.exceptions import (
    DuplicateScheduleCodeError,
    ScheduleHasPostedEntriesError,
    ValidationError,
)
from recognition_kernel.logging_config import LogContext, get_logger
from recognition_kernel.selectors.base import Page, PageRequest
from recognition_modules.amortization.calculations import validate_terms
from recognition_modules.amortization.engine import AmortizationScheduleEngine
from recognition_modules.amortization.models import (
    AmortizationSchedule,
    EntryStatus,
    ScheduleStatus,
    ScheduleType,
    ensure_schedule_active,
)
from recognition_modules.amortization.orm import AmortizationScheduleModel
from recognition_modules.amortization.selectors import EntrySelector, ScheduleSelector

logger = get_logger("modules.amortization.schedule_service")


def _require_text(field: str, value: str | None) -> str:
    if value is None or not value.strip():
        raise ValidationError(field, "must not be blank")
    return value.strip()


class AmortizationScheduleService:
    """
    Schedule commands and queries.

    Guarantees
    ----------
    * ``create`` persists the schedule and its generated entries in one
      unit of work; nothing is stored if validation or generation fails.
    * Read methods never modify the session.
    """

    def __init__(self, session: Session):
        self._session = session
        self._engine = AmortizationScheduleEngine(session)
        self._schedules = ScheduleSelector(session)
        self._entries = EntrySelector(session)

    # =========================================================================
    # Queries
    # =========================================================================

    def find_by_id(self, schedule_id: UUID) -> AmortizationSchedule:
        return self._schedules.find_by_id(schedule_id)

    def find_by_code(self, code: str) -> AmortizationSchedule:
        return self._schedules.find_by_code(code)

    def find_all(self, page: PageRequest | None = None) -> Page[AmortizationSchedule]:
        return self._schedules.find_all(page)

    def find_by_status(self, status: ScheduleStatus) -> list[AmortizationSchedule]:
        return self._schedules.find_by_status(status)

    def find_by_filters(
        self,
        status: ScheduleStatus | None = None,
        start_from: date | None = None,
        start_to: date | None = None,
        search_text: str | None = None,
        page: PageRequest | None = None,
        schedule_type: ScheduleType | None = None,
    ) -> Page[AmortizationSchedule]:
        return self._schedules.find_by_filters(
            status=status,
            start_from=start_from,
            start_to=start_to,
            search_text=search_text,
            schedule_type=schedule_type,
            request=page,
        )

    def find_active_schedules_for_date(self, on_date: date) -> list[AmortizationSchedule]:
        """ACTIVE schedules with ``start_date <= on_date <= end_date``."""
        return self._schedules.find_active_for_date(on_date)

    def count_active_schedules(self) -> int:
        return self._schedules.count_by_status(ScheduleStatus.ACTIVE)

    def count_by_status(self, status: ScheduleStatus) -> int:
        return self._schedules.count_by_status(status)

    # =========================================================================
    # Commands
    # =========================================================================

    def create(
        self,
        code: str,
        name: str,
        principal: Decimal,
        start_date: date,
        term: int,
        source_account_code: str,
        target_account_code: str,
        period_unit: PeriodUnit = PeriodUnit.MONTHLY,
        schedule_type: ScheduleType = ScheduleType.PREPAID_EXPENSE,
        auto_post: bool = False,
        description: str | None = None,
    ) -> AmortizationSchedule:
        """
        Create a schedule, activate it and generate its entries.

        Raises:
            ValidationError: On blank fields, identical accounts or bad terms.
            DuplicateScheduleCodeError: If *code* is already used.
        """
        code = _require_text("code", code)
        name = _require_text("name", name)
        source_account_code = _require_text("source_account_code", source_account_code)
        target_account_code = _require_text("target_account_code", target_account_code)
        if source_account_code == target_account_code:
            raise ValidationError(
                "target_account_code", "must differ from source_account_code",
            )
        if start_date is None:
            raise ValidationError("start_date", "is required")
        validate_terms(principal, term)

        logger.info("amortization_schedule_create_started", extra={
            "schedule_code": code,
            "principal": str(principal),
            "term": term,
            "period_unit": period_unit.value,
        })
        try:
            if self._schedules.code_exists(code):
                raise DuplicateScheduleCodeError(code)

            model = AmortizationScheduleModel(
                code=code,
                name=name,
                description=description,
                schedule_type=schedule_type.value,
                source_account_code=source_account_code,
                target_account_code=target_account_code,
                principal=principal,
                start_date=start_date,
                term=term,
                period_unit=period_unit.value,
                status=ScheduleStatus.ACTIVE.value,
                auto_post=auto_post,
            )
            self._session.add(model)
            try:
                self._session.flush()
            except IntegrityError as exc:
                raise DuplicateScheduleCodeError(code) from exc

            self._engine.activate(model)
            self._session.commit()
        except Exception:
            self._session.rollback()
            logger.warning("amortization_schedule_create_rolled_back", extra={
                "schedule_code": code,
            })
            raise

        logger.info("amortization_schedule_created", extra={
            "schedule_id": str(model.id),
            "schedule_code": code,
        })
        return model.to_dto()

    def update(
        self,
        schedule_id: UUID,
        name: str | None = None,
        description: str | None = None,
        auto_post: bool | None = None,
    ) -> AmortizationSchedule:
        """
        Change descriptive fields of an ACTIVE schedule with nothing posted.

        Financial terms are immutable once entries exist; only ``name``,
        ``description`` and ``auto_post`` may change.
        """
        with LogContext.bind(schedule_id=schedule_id):
            try:
                model = self._schedules.get_model(schedule_id)
                ensure_schedule_active(model.id, ScheduleStatus(model.status), "update")
                self._ensure_nothing_posted(model, "update")

                if name is not None:
                    model.name = _require_text("name", name)
                if description is not None:
                    model.description = description
                if auto_post is not None:
                    model.auto_post = auto_post
                self._session.commit()
            except Exception:
                self._session.rollback()
                logger.warning("amortization_schedule_update_rolled_back")
                raise

            logger.info("amortization_schedule_updated", extra={
                "schedule_code": model.code,
                "auto_post": model.auto_post,
            })
            return model.to_dto()

    def cancel(self, schedule_id: UUID) -> AmortizationSchedule:
        """ACTIVE -> CANCELLED.  Posted and pending entries stay as they are."""
        with LogContext.bind(schedule_id=schedule_id):
            try:
                model = self._schedules.get_model(schedule_id)
                self._engine.cancel(model)
                self._session.commit()
            except Exception:
                self._session.rollback()
                logger.warning("amortization_schedule_cancel_rolled_back")
                raise
            return model.to_dto()

    def delete(self, schedule_id: UUID) -> None:
        """Delete a schedule and its entries.  Refused once anything is posted."""
        with LogContext.bind(schedule_id=schedule_id):
            try:
                model = self._schedules.get_model(schedule_id)
                self._ensure_nothing_posted(model, "delete")
                code = model.code
                self._session.delete(model)
                self._session.commit()
            except Exception:
                self._session.rollback()
                logger.warning("amortization_schedule_delete_rolled_back")
                raise

            logger.info("amortization_schedule_deleted", extra={"schedule_code": code})

    def _ensure_nothing_posted(self, model: AmortizationScheduleModel, operation: str) -> None:
        posted = self._entries.count_by_status(EntryStatus.POSTED, schedule_id=model.id)
        if posted:
            raise ScheduleHasPostedEntriesError(str(model.id), posted, operation)
