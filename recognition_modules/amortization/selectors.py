"""
Amortization Selectors (``recognition_modules.amortization.selectors``).

Read-only queries over schedules and entries.  Every method returns frozen
DTOs; lookups by identifier raise ``NotFoundError`` subclasses, scans
return empty results for unknown schedules.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy import func, or_, select

from recognition_kernel.selectors.base import BaseSelector, Page, PageRequest
from recognition_kernel.exceptions import EntryNotFoundError, ScheduleNotFoundError
from recognition_modules.amortization.models import (
    AmortizationEntry,
    AmortizationSchedule,
    EntryStatus,
    ScheduleStatus,
    ScheduleType,
)
from recognition_modules.amortization.orm import (
    AmortizationEntryModel,
    AmortizationScheduleModel,
)


def _contains_pattern(text: str) -> str:
    """LIKE pattern matching *text* literally anywhere in a column."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class ScheduleSelector(BaseSelector):
    """Queries over ``amortization_schedules``."""

    def get_model(self, schedule_id: UUID) -> AmortizationScheduleModel:
        model = self.session.get(AmortizationScheduleModel, schedule_id)
        if model is None:
            raise ScheduleNotFoundError(str(schedule_id))
        return model

    def find_by_id(self, schedule_id: UUID) -> AmortizationSchedule:
        return self.get_model(schedule_id).to_dto()

    def find_by_code(self, code: str) -> AmortizationSchedule:
        model = self.session.scalars(
            select(AmortizationScheduleModel).where(AmortizationScheduleModel.code == code)
        ).first()
        if model is None:
            raise ScheduleNotFoundError(code, field="code")
        return model.to_dto()

    def code_exists(self, code: str) -> bool:
        return self.session.scalar(
            select(func.count())
            .select_from(AmortizationScheduleModel)
            .where(AmortizationScheduleModel.code == code)
        ) > 0

    def find_all(self, request: PageRequest | None = None) -> Page[AmortizationSchedule]:
        stmt = select(AmortizationScheduleModel).order_by(
            AmortizationScheduleModel.code,
        )
        return self._paginate(stmt, request or PageRequest(), lambda m: m.to_dto())

    def find_by_status(self, status: ScheduleStatus) -> list[AmortizationSchedule]:
        models = self.session.scalars(
            select(AmortizationScheduleModel)
            .where(AmortizationScheduleModel.status == status.value)
            .order_by(AmortizationScheduleModel.code)
        ).all()
        return [m.to_dto() for m in models]

    def find_by_filters(
        self,
        status: ScheduleStatus | None = None,
        start_from: date | None = None,
        start_to: date | None = None,
        search_text: str | None = None,
        schedule_type: ScheduleType | None = None,
        request: PageRequest | None = None,
    ) -> Page[AmortizationSchedule]:
        """
        Filtered, paged schedule listing.

        ``None`` for any filter means "no filter"; so does a blank
        ``search_text``.  The date range applies to the start date and is
        inclusive on both ends.
        """
        stmt = select(AmortizationScheduleModel)
        if status is not None:
            stmt = stmt.where(AmortizationScheduleModel.status == status.value)
        if schedule_type is not None:
            stmt = stmt.where(AmortizationScheduleModel.schedule_type == schedule_type.value)
        if start_from is not None:
            stmt = stmt.where(AmortizationScheduleModel.start_date >= start_from)
        if start_to is not None:
            stmt = stmt.where(AmortizationScheduleModel.start_date <= start_to)
        if search_text and search_text.strip():
            pattern = _contains_pattern(search_text.strip())
            stmt = stmt.where(or_(
                AmortizationScheduleModel.code.ilike(pattern, escape="\\"),
                AmortizationScheduleModel.name.ilike(pattern, escape="\\"),
                func.coalesce(AmortizationScheduleModel.description, "").ilike(pattern, escape="\\"),
            ))
        stmt = stmt.order_by(AmortizationScheduleModel.code)
        return self._paginate(stmt, request or PageRequest(), lambda m: m.to_dto())

    def find_active_for_date(self, on_date: date) -> list[AmortizationSchedule]:
        models = self.session.scalars(
            select(AmortizationScheduleModel)
            .where(
                AmortizationScheduleModel.status == ScheduleStatus.ACTIVE.value,
                AmortizationScheduleModel.start_date <= on_date,
                AmortizationScheduleModel.end_date >= on_date,
            )
            .order_by(AmortizationScheduleModel.code)
        ).all()
        return [m.to_dto() for m in models]

    def count_by_status(self, status: ScheduleStatus) -> int:
        return self.session.scalar(
            select(func.count())
            .select_from(AmortizationScheduleModel)
            .where(AmortizationScheduleModel.status == status.value)
        ) or 0


class EntrySelector(BaseSelector):
    """Queries over ``amortization_entries``."""

    def get_model(self, entry_id: UUID) -> AmortizationEntryModel:
        model = self.session.get(AmortizationEntryModel, entry_id)
        if model is None:
            raise EntryNotFoundError(str(entry_id))
        return model

    def find_by_id(self, entry_id: UUID) -> AmortizationEntry:
        return self.get_model(entry_id).to_dto()

    def find_by_schedule_id(
        self, schedule_id: UUID, status: EntryStatus | None = None,
    ) -> list[AmortizationEntry]:
        stmt = select(AmortizationEntryModel).where(
            AmortizationEntryModel.schedule_id == schedule_id,
        )
        if status is not None:
            stmt = stmt.where(AmortizationEntryModel.status == status.value)
        models = self.session.scalars(
            stmt.order_by(AmortizationEntryModel.sequence)
        ).all()
        return [m.to_dto() for m in models]

    def find_pending_due_by(
        self, as_of: date, auto_post_only: bool = False,
    ) -> list[AmortizationEntry]:
        """PENDING entries due on or before *as_of*, by due date then schedule code."""
        stmt = (
            select(AmortizationEntryModel)
            .join(AmortizationScheduleModel)
            .where(
                AmortizationEntryModel.status == EntryStatus.PENDING.value,
                AmortizationEntryModel.due_date <= as_of,
            )
        )
        if auto_post_only:
            stmt = stmt.where(
                AmortizationScheduleModel.auto_post.is_(True),
                AmortizationScheduleModel.status == ScheduleStatus.ACTIVE.value,
            )
        models = self.session.scalars(
            stmt.order_by(
                AmortizationEntryModel.due_date,
                AmortizationScheduleModel.code,
                AmortizationEntryModel.sequence,
            )
        ).all()
        return [m.to_dto() for m in models]

    def count_by_status(
        self, status: EntryStatus, schedule_id: UUID | None = None,
    ) -> int:
        stmt = (
            select(func.count())
            .select_from(AmortizationEntryModel)
            .where(AmortizationEntryModel.status == status.value)
        )
        if schedule_id is not None:
            stmt = stmt.where(AmortizationEntryModel.schedule_id == schedule_id)
        return self.session.scalar(stmt) or 0
