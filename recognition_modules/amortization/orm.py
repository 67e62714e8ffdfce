"""
Amortization ORM Models (``recognition_modules.amortization.orm``).

Responsibility
--------------
SQLAlchemy persistence models for amortization schedules and their
entries.  Maps the frozen domain dataclasses from ``models.py`` to
database tables.

Architecture position
---------------------
**Modules layer** -- persistence.  Imports from ``recognition_kernel.db.base``
and sibling ``models.py``.  MUST NOT be imported by ``recognition_kernel``.

Invariants enforced
-------------------
* Schedule code is unique.
* ``(schedule_id, sequence)`` and ``(schedule_id, due_date)`` are unique.
* Both tables carry a version counter (``version_id_col``); an UPDATE
  against a stale version raises ``StaleDataError`` at flush.
* Entries are deleted only through their schedule (cascade).
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from recognition_kernel.db.base import TrackedBase


# ---------------------------------------------------------------------------
# AmortizationScheduleModel
# ---------------------------------------------------------------------------

class AmortizationScheduleModel(TrackedBase):
    """
    ORM model for ``AmortizationSchedule``.

    Table: ``amortization_schedules``
    """

    __tablename__ = "amortization_schedules"

    code: Mapped[str] = mapped_column(String(50))
    name: Mapped[str] = mapped_column(String(200))
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    schedule_type: Mapped[str] = mapped_column(String(30))
    source_account_code: Mapped[str] = mapped_column(String(50))
    target_account_code: Mapped[str] = mapped_column(String(50))
    principal: Mapped[Decimal]
    start_date: Mapped[date]
    end_date: Mapped[date | None] = mapped_column(nullable=True)
    term: Mapped[int]
    period_unit: Mapped[str] = mapped_column(String(20))
    status: Mapped[str] = mapped_column(String(20), default="active")
    auto_post: Mapped[bool] = mapped_column(Boolean, default=False)
    completed_periods: Mapped[int] = mapped_column(default=0)
    amortized_amount: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    remaining_amount: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    version: Mapped[int] = mapped_column(default=1)

    entries: Mapped[list["AmortizationEntryModel"]] = relationship(
        back_populates="schedule",
        cascade="all, delete-orphan",
        order_by="AmortizationEntryModel.sequence",
    )

    __table_args__ = (
        UniqueConstraint("code", name="uq_amortization_schedules_code"),
        Index("idx_amortization_schedules_status", "status"),
        Index("idx_amortization_schedules_start_date", "start_date"),
    )

    __mapper_args__ = {"version_id_col": version}

    def to_dto(self):
        from recognition_kernel.domain.calendar import PeriodUnit
        from recognition_modules.amortization.models import (
            AmortizationSchedule,
            ScheduleStatus,
            ScheduleType,
        )
        return AmortizationSchedule(
            id=self.id,
            code=self.code,
            name=self.name,
            principal=self.principal,
            start_date=self.start_date,
            term=self.term,
            period_unit=PeriodUnit(self.period_unit),
            schedule_type=ScheduleType(self.schedule_type),
            source_account_code=self.source_account_code,
            target_account_code=self.target_account_code,
            status=ScheduleStatus(self.status),
            auto_post=self.auto_post,
            description=self.description,
            end_date=self.end_date,
            completed_periods=self.completed_periods,
            amortized_amount=self.amortized_amount,
            remaining_amount=self.remaining_amount,
        )

    @classmethod
    def from_dto(cls, dto) -> "AmortizationScheduleModel":
        return cls(
            id=dto.id,
            code=dto.code,
            name=dto.name,
            description=dto.description,
            schedule_type=dto.schedule_type.value,
            source_account_code=dto.source_account_code,
            target_account_code=dto.target_account_code,
            principal=dto.principal,
            start_date=dto.start_date,
            end_date=dto.end_date,
            term=dto.term,
            period_unit=dto.period_unit.value,
            status=dto.status.value,
            auto_post=dto.auto_post,
            completed_periods=dto.completed_periods,
            amortized_amount=dto.amortized_amount,
            remaining_amount=dto.remaining_amount,
        )

    def __repr__(self) -> str:
        return (
            f"<AmortizationScheduleModel(id={self.id!r}, code={self.code!r}, "
            f"status={self.status!r})>"
        )


# ---------------------------------------------------------------------------
# AmortizationEntryModel
# ---------------------------------------------------------------------------

class AmortizationEntryModel(TrackedBase):
    """
    ORM model for ``AmortizationEntry``.

    Table: ``amortization_entries``
    """

    __tablename__ = "amortization_entries"

    schedule_id: Mapped[UUID] = mapped_column(
        ForeignKey("amortization_schedules.id", ondelete="CASCADE"),
    )
    sequence: Mapped[int]
    period_start: Mapped[date]
    period_end: Mapped[date]
    due_date: Mapped[date]
    amount: Mapped[Decimal]
    status: Mapped[str] = mapped_column(String(20), default="pending")
    posted_at: Mapped[datetime | None] = mapped_column(nullable=True)
    ledger_reference: Mapped[str | None] = mapped_column(String(100), nullable=True)
    version: Mapped[int] = mapped_column(default=1)

    schedule: Mapped["AmortizationScheduleModel"] = relationship(
        back_populates="entries",
    )

    __table_args__ = (
        UniqueConstraint("schedule_id", "sequence", name="uq_amortization_entries_sequence"),
        UniqueConstraint("schedule_id", "due_date", name="uq_amortization_entries_due_date"),
        Index("idx_amortization_entries_status_due", "status", "due_date"),
    )

    __mapper_args__ = {"version_id_col": version}

    def to_dto(self):
        from recognition_modules.amortization.models import (
            AmortizationEntry,
            EntryStatus,
        )
        return AmortizationEntry(
            id=self.id,
            schedule_id=self.schedule_id,
            sequence=self.sequence,
            period_start=self.period_start,
            period_end=self.period_end,
            due_date=self.due_date,
            amount=self.amount,
            status=EntryStatus(self.status),
            posted_at=self.posted_at,
            ledger_reference=self.ledger_reference,
        )

    def __repr__(self) -> str:
        return (
            f"<AmortizationEntryModel(id={self.id!r}, sequence={self.sequence!r}, "
            f"status={self.status!r})>"
        )
