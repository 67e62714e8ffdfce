"""
Depreciation ORM Models (``recognition_modules.depreciation.orm``).

Responsibility
--------------
SQLAlchemy persistence models for asset categories and fixed assets -- the
fields the depreciation report reads.  Asset maintenance itself belongs to
the asset register; these tables are the read side the engine queries.

Architecture position
---------------------
**Modules layer** -- persistence.  Imports from ``recognition_kernel.db.base``
and sibling ``models.py``.  MUST NOT be imported by ``recognition_kernel``.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from recognition_kernel.db.base import TrackedBase


# ---------------------------------------------------------------------------
# AssetCategoryModel
# ---------------------------------------------------------------------------

class AssetCategoryModel(TrackedBase):
    """
    ORM model for ``AssetCategory``.

    Table: ``depreciation_asset_categories``
    """

    __tablename__ = "depreciation_asset_categories"

    code: Mapped[str] = mapped_column(String(50))
    name: Mapped[str] = mapped_column(String(200))

    assets: Mapped[list["FixedAssetModel"]] = relationship(back_populates="category")

    __table_args__ = (
        UniqueConstraint("code", name="uq_depreciation_asset_categories_code"),
    )

    def to_dto(self):
        from recognition_modules.depreciation.models import AssetCategory
        return AssetCategory(id=self.id, code=self.code, name=self.name)

    def __repr__(self) -> str:
        return f"<AssetCategoryModel(id={self.id!r}, code={self.code!r})>"


# ---------------------------------------------------------------------------
# FixedAssetModel
# ---------------------------------------------------------------------------

class FixedAssetModel(TrackedBase):
    """
    ORM model for ``FixedAsset``.

    Table: ``depreciation_fixed_assets``
    """

    __tablename__ = "depreciation_fixed_assets"

    code: Mapped[str] = mapped_column(String(50))
    name: Mapped[str] = mapped_column(String(200))
    category_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("depreciation_asset_categories.id"), nullable=True,
    )
    purchase_date: Mapped[date]
    purchase_cost: Mapped[Decimal]
    salvage_value: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    useful_life_years: Mapped[int]
    depreciation_method: Mapped[str] = mapped_column(String(30))
    status: Mapped[str] = mapped_column(String(20), default="active")
    disposal_date: Mapped[date | None] = mapped_column(nullable=True)

    category: Mapped["AssetCategoryModel | None"] = relationship(back_populates="assets")

    __table_args__ = (
        UniqueConstraint("code", name="uq_depreciation_fixed_assets_code"),
        Index("idx_depreciation_fixed_assets_status", "status"),
        Index("idx_depreciation_fixed_assets_purchase_date", "purchase_date"),
    )

    def to_dto(self):
        from recognition_modules.depreciation.models import (
            AssetStatus,
            DepreciationMethod,
            FixedAsset,
        )
        return FixedAsset(
            id=self.id,
            code=self.code,
            name=self.name,
            purchase_date=self.purchase_date,
            purchase_cost=self.purchase_cost,
            useful_life_years=self.useful_life_years,
            depreciation_method=DepreciationMethod(self.depreciation_method),
            salvage_value=self.salvage_value,
            status=AssetStatus(self.status),
            disposal_date=self.disposal_date,
            category_id=self.category_id,
            category_name=self.category.name if self.category is not None else None,
        )

    @classmethod
    def from_dto(cls, dto) -> "FixedAssetModel":
        return cls(
            id=dto.id,
            code=dto.code,
            name=dto.name,
            category_id=dto.category_id,
            purchase_date=dto.purchase_date,
            purchase_cost=dto.purchase_cost,
            salvage_value=dto.salvage_value,
            useful_life_years=dto.useful_life_years,
            depreciation_method=dto.depreciation_method.value,
            status=dto.status.value,
            disposal_date=dto.disposal_date,
        )

    def __repr__(self) -> str:
        return (
            f"<FixedAssetModel(id={self.id!r}, code={self.code!r}, "
            f"status={self.status!r})>"
        )
