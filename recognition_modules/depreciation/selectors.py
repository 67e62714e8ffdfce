"""
Asset Selector (``recognition_modules.depreciation.selectors``).

Read-only query interface into the asset register, filtered by status,
category and date.  Returns ``FixedAsset`` DTOs ordered by asset code.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import selectinload

from recognition_kernel.exceptions import AssetNotFoundError
from recognition_kernel.selectors.base import BaseSelector
from recognition_modules.depreciation.models import AssetStatus, FixedAsset
from recognition_modules.depreciation.orm import FixedAssetModel


class AssetSelector(BaseSelector):

    def _base(self):
        return select(FixedAssetModel).options(selectinload(FixedAssetModel.category))

    def find_by_id(self, asset_id: UUID) -> FixedAsset:
        model = self.session.scalars(
            self._base().where(FixedAssetModel.id == asset_id)
        ).first()
        if model is None:
            raise AssetNotFoundError(str(asset_id))
        return model.to_dto()

    def find_by_code(self, code: str) -> FixedAsset:
        model = self.session.scalars(
            self._base().where(FixedAssetModel.code == code)
        ).first()
        if model is None:
            raise AssetNotFoundError(code)
        return model.to_dto()

    def find_by_status(self, status: AssetStatus) -> list[FixedAsset]:
        models = self.session.scalars(
            self._base()
            .where(FixedAssetModel.status == status.value)
            .order_by(FixedAssetModel.code)
        ).all()
        return [m.to_dto() for m in models]

    def find_by_category(self, category_id: UUID) -> list[FixedAsset]:
        models = self.session.scalars(
            self._base()
            .where(FixedAssetModel.category_id == category_id)
            .order_by(FixedAssetModel.code)
        ).all()
        return [m.to_dto() for m in models]

    def find_for_period(self, period_start: date, period_end: date) -> list[FixedAsset]:
        """
        Assets that overlap ``[period_start, period_end]``.

        Purchased on or before the period end, and either still ACTIVE or
        disposed on or after the period start.
        """
        models = self.session.scalars(
            self._base()
            .where(
                FixedAssetModel.purchase_date <= period_end,
                or_(
                    FixedAssetModel.status == AssetStatus.ACTIVE.value,
                    and_(
                        FixedAssetModel.status == AssetStatus.DISPOSED.value,
                        FixedAssetModel.disposal_date >= period_start,
                    ),
                ),
            )
            .order_by(FixedAssetModel.code)
        ).all()
        return [m.to_dto() for m in models]
