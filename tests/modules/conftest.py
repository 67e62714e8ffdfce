"""
Shared fixtures for module tests.

Asset-register factories.  Amortization services and the schedule factory
live in the top-level conftest so the concurrency tests share them.
Factories commit what they create.

DESIGN RULE: Every fixture is opt-in.  No autouse.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

import pytest

from recognition_modules.depreciation.models import AssetStatus, DepreciationMethod
from recognition_modules.depreciation.orm import AssetCategoryModel, FixedAssetModel

# ---------------------------------------------------------------------------
# Deterministic IDs
# ---------------------------------------------------------------------------

TEST_CATEGORY_ID = UUID("00000000-0000-4000-a000-000000000020")


@pytest.fixture
def asset_category(session):
    category = AssetCategoryModel(id=TEST_CATEGORY_ID, code="EQUIP", name="Equipment")
    session.add(category)
    session.commit()
    return category


@pytest.fixture
def make_asset(session, asset_category):
    """Insert a fixed asset and commit."""

    def _make(code: str, **overrides):
        params = {
            "code": code,
            "name": f"Asset {code}",
            "category_id": asset_category.id,
            "purchase_date": date(2023, 1, 1),
            "purchase_cost": Decimal("12000000"),
            "salvage_value": Decimal("0"),
            "useful_life_years": 5,
            "depreciation_method": DepreciationMethod.STRAIGHT_LINE.value,
            "status": AssetStatus.ACTIVE.value,
        }
        params.update(overrides)
        model = FixedAssetModel(**params)
        session.add(model)
        session.commit()
        return model

    return _make
