"""
Depreciation report tests.

Asset selection for a fiscal year, per-item figures, totals as exact sums
and empty reports.
"""

from datetime import date
from decimal import Decimal

import pytest

from recognition_config import CompanyConfig
from recognition_kernel.exceptions import AssetNotFoundError
from recognition_modules.amortization.orm import AmortizationScheduleModel
from recognition_modules.depreciation.models import AssetStatus, DepreciationMethod
from recognition_modules.depreciation.report_service import DepreciationReportService
from recognition_modules.depreciation.selectors import AssetSelector


@pytest.fixture
def report_service(session):
    return DepreciationReportService(session, config=CompanyConfig())


class TestGenerateReport:

    def test_straight_line_item(self, make_asset, report_service):
        make_asset("FA-001")

        report = report_service.generate_report(2025)

        assert len(report.items) == 1
        item = report.items[0]
        assert item.asset_code == "FA-001"
        assert item.category_name == "Equipment"
        assert item.depreciation_method is DepreciationMethod.STRAIGHT_LINE
        assert item.depreciation_this_year == Decimal("2400000")
        assert item.accumulated_depreciation == Decimal("7200000")
        assert item.book_value == Decimal("4800000")

    def test_far_future_year_without_assets_is_zero_report(self, engine, report_service):
        report = report_service.generate_report(2099)

        assert report.items == ()
        assert report.is_empty
        assert report.total_purchase_cost == Decimal("0")
        assert report.total_depreciation_this_year == Decimal("0")
        assert report.total_accumulated_depreciation == Decimal("0")
        assert report.total_book_value == Decimal("0")

    def test_totals_are_sums_of_items(self, make_asset, report_service):
        make_asset("FA-002", purchase_cost=Decimal("5000000"), useful_life_years=4)
        make_asset(
            "FA-001",
            purchase_cost=Decimal("10000"),
            depreciation_method=DepreciationMethod.DECLINING_BALANCE.value,
            purchase_date=date(2025, 1, 1),
        )
        make_asset("FA-003", purchase_date=date(2025, 7, 20))

        report = report_service.generate_report(2025)

        assert [i.asset_code for i in report.items] == ["FA-001", "FA-002", "FA-003"]
        assert report.total_purchase_cost == sum(i.purchase_cost for i in report.items)
        assert report.total_depreciation_this_year == sum(
            i.depreciation_this_year for i in report.items
        )
        assert report.total_accumulated_depreciation == sum(
            i.accumulated_depreciation for i in report.items
        )
        assert report.total_book_value == sum(i.book_value for i in report.items)

    def test_asset_bought_after_year_excluded(self, make_asset, report_service):
        make_asset("FA-NEW", purchase_date=date(2026, 2, 1))
        assert report_service.generate_report(2025).is_empty

    def test_disposed_asset_listed_only_through_disposal_year(self, make_asset, report_service):
        make_asset(
            "FA-SOLD",
            status=AssetStatus.DISPOSED.value,
            disposal_date=date(2024, 6, 30),
        )

        in_year = report_service.generate_report(2024)
        assert [i.asset_code for i in in_year.items] == ["FA-SOLD"]
        assert in_year.items[0].status is AssetStatus.DISPOSED
        assert in_year.items[0].depreciation_this_year == Decimal("1200000")

        assert report_service.generate_report(2025).is_empty

    def test_fully_depreciated_asset_still_listed(self, make_asset, report_service):
        make_asset("FA-OLD", purchase_date=date(2015, 1, 1))
        item = report_service.generate_report(2025).items[0]
        assert item.depreciation_this_year == Decimal("0")
        assert item.book_value == Decimal("0")

    def test_report_carries_fiscal_bounds_and_currency(self, make_asset, session):
        make_asset("FA-001")
        service = DepreciationReportService(
            session, config=CompanyConfig("Acme", 4, "USD"),
        )
        report = service.generate_report(2025)
        assert report.fiscal_year_start == date(2025, 4, 1)
        assert report.fiscal_year_end == date(2026, 3, 31)
        assert report.currency_code == "USD"

    def test_report_logged(self, make_asset, report_service, captured_logs):
        make_asset("FA-001")
        report_service.generate_report(2025)
        records = [
            r for r in captured_logs() if r["message"] == "depreciation_report_generated"
        ]
        assert records[0]["item_count"] == 1

    def test_item_identity_holds_for_sub_cent_cost(self, make_asset, report_service):
        make_asset("FA-ODD", purchase_cost=Decimal("1000.125"), useful_life_years=3)

        item = report_service.generate_report(2024).items[0]

        assert item.purchase_cost == Decimal("1000.13")
        assert item.book_value == item.purchase_cost - item.accumulated_depreciation


class TestSessionHandling:

    def test_pending_caller_work_survives_report(
        self, make_schedule, make_asset, session, report_service,
    ):
        schedule = make_schedule()
        make_asset("FA-001")
        model = session.get(AmortizationScheduleModel, schedule.id)
        model.name = "Renamed in open transaction"
        session.flush()

        report_service.generate_report(2025)
        session.commit()

        session.expire_all()
        reloaded = session.get(AmortizationScheduleModel, schedule.id)
        assert reloaded.name == "Renamed in open transaction"
        session.commit()

    def test_own_read_transaction_is_closed(self, make_asset, session, report_service):
        make_asset("FA-001")
        assert not session.in_transaction()

        report_service.generate_report(2025)

        assert not session.in_transaction()


class TestAssetSelector:

    def test_lookups(self, make_asset, session):
        asset = make_asset("FA-LOOK")
        selector = AssetSelector(session)
        assert selector.find_by_id(asset.id).code == "FA-LOOK"
        assert selector.find_by_code("FA-LOOK").id == asset.id
        with pytest.raises(AssetNotFoundError):
            selector.find_by_code("MISSING")

    def test_filters(self, make_asset, asset_category, session):
        make_asset("FA-A")
        make_asset("FA-B", status=AssetStatus.DISPOSED.value, disposal_date=date(2024, 1, 1))
        selector = AssetSelector(session)

        assert [a.code for a in selector.find_by_status(AssetStatus.ACTIVE)] == ["FA-A"]
        assert [a.code for a in selector.find_by_category(asset_category.id)] == ["FA-A", "FA-B"]
        assert [a.code for a in selector.find_for_period(date(2025, 1, 1), date(2025, 12, 31))] == [
            "FA-A",
        ]
