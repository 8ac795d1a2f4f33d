"""Tests for sales reports."""

from datetime import date, datetime

import pytest

from batchcogs.models.common import PaymentMode
from batchcogs.models.sales import SaleRecord, SoldItem
from batchcogs.services import ReportService


@pytest.fixture
def reports():
    return ReportService()


def make_record(when: datetime, total: float, cogs: float, items=None) -> SaleRecord:
    return SaleRecord(
        order_id=f"ord_{when:%m%d%H}",
        sale_time=when,
        grand_total=total,
        cost_of_goods_sold=cogs,
        profit=total - cogs,
        payment_mode=PaymentMode.CASH,
        items_sold=[SoldItem(dish_name=name, quantity=qty) for name, qty in (items or [])],
    )


@pytest.fixture
def records():
    return [
        make_record(datetime(2024, 12, 20, 19, 0), 500, 200, [("Fried Rice", 2)]),
        make_record(datetime(2025, 1, 3, 12, 0), 300, 100, [("Lassi", 3), ("Fried Rice", 1)]),
        make_record(datetime(2025, 1, 5, 13, 0), 1000, 160, [("Fried Rice", 4)]),
        make_record(datetime(2025, 1, 5, 20, 0), 250, 50, [("Dal", 1), ("Lassi", 1)]),
    ]


def test_profit_on_day(reports, records):
    assert reports.profit_on(records, date(2025, 1, 5)) == 1040
    assert reports.profit_on(records, date(2025, 1, 4)) == 0


def test_last_month_profit(reports, records):
    assert reports.last_month_profit(records, date(2025, 1, 5)) == 300


def test_monthly_summary(reports, records):
    summary = reports.monthly_summary(records)

    assert [s.period for s in summary] == ["Dec 2024", "Jan 2025"]
    january = summary[1]
    assert january.period_start == date(2025, 1, 1)
    assert january.revenue == 1550
    assert january.cost_of_goods_sold == 310
    assert january.profit == 1240
    assert january.orders == 3


def test_yearly_summary(reports, records):
    summary = reports.yearly_summary(records)

    assert [(s.period, s.orders) for s in summary] == [("2024", 1), ("2025", 3)]


def test_top_selling(reports, records):
    top = reports.top_selling(records, limit=2)

    assert [(t.dish_name, t.quantity) for t in top] == [("Fried Rice", 7), ("Lassi", 4)]


def test_empty_journal(reports):
    assert reports.monthly_summary([]) == []
    assert reports.top_selling([]) == []
    assert reports.profit_on([], date(2025, 1, 5)) == 0

    overview = reports.overview([], now=datetime(2025, 1, 5, 21, 0))
    assert overview.today_profit == 0
    assert overview.top_items == []


def test_overview(reports, records):
    overview = reports.overview(records, now=datetime(2025, 1, 5, 21, 0))

    assert overview.today_profit == 1040
    assert overview.last_month_profit == 300
    assert len(overview.monthly) == 2
    assert overview.top_items[0].dish_name == "Fried Rice"
