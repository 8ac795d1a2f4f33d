"""Tests for orders and sale recording."""

from datetime import datetime

import pytest

from batchcogs.errors import InsufficientStockError, NotFoundError, ValidationError
from batchcogs.models.common import PaymentMode
from batchcogs.models.inventory import LedgerSnapshot
from batchcogs.models.sales import Order, SalesHistory
from batchcogs.services import InventoryService, SalesService
from batchcogs.storage import JsonFileStore


@pytest.fixture
def sales(service, clock):
    return SalesService(service, clock=clock)


def test_order_totals():
    order = Order(tax_amount=25, discount=50)
    order.add_item("Fried Rice", 2, unit_price=250)
    order.add_item("Lassi", 1, unit_price=80)

    assert order.subtotal == 580
    assert order.grand_total == 555


def test_order_merges_same_dish():
    order = Order()
    order.add_item("Fried Rice", 1, unit_price=250)
    order.add_item("fried rice", 2, unit_price=250)

    assert len(order.lines) == 1
    assert order.lines[0].quantity == 3


def test_order_item_validation():
    order = Order()
    with pytest.raises(ValueError):
        order.add_item("Fried Rice", 0)
    with pytest.raises(IndexError):
        order.remove_item(0)


def test_grand_total_never_negative():
    order = Order(discount=500)
    order.add_item("Lassi", 1, unit_price=80)

    assert order.grand_total == 0


def test_record_sale(sales, service, rice, fried_rice):
    order = Order(order_time=datetime(2025, 1, 5, 13, 0), payment_mode=PaymentMode.UPI)
    order.add_item("Fried Rice", 4, unit_price=250)

    result = sales.record_sale(order, [fried_rice])
    record = result.value

    assert record.order_id == order.order_id
    assert record.grand_total == 1000
    assert record.cost_of_goods_sold == pytest.approx(160)
    assert record.profit == pytest.approx(840)
    assert record.payment_mode == PaymentMode.UPI
    assert [(i.dish_name, i.quantity) for i in record.items_sold] == [("Fried Rice", 4)]
    assert sales.history() == [record]
    assert service.total_stock("Rice") == pytest.approx(13)


def test_empty_order_rejected(sales, rice, fried_rice):
    with pytest.raises(ValidationError):
        sales.record_sale(Order(), [fried_rice])


def test_unknown_dish_rejected(sales, service, rice, fried_rice):
    order = Order()
    order.add_item("Biryani", 1, unit_price=300)

    with pytest.raises(NotFoundError):
        sales.record_sale(order, [fried_rice])

    assert service.total_stock("Rice") == 15


def test_failed_deduction_records_nothing(sales, rice, fried_rice):
    order = Order()
    order.add_item("Fried Rice", 31, unit_price=250)

    with pytest.raises(InsufficientStockError):
        sales.record_sale(order, [fried_rice])

    assert sales.history() == []


def test_sales_history_survives_restart(temp_dir, clock, fried_rice):
    ledger_path = str(temp_dir / "ledger.json")
    sales_path = str(temp_dir / "sales.json")

    inventory = InventoryService(store=JsonFileStore(ledger_path, LedgerSnapshot), clock=clock)
    inventory.define_ingredient("Rice", "kg")
    inventory.restock_batch("Rice", 10, actor="Chef", total_cost=500)
    sales = SalesService(inventory, store=JsonFileStore(sales_path, SalesHistory), clock=clock)
    order = Order()
    order.add_item("Fried Rice", 2, unit_price=250)
    result = sales.record_sale(order, [fried_rice])

    assert result.persisted

    inventory_again = InventoryService(store=JsonFileStore(ledger_path, LedgerSnapshot), clock=clock)
    inventory_again.load()
    sales_again = SalesService(inventory_again, store=JsonFileStore(sales_path, SalesHistory), clock=clock)
    sales_again.load()

    assert sales_again.history() == [result.value]
    assert inventory_again.total_stock("Rice") == 9
