from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from restopos import ledger, tables
from restopos.errors import NotFound, StoreError, ValidationError
from restopos.models import OrderItem, TableStatus


def test_add_order_occupies_table(db):
    order = ledger.add_order(db, 5, "Coffee", 2, 3.50)
    assert order.id is not None
    assert tables.get_status(db, 5) == TableStatus.OCCUPIED
    rows = ledger.list_orders(db, 5)
    assert [(o.product, o.quantity, o.price) for o in rows] == [("Coffee", 2, Decimal("3.50"))]


def test_add_order_reopens_closing_table(db):
    ledger.add_order(db, 2, "Tea", 1, "2.00")
    tables.close_table(db, 2)
    ledger.add_order(db, 2, "Cake", 1, "5.00")
    assert tables.get_status(db, 2) == TableStatus.OCCUPIED


def test_price_is_fixed_point(db):
    order = ledger.add_order(db, 1, "Juice", 1, "1.005")
    assert order.price == Decimal("1.01")


@pytest.mark.parametrize(
    "product, quantity, price",
    [
        (None, 1, "1.00"),
        ("  ", 1, "1.00"),
        ("Water", None, "1.00"),
        ("Water", 0, "1.00"),
        ("Water", -2, "1.00"),
        ("Water", 1, None),
        ("Water", 1, "-0.50"),
        ("Water", 1, "abc"),
        ("Water", 1, "1e30"),
        ("Water", 1, "100000000"),
        ("Water", 2**31, "1.00"),
        ("Water", 2**70, "1.00"),
    ],
)
def test_add_order_validation(db, product, quantity, price):
    with pytest.raises(ValidationError):
        ledger.add_order(db, 1, product, quantity, price)
    assert ledger.list_orders(db, 1) == []
    assert tables.get_status(db, 1) == TableStatus.FREE


def test_add_order_unknown_table(db):
    with pytest.raises(NotFound):
        ledger.add_order(db, 500, "Coffee", 1, "1.00")
    assert db.query(OrderItem).count() == 0


def test_list_orders_in_insertion_order(db):
    for name in ("A", "B", "C"):
        ledger.add_order(db, 9, name, 1, "1.00")
    assert [o.product for o in ledger.list_orders(db, 9)] == ["A", "B", "C"]
    assert ledger.list_orders(db, 10) == []


def test_update_quantity(db):
    order = ledger.add_order(db, 4, "Beer", 1, "6.00")
    updated = ledger.update_quantity(db, order.id, 3)
    assert updated.quantity == 3
    assert updated.price == Decimal("6.00")
    with pytest.raises(NotFound):
        ledger.update_quantity(db, 9999, 2)
    with pytest.raises(ValidationError):
        ledger.update_quantity(db, order.id, 0)


def test_remove_order_unknown_id(db):
    with pytest.raises(NotFound):
        ledger.remove_order(db, 12345)


def test_removing_last_order_frees_table(db):
    a = ledger.add_order(db, 6, "Pizza", 1, "12.00")
    b = ledger.add_order(db, 6, "Soda", 2, "2.50")
    ledger.remove_order(db, a.id)
    assert tables.get_status(db, 6) == TableStatus.OCCUPIED
    ledger.remove_order(db, b.id)
    assert ledger.list_orders(db, 6) == []
    assert tables.get_status(db, 6) == TableStatus.FREE


def test_clear_table_then_free(db):
    ledger.add_order(db, 8, "Wine", 2, "20.00")
    ledger.add_order(db, 8, "Bread", 1, "3.00")
    ledger.add_order(db, 3, "Water", 1, "1.00")
    assert ledger.clear_table(db, 8) == 2
    tables.set_status(db, 8, TableStatus.FREE)
    db.commit()
    assert ledger.list_orders(db, 8) == []
    assert tables.get_status(db, 8) == TableStatus.FREE
    assert len(ledger.list_orders(db, 3)) == 1


def test_pay_table(db):
    ledger.add_order(db, 11, "Steak", 1, "25.00")
    tables.close_table(db, 11)
    assert ledger.pay_table(db, 11) == 1
    assert ledger.list_orders(db, 11) == []
    assert tables.get_status(db, 11) == TableStatus.FREE
    # paying a free table is a no-op
    assert ledger.pay_table(db, 11) == 0
    with pytest.raises(NotFound):
        ledger.pay_table(db, 0)


def test_price_upper_bound(db):
    order = ledger.add_order(db, 1, "Caviar", 1, "99999999.99")
    assert order.price == Decimal("99999999.99")
    with pytest.raises(ValidationError):
        ledger.update_quantity(db, order.id, 2**31)


def _fail_status(*args, **kwargs):
    raise OperationalError("UPDATE tables", {}, Exception("disk I/O error"))


def test_add_order_is_atomic(db, monkeypatch):
    monkeypatch.setattr(ledger, "set_status", _fail_status)
    with pytest.raises(StoreError):
        ledger.add_order(db, 4, "Coffee", 1, "2.00")
    assert db.query(OrderItem).count() == 0
    assert tables.get_status(db, 4) == TableStatus.FREE


def test_pay_table_is_atomic(db, monkeypatch):
    ledger.add_order(db, 4, "Coffee", 1, "2.00")
    ledger.add_order(db, 4, "Cake", 1, "4.00")
    monkeypatch.setattr(ledger, "set_status", _fail_status)
    with pytest.raises(StoreError):
        ledger.pay_table(db, 4)
    assert len(ledger.list_orders(db, 4)) == 2
    assert tables.get_status(db, 4) == TableStatus.OCCUPIED


def test_remove_last_order_is_atomic(db, monkeypatch):
    order = ledger.add_order(db, 4, "Coffee", 1, "2.00")
    monkeypatch.setattr(ledger, "set_status", _fail_status)
    with pytest.raises(StoreError):
        ledger.remove_order(db, order.id)
    assert [o.id for o in ledger.list_orders(db, 4)] == [order.id]
    assert tables.get_status(db, 4) == TableStatus.OCCUPIED
