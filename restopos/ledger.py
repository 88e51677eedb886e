"""Open line items per table.

Adding an order marks its table occupied, paying a table purges its orders and
frees it; each of those pairs commits as a single transaction.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from .db import atomic
from .errors import NotFound, ValidationError
from .models import OrderItem, TableStatus
from .tables import get_table, set_status
from .utils.money import MAX_PRICE, to_money

log = logging.getLogger(__name__)

# orders.quantity 是 32 位元 Integer
MAX_QUANTITY = 2**31 - 1


def _check_quantity(quantity) -> int:
    if quantity is None:
        raise ValidationError("missing field: quantity")
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError("quantity must be a positive integer")
    if quantity > MAX_QUANTITY:
        raise ValidationError(f"quantity must not exceed {MAX_QUANTITY}")
    return quantity


def _check_price(price) -> Decimal:
    if price is None:
        raise ValidationError("missing field: price")
    try:
        amount = to_money(price)
    except ValueError:
        raise ValidationError("price must be a decimal amount")
    if amount < 0:
        raise ValidationError("price must not be negative")
    if amount >= MAX_PRICE:
        raise ValidationError(f"price must be below {MAX_PRICE}")
    return amount


def _get_order(db: Session, order_id: int) -> OrderItem:
    order = db.get(OrderItem, order_id)
    if order is None:
        raise NotFound(f"order {order_id} not found")
    return order


def list_orders(db: Session, table_number: int) -> List[OrderItem]:
    get_table(db, table_number)
    stmt = select(OrderItem).where(OrderItem.table_number == table_number).order_by(OrderItem.id.asc())
    return list(db.execute(stmt).scalars())


def add_order(
    db: Session,
    table_number: int,
    product: Optional[str],
    quantity: Optional[int],
    price,
    note: Optional[str] = None,
) -> OrderItem:
    if not product or not str(product).strip():
        raise ValidationError("missing field: product")
    qty = _check_quantity(quantity)
    amount = _check_price(price)

    with atomic(db):
        get_table(db, table_number)
        order = OrderItem(
            table_number=table_number,
            product=str(product).strip(),
            quantity=qty,
            price=amount,
            note=note or None,
        )
        db.add(order)
        db.flush()
        set_status(db, table_number, TableStatus.OCCUPIED)
    log.info(f"Order {order.id} added to table {table_number}: {qty} x {order.product} @ {amount}")
    return order


def update_quantity(db: Session, order_id: int, quantity) -> OrderItem:
    qty = _check_quantity(quantity)
    with atomic(db):
        order = _get_order(db, order_id)
        order.quantity = qty
    log.info(f"Order {order_id} quantity -> {qty}")
    return order


def remove_order(db: Session, order_id: int) -> None:
    """Delete one order; the table goes back to free once its last order is gone."""
    with atomic(db):
        order = _get_order(db, order_id)
        table_number = order.table_number
        db.delete(order)
        db.flush()
        left = db.scalar(select(func.count()).select_from(OrderItem).where(OrderItem.table_number == table_number))
        if not left:
            set_status(db, table_number, TableStatus.FREE)
    log.info(f"Order {order_id} removed from table {table_number}")


def clear_table(db: Session, table_number: int) -> int:
    """Delete every order of a table inside the caller's transaction.

    The caller is responsible for resetting the table status.
    """
    result = db.execute(delete(OrderItem).where(OrderItem.table_number == table_number))
    return result.rowcount or 0


def pay_table(db: Session, table_number: int) -> int:
    """Purge the table's orders and free it; returns how many orders were removed."""
    with atomic(db):
        get_table(db, table_number)
        removed = clear_table(db, table_number)
        set_status(db, table_number, TableStatus.FREE)
    log.info(f"Table {table_number} paid, {removed} order(s) cleared")
    return removed


__all__ = ["list_orders", "add_order", "update_quantity", "remove_order", "clear_table", "pay_table"]
