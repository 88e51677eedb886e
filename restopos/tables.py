"""Table occupancy status and its allowed transitions."""

from __future__ import annotations

import logging
from typing import Dict, List, Union

from sqlalchemy import select
from sqlalchemy.orm import Session

from .db import atomic
from .errors import NotFound, ValidationError
from .models import DiningTable, TableStatus

log = logging.getLogger(__name__)

# closing 是可選的中間狀態：付款可從任何狀態直接回到 free
TRANSITIONS: Dict[TableStatus, List[TableStatus]] = {
    TableStatus.FREE: [TableStatus.OCCUPIED],
    TableStatus.OCCUPIED: [TableStatus.OCCUPIED, TableStatus.CLOSING, TableStatus.FREE],
    TableStatus.CLOSING: [TableStatus.CLOSING, TableStatus.OCCUPIED, TableStatus.FREE],
}


def can_transition(src: TableStatus, dst: TableStatus) -> bool:
    """Return ``True`` if a table may move from ``src`` to ``dst``."""
    return dst in TRANSITIONS.get(src, [])


def _coerce_status(value: Union[TableStatus, str]) -> TableStatus:
    try:
        return TableStatus(value)
    except ValueError:
        raise ValidationError(f"unknown table status: {value!r}")


def list_tables(db: Session) -> List[DiningTable]:
    return list(db.execute(select(DiningTable).order_by(DiningTable.number.asc())).scalars())


def status_map(db: Session) -> Dict[int, TableStatus]:
    return {t.number: t.status for t in list_tables(db)}


def get_table(db: Session, number: int) -> DiningTable:
    table = db.get(DiningTable, number)
    if table is None:
        raise NotFound(f"table {number} not found")
    return table


def get_status(db: Session, number: int) -> TableStatus:
    return get_table(db, number).status


def set_status(db: Session, number: int, status: Union[TableStatus, str]) -> DiningTable:
    """Move a table to ``status`` without checking the transition table.

    Runs inside the caller's transaction; nothing is committed here.
    """
    new = _coerce_status(status)
    table = get_table(db, number)
    if table.status != new:
        log.debug(f"table {number}: {table.status.value} -> {new.value}")
    table.status = new
    db.flush()
    return table


def close_table(db: Session, number: int) -> DiningTable:
    """Flag a table as waiting for its bill (occupied -> closing).

    A free table has no bill, so closing it raises ValidationError instead of
    flipping the status the way a plain status write would.
    """
    with atomic(db):
        table = get_table(db, number)
        if not can_transition(table.status, TableStatus.CLOSING):
            raise ValidationError(f"table {number} is {table.status.value}, nothing to close")
        set_status(db, number, TableStatus.CLOSING)
    log.info(f"Table {number} closing")
    return table
