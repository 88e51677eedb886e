"""End-of-day closeout.

``close_day`` folds every open order in the restaurant into one immutable
``DailyReport`` row, then purges all orders and frees every table. The
report insert and the purge commit together or not at all.
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from .db import atomic
from .errors import ValidationError
from .models import DailyReport, DiningTable, OrderItem, TableStatus
from .utils.money import quantize
from .utils.settings import SERVICE_CHARGE_RATE

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Totals:
    gross_total: Decimal
    service_charge: Decimal
    final_total: Decimal


@dataclass(frozen=True)
class Settlement:
    id: int
    report_date: date
    closed_at: datetime
    orders_settled: int
    gross_total: Decimal
    service_charge: Decimal
    final_total: Decimal


def compute_totals(lines: Iterable[Tuple[Decimal, int]], rate: Decimal = SERVICE_CHARGE_RATE) -> Totals:
    """Sum ``price * quantity`` over ``lines`` and apply the service charge.

    All arithmetic stays in Decimal; the charge is rounded half-up to cents and
    ``final_total`` is always exactly ``gross_total + service_charge``.
    """
    gross = quantize(sum((Decimal(price) * qty for price, qty in lines), Decimal("0")))
    charge = quantize(gross * Decimal(rate))
    return Totals(gross_total=gross, service_charge=charge, final_total=gross + charge)


def close_day(db: Session, rate: Decimal = SERVICE_CHARGE_RATE) -> Settlement:
    with atomic(db):
        orders = list(db.execute(select(OrderItem).with_for_update()).scalars())
        if not orders:
            raise ValidationError("no orders to settle")

        totals = compute_totals(((o.price, o.quantity) for o in orders), rate)
        report = DailyReport(
            gross_total=totals.gross_total,
            service_charge=totals.service_charge,
            final_total=totals.final_total,
        )
        db.add(report)
        db.flush()

        db.execute(delete(OrderItem))
        db.execute(update(DiningTable).values(status=TableStatus.FREE))

    log.info(
        f"Day settled: report {report.id}, {len(orders)} order(s), "
        f"gross {totals.gross_total} + service {totals.service_charge} = {totals.final_total}"
    )
    return Settlement(
        id=report.id,
        report_date=report.report_date,
        closed_at=report.created_at,
        orders_settled=len(orders),
        gross_total=totals.gross_total,
        service_charge=totals.service_charge,
        final_total=totals.final_total,
    )


def _render(r: DailyReport) -> Dict:
    return {
        "id": r.id,
        "report_date": r.report_date,
        "date": r.report_date.strftime("%d/%m/%Y"),
        "time": r.created_at.strftime("%H:%M"),
        "gross_total": r.gross_total,
        "service_charge": r.service_charge,
        "final_total": r.final_total,
        "created_at": r.created_at,
    }


def list_reports(db: Session) -> List[Dict]:
    stmt = select(DailyReport).order_by(DailyReport.report_date.desc(), DailyReport.id.desc())
    return [_render(r) for r in db.execute(stmt).scalars()]


CSV_FIELDS = ["id", "date", "time", "gross_total", "service_charge", "final_total"]


def export_reports_csv(db: Session) -> str:
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=CSV_FIELDS, extrasaction="ignore")
    writer.writeheader()
    for row in list_reports(db):
        writer.writerow(row)
    return buf.getvalue()


__all__ = ["Totals", "Settlement", "compute_totals", "close_day", "list_reports", "export_reports_csv"]
