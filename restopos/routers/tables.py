# restopos/routers/tables.py
from typing import Dict, List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import ledger, tables
from ..db import get_db
from ..models import TableStatus
from ..utils.schemas import OrderIn, OrderOut, TableDetailOut, TableOut
from ..utils.security import optional_identity

router = APIRouter(prefix="/tables", tags=["tables"], dependencies=[Depends(optional_identity)])

@router.get("", response_model=List[TableOut])
def list_tables(db: Session = Depends(get_db)):
    return tables.list_tables(db)

@router.get("/status", response_model=Dict[int, TableStatus])
def table_status_map(db: Session = Depends(get_db)):
    return tables.status_map(db)

@router.get("/{number}", response_model=TableDetailOut)
def table_detail(number: int, db: Session = Depends(get_db)):
    t = tables.get_table(db, number)
    orders = [OrderOut.model_validate(o) for o in ledger.list_orders(db, number)]
    return TableDetailOut(number=t.number, status=t.status, orders=orders)

@router.get("/{number}/orders", response_model=List[OrderOut])
def list_table_orders(number: int, db: Session = Depends(get_db)):
    return ledger.list_orders(db, number)

@router.post("/{number}/orders", response_model=OrderOut, status_code=201)
def add_table_order(number: int, payload: OrderIn, db: Session = Depends(get_db)):
    return ledger.add_order(db, number, payload.product, payload.quantity, payload.price, payload.note)

@router.post("/{number}/close")
def close_table(number: int, db: Session = Depends(get_db)):
    t = tables.close_table(db, number)
    return {"ok": True, "number": t.number, "status": t.status.value}

@router.post("/{number}/pay")
def pay_table(number: int, db: Session = Depends(get_db)):
    removed = ledger.pay_table(db, number)
    return {"ok": True, "number": number, "status": TableStatus.FREE.value, "removed": removed}
