from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import ledger
from ..db import get_db
from ..utils.schemas import OrderOut, QuantityIn
from ..utils.security import optional_identity

router = APIRouter(prefix="/orders", tags=["orders"], dependencies=[Depends(optional_identity)])

@router.patch("/{oid}", response_model=OrderOut)
def update_order_quantity(oid: int, payload: QuantityIn, db: Session = Depends(get_db)):
    return ledger.update_quantity(db, oid, payload.quantity)

@router.delete("/{oid}", response_model=dict)
def delete_order(oid: int, db: Session = Depends(get_db)):
    ledger.remove_order(db, oid)
    return {"ok": True}
