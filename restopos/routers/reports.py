from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from .. import settlement
from ..db import get_db
from ..utils.schemas import ReportOut, SettlementOut
from ..utils.security import optional_identity

router = APIRouter(prefix="/reports", tags=["reports"], dependencies=[Depends(optional_identity)])

@router.post("/close-day", response_model=SettlementOut, status_code=201)
def close_day(db: Session = Depends(get_db)):
    return settlement.close_day(db)

@router.get("", response_model=List[ReportOut])
def list_reports(db: Session = Depends(get_db)):
    return settlement.list_reports(db)

@router.get("/export")
def export_reports(db: Session = Depends(get_db)):
    body = settlement.export_reports_csv(db)
    filename = f"reports-{datetime.now().strftime('%Y%m%d-%H%M%S')}.csv"
    return StreamingResponse(iter([body]), media_type="text/csv", headers={"Content-Disposition": f'attachment; filename="{filename}"'})
