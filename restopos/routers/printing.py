# 沒有實體印表機：只把收到的內容記到 log
import logging

from fastapi import APIRouter, Body

log = logging.getLogger(__name__)

router = APIRouter(prefix="/print", tags=["print"])

@router.post("")
def print_order(payload: dict = Body(default={})):
    log.info(f"Print order: {payload}")
    return {"status": "ok"}

@router.post("/ticket")
def print_ticket(payload: dict = Body(default={})):
    log.info(f"Print full ticket: {payload}")
    return {"status": "ok"}
