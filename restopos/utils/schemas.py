import datetime as dt
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from ..models import TableStatus

class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"

class LoginIn(BaseModel):
    username: str
    password: str

class RegisterIn(LoginIn):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)

class UserOut(BaseModel):
    id: int
    username: str
    role: str

class TableOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    number: int
    status: TableStatus

class OrderIn(BaseModel):
    product: str = Field(..., min_length=1, max_length=255)
    quantity: int = Field(..., gt=0, le=2**31 - 1)
    price: Decimal = Field(..., ge=0, lt=Decimal("1e8"))
    note: Optional[str] = None

class QuantityIn(BaseModel):
    quantity: int = Field(..., gt=0, le=2**31 - 1)

class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    table_number: int
    product: str
    quantity: int
    price: Decimal
    note: Optional[str] = None

class TableDetailOut(TableOut):
    orders: List[OrderOut]

class SettlementOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    report_date: dt.date
    closed_at: dt.datetime
    orders_settled: int
    gross_total: Decimal
    service_charge: Decimal
    final_total: Decimal

class ReportOut(BaseModel):
    id: int
    report_date: dt.date
    date: str
    time: str
    gross_total: Decimal
    service_charge: Decimal
    final_total: Decimal
    created_at: dt.datetime
