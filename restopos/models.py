import enum
import logging
from datetime import date, datetime

from sqlalchemy import Column, Integer, String, Date, DateTime, Numeric, Text, Enum, ForeignKey, Index, select
from sqlalchemy.orm import Session, relationship

from .db import Base, engine
from .utils.settings import TABLE_COUNT

log = logging.getLogger(__name__)


class TableStatus(str, enum.Enum):
    FREE = "free"
    OCCUPIED = "occupied"
    CLOSING = "closing"


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="user")
    created_at = Column(DateTime, nullable=False, default=datetime.now)


class DiningTable(Base):
    __tablename__ = "tables"
    number = Column(Integer, primary_key=True, autoincrement=False)
    status = Column(
        Enum(TableStatus, values_callable=lambda e: [m.value for m in e], native_enum=False, length=20),
        nullable=False,
        default=TableStatus.FREE,
    )
    orders = relationship("OrderItem", back_populates="table", order_by="OrderItem.id")


class OrderItem(Base):
    __tablename__ = "orders"
    id = Column(Integer, primary_key=True)
    table_number = Column(Integer, ForeignKey("tables.number"), nullable=False)
    product = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)   # 單價，兩位小數
    note = Column(Text)
    table = relationship("DiningTable", back_populates="orders")
    __table_args__ = (Index("ix_orders_table_id", "table_number", "id"),)


class DailyReport(Base):
    __tablename__ = "daily_reports"
    id = Column(Integer, primary_key=True)
    report_date = Column(Date, nullable=False, default=date.today, index=True)
    gross_total = Column(Numeric(12, 2), nullable=False)
    service_charge = Column(Numeric(12, 2), nullable=False)
    final_total = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)


def seed_tables(db: Session, count: int = TABLE_COUNT) -> int:
    """Insert the missing tables of the 1..count pool; existing rows are left alone."""
    existing = set(db.execute(select(DiningTable.number)).scalars())
    missing = [n for n in range(1, count + 1) if n not in existing]
    for n in missing:
        db.add(DiningTable(number=n, status=TableStatus.FREE))
    db.commit()
    return len(missing)


# 啟動時確保表存在，並補齊桌號池
def ensure_tables(_engine=engine, table_count: int = TABLE_COUNT) -> None:
    Base.metadata.create_all(bind=_engine)
    with Session(bind=_engine, future=True) as db:
        added = seed_tables(db, table_count)
    if added:
        log.info(f"Seeded {added} tables (pool 1..{table_count})")
