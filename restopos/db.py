from __future__ import annotations
import logging
from contextlib import contextmanager
from typing import Generator, Iterator
from sqlalchemy import create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base, Session

from .errors import PosError, StoreError
from .utils.settings import DATABASE_URL

log = logging.getLogger(__name__)

engine_kwargs = dict(pool_pre_ping=True, future=True)
if DATABASE_URL.startswith("sqlite"):
    engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False}, **engine_kwargs)

    @event.listens_for(engine, "connect")
    def _sqlite_pragmas(dbapi_connection, _):
        cur = dbapi_connection.cursor()
        cur.execute("PRAGMA foreign_keys=ON")
        try:
            cur.execute("PRAGMA journal_mode=WAL")
            cur.execute("PRAGMA synchronous=NORMAL")
        except Exception:
            pass
        cur.close()
else:
    engine = create_engine(DATABASE_URL, **engine_kwargs)

Base = declarative_base()
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False, future=True)

def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """Run the block as one transaction: commit on success, roll back on any error.

    Domain errors pass through untouched; SQLAlchemy failures surface as StoreError.
    """
    try:
        yield db
        db.commit()
    except PosError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        log.exception("store failure, transaction rolled back")
        raise StoreError(f"database error: {exc.__class__.__name__}") from exc
    except Exception:
        db.rollback()
        raise

__all__ = ["DATABASE_URL", "engine", "Base", "SessionLocal", "get_db", "atomic"]
