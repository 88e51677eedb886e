import pytest

from restopos import ledger, tables
from restopos.errors import NotFound, ValidationError
from restopos.models import TableStatus
from restopos.tables import TRANSITIONS, can_transition


def test_pool_is_seeded_free(db):
    rows = tables.list_tables(db)
    assert [t.number for t in rows] == list(range(1, 101))
    assert all(t.status == TableStatus.FREE for t in rows)


def test_status_map_covers_pool(db):
    m = tables.status_map(db)
    assert len(m) == 100
    assert m[1] == TableStatus.FREE and m[100] == TableStatus.FREE


@pytest.mark.parametrize("number", [0, 101, -3])
def test_unknown_table(db, number):
    with pytest.raises(NotFound):
        tables.get_status(db, number)
    with pytest.raises(NotFound):
        tables.set_status(db, number, TableStatus.OCCUPIED)


def test_set_status_is_unconditional(db):
    tables.set_status(db, 3, "closing")
    db.commit()
    assert tables.get_status(db, 3) == TableStatus.CLOSING
    tables.set_status(db, 3, TableStatus.FREE)
    db.commit()
    assert tables.get_status(db, 3) == TableStatus.FREE


def test_set_status_rejects_unknown_value(db):
    with pytest.raises(ValidationError):
        tables.set_status(db, 3, "paid")


def test_transition_table():
    assert can_transition(TableStatus.FREE, TableStatus.OCCUPIED)
    assert not can_transition(TableStatus.FREE, TableStatus.CLOSING)
    assert can_transition(TableStatus.OCCUPIED, TableStatus.CLOSING)
    assert can_transition(TableStatus.CLOSING, TableStatus.FREE)
    assert set(TRANSITIONS) == set(TableStatus)


def test_close_free_table_fails(db):
    with pytest.raises(ValidationError):
        tables.close_table(db, 7)
    assert tables.get_status(db, 7) == TableStatus.FREE


def test_close_occupied_table(db):
    ledger.add_order(db, 7, "Soup", 1, "4.00")
    t = tables.close_table(db, 7)
    assert t.status == TableStatus.CLOSING
    # closing again keeps it closing
    tables.close_table(db, 7)
    assert tables.get_status(db, 7) == TableStatus.CLOSING


def test_close_free_table_keeps_it_free(db):
    with pytest.raises(ValidationError, match="nothing to close"):
        tables.close_table(db, 20)
    assert tables.status_map(db)[20] == TableStatus.FREE
