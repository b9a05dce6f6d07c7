from __future__ import annotations
from datetime import UTC, date, datetime
from unittest.mock import MagicMock

import psycopg2
import pytest

from award_import.db.protocols import AwardStore, EmployeeDirectory, PersistenceError
from award_import.db.repositories import (
    EXISTING_IDS_SQL,
    INSERT_AWARD_SQL,
    PostgresAwardStore,
    PostgresEmployeeDirectory,
)
from award_import.models.award import Award


def _pool_with_cursor():
    pool = MagicMock()
    conn = MagicMock()
    cur = MagicMock()
    pool.getconn.return_value = conn
    conn.cursor.return_value.__enter__.return_value = cur
    return pool, conn, cur


def _award() -> Award:
    return Award(
        employee_id=1,
        award_code="A1",
        award_name="Best employee",
        award_date=date(2024, 1, 10),
        created_at=datetime(2024, 6, 1, tzinfo=UTC),
    )


def test_adapters_satisfy_protocols():
    pool = MagicMock()
    assert isinstance(PostgresEmployeeDirectory(pool), EmployeeDirectory)
    assert isinstance(PostgresAwardStore(pool), AwardStore)


def test_existing_ids_queries_once_and_returns_connection():
    pool, conn, cur = _pool_with_cursor()
    cur.fetchall.return_value = [(1,), (3,)]

    found = PostgresEmployeeDirectory(pool).existing_ids({3, 1, 2})

    assert found == {1, 3}
    cur.execute.assert_called_once_with(EXISTING_IDS_SQL, ([1, 2, 3],))
    conn.commit.assert_called_once()
    pool.putconn.assert_called_once_with(conn)


def test_existing_ids_empty_input_skips_database():
    pool = MagicMock()
    assert PostgresEmployeeDirectory(pool).existing_ids(set()) == set()
    pool.getconn.assert_not_called()


def test_existing_ids_error_rolls_back_and_propagates():
    pool, conn, cur = _pool_with_cursor()
    cur.execute.side_effect = psycopg2.OperationalError("server closed the connection")

    with pytest.raises(psycopg2.OperationalError):
        PostgresEmployeeDirectory(pool).existing_ids({1})

    conn.rollback.assert_called_once()
    pool.putconn.assert_called_once_with(conn)


def test_save_inserts_and_returns_award_with_id():
    pool, conn, cur = _pool_with_cursor()
    cur.fetchone.return_value = (42,)
    award = _award()

    saved = PostgresAwardStore(pool).save(award)

    assert saved.id == 42
    assert award.id is None
    cur.execute.assert_called_once_with(
        INSERT_AWARD_SQL,
        (1, "A1", "Best employee", date(2024, 1, 10), datetime(2024, 6, 1, tzinfo=UTC)),
    )
    conn.commit.assert_called_once()
    pool.putconn.assert_called_once_with(conn)


def test_save_failure_becomes_persistence_error():
    pool, conn, cur = _pool_with_cursor()
    cur.execute.side_effect = psycopg2.IntegrityError("insert violates foreign key constraint\n")

    with pytest.raises(PersistenceError) as e:
        PostgresAwardStore(pool).save(_award())

    assert str(e.value) == "insert violates foreign key constraint"
    conn.rollback.assert_called_once()
    conn.commit.assert_not_called()
    pool.putconn.assert_called_once_with(conn)
