from __future__ import annotations

import logging
from typing import Any

from ..models.award import Award
from .protocols import PersistenceError

"""PostgreSQL collaborators backed by a psycopg2 connection pool.

Tables (owned outside this tool):
- employee (id, full_name)
- award (id, employee_id, award_code, award_name, award_date, created_at)

Every call borrows one connection from the pool and returns it, so the award
store can be used from several worker threads at once. Each award is committed
on its own; there is no all-or-nothing transaction across rows.
"""

__all__ = [
    "PostgresEmployeeDirectory",
    "PostgresAwardStore",
]

logger = logging.getLogger(__name__)

EXISTING_IDS_SQL = "SELECT id FROM employee WHERE id = ANY(%s)"
INSERT_AWARD_SQL = (
    "INSERT INTO award (employee_id, award_code, award_name, award_date, created_at) "
    "VALUES (%s, %s, %s, %s, %s) RETURNING id"
)


class PostgresEmployeeDirectory:
    def __init__(self, pool: Any) -> None:
        self._pool = pool

    def existing_ids(self, candidate_ids: set[int]) -> set[int]:
        if not candidate_ids:
            return set()
        conn = self._pool.getconn()
        try:
            with conn.cursor() as cur:
                cur.execute(EXISTING_IDS_SQL, (sorted(candidate_ids),))
                found = {r[0] for r in cur.fetchall()}
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._pool.putconn(conn)
        logger.debug("employee lookup candidates=%d found=%d", len(candidate_ids), len(found))
        return found


class PostgresAwardStore:
    def __init__(self, pool: Any) -> None:
        self._pool = pool

    def save(self, award: Award) -> Award:
        """INSERT one award and return it with the generated id.

        Raises:
            PersistenceError: wrapping any database error (the row is rolled back)
        """
        conn = self._pool.getconn()
        try:
            with conn.cursor() as cur:
                cur.execute(
                    INSERT_AWARD_SQL,
                    (
                        award.employee_id,
                        award.award_code,
                        award.award_name,
                        award.award_date,
                        award.created_at,
                    ),
                )
                new_id = cur.fetchone()[0]
            conn.commit()
        except Exception as e:
            try:
                conn.rollback()
            except Exception as rollback_e:  # pragma: no cover
                logger.warning("rollback failed: %s", rollback_e)
            raise PersistenceError(str(e).strip()) from e
        finally:
            self._pool.putconn(conn)
        return award.with_id(new_id)
