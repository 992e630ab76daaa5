from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def is_duplicate_key(exc: Exception) -> bool:
    """True for a unique-constraint violation (ER_DUP_ENTRY)."""
    return isinstance(exc, IntegrityError) and getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY
