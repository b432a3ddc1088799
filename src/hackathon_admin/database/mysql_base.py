from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import ConflictError, StorageError, ValidationError

logger = logging.getLogger(__name__)


def translate_db_error(exc: mysql.connector.Error) -> Exception:
    """Map a driver error onto the domain error taxonomy."""
    if exc.errno == errorcode.ER_DUP_ENTRY:
        return ConflictError("Duplicate entry")
    if exc.errno in (errorcode.ER_NO_REFERENCED_ROW, errorcode.ER_NO_REFERENCED_ROW_2):
        return ValidationError("Referenced row does not exist")
    return StorageError(f"Database error ({exc.errno}): {exc.msg}")


@contextmanager
def db_cursor(conn_factory, *, dictionary: bool = True):
    """Yield ``(conn, cur)`` inside one transaction.

    Commits when the block finishes, rolls back on any exception. Driver
    errors are re-raised as ConflictError/ValidationError/StorageError.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        raise StorageError(f"Could not acquire a database connection: {exc}") from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as exc:
        _rollback(conn)
        raise translate_db_error(exc) from exc
    except Exception:
        _rollback(conn)
        raise
    finally:
        conn.close()


def _rollback(conn) -> None:
    try:
        conn.rollback()
    except mysql.connector.Error:
        logger.warning("Rollback failed", exc_info=True)


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def in_clause(values: Sequence[Any]) -> Tuple[str, Tuple[Any, ...]]:
    """Placeholders for ``IN (...)``; values are still bound, never inlined."""
    if not values:
        raise ValueError("in_clause() needs at least one value")
    return ", ".join(["%s"] * len(values)), tuple(values)


def set_clause(fields: Dict[str, Any], allowed: Iterable[str]) -> Tuple[str, Tuple[Any, ...]]:
    """``col=%s, ...`` for a partial update restricted to whitelisted columns."""
    allowed = set(allowed)
    unknown = set(fields) - allowed
    if unknown:
        raise ValueError(f"Unsupported columns: {sorted(unknown)}")
    cols = [c for c in fields]
    return ", ".join(f"{c}=%s" for c in cols), tuple(fields[c] for c in cols)
