from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Optional

from mysql.connector import errors, pooling


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = 5
    pool_name: str = "hackathon_admin"
    # Seconds a borrower waits for a free connection before giving up.
    pool_timeout: float = 10.0

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "hackathon_db")),
            pool_size=int(db_config.get("pool_size", 5)),
            pool_timeout=float(db_config.get("pool_timeout", 10.0)),
        )


class PooledConnection:
    """A connection on loan from ``DatabaseConnection``.

    ``close()`` hands it back to the pool and frees the borrower slot; a second
    ``close()`` is a no-op.
    """

    def __init__(self, conn, release: Callable[[], None]):
        self._conn = conn
        self._release: Optional[Callable[[], None]] = release

    def __getattr__(self, name):
        return getattr(self._conn, name)

    def close(self) -> None:
        if self._release is None:
            return
        release, self._release = self._release, None
        try:
            self._conn.close()
        finally:
            release()


class DatabaseConnection:
    """Bounded pool of MySQL connections.

    Built once per application by the container and handed to every
    repository. The pool is created lazily on first use so the app can start
    before the database is reachable. ``MySQLConnectionPool`` fails at once
    when it is exhausted, so borrowers queue on a semaphore of the same size
    and wait up to ``pool_timeout`` seconds for a connection to come back.
    """

    def __init__(self, config: DBConfig, *, pool: Optional[pooling.MySQLConnectionPool] = None):
        self._config = config
        self._pool = pool
        self._lock = threading.Lock()
        self._slots = threading.BoundedSemaphore(int(config.pool_size))

    @property
    def config(self) -> DBConfig:
        return self._config

    def _get_pool(self) -> pooling.MySQLConnectionPool:
        if self._pool is None:
            with self._lock:
                if self._pool is None:
                    self._pool = pooling.MySQLConnectionPool(
                        pool_name=self._config.pool_name,
                        pool_size=int(self._config.pool_size),
                        pool_reset_session=True,
                        host=self._config.host,
                        port=int(self._config.port),
                        user=self._config.user,
                        password=self._config.password,
                        database=self._config.database,
                        autocommit=False,
                    )
        return self._pool

    def connect(self) -> PooledConnection:
        """Borrow a connection, waiting while all of them are in use."""
        if not self._slots.acquire(timeout=self._config.pool_timeout):
            raise errors.PoolError(
                msg=f"No free database connection after {self._config.pool_timeout:g}s "
                f"(pool_size={self._config.pool_size})"
            )
        try:
            conn = self._get_pool().get_connection()
        except Exception:
            self._slots.release()
            raise
        return PooledConnection(conn, self._slots.release)
