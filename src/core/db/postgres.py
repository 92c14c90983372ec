"""PostgreSQL client — pooled connections, parameterized queries and transactions."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg.conninfo import make_conninfo
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from core.config import Config
from core.errors import ProposalEngineError

Params = tuple[Any, ...] | dict[str, Any] | None


class PostgresClient:
    """Thin wrapper over a psycopg connection pool, safe to share between threads.

    Pooled connections run in autocommit mode. A statement outside
    ``transaction()`` checks out a connection, runs and commits on its own.
    ``transaction()`` checks out one connection and binds it to the calling
    thread until the block exits, so every statement issued inside it by that
    thread commits or rolls back together. Transactions on other threads use
    other connections.
    """

    def __init__(self, config: Config) -> None:
        self._config = config
        self._pool: ConnectionPool | None = None
        self._local = threading.local()

    def connect(self) -> None:
        options = None
        if self._config.db_statement_timeout_ms:
            options = f"-c statement_timeout={self._config.db_statement_timeout_ms}"
        conninfo = make_conninfo(
            host=self._config.db_host,
            port=self._config.db_port,
            dbname=self._config.db_name,
            user=self._config.db_user,
            password=self._config.db_password,
            options=options,
        )
        self._pool = ConnectionPool(
            conninfo,
            min_size=self._config.db_pool_min_size,
            max_size=self._config.db_pool_max_size,
            kwargs={"autocommit": True, "row_factory": dict_row},
            open=True,
        )
        self._pool.wait()

    def disconnect(self) -> None:
        if self._pool is not None and not self._pool.closed:
            self._pool.close()
        self._pool = None

    def _require_pool(self) -> ConnectionPool:
        """Return the open pool or raise if not connected."""
        if self._pool is None or self._pool.closed:
            raise ProposalEngineError("PostgresClient is not connected. Call connect() first.")
        return self._pool

    @contextmanager
    def _connection(self) -> Iterator[psycopg.Connection]:
        bound = getattr(self._local, "conn", None)
        if bound is not None:
            yield bound
            return
        with self._require_pool().connection() as conn:
            yield conn

    def health_check(self) -> bool:
        try:
            with self._connection() as conn, conn.cursor() as cur:
                cur.execute("SELECT 1")
            return True
        except Exception:
            return False

    @contextmanager
    def transaction(self) -> Iterator["PostgresClient"]:
        """Run the enclosed statements as one all-or-nothing unit.

        Nested calls on the same thread become savepoints of the outer transaction.
        """
        bound = getattr(self._local, "conn", None)
        if bound is not None:
            with bound.transaction():
                yield self
            return

        with self._require_pool().connection() as conn:
            self._local.conn = conn
            try:
                with conn.transaction():
                    yield self
            finally:
                self._local.conn = None

    def fetch_one(self, sql: str, params: Params = None) -> dict[str, Any] | None:
        with self._connection() as conn, conn.cursor() as cur:
            cur.execute(sql, params)
            return cur.fetchone()

    def fetch_all(self, sql: str, params: Params = None) -> list[dict[str, Any]]:
        with self._connection() as conn, conn.cursor() as cur:
            cur.execute(sql, params)
            return cur.fetchall()

    def execute(self, sql: str, params: Params = None) -> int:
        """Run a write statement and return the number of affected rows."""
        with self._connection() as conn, conn.cursor() as cur:
            cur.execute(sql, params)
            return cur.rowcount

    def __enter__(self) -> "PostgresClient":
        self.connect()
        return self

    def __exit__(self, *args: object) -> None:
        self.disconnect()
