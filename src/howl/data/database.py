"""Typed async database access for the content store.

SQLite via stdlib ``sqlite3`` + ``anyio``. SQL in, frozen dataclasses out.

Connection URL format::

    sqlite:///path/to/howl.db    # SQLite file
    sqlite:///:memory:           # In-memory SQLite

Concurrency:
    - One connection, serialized with an ``anyio.Lock``
    - Transactions are per-task (ContextVar), never shared between tasks
    - All public methods are async; blocking calls run in worker threads
"""

from __future__ import annotations

import sys
import threading
import time
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, overload

import anyio

from howl.data._mapping import map_row, map_rows
from howl.data.errors import DataError, QueryError

# Set inside transaction(); query methods check this to reuse the
# transaction's connection instead of taking the lock again.
_current_conn: ContextVar[Any] = ContextVar("howl_db_conn")


def _in_transaction() -> bool:
    """Check if the current task is inside a managed transaction."""
    try:
        _current_conn.get()
        return True
    except LookupError:
        return False


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    """Database connection configuration."""

    url: str
    echo: bool = False


class Database:
    """Typed async database access.

    Usage::

        db = Database("sqlite:///howl.db")

        record = await db.fetch_one(
            ContentRecord, "SELECT * FROM content WHERE slug = ?", "/pages/about"
        )

        await db.execute("DELETE FROM redirects WHERE source_path = ?", "/old")

        async with db.transaction():
            await db.execute("INSERT INTO content ...", ...)
            await db.execute("INSERT INTO pages ...", ...)
    """

    __slots__ = ("_async_lock", "_config", "_conn", "_initialized", "_lock")

    def __init__(self, url: str, /, *, echo: bool = False) -> None:
        _parse_sqlite_path(url)  # fail fast on unsupported URLs
        self._config = DatabaseConfig(url=url, echo=echo)
        self._lock = threading.Lock()
        self._async_lock: anyio.Lock | None = None  # Created lazily on first use
        self._conn: Any = None
        self._initialized = False

    @property
    def url(self) -> str:
        return self._config.url

    # -- Connection management --

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[Any]:
        """Acquire the connection, release when done.

        Inside a ``transaction()`` block the transaction's connection is
        reused and the lock is already held.
        """
        if not self._initialized:
            await self.connect()

        conn = _current_conn.get(None)
        if conn is not None:
            yield conn
            return

        # Can't create the lock in __init__ before an event loop exists.
        if self._async_lock is None:
            self._async_lock = anyio.Lock()
        async with self._async_lock:
            yield self._conn

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Execute multiple statements atomically.

        Auto-commits on clean exit, rolls back on exception.  Nested
        ``transaction()`` blocks join the outer one.
        """
        if not self._initialized:
            await self.connect()

        if _in_transaction():
            yield
            return

        if self._async_lock is None:
            self._async_lock = anyio.Lock()
        async with self._async_lock:
            conn = self._conn
            token = _current_conn.set(conn)
            try:
                conn.autocommit = False
                yield
                await conn.commit()
            except BaseException:
                await conn.rollback()
                raise
            finally:
                conn.autocommit = True
                _current_conn.reset(token)

    # -- Echo / query logging --

    def _log_query(self, sql: str, params: tuple[Any, ...] | Sequence[Any], elapsed: float) -> None:
        """Log a query to stderr when echo is enabled."""
        if not self._config.echo:
            return
        ms = elapsed * 1000
        param_str = f"  params={params!r}" if params else ""
        print(f"[howl.data] {ms:6.1f}ms  {sql}{param_str}", file=sys.stderr)

    # -- Public query API --

    async def fetch[T](self, cls: type[T], sql: str, /, *params: Any) -> list[T]:
        """Execute a query and return all rows as typed dataclasses."""
        t0 = time.perf_counter()
        async with self._connection() as conn:
            try:
                rows = await _fetch_all(conn, sql, params)
                return map_rows(cls, rows)
            except Exception as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, params, time.perf_counter() - t0)

    async def fetch_one[T](self, cls: type[T], sql: str, /, *params: Any) -> T | None:
        """Execute a query and return the first row, or ``None``."""
        t0 = time.perf_counter()
        async with self._connection() as conn:
            try:
                row = await _fetch_one(conn, sql, params)
                if row is None:
                    return None
                return map_row(cls, row)
            except Exception as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, params, time.perf_counter() - t0)

    async def execute(self, sql: str, /, *params: Any) -> int:
        """Execute a statement (INSERT/UPDATE/DELETE) and return rows affected."""
        t0 = time.perf_counter()
        async with self._connection() as conn:
            try:
                cursor = await conn.execute(sql, params)
                return cursor.rowcount
            except Exception as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, params, time.perf_counter() - t0)

    async def execute_script(self, sql: str, /) -> None:
        """Execute multiple SQL statements at once (migrations)."""
        t0 = time.perf_counter()
        async with self._connection() as conn:
            try:
                await conn.executescript(sql)
            except Exception as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, (), time.perf_counter() - t0)

    @overload
    async def fetch_val(self, sql: str, /, *params: Any) -> Any: ...
    @overload
    async def fetch_val[T](self, sql: str, /, *params: Any, as_type: type[T]) -> T | None: ...

    async def fetch_val(self, sql: str, /, *params: Any, as_type: type | None = None) -> Any:
        """Execute a query and return the first column of the first row.

        Useful for COUNT, MAX, and existence checks::

            count = await db.fetch_val("SELECT COUNT(*) FROM content")
        """
        t0 = time.perf_counter()
        async with self._connection() as conn:
            try:
                row = await _fetch_one(conn, sql, params)
                if row is None:
                    return None
                first_value = next(iter(row.values()))
                if as_type is not None:
                    return as_type(first_value)
                return first_value
            except Exception as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, params, time.perf_counter() - t0)

    # -- Lifecycle --

    async def connect(self) -> None:
        """Open the connection.

        Called automatically on first query. Call explicitly if you want
        to fail fast at startup.
        """
        if self._initialized:
            return
        with self._lock:
            if self._initialized:
                return
            self._conn = await _open_sqlite(self._config)
            self._initialized = True

    async def disconnect(self) -> None:
        """Close the connection."""
        if not self._initialized:
            return
        with self._lock:
            if not self._initialized:
                return
            await self._conn.close()
            self._conn = None
            self._initialized = False

    # -- Context manager --

    async def __aenter__(self) -> Database:
        await self.connect()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.disconnect()


# =============================================================================
# SQLite helpers
# =============================================================================


def _parse_sqlite_path(url: str) -> str:
    """Extract the file path from a sqlite:// URL."""
    # sqlite:///path/to/db  ->  path/to/db
    # sqlite:///:memory:    ->  :memory:
    prefix = "sqlite:///"
    if url.startswith(prefix):
        return url[len(prefix) :]
    prefix_short = "sqlite://"
    if url.startswith(prefix_short):
        return url[len(prefix_short) :]
    msg = f"Unsupported database URL: {url!r}. Supported: sqlite:///path"
    raise DataError(msg)


async def _open_sqlite(config: DatabaseConfig) -> Any:
    import sqlite3

    from howl.data._sqlite import connect as sqlite_connect

    path = _parse_sqlite_path(config.url)
    conn = await sqlite_connect(path)
    conn.row_factory = sqlite3.Row
    await conn.execute("PRAGMA journal_mode=WAL")
    await conn.execute("PRAGMA foreign_keys=ON")
    return conn


async def _fetch_all(conn: Any, sql: str, params: tuple[Any, ...]) -> list[dict[str, Any]]:
    cursor = await conn.execute(sql, params)
    rows = await cursor.fetchall()
    columns = [desc[0] for desc in cursor.description]
    return [dict(zip(columns, row, strict=True)) for row in rows]


async def _fetch_one(conn: Any, sql: str, params: tuple[Any, ...]) -> dict[str, Any] | None:
    cursor = await conn.execute(sql, params)
    row = await cursor.fetchone()
    if row is None:
        return None
    columns = [desc[0] for desc in cursor.description]
    return dict(zip(columns, row, strict=True))
