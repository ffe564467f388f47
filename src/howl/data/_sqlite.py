"""Async SQLite wrapper using stdlib sqlite3 + anyio.

Every blocking sqlite3 call runs in a worker thread via ``anyio.to_thread``,
so store queries never block the event loop that is resolving requests.

``check_same_thread=False`` is required because ``anyio.to_thread``
dispatches to a pool and consecutive calls may land on different threads;
:class:`howl.data.database.Database` serializes access with a lock.
``autocommit=True`` (Python 3.12+) makes single statements commit
immediately; ``Database.transaction()`` flips to manual mode, which also
keeps ``executescript`` inside the open transaction.
"""

import sqlite3
from collections.abc import Callable, Sequence
from typing import Any

import anyio


async def _in_thread(func: Callable[[], Any]) -> Any:
    return await anyio.to_thread.run_sync(func)


class AsyncCursor:
    """Async view of a ``sqlite3.Cursor``."""

    __slots__ = ("_cursor",)

    def __init__(self, cursor: sqlite3.Cursor) -> None:
        self._cursor = cursor

    @property
    def description(self) -> Any:
        return self._cursor.description

    @property
    def rowcount(self) -> int:
        return self._cursor.rowcount

    async def fetchall(self) -> list[Any]:
        return await _in_thread(self._cursor.fetchall)

    async def fetchone(self) -> Any:
        return await _in_thread(self._cursor.fetchone)


class AsyncConnection:
    """Async view of a ``sqlite3.Connection``."""

    __slots__ = ("_conn",)

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    @property
    def row_factory(self) -> Any:
        return self._conn.row_factory

    @row_factory.setter
    def row_factory(self, factory: Any) -> None:
        self._conn.row_factory = factory

    @property
    def autocommit(self) -> bool:
        return bool(self._conn.autocommit)

    @autocommit.setter
    def autocommit(self, value: bool) -> None:
        self._conn.autocommit = value

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> AsyncCursor:
        cursor = await _in_thread(lambda: self._conn.execute(sql, params))
        return AsyncCursor(cursor)

    async def executescript(self, sql: str) -> None:
        """Run a multi-statement script.

        Outside manual mode each statement commits on its own; inside it
        the script joins the open transaction.
        """
        await _in_thread(lambda: self._conn.executescript(sql))

    async def commit(self) -> None:
        await _in_thread(self._conn.commit)

    async def rollback(self) -> None:
        await _in_thread(self._conn.rollback)

    async def close(self) -> None:
        await _in_thread(self._conn.close)


async def connect(path: str) -> AsyncConnection:
    """Open an async SQLite connection."""
    conn = await _in_thread(
        lambda: sqlite3.connect(path, autocommit=True, check_same_thread=False)
    )
    return AsyncConnection(conn)
