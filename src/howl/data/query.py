"""Immutable SELECT builder used by the content store.

Each method returns a new frozen ``Query``; the original is never mutated.
The source may be a table or a join expression, which is how module
records pick up their template path::

    Query(PageRecord, "pages m LEFT JOIN templates t ON t.id = m.template_id")
        .select("m.*, t.template_path AS template_path")
        .where("m.content_id = ?", 7)
        .where_if(statuses, "m.status IN (?, ?)", *statuses)

``.sql`` and ``.params`` show exactly what will run.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from howl.data.database import Database


def placeholders(count: int) -> str:
    """Return ``?, ?, ?`` for an ``IN (...)`` clause of *count* values."""
    return ", ".join("?" * count)


@dataclass(frozen=True, slots=True)
class Query[T]:
    """Immutable SELECT query builder."""

    _cls: type[T]
    _source: str
    _wheres: tuple[tuple[str, tuple[object, ...]], ...] = ()
    _order: str | None = None
    _limit: int | None = None
    _columns: str = "*"

    def where(self, clause: str, /, *params: object) -> Query[T]:
        """Add a WHERE clause. Multiple calls are ANDed."""
        return replace(self, _wheres=(*self._wheres, (clause, params)))

    def where_if(self, condition: object, clause: str, /, *params: object) -> Query[T]:
        """Add a WHERE clause only if ``condition`` is truthy."""
        if not condition:
            return self
        return self.where(clause, *params)

    def where_in(self, column: str, values: tuple[object, ...] | frozenset[object]) -> Query[T]:
        """Add ``column IN (...)``; no-op for an empty collection."""
        ordered = tuple(sorted(values, key=str))
        return self.where_if(ordered, f"{column} IN ({placeholders(len(ordered))})", *ordered)

    def order_by(self, clause: str) -> Query[T]:
        """Set ORDER BY. Replaces any previous ordering."""
        return replace(self, _order=clause)

    def take(self, n: int) -> Query[T]:
        """Set LIMIT."""
        return replace(self, _limit=n)

    def select(self, columns: str) -> Query[T]:
        """Set which columns to SELECT. Default is ``*``."""
        return replace(self, _columns=columns)

    @property
    def sql(self) -> str:
        parts = [f"SELECT {self._columns} FROM {self._source}"]
        if self._wheres:
            parts.append("WHERE " + " AND ".join(w[0] for w in self._wheres))
        if self._order:
            parts.append(f"ORDER BY {self._order}")
        if self._limit is not None:
            parts.append(f"LIMIT {self._limit}")
        return " ".join(parts)

    @property
    def params(self) -> tuple[object, ...]:
        result: list[object] = []
        for _, p in self._wheres:
            result.extend(p)
        return tuple(result)

    async def fetch(self, db: Database) -> list[T]:
        return await db.fetch(self._cls, self.sql, *self.params)

    async def fetch_one(self, db: Database) -> T | None:
        return await db.fetch_one(self._cls, self.sql, *self.params)
