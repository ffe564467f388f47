"""Typed async storage for the reference content store.

SQL in, frozen dataclasses out. Not an ORM::

    from howl.data import Database, migrate

    db = Database("sqlite:///howl.db")
    await migrate(db)
"""

from howl.data.database import Database
from howl.data.errors import DataError, MigrationError, QueryError, StorageError
from howl.data.migrate import MigrationResult, migrate
from howl.data.query import Query

__all__ = [
    "DataError",
    "Database",
    "MigrationError",
    "MigrationResult",
    "Query",
    "QueryError",
    "StorageError",
    "migrate",
]
