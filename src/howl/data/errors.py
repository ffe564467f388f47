"""Storage error hierarchy.

Any failure talking to the content store surfaces as a :class:`DataError`
subclass.  The router lets these propagate; the site renderer maps them to
a server-error page.  Nothing is retried.
"""

from howl.errors import HowlError


class DataError(HowlError):
    """Base for all storage errors."""


# Name used by callers that think in terms of the persistence collaborator.
StorageError = DataError


class QueryError(DataError):
    """Raised when a SQL statement fails."""


class MigrationError(DataError):
    """Raised when a schema migration cannot be discovered or applied."""
