"""Howl exception hierarchy.

Shared across the catalog, router, store, and renderer so every module
raises and catches the same types.  Request-level outcomes (not found,
server error) are returned values, see :mod:`howl.routing.outcomes`.
"""


class HowlError(Exception):
    """Base for all howl-specific errors."""


class ConfigurationError(HowlError):
    """Raised when content or site configuration is inconsistent.

    A module record with no template assigned, or a home-page override
    pointing at a record without a slug.  Indicates an authoring defect
    rather than a missing resource, so it renders as a server error.
    """


class CatalogBusyError(HowlError):
    """Raised when a catalog sync is requested while one is running."""
