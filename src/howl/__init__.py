"""Howl: template-driven content rendering for a multi-module CMS.

Templates declare their editable regions in markup; the catalog sync
records them; the router turns request paths into render contexts.

Basic usage::

    from howl import HowlConfig, SiteRenderer, SqlContentStore, create_environment, sync_catalog
    from howl.data import Database

    config = HowlConfig(template_dir="templates")
    db = Database(config.database_url)
    store = SqlContentStore(db)
    await store.ensure_schema()
    await sync_catalog(store, config.template_dir)

    renderer = SiteRenderer(config, store, create_environment(config))
    result = await renderer.render("/about")
"""

__version__ = "0.1.0"
__all__ = [
    "BlockLookup",
    "CatalogBusyError",
    "CatalogSync",
    "ConfigurationError",
    "ContentRouter",
    "ContentStore",
    "HowlConfig",
    "HowlError",
    "NotFound",
    "RegionSpec",
    "RegionType",
    "RenderContext",
    "RenderResult",
    "ServerError",
    "SiteRenderer",
    "SiteSettings",
    "SqlContentStore",
    "TemplateSchema",
    "create_environment",
    "extract_regions",
    "sync_catalog",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import howl`` cheap for callers that only need the extractor.
    """
    if name == "HowlConfig":
        from howl.config import HowlConfig

        return HowlConfig

    if name in ("HowlError", "ConfigurationError", "CatalogBusyError"):
        from howl import errors as _errors

        return getattr(_errors, name)

    if name in ("RegionSpec", "RegionType", "TemplateSchema", "extract_regions"):
        from howl import schema as _schema

        return getattr(_schema, name)

    if name in ("CatalogSync", "sync_catalog"):
        from howl import catalog as _catalog

        return getattr(_catalog, name)

    if name in ("ContentStore", "SqlContentStore"):
        from howl import store as _store

        return getattr(_store, name)

    if name == "ContentRouter":
        from howl.routing.resolver import ContentRouter

        return ContentRouter

    if name in ("NotFound", "RenderContext", "ServerError"):
        from howl.routing import outcomes as _outcomes

        return getattr(_outcomes, name)

    if name in ("RenderResult", "SiteRenderer"):
        from howl import render as _render

        return getattr(_render, name)

    if name == "BlockLookup":
        from howl.blocks import BlockLookup

        return BlockLookup

    if name == "SiteSettings":
        from howl.settings import SiteSettings

        return SiteSettings

    if name == "create_environment":
        from howl.templating import create_environment

        return create_environment

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
