"""Template catalog: discovery of template files and their sync into the store."""

from howl.catalog.discovery import scan_block_templates, scan_page_templates
from howl.catalog.sync import (
    CatalogSync,
    content_type_label,
    default_content_type,
    plural_label,
    register_content_types,
    sync_catalog,
)

__all__ = [
    "CatalogSync",
    "content_type_label",
    "default_content_type",
    "plural_label",
    "register_content_types",
    "scan_block_templates",
    "scan_page_templates",
    "sync_catalog",
]
