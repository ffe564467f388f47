"""Template region schemas.

Templates expose their editable content contract through ``data-cms-*``
annotations.  :func:`extract_regions` reads that contract out of raw
markup; :func:`build_schema` adds the template's path, display name and
owning content type.
"""

from howl.schema.extract import build_schema, content_type_for, display_name_for, extract_regions
from howl.schema.types import RegionSpec, RegionType, TemplateSchema, format_label

__all__ = [
    "RegionSpec",
    "RegionType",
    "TemplateSchema",
    "build_schema",
    "content_type_for",
    "display_name_for",
    "extract_regions",
    "format_label",
]
