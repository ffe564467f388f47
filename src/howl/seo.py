"""SEO context assembly.

Every field falls back independently; an override on one field never
short-circuits another::

    title           = meta_title       or content.title
    description     = meta_description or ""
    canonical       = canonical_url    or site_url + slug
    robots          = robots           or "index, follow"
    og.title        = og_title         or meta_title or content.title
    og.description  = og_description   or meta_description or ""
    og.image        = og_image         or ""

``None`` and empty strings both count as unset.  Structured data
(``schema_markup``) is parsed leniently: malformed JSON gives ``None``.
"""

from dataclasses import dataclass
from typing import Any

from howl._internal.jsonfield import parse_json_field
from howl.models import ContentRecord, ContentType, ModuleRecord, SeoOverrides
from howl.settings import SiteSettings

DEFAULT_ROBOTS = "index, follow"
OG_TYPE = "website"

__all__ = [
    "DEFAULT_ROBOTS",
    "OpenGraph",
    "SeoContext",
    "build_index_seo",
    "build_seo",
    "parse_json_field",
]


@dataclass(frozen=True, slots=True)
class OpenGraph:
    title: str
    description: str = ""
    image: str = ""
    url: str = ""
    type: str = OG_TYPE


@dataclass(frozen=True, slots=True)
class SeoContext:
    """Resolved SEO metadata for one render."""

    title: str
    description: str
    canonical: str
    robots: str
    og: OpenGraph
    schema: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "canonical": self.canonical,
            "robots": self.robots,
            "og": {
                "title": self.og.title,
                "description": self.og.description,
                "image": self.og.image,
                "url": self.og.url,
                "type": self.og.type,
            },
            "schema": self.schema,
        }


def _first(*values: str | None) -> str:
    for value in values:
        if value:
            return value
    return ""


def absolute_url(settings: SiteSettings, path: str) -> str:
    return f"{settings.site_url.rstrip('/')}{path}"


def build_seo(
    module_record: ModuleRecord,
    content_record: ContentRecord,
    settings: SiteSettings,
    *,
    path: str | None = None,
) -> SeoContext:
    """Build the SEO context for a single record.

    *path* is the slug the canonical and ``og:url`` are built from; it
    defaults to the content record's slug.  Modules without SEO fields
    fall through every chain.
    """
    overrides: SeoOverrides = module_record.seo_overrides()
    slug = path if path is not None else content_record.slug
    url = absolute_url(settings, slug)
    return SeoContext(
        title=_first(overrides.meta_title, content_record.title),
        description=_first(overrides.meta_description),
        canonical=_first(overrides.canonical_url, url),
        robots=_first(overrides.robots, DEFAULT_ROBOTS),
        og=OpenGraph(
            title=_first(overrides.og_title, overrides.meta_title, content_record.title),
            description=_first(overrides.og_description, overrides.meta_description),
            image=_first(overrides.og_image),
            url=url,
        ),
        schema=parse_json_field(overrides.schema_markup),
    )


def build_index_seo(
    content_type: ContentType | None,
    module: str,
    path: str,
    settings: SiteSettings,
) -> SeoContext:
    """SEO for a module index page such as ``/products``.

    The title is the content type's plural label (the module name when
    the type is not registered), the description is the site default.
    """
    title = content_type.plural_label if content_type is not None else module.capitalize()
    url = absolute_url(settings, path)
    description = settings.default_meta_description
    return SeoContext(
        title=title,
        description=description,
        canonical=url,
        robots=DEFAULT_ROBOTS,
        og=OpenGraph(title=title, description=description, url=url),
    )
