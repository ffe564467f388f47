"""Persisted content models.

Frozen dataclasses mapped from store rows by :mod:`howl.data`.  Columns a
model does not declare are ignored, so joined queries can return more
than a model needs.

Module records form a closed set: :class:`PageRecord`,
:class:`ProductRecord` and :class:`BlockRecord`.  Each references exactly
one :class:`ContentRecord`, which owns the title, slug and field data.
"""

from dataclasses import dataclass
from typing import Any

from howl._internal.jsonfield import parse_json_field, parse_json_object
from howl.schema.types import RegionSpec, TemplateSchema


@dataclass(frozen=True, slots=True)
class ContentType:
    """A named content module (``pages``, ``products``, ``blocks``, ...)."""

    name: str
    label: str
    plural_label: str
    icon: str = "FileText"
    has_status: bool = True
    has_seo: bool = True
    is_system: bool = False
    id: int | None = None


@dataclass(frozen=True, slots=True)
class TemplateDefinition:
    """A template's schema as persisted by the catalog sync."""

    template_path: str
    name: str
    content_type: str
    regions: str = "[]"
    updated_at: str | None = None
    id: int | None = None

    @property
    def schema(self) -> TemplateSchema:
        """Rebuild the schema; malformed region JSON gives zero regions."""
        raw = parse_json_field(self.regions)
        regions: list[RegionSpec] = []
        if isinstance(raw, list):
            seen: set[str] = set()
            for item in raw:
                spec = RegionSpec.from_dict(item)
                if spec is not None and spec.name not in seen:
                    seen.add(spec.name)
                    regions.append(spec)
        return TemplateSchema(
            template_path=self.template_path,
            display_name=self.name,
            content_type=self.content_type,
            regions=tuple(regions),
        )


@dataclass(frozen=True, slots=True)
class ContentRecord:
    """Title, slug and field data shared by every module record."""

    id: int
    module: str
    slug: str
    title: str = ""
    data: str | None = None
    updated_at: str | None = None

    @property
    def fields(self) -> dict[str, Any]:
        """The field map keyed by region name. Malformed data gives ``{}``."""
        return parse_json_object(self.data)


@dataclass(frozen=True, slots=True)
class SeoOverrides:
    """Per-record SEO fields. ``None`` means fall back."""

    meta_title: str | None = None
    meta_description: str | None = None
    og_title: str | None = None
    og_description: str | None = None
    og_image: str | None = None
    canonical_url: str | None = None
    robots: str | None = None
    schema_markup: str | None = None


@dataclass(frozen=True, slots=True)
class PageRecord:
    """A page. Publicly visible only when ``published``."""

    id: int
    content_id: int
    status: str = "draft"
    template_id: int | None = None
    template_path: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    og_title: str | None = None
    og_description: str | None = None
    og_image: str | None = None
    canonical_url: str | None = None
    robots: str | None = None
    schema_markup: str | None = None
    updated_at: str | None = None

    def seo_overrides(self) -> SeoOverrides:
        return SeoOverrides(
            meta_title=self.meta_title,
            meta_description=self.meta_description,
            og_title=self.og_title,
            og_description=self.og_description,
            og_image=self.og_image,
            canonical_url=self.canonical_url,
            robots=self.robots,
            schema_markup=self.schema_markup,
        )


@dataclass(frozen=True, slots=True)
class ProductRecord:
    """A product. Publicly visible when ``active`` or ``draft``."""

    id: int
    content_id: int
    sku: str
    price: float = 0.0
    inventory_quantity: int = 0
    status: str = "draft"
    template_id: int | None = None
    template_path: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    og_title: str | None = None
    og_description: str | None = None
    og_image: str | None = None
    canonical_url: str | None = None
    robots: str | None = None
    schema_markup: str | None = None
    updated_at: str | None = None

    @property
    def in_stock(self) -> bool:
        return self.inventory_quantity > 0

    def seo_overrides(self) -> SeoOverrides:
        return SeoOverrides(
            meta_title=self.meta_title,
            meta_description=self.meta_description,
            og_title=self.og_title,
            og_description=self.og_description,
            og_image=self.og_image,
            canonical_url=self.canonical_url,
            robots=self.robots,
            schema_markup=self.schema_markup,
        )


@dataclass(frozen=True, slots=True)
class BlockRecord:
    """A reusable fragment. Blocks carry no status and no SEO fields."""

    id: int
    content_id: int
    template_id: int | None = None
    template_path: str | None = None
    updated_at: str | None = None

    def seo_overrides(self) -> SeoOverrides:
        return SeoOverrides()


type ModuleRecord = PageRecord | ProductRecord | BlockRecord


@dataclass(frozen=True, slots=True)
class PublishedBlock:
    """A block joined with its content row, ready for embedding."""

    id: int
    slug: str
    title: str = ""
    data: str | None = None
    template_path: str | None = None

    @property
    def fields(self) -> dict[str, Any]:
        return parse_json_object(self.data)


@dataclass(frozen=True, slots=True)
class MenuRow:
    id: int
    name: str
    slug: str


@dataclass(frozen=True, slots=True)
class MenuItemRow:
    id: int
    menu_id: int
    title: str
    parent_id: int | None = None
    url: str | None = None
    target: str = "_self"
    position: int = 0
    content_slug: str | None = None


@dataclass(frozen=True, slots=True)
class Redirect:
    source_path: str
    target_path: str
    status_code: int = 301


@dataclass(frozen=True, slots=True)
class SitemapEntry:
    slug: str
    updated_at: str | None = None
