"""Persistence interface consumed by the router and the catalog sync.

:class:`ContentStore` is the whole contract; nothing else in howl talks
to storage.  :class:`SqlContentStore` implements it on :mod:`howl.data`
(SQLite), with the schema shipped as migrations::

    db = Database("sqlite:///howl.db")
    store = SqlContentStore(db)
    await store.ensure_schema()

Every method may raise :class:`howl.data.DataError` on storage failure.
Callers do not retry.
"""

from dataclasses import dataclass
from typing import Protocol

from howl.data import Database, MigrationResult, Query, migrate
from howl.models import (
    ContentRecord,
    ContentType,
    MenuItemRow,
    MenuRow,
    ModuleRecord,
    PublishedBlock,
    Redirect,
    SitemapEntry,
    TemplateDefinition,
)
from howl.routing.modules import dispatch_module
from howl.schema.types import TemplateSchema


class ContentStore(Protocol):
    """What howl needs from storage. Implementations may use any engine."""

    # -- Template catalog --

    async def find_template_by_path(self, template_path: str) -> TemplateDefinition | None: ...

    async def list_templates(self, content_type: str | None = None) -> list[TemplateDefinition]: ...

    async def upsert_template(self, schema: TemplateSchema) -> None: ...

    async def list_content_types(self) -> list[ContentType]: ...

    async def upsert_content_type(self, content_type: ContentType) -> bool: ...

    # -- Content --

    async def find_content_by_slug(self, slug: str) -> ContentRecord | None: ...

    async def find_content_by_id(self, content_id: int) -> ContentRecord | None: ...

    async def find_module_record_by_content_id(
        self, module: str, content_id: int
    ) -> ModuleRecord | None: ...

    async def list_content_by_module(self, module: str) -> list[ContentRecord]: ...

    async def list_published_blocks(self) -> list[PublishedBlock]: ...

    # -- Site --

    async def get_settings(self) -> dict[str, str]: ...

    async def list_menus(self) -> list[MenuRow]: ...

    async def list_menu_items(self, menu_id: int) -> list[MenuItemRow]: ...

    async def find_redirect(self, source_path: str) -> Redirect | None: ...

    async def list_sitemap_entries(self) -> list[SitemapEntry]: ...


@dataclass(frozen=True, slots=True)
class _Setting:
    setting_key: str
    setting_value: str | None = None


_UPSERT_TEMPLATE_SQL = """
INSERT INTO templates (template_path, name, content_type, regions)
VALUES (?, ?, ?, ?)
ON CONFLICT (template_path) DO UPDATE SET
    name = excluded.name,
    content_type = excluded.content_type,
    regions = excluded.regions,
    updated_at = CURRENT_TIMESTAMP
WHERE templates.name IS NOT excluded.name
   OR templates.content_type IS NOT excluded.content_type
   OR templates.regions IS NOT excluded.regions
"""

_INSERT_CONTENT_TYPE_SQL = """
INSERT INTO content_types (name, label, plural_label, icon, has_status, has_seo, is_system)
VALUES (?, ?, ?, ?, ?, ?, ?)
ON CONFLICT (name) DO NOTHING
"""

_PUBLISHED_BLOCKS_SQL = """
SELECT b.id AS id, c.slug AS slug, c.title AS title, c.data AS data,
       t.template_path AS template_path
FROM blocks b
JOIN content c ON c.id = b.content_id
LEFT JOIN templates t ON t.id = b.template_id
ORDER BY c.slug
"""

_SITEMAP_SQL = """
SELECT c.slug AS slug, c.updated_at AS updated_at
FROM content c JOIN pages p ON p.content_id = c.id
WHERE p.status = 'published'
UNION ALL
SELECT c.slug AS slug, c.updated_at AS updated_at
FROM content c JOIN products pr ON pr.content_id = c.id
WHERE pr.status = 'active'
ORDER BY updated_at DESC, slug
"""


class SqlContentStore:
    """:class:`ContentStore` on a :class:`howl.data.Database`."""

    __slots__ = ("__weakref__", "_db")

    def __init__(self, db: Database) -> None:
        self._db = db

    @property
    def db(self) -> Database:
        return self._db

    async def ensure_schema(self) -> MigrationResult:
        """Apply any pending schema migrations."""
        return await migrate(self._db)

    # -- Template catalog --

    async def find_template_by_path(self, template_path: str) -> TemplateDefinition | None:
        return await (
            Query(TemplateDefinition, "templates")
            .where("template_path = ?", template_path)
            .fetch_one(self._db)
        )

    async def list_templates(self, content_type: str | None = None) -> list[TemplateDefinition]:
        return await (
            Query(TemplateDefinition, "templates")
            .where_if(content_type, "content_type = ?", content_type)
            .order_by("template_path")
            .fetch(self._db)
        )

    async def upsert_template(self, schema: TemplateSchema) -> None:
        """Insert or replace a template row keyed by path.

        Name, content type and regions are always overwritten, never
        merged.  An unchanged schema leaves the row untouched.
        """
        await self._db.execute(
            _UPSERT_TEMPLATE_SQL,
            schema.template_path,
            schema.display_name,
            schema.content_type,
            schema.regions_json(),
        )

    async def list_content_types(self) -> list[ContentType]:
        return await Query(ContentType, "content_types").order_by("name").fetch(self._db)

    async def upsert_content_type(self, content_type: ContentType) -> bool:
        """Register a content type if its name is new.

        Existing types are left as editors configured them.  Returns
        whether a row was inserted.
        """
        inserted = await self._db.execute(
            _INSERT_CONTENT_TYPE_SQL,
            content_type.name,
            content_type.label,
            content_type.plural_label,
            content_type.icon,
            content_type.has_status,
            content_type.has_seo,
            content_type.is_system,
        )
        return inserted > 0

    # -- Content --

    async def find_content_by_slug(self, slug: str) -> ContentRecord | None:
        return await Query(ContentRecord, "content").where("slug = ?", slug).fetch_one(self._db)

    async def find_content_by_id(self, content_id: int) -> ContentRecord | None:
        return await Query(ContentRecord, "content").where("id = ?", content_id).fetch_one(self._db)

    async def find_module_record_by_content_id(
        self, module: str, content_id: int
    ) -> ModuleRecord | None:
        """Load the module record behind a content row, applying its status gate."""
        kind = dispatch_module(module)
        return await (
            Query(kind.record_type, f"{kind.table} m LEFT JOIN templates t ON t.id = m.template_id")
            .select("m.*, t.template_path AS template_path")
            .where("m.content_id = ?", content_id)
            .where_in("m.status", kind.public_statuses)
            .order_by("m.id")
            .take(1)
            .fetch_one(self._db)
        )

    async def list_content_by_module(self, module: str) -> list[ContentRecord]:
        return await (
            Query(ContentRecord, "content")
            .where("module = ?", module)
            .order_by("title ASC, id ASC")
            .fetch(self._db)
        )

    async def list_published_blocks(self) -> list[PublishedBlock]:
        """Every block with its content row.

        Blocks have no status lifecycle, so every stored block counts as
        published.
        """
        return await self._db.fetch(PublishedBlock, _PUBLISHED_BLOCKS_SQL)

    # -- Site --

    async def get_settings(self) -> dict[str, str]:
        rows = await Query(_Setting, "settings").order_by("setting_key").fetch(self._db)
        return {row.setting_key: row.setting_value or "" for row in rows}

    async def list_menus(self) -> list[MenuRow]:
        return await Query(MenuRow, "menus").order_by("slug").fetch(self._db)

    async def list_menu_items(self, menu_id: int) -> list[MenuItemRow]:
        return await (
            Query(MenuItemRow, "menu_items mi LEFT JOIN content c ON c.id = mi.content_id")
            .select("mi.*, c.slug AS content_slug")
            .where("mi.menu_id = ?", menu_id)
            .order_by("mi.position, mi.id")
            .fetch(self._db)
        )

    async def find_redirect(self, source_path: str) -> Redirect | None:
        return await (
            Query(Redirect, "redirects").where("source_path = ?", source_path).fetch_one(self._db)
        )

    async def list_sitemap_entries(self) -> list[SitemapEntry]:
        return await self._db.fetch(SitemapEntry, _SITEMAP_SQL)
