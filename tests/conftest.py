"""Shared fixtures: a migrated SQLite store under tmp_path and a seeding helper."""

import json
from typing import Any

import pytest
from kida import DictLoader, Environment

from howl.data import Database
from howl.schema import RegionSpec, TemplateSchema, build_schema
from howl.store import SqlContentStore

SITE_URL = "https://example.test"


class Seeder:
    """Insert content rows the way an admin UI would."""

    def __init__(self, db: Database, store: SqlContentStore) -> None:
        self.db = db
        self.store = store

    async def _last_id(self) -> int:
        return await self.db.fetch_val("SELECT last_insert_rowid()", as_type=int)

    async def template(
        self,
        path: str,
        markup: str = "",
        *,
        regions: tuple[RegionSpec, ...] | None = None,
    ) -> int:
        schema = build_schema(path, markup)
        if regions is not None:
            schema = TemplateSchema(path, schema.display_name, schema.content_type, regions)
        await self.store.upsert_template(schema)
        return await self.db.fetch_val(
            "SELECT id FROM templates WHERE template_path = ?", path, as_type=int
        )

    async def _template_id(self, path: str | None) -> int | None:
        if path is None:
            return None
        existing = await self.store.find_template_by_path(path)
        if existing is not None:
            return existing.id
        return await self.template(path)

    async def content(
        self,
        module: str,
        slug: str,
        title: str,
        data: dict[str, Any] | str | None = None,
    ) -> int:
        raw = json.dumps(data) if isinstance(data, dict) else data
        await self.db.execute(
            "INSERT INTO content (module, slug, title, data) VALUES (?, ?, ?, ?)",
            module,
            slug,
            title,
            raw,
        )
        return await self._last_id()

    async def page(
        self,
        slug: str,
        title: str,
        *,
        data: dict[str, Any] | str | None = None,
        status: str = "published",
        template: str | None = "pages/standard.html",
        module: str = "pages",
        **seo: str | None,
    ) -> int:
        content_id = await self.content(module, slug, title, data)
        columns = ["content_id", "template_id", "status", *seo]
        values = [content_id, await self._template_id(template), status, *seo.values()]
        await self.db.execute(
            f"INSERT INTO pages ({', '.join(columns)}) VALUES ({', '.join('?' * len(values))})",
            *values,
        )
        return content_id

    async def product(
        self,
        slug: str,
        title: str,
        *,
        sku: str,
        price: float = 10.0,
        inventory_quantity: int = 5,
        status: str = "active",
        data: dict[str, Any] | None = None,
        template: str | None = "products/single.html",
    ) -> int:
        content_id = await self.content("products", slug, title, data)
        await self.db.execute(
            "INSERT INTO products"
            " (content_id, template_id, sku, price, inventory_quantity, status)"
            " VALUES (?, ?, ?, ?, ?, ?)",
            content_id,
            await self._template_id(template),
            sku,
            price,
            inventory_quantity,
            status,
        )
        return content_id

    async def block(
        self,
        slug: str,
        title: str,
        *,
        data: dict[str, Any] | None = None,
        template: str | None = "blocks/cta.html",
    ) -> int:
        content_id = await self.content("blocks", slug, title, data)
        await self.db.execute(
            "INSERT INTO blocks (content_id, template_id) VALUES (?, ?)",
            content_id,
            await self._template_id(template),
        )
        return content_id

    async def setting(self, key: str, value: str) -> None:
        await self.db.execute(
            "INSERT INTO settings (setting_key, setting_value) VALUES (?, ?)"
            " ON CONFLICT (setting_key) DO UPDATE SET setting_value = excluded.setting_value",
            key,
            value,
        )

    async def menu(self, name: str, slug: str) -> int:
        await self.db.execute("INSERT INTO menus (name, slug) VALUES (?, ?)", name, slug)
        return await self._last_id()

    async def menu_item(
        self,
        menu_id: int,
        title: str,
        *,
        url: str | None = None,
        content_id: int | None = None,
        parent_id: int | None = None,
        position: int = 0,
        target: str = "_self",
    ) -> int:
        await self.db.execute(
            "INSERT INTO menu_items (menu_id, parent_id, title, url, content_id, target, position)"
            " VALUES (?, ?, ?, ?, ?, ?, ?)",
            menu_id,
            parent_id,
            title,
            url,
            content_id,
            target,
            position,
        )
        return await self._last_id()

    async def redirect(self, source: str, target: str, status_code: int = 301) -> None:
        await self.db.execute(
            "INSERT INTO redirects (source_path, target_path, status_code) VALUES (?, ?, ?)",
            source,
            target,
            status_code,
        )


# -- Fixtures --


@pytest.fixture
async def db(tmp_path):
    """A fresh SQLite database file under tmp_path."""
    db = Database(f"sqlite:///{tmp_path / 'howl.db'}")
    await db.connect()
    yield db
    await db.disconnect()


@pytest.fixture
async def store(db):
    """A migrated content store."""
    store = SqlContentStore(db)
    await store.ensure_schema()
    return store


@pytest.fixture
async def seed(db, store):
    return Seeder(db, store)


@pytest.fixture
def env() -> Environment:
    """In-memory templates covering pages, products, blocks and error pages."""
    return Environment(
        loader=DictLoader(
            {
                "pages/standard.html": (
                    "<title>{{ seo.title }}</title>"
                    '<h1 data-cms-region="heading">{{ content.heading }}</h1>'
                    "{{ render_block('cta') }}"
                ),
                "pages/404.html": "<h1>{{ title }}</h1><p>{{ path }}</p>",
                "pages/500.html": "<h1>{{ title }}</h1>",
                "products/single.html": "<h1>{{ record.title }}</h1><p>{{ page.sku }}</p>",
                "products/index.html": (
                    "{% for item in records %}<li>{{ item.title }}</li>{% end %}"
                ),
                "blocks/cta.html": '<aside class="cta">{{ content.text }}</aside>',
            }
        )
    )
