"""Tests for howl.routing: path handling and content resolution."""

import logging
from typing import Any

import pytest

from howl.catalog import default_content_type
from howl.data import QueryError
from howl.errors import ConfigurationError
from howl.models import PageRecord, ProductRecord
from howl.routing.outcomes import NotFound, RenderContext, ServerError
from howl.routing.paths import (
    apply_default_prefix,
    index_template_path,
    module_index_name,
    normalize_path,
)
from howl.routing.resolver import ContentRouter, fill_region_defaults
from howl.schema import RegionSpec, RegionType, TemplateSchema
from howl.settings import SiteSettings

SITE_URL = "https://example.test"
KNOWN = {"pages", "products", "blocks"}


class SpyStore:
    """Delegates to a real store and counts calls."""

    def __init__(self, store: Any) -> None:
        self._store = store
        self.calls: list[str] = []

    def __getattr__(self, name: str) -> Any:
        attr = getattr(self._store, name)
        if not callable(attr):
            return attr

        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            self.calls.append(name)
            return await attr(*args, **kwargs)

        return wrapper


@pytest.fixture
def settings() -> SiteSettings:
    return SiteSettings(site_url=SITE_URL, site_name="Howl")


@pytest.fixture
def router(store, env) -> ContentRouter:
    return ContentRouter(store, env)


# ── Paths ──


class TestPaths:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("/", "/"),
            ("", "/"),
            ("/about/", "/about"),
            ("about", "/about"),
            ("/pages/about", "/pages/about"),
            ("/pages/about//", "/pages/about/"),
        ],
    )
    def test_normalize(self, raw: str, expected: str) -> None:
        assert normalize_path(raw) == expected

    def test_unprefixed_path_gets_default_module(self) -> None:
        assert apply_default_prefix("/about", KNOWN, "pages") == "/pages/about"

    def test_prefixed_path_kept(self) -> None:
        assert apply_default_prefix("/products/widget", KNOWN, "pages") == "/products/widget"

    def test_root_never_prefixed(self) -> None:
        assert apply_default_prefix("/", KNOWN, "pages") == "/"

    def test_module_index_name(self) -> None:
        assert module_index_name("/products", KNOWN) == "products"
        assert module_index_name("/products/widget", KNOWN) is None
        assert module_index_name("/pages/about", KNOWN) is None
        assert module_index_name("/about", KNOWN) is None

    def test_index_template_path(self) -> None:
        assert index_template_path("products") == "products/index.html"
        assert index_template_path("blog", ".njk") == "blog/index.njk"


class TestFillRegionDefaults:
    def test_unset_regions_get_defaults(self) -> None:
        schema = TemplateSchema(
            "pages/a.html",
            "A",
            "pages",
            (
                RegionSpec("heading"),
                RegionSpec("show", RegionType.CHECKBOX),
                RegionSpec("items", RegionType.REPEATER),
            ),
        )
        content = fill_region_defaults({"heading": "Hi", "extra": 1}, schema)
        assert content == {"heading": "Hi", "show": False, "items": [], "extra": 1}

    def test_without_schema_fields_pass_through(self) -> None:
        assert fill_region_defaults({"a": 1}, None) == {"a": 1}


# ── Record resolution ──


class TestResolveRecord:
    async def test_end_to_end_canonical(self, router, seed, settings) -> None:
        await seed.page("/pages/about", "About Us")
        ctx = await router.resolve("/pages/about", settings)
        assert isinstance(ctx, RenderContext)
        assert ctx.seo.canonical == SITE_URL + "/pages/about"
        assert ctx.template_path == "pages/standard.html"
        assert ctx.module == "pages"
        assert isinstance(ctx.record, PageRecord)
        assert ctx.content_record is not None
        assert ctx.content_record.title == "About Us"

    async def test_unprefixed_path_resolves_default_module(self, router, seed, settings) -> None:
        await seed.page("/pages/about", "About Us")
        ctx = await router.resolve("/about", settings)
        assert isinstance(ctx, RenderContext)
        assert ctx.path == "/pages/about"

    async def test_trailing_slash(self, router, seed, settings) -> None:
        await seed.page("/pages/about", "About Us")
        ctx = await router.resolve("/pages/about/", settings)
        assert isinstance(ctx, RenderContext)

    async def test_missing_slug_is_not_found(self, router, store, settings) -> None:
        outcome = await router.resolve("/pages/nope", settings)
        assert outcome == NotFound("/pages/nope")

    async def test_draft_page_is_not_found(self, router, seed, settings) -> None:
        await seed.page("/pages/wip", "WIP", status="draft")
        assert isinstance(await router.resolve("/pages/wip", settings), NotFound)

    async def test_content_without_module_record_is_not_found(
        self, router, seed, settings
    ) -> None:
        await seed.content("pages", "/pages/orphan", "Orphan")
        assert isinstance(await router.resolve("/pages/orphan", settings), NotFound)

    async def test_product_gates(self, router, seed, settings) -> None:
        await seed.product("/products/active", "Active", sku="A", status="active")
        await seed.product("/products/draft", "Draft", sku="B", status="draft")
        await seed.product("/products/gone", "Gone", sku="C", status="archived")
        active = await router.resolve("/products/active", settings)
        assert isinstance(active, RenderContext)
        assert isinstance(active.record, ProductRecord)
        assert active.module == "products"
        assert isinstance(await router.resolve("/products/draft", settings), RenderContext)
        assert isinstance(await router.resolve("/products/gone", settings), NotFound)

    async def test_blocks_are_not_routable(self, router, seed, settings) -> None:
        await seed.block("/blocks/cta", "CTA")
        assert isinstance(await router.resolve("/blocks/cta", settings), NotFound)

    async def test_missing_template_is_server_error(self, router, seed, settings) -> None:
        await seed.page("/pages/bare", "Bare", template=None)
        outcome = await router.resolve("/pages/bare", settings)
        assert isinstance(outcome, ServerError)
        assert isinstance(outcome.error, ConfigurationError)
        assert "no template assigned" in outcome.detail

    async def test_unknown_module_dispatches_as_page(
        self, router, seed, settings, caplog: pytest.LogCaptureFixture
    ) -> None:
        await seed.store.upsert_content_type(default_content_type("legacy"))
        await seed.page("/legacy/thing", "Thing", module="legacy")
        with caplog.at_level(logging.WARNING, logger="howl.router"):
            ctx = await router.resolve("/legacy/thing", settings)
        assert isinstance(ctx, RenderContext)
        assert ctx.module == "pages"
        assert isinstance(ctx.record, PageRecord)
        assert "No handler for module 'legacy'" in caplog.text
        assert caplog.text.count("No handler for module") == 1

    async def test_content_fields_filled_from_schema(self, router, seed, settings) -> None:
        await seed.template(
            "pages/feature.html",
            '<h1 data-cms-region="heading"></h1>'
            '<ul data-cms-region="items" data-cms-type="repeater"></ul>'
            '<input data-cms-region="show_banner" data-cms-type="checkbox">',
        )
        await seed.page(
            "/pages/feature", "Feature", data={"heading": "Hello"}, template="pages/feature.html"
        )
        ctx = await router.resolve("/pages/feature", settings)
        assert isinstance(ctx, RenderContext)
        assert ctx.content == {"heading": "Hello", "items": [], "show_banner": False}
        assert ctx.schema is not None
        assert ctx.schema.region_names == ("heading", "items", "show_banner")

    async def test_malformed_data_gives_defaults(self, router, seed, settings) -> None:
        await seed.template("pages/simple.html", '<h1 data-cms-region="heading"></h1>')
        await seed.page("/pages/broken", "Broken", data="{oops", template="pages/simple.html")
        ctx = await router.resolve("/pages/broken", settings)
        assert isinstance(ctx, RenderContext)
        assert ctx.content == {"heading": ""}

    async def test_deeply_nested_data_gives_defaults(self, router, seed, settings) -> None:
        await seed.template("pages/simple.html", '<h1 data-cms-region="heading"></h1>')
        nested = "[" * 100_000 + "]" * 100_000
        await seed.page("/pages/deep", "Deep", data=nested, template="pages/simple.html")
        ctx = await router.resolve("/pages/deep", settings)
        assert isinstance(ctx, RenderContext)
        assert ctx.content == {"heading": ""}

    async def test_storage_failure_propagates(self, store, env, settings) -> None:
        class FailingStore(SpyStore):
            async def find_content_by_slug(self, slug: str) -> Any:
                raise QueryError("database is locked")

        router = ContentRouter(FailingStore(store), env)
        with pytest.raises(QueryError):
            await router.resolve("/pages/about", settings)


# ── Home override ──


class TestHomeOverride:
    async def test_root_resolves_home_record(self, router, seed) -> None:
        home_id = await seed.page("/pages/home", "Home")
        settings = SiteSettings(site_url=SITE_URL, home_record_id=home_id)
        via_root = await router.resolve("/", settings)
        direct = await router.resolve("/pages/home", settings)
        assert isinstance(via_root, RenderContext)
        assert isinstance(direct, RenderContext)
        assert via_root.content_record == direct.content_record
        assert via_root.record == direct.record

    async def test_missing_home_record_keeps_root(
        self, router, seed, caplog: pytest.LogCaptureFixture
    ) -> None:
        await seed.page("/", "Root page")
        settings = SiteSettings(site_url=SITE_URL, home_record_id=999)
        with caplog.at_level(logging.WARNING, logger="howl.router"):
            ctx = await router.resolve("/", settings)
        assert isinstance(ctx, RenderContext)
        assert ctx.content_record is not None
        assert ctx.content_record.slug == "/"
        assert "Home record 999 not found" in caplog.text

    async def test_slugless_home_record_is_server_error(self, router, seed) -> None:
        blank_id = await seed.content("pages", "", "Blank")
        settings = SiteSettings(site_url=SITE_URL, home_record_id=blank_id)
        outcome = await router.resolve("/", settings)
        assert isinstance(outcome, ServerError)
        assert isinstance(outcome.error, ConfigurationError)

    async def test_override_only_applies_to_root(self, router, seed) -> None:
        home_id = await seed.page("/pages/home", "Home")
        await seed.page("/pages/about", "About")
        settings = SiteSettings(site_url=SITE_URL, home_record_id=home_id)
        ctx = await router.resolve("/about", settings)
        assert isinstance(ctx, RenderContext)
        assert ctx.content_record is not None
        assert ctx.content_record.slug == "/pages/about"


# ── Module index ──


class TestModuleIndex:
    async def test_products_index_lists_by_title(self, store, env, seed, settings) -> None:
        await seed.template("products/index.html")
        await seed.product("/products/zebra", "Zebra", sku="Z")
        await seed.product("/products/apple", "Apple", sku="A")
        spy = SpyStore(store)
        router = ContentRouter(spy, env)

        ctx = await router.resolve("/products", settings)
        assert isinstance(ctx, RenderContext)
        assert ctx.is_index
        assert ctx.template_path == "products/index.html"
        assert [r.title for r in ctx.records] == ["Apple", "Zebra"]
        assert ctx.seo.title == "Products"
        assert ctx.seo.canonical == SITE_URL + "/products"
        assert "find_content_by_slug" not in spy.calls
        assert "find_module_record_by_content_id" not in spy.calls

    async def test_trailing_slash_index(self, router, seed, settings) -> None:
        await seed.template("products/index.html")
        ctx = await router.resolve("/products/", settings)
        assert isinstance(ctx, RenderContext)
        assert ctx.records == ()

    async def test_missing_index_template_is_not_found(self, router, seed, settings) -> None:
        await seed.product("/products/apple", "Apple", sku="A")
        outcome = await router.resolve("/products", settings)
        assert isinstance(outcome, NotFound)

    async def test_blocks_index_is_not_found(self, router, seed, settings) -> None:
        await seed.template("blocks/index.html")
        assert isinstance(await router.resolve("/blocks", settings), NotFound)

    async def test_default_module_index(self, router, seed, settings) -> None:
        await seed.template("pages/index.html")
        await seed.page("/pages/b", "B")
        await seed.page("/pages/a", "A")
        ctx = await router.resolve("/pages", settings)
        assert isinstance(ctx, RenderContext)
        assert [r.title for r in ctx.records] == ["A", "B"]


# ── Render context ──


class TestRenderContext:
    async def test_template_context_keys(self, router, seed, settings) -> None:
        await seed.page("/pages/about", "About", data={"heading": "Hi"})
        ctx = await router.resolve("/pages/about", settings)
        assert isinstance(ctx, RenderContext)
        context = ctx.template_context()
        assert set(context) >= {
            "page",
            "record",
            "content",
            "regions",
            "seo",
            "site",
            "menus",
            "records",
            "module",
            "render_block",
        }
        assert context["content"]["heading"] == "Hi"
        assert context["seo"]["canonical"] == SITE_URL + "/pages/about"
        assert context["site"]["site_name"] == "Howl"

    async def test_blocks_and_menus_wired(self, router, seed, settings) -> None:
        about = await seed.page("/pages/about", "About")
        await seed.block("/blocks/cta", "CTA", data={"text": "Buy now"})
        menu_id = await seed.menu("Main", "main")
        await seed.menu_item(menu_id, "About", content_id=about)

        ctx = await router.resolve("/pages/about", settings)
        assert isinstance(ctx, RenderContext)
        assert "Buy now" in str(ctx.blocks("cta"))
        assert [item.url for item in ctx.menus["main"].items] == ["/pages/about"]

    async def test_seo_schema_markup(self, router, seed, settings) -> None:
        await seed.page(
            "/pages/org",
            "Org",
            schema_markup='{"@type": "Organization"}',
            meta_title="Our Org",
            og_title=None,
        )
        ctx = await router.resolve("/pages/org", settings)
        assert isinstance(ctx, RenderContext)
        assert ctx.seo.schema == {"@type": "Organization"}
        assert ctx.seo.title == "Our Org"
        assert ctx.seo.og.title == "Our Org"
