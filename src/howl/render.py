"""Site rendering: request path in, status and markup out.

:class:`SiteRenderer` is the seam a web server calls.  It serves
``/robots.txt`` and ``/sitemap.xml``, applies stored redirects, resolves
everything else through :class:`~howl.routing.resolver.ContentRouter` and
renders the result with kida::

    renderer = SiteRenderer(config, store, env)
    result = await renderer.render("/about")
    send(result.status, result.headers, result.body)

Not-found and server-error outcomes render the configured error
templates.  When an error template is itself missing or broken, a
plain-text body is served instead.
"""

import logging
from dataclasses import dataclass
from typing import Any
from xml.sax.saxutils import escape

from kida import Environment
from kida.environment.exceptions import TemplateNotFoundError

from howl.blocks import register_block_lookup
from howl.config import HowlConfig
from howl.data.errors import DataError
from howl.menus import Menu, load_menus
from howl.models import PublishedBlock
from howl.routing.outcomes import NotFound, RenderContext, ServerError
from howl.routing.paths import ROOT, normalize_path
from howl.routing.resolver import ContentRouter
from howl.settings import SiteSettings, load_site_settings
from howl.store import ContentStore
from howl.templating.integration import render_template

logger = logging.getLogger("howl.render")

HTML = "text/html; charset=utf-8"
PLAIN = "text/plain; charset=utf-8"
XML = "application/xml; charset=utf-8"

ROBOTS_PATH = "/robots.txt"
SITEMAP_PATH = "/sitemap.xml"

_REASONS = {404: "Not Found", 500: "Internal Server Error"}
_TITLES = {404: "Page Not Found", 500: "Server Error"}


@dataclass(frozen=True, slots=True)
class RenderResult:
    """A rendered response, independent of any web framework."""

    status: int
    body: str
    content_type: str = HTML
    headers: tuple[tuple[str, str], ...] = ()

    def header(self, name: str) -> str | None:
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None

    @property
    def location(self) -> str | None:
        return self.header("location")


class SiteRenderer:
    """Render public site paths.

    Args:
        config: Template names and routing defaults.
        store: Content persistence.
        env: Template environment, usually from
            :func:`~howl.templating.create_environment`.
    """

    __slots__ = ("_config", "_env", "_router", "_store")

    def __init__(self, config: HowlConfig, store: ContentStore, env: Environment) -> None:
        self._config = config
        self._store = store
        self._env = env
        self._router = ContentRouter(
            store,
            env,
            default_module=config.default_module,
            template_suffix=config.template_suffix,
        )

    @property
    def router(self) -> ContentRouter:
        return self._router

    async def render(self, path: str) -> RenderResult:
        normalized = normalize_path(path)
        if normalized == ROBOTS_PATH:
            return await self.robots_txt()
        if normalized == SITEMAP_PATH:
            return await self.sitemap_xml()

        try:
            redirect = await self._store.find_redirect(normalized)
            settings = await load_site_settings(self._store)
        except DataError:
            logger.exception("Storage failure before resolving %s", normalized)
            return _plain(500)

        if redirect is not None:
            logger.debug(
                "Redirect %s -> %s (%d)", normalized, redirect.target_path, redirect.status_code
            )
            return RenderResult(
                status=redirect.status_code,
                body="",
                content_type=PLAIN,
                headers=(("location", redirect.target_path),),
            )

        try:
            outcome = await self._router.resolve(normalized, settings)
        except DataError:
            logger.exception("Storage failure resolving %s", normalized)
            return await self._error_page(500, normalized, settings)

        match outcome:
            case RenderContext() as ctx:
                return await self._render_context(ctx)
            case NotFound(path=missing):
                return await self._error_page(404, missing, settings)
            case ServerError(path=failed, detail=detail):
                logger.error("Cannot render %s: %s", failed, detail)
                return await self._error_page(500, failed, settings)

    async def _render_context(self, ctx: RenderContext) -> RenderResult:
        try:
            body = render_template(self._env, ctx.template_path, ctx.template_context())
        except Exception:
            logger.exception("Failed to render %s with %s", ctx.path, ctx.template_path)
            return await self._error_page(500, ctx.path, ctx.site)
        return RenderResult(status=200, body=body)

    async def _error_page(self, status: int, path: str, settings: SiteSettings) -> RenderResult:
        template_path = (
            self._config.not_found_template if status == 404 else self._config.server_error_template
        )
        context: dict[str, Any] = {
            "title": _TITLES[status],
            "path": path,
            "site": settings.as_template_dict(),
            "menus": await self._menus_or_empty(),
        }
        register_block_lookup(context, self._env, await self._blocks_or_empty())
        try:
            body = render_template(self._env, template_path, context)
        except TemplateNotFoundError:
            logger.debug("No %d template %s; serving plain text", status, template_path)
            return _plain(status)
        except Exception:
            logger.exception("Error template %s failed to render", template_path)
            return _plain(status)
        return RenderResult(status=status, body=body)

    async def _blocks_or_empty(self) -> list[PublishedBlock]:
        try:
            return await self._store.list_published_blocks()
        except DataError:
            logger.exception("Could not load blocks for error page")
            return []

    async def _menus_or_empty(self) -> dict[str, Menu]:
        try:
            return await load_menus(self._store)
        except DataError:
            logger.exception("Could not load menus for error page")
            return {}

    async def robots_txt(self) -> RenderResult:
        """``robots_txt`` setting, or allow-all."""
        try:
            settings = await load_site_settings(self._store)
        except DataError:
            logger.exception("Could not load settings for robots.txt")
            settings = SiteSettings()
        return RenderResult(status=200, body=settings.robots_txt, content_type=PLAIN)

    async def sitemap_xml(self) -> RenderResult:
        """Sitemap of published pages and active products, newest first."""
        try:
            settings = await load_site_settings(self._store)
            entries = await self._store.list_sitemap_entries()
        except DataError:
            logger.exception("Could not build sitemap")
            return _plain(500)

        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
        ]
        for entry in entries:
            loc = settings.site_url + ("" if entry.slug == ROOT else entry.slug)
            lines.append("  <url>")
            lines.append(f"    <loc>{escape(loc or ROOT)}</loc>")
            if entry.updated_at:
                lines.append(f"    <lastmod>{escape(entry.updated_at[:10])}</lastmod>")
            lines.append("    <changefreq>weekly</changefreq>")
            lines.append(f"    <priority>{'1.0' if entry.slug == ROOT else '0.8'}</priority>")
            lines.append("  </url>")
        lines.append("</urlset>")
        return RenderResult(status=200, body="\n".join(lines), content_type=XML)


def _plain(status: int) -> RenderResult:
    return RenderResult(status=status, body=_REASONS.get(status, "Error"), content_type=PLAIN)
