"""Content resolution.

:class:`ContentRouter` turns a request path into a :class:`RenderContext`
in a fixed sequence of steps:

1. normalize the path
2. substitute the home record's slug for ``/`` when one is configured
3. prefix the default module when the path names no known module
4. a single segment naming a module is a module index
5. otherwise look the content record up by slug
6. dispatch on the record's module and load its module record
7. load the template schema and fill unset regions with defaults
8. assemble SEO, blocks and menus

Lookup failures come back as :class:`NotFound` or :class:`ServerError`.
Storage failures (:class:`howl.data.DataError`) propagate to the caller.
"""

import logging
from typing import Any

from kida import Environment

from howl.blocks import BlockLookup
from howl.errors import ConfigurationError
from howl.menus import load_menus
from howl.models import ContentType, PageRecord, ProductRecord
from howl.routing.modules import MODULE_KINDS, ModuleKind, dispatch_module
from howl.routing.outcomes import NotFound, RenderContext, Resolution, ServerError
from howl.routing.paths import (
    ROOT,
    apply_default_prefix,
    index_template_path,
    module_index_name,
    normalize_path,
)
from howl.schema.types import TemplateSchema
from howl.seo import build_index_seo, build_seo
from howl.settings import SiteSettings
from howl.store import ContentStore

logger = logging.getLogger("howl.router")


def fill_region_defaults(
    fields: dict[str, Any],
    schema: TemplateSchema | None,
) -> dict[str, Any]:
    """Return *fields* with every declared-but-unset region defaulted.

    Fields the template does not declare are kept as stored.
    """
    content = dict(fields)
    if schema is None:
        return content
    for region in schema.regions:
        if content.get(region.name) is None:
            content[region.name] = region.default_value()
    return content


class ContentRouter:
    """Resolve request paths against a :class:`ContentStore`.

    Args:
        store: Persistence collaborator.
        env: Template environment block lookups render with.
        default_module: Module owning paths that name no module.
        template_suffix: Extension of module index templates.
    """

    __slots__ = ("_default_module", "_env", "_store", "_suffix")

    def __init__(
        self,
        store: ContentStore,
        env: Environment,
        *,
        default_module: str = "pages",
        template_suffix: str = ".html",
    ) -> None:
        self._store = store
        self._env = env
        self._default_module = default_module
        self._suffix = template_suffix

    @property
    def default_module(self) -> str:
        return self._default_module

    async def resolve(self, request_path: str, settings: SiteSettings) -> Resolution:
        path = normalize_path(request_path)

        try:
            path = await self._home_override(path, settings)
        except ConfigurationError as exc:
            logger.error("Home page misconfigured: %s", exc)
            return ServerError(path, str(exc), exc)

        content_types = {ct.name: ct for ct in await self._store.list_content_types()}
        known = {*content_types, self._default_module}
        path = apply_default_prefix(path, known, self._default_module)

        module = module_index_name(path, known)
        if module is not None:
            return await self._resolve_index(module, path, settings, content_types.get(module))
        return await self._resolve_record(path, settings)

    async def _home_override(self, path: str, settings: SiteSettings) -> str:
        if path != ROOT or settings.home_record_id is None:
            return path
        record = await self._store.find_content_by_id(settings.home_record_id)
        if record is None:
            logger.warning(
                "Home record %d not found; serving %s", settings.home_record_id, ROOT
            )
            return path
        slug = record.slug.strip()
        if not slug:
            raise ConfigurationError(
                f"Home record {record.id} has no slug; cannot serve it at {ROOT}"
            )
        logger.debug("Home override: %s -> %s", ROOT, slug)
        return normalize_path(slug)

    async def _resolve_index(
        self,
        module: str,
        path: str,
        settings: SiteSettings,
        content_type: ContentType | None,
    ) -> Resolution:
        kind = MODULE_KINDS.get(module)
        if kind is not None and not kind.routable:
            return NotFound(path, f"Module {module!r} has no public listing")

        template_path = index_template_path(module, self._suffix)
        definition = await self._store.find_template_by_path(template_path)
        if definition is None:
            logger.debug("No index template %s for %s", template_path, path)
            return NotFound(path, f"No index template for module {module!r}")

        records = await self._store.list_content_by_module(module)
        schema = definition.schema
        return RenderContext(
            path=path,
            template_path=template_path,
            module=module,
            seo=build_index_seo(content_type, module, path, settings),
            site=settings,
            blocks=await self._block_lookup(),
            content=fill_region_defaults({}, schema),
            schema=schema,
            menus=await load_menus(self._store),
            records=tuple(records),
        )

    async def _resolve_record(self, path: str, settings: SiteSettings) -> Resolution:
        content_record = await self._store.find_content_by_slug(path)
        if content_record is None:
            logger.debug("No content at %s", path)
            return NotFound(path)

        kind = dispatch_module(content_record.module)
        if not kind.routable:
            return NotFound(path, f"Module {kind.name!r} is not publicly routable")

        module_record = await self._store.find_module_record_by_content_id(
            kind.name, content_record.id
        )
        if module_record is None or not _passes_gate(kind, module_record):
            logger.debug("No public %s record for content %d", kind.name, content_record.id)
            return NotFound(path)

        if not module_record.template_path:
            exc = ConfigurationError(
                f"{kind.name} record {module_record.id} ({content_record.slug}) "
                "has no template assigned"
            )
            logger.error("%s", exc)
            return ServerError(path, str(exc), exc)

        definition = await self._store.find_template_by_path(module_record.template_path)
        schema = definition.schema if definition is not None else None
        if schema is None:
            logger.debug("Template %s is not in the catalog", module_record.template_path)

        return RenderContext(
            path=path,
            template_path=module_record.template_path,
            module=kind.name,
            seo=build_seo(module_record, content_record, settings, path=content_record.slug),
            site=settings,
            blocks=await self._block_lookup(),
            record=module_record,
            content_record=content_record,
            content=fill_region_defaults(content_record.fields, schema),
            schema=schema,
            menus=await load_menus(self._store),
        )

    async def _block_lookup(self) -> BlockLookup:
        return BlockLookup(self._env, await self._store.list_published_blocks())


def _passes_gate(kind: ModuleKind, record: Any) -> bool:
    match record:
        case PageRecord(status=status) | ProductRecord(status=status):
            return kind.is_public(status)
        case _:
            return True
