"""Template catalog sync.

Reconciles the template files on disk with the persisted catalog: every
discovered template is re-extracted and upserted by path, and every
content type seen for the first time is registered with defaults.

Runs out of band (deploy hook, CLI, admin action), never per request::

    schemas = await sync_catalog(store, "templates")

Each file read goes through :class:`anyio.Path`, so a sync running under a
cancel scope stops at the next file.  A second :meth:`CatalogSync.run`
while another sync of the same store and template root is in flight is
rejected with :class:`CatalogBusyError`, whichever instance started it.
"""

import logging
import weakref
from collections.abc import Iterable, Sequence
from pathlib import Path

import anyio

from howl.catalog.discovery import DEFAULT_SUFFIXES, scan_block_templates, scan_page_templates
from howl.errors import CatalogBusyError
from howl.models import ContentType
from howl.schema.extract import build_schema
from howl.schema.types import TemplateSchema
from howl.store import ContentStore

logger = logging.getLogger("howl.catalog")

CONTENT_TYPE_ICONS: dict[str, str] = {
    "pages": "FileText",
    "blocks": "Boxes",
    "blog": "BookOpen",
    "news": "Newspaper",
    "products": "Package",
    "team": "Users",
    "portfolio": "Briefcase",
}
DEFAULT_ICON = "FileText"

_ES_ENDINGS = ("s", "x", "z", "ch", "sh")


def content_type_label(name: str) -> str:
    """``blog`` becomes ``Blog``."""
    return name[:1].upper() + name[1:].lower()


def plural_label(label: str) -> str:
    """English plural of a label. Labels already ending in ``s`` are kept."""
    if not label:
        return label
    lower = label.lower()
    if lower.endswith("s") and not lower.endswith("ss"):
        return label
    if lower.endswith("y") and lower[-2:-1] not in ("", "a", "e", "i", "o", "u"):
        return label[:-1] + "ies"
    if lower.endswith(_ES_ENDINGS):
        return label + "es"
    return label + "s"


def icon_for(name: str) -> str:
    return CONTENT_TYPE_ICONS.get(name, DEFAULT_ICON)


def default_content_type(name: str) -> ContentType:
    """The content type registered on first sight of a template directory."""
    label = content_type_label(name)
    has_fields = name != "blocks"
    return ContentType(
        name=name,
        label=label,
        plural_label=plural_label(label),
        icon=icon_for(name),
        has_status=has_fields,
        has_seo=has_fields,
        is_system=False,
    )


async def register_content_types(
    store: ContentStore,
    schemas: Iterable[TemplateSchema],
) -> list[ContentType]:
    """Register content types discovered in *schemas* that are not yet known.

    Existing types are never modified or removed.  Returns the newly
    registered types in name order.
    """
    known = {ct.name for ct in await store.list_content_types()}
    discovered = sorted({schema.content_type for schema in schemas} - known)

    registered: list[ContentType] = []
    for name in discovered:
        content_type = default_content_type(name)
        if await store.upsert_content_type(content_type):
            logger.info("Registered content type %r", name)
            registered.append(content_type)
    return registered


# Sync locks per store, then per resolved template root.
_SYNC_LOCKS: weakref.WeakKeyDictionary[ContentStore, dict[Path, anyio.Lock]] = (
    weakref.WeakKeyDictionary()
)


def _sync_lock(store: ContentStore, root: Path) -> anyio.Lock:
    locks = _SYNC_LOCKS.setdefault(store, {})
    return locks.setdefault(root.resolve(), anyio.Lock())


class CatalogSync:
    """Re-extract every template under *template_root* into *store*.

    Runs of any two instances sharing a store and template root exclude
    each other.

    Args:
        store: Persistence for templates and content types.
        template_root: Directory the template paths are relative to.
        default_module: Module owning templates placed directly in the root.
        suffixes: Template file extensions to scan.
    """

    __slots__ = ("_default_module", "_lock", "_root", "_store", "_suffixes")

    def __init__(
        self,
        store: ContentStore,
        template_root: str | Path,
        *,
        default_module: str = "pages",
        suffixes: Sequence[str] = DEFAULT_SUFFIXES,
    ) -> None:
        self._store = store
        self._root = Path(template_root)
        self._default_module = default_module
        self._suffixes = tuple(suffixes)
        self._lock = _sync_lock(store, self._root)

    @property
    def template_root(self) -> Path:
        return self._root

    @property
    def running(self) -> bool:
        return self._lock.locked()

    async def run(self) -> list[TemplateSchema]:
        """Scan, extract and persist. Returns the schemas that were synced.

        Raises:
            CatalogBusyError: If a sync of the same store and root is in progress.
            FileNotFoundError: If the template root does not exist.
        """
        try:
            self._lock.acquire_nowait()
        except anyio.WouldBlock:
            raise CatalogBusyError(
                f"Catalog sync already running for {self._root}"
            ) from None
        try:
            return await self._run()
        finally:
            self._lock.release()

    def _scan(self) -> list[str]:
        paths = scan_page_templates(self._root, self._suffixes)
        paths.extend(scan_block_templates(self._root, self._suffixes))
        return paths

    async def _run(self) -> list[TemplateSchema]:
        paths = await anyio.to_thread.run_sync(self._scan)

        schemas: list[TemplateSchema] = []
        for template_path in paths:
            schema = await self._extract(template_path)
            if schema is None:
                continue
            await self._store.upsert_template(schema)
            logger.debug(
                "Synced %s (%s, %d regions)",
                template_path,
                schema.content_type,
                len(schema.regions),
            )
            schemas.append(schema)

        await register_content_types(self._store, schemas)
        logger.info("Catalog sync complete: %d templates from %s", len(schemas), self._root)
        return schemas

    async def _extract(self, template_path: str) -> TemplateSchema | None:
        file = anyio.Path(self._root / template_path)
        try:
            markup = await file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping unreadable template %s: %s", template_path, exc)
            return None
        return build_schema(template_path, markup, default_module=self._default_module)


async def sync_catalog(
    store: ContentStore,
    template_root: str | Path,
    *,
    default_module: str = "pages",
    suffixes: Sequence[str] = DEFAULT_SUFFIXES,
) -> list[TemplateSchema]:
    """One-shot :class:`CatalogSync` run."""
    sync = CatalogSync(store, template_root, default_module=default_module, suffixes=suffixes)
    return await sync.run()
