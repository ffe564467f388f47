"""Resolution outcomes.

The router returns exactly one of three values and never raises for
lookup-level failures::

    match await router.resolve(path, settings):
        case RenderContext() as ctx:
            html = env.get_template(ctx.template_path).render(ctx.template_context())
        case NotFound():
            ...
        case ServerError(error=error):
            ...
"""

from dataclasses import dataclass, field
from typing import Any

from howl.blocks import RENDER_BLOCK_NAME, BlockLookup
from howl.menus import Menu
from howl.models import ContentRecord, ModuleRecord
from howl.schema.types import TemplateSchema
from howl.seo import SeoContext
from howl.settings import SiteSettings


@dataclass(frozen=True, slots=True)
class NotFound:
    """No public content answers *path*."""

    path: str
    detail: str = "Not found"


@dataclass(frozen=True, slots=True)
class ServerError:
    """Content exists but cannot be rendered, usually a configuration defect."""

    path: str
    detail: str
    error: Exception | None = None


@dataclass(frozen=True, slots=True)
class RenderContext:
    """Everything one render needs. Request-scoped, never persisted.

    ``record`` is ``None`` for a module index, which carries its listing
    in ``records`` instead.
    """

    path: str
    template_path: str
    module: str
    seo: SeoContext
    site: SiteSettings
    blocks: BlockLookup
    record: ModuleRecord | None = None
    content_record: ContentRecord | None = None
    content: dict[str, Any] = field(default_factory=dict)
    schema: TemplateSchema | None = None
    menus: dict[str, Menu] = field(default_factory=dict)
    records: tuple[ContentRecord, ...] = ()

    @property
    def is_index(self) -> bool:
        return self.record is None

    def template_context(self) -> dict[str, Any]:
        """The variables handed to the template."""
        return {
            "page": self.record,
            "record": self.content_record,
            "content": self.content,
            "regions": self.schema.regions if self.schema is not None else (),
            "seo": self.seo.to_dict(),
            "site": self.site.as_template_dict(),
            "menus": self.menus,
            "records": list(self.records),
            "module": self.module,
            "path": self.path,
            RENDER_BLOCK_NAME: self.blocks,
        }


type Resolution = RenderContext | NotFound | ServerError
