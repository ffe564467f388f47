"""Module dispatch over the closed set of module record shapes.

Each content module is one :class:`ModuleKind` variant carrying its
record type, its table, and its public status gate.  Dispatch is a plain
lookup by name; anything unregistered is served as a page.

The page fallback keeps records whose module has no handler renderable,
but it also hides data-integrity problems (a content row pointing at a
module nobody implements), so every fallback is logged.
"""

import logging
from dataclasses import dataclass

from howl.models import BlockRecord, PageRecord, ProductRecord

logger = logging.getLogger("howl.router")


@dataclass(frozen=True, slots=True)
class ModuleKind:
    """One module variant.

    Attributes:
        name: Module name, as stored on ``content.module``.
        table: Table holding the module records.
        record_type: Dataclass each row maps to.
        public_statuses: Statuses that make a record publicly resolvable.
            Empty means the module has no status gate.
        routable: Whether records of this module can be requested by path.
    """

    name: str
    table: str
    record_type: type[PageRecord] | type[ProductRecord] | type[BlockRecord]
    public_statuses: frozenset[str] = frozenset()
    routable: bool = True

    def is_public(self, status: str | None) -> bool:
        if not self.public_statuses:
            return True
        return status in self.public_statuses


PAGES = ModuleKind(
    name="pages",
    table="pages",
    record_type=PageRecord,
    public_statuses=frozenset({"published"}),
)

PRODUCTS = ModuleKind(
    name="products",
    table="products",
    record_type=ProductRecord,
    public_statuses=frozenset({"active", "draft"}),
)

BLOCKS = ModuleKind(
    name="blocks",
    table="blocks",
    record_type=BlockRecord,
    routable=False,
)

MODULE_KINDS: dict[str, ModuleKind] = {kind.name: kind for kind in (PAGES, PRODUCTS, BLOCKS)}


def dispatch_module(name: str, *, default: ModuleKind = PAGES) -> ModuleKind:
    """Return the variant for *name*, falling back to *default*."""
    kind = MODULE_KINDS.get(name)
    if kind is None:
        logger.warning("No handler for module %r; dispatching as %r", name, default.name)
        return default
    return kind
