"""Block embedding.

Templates embed reusable blocks by slug::

    {{ render_block("cta") }}
    {{ render_block("/blocks/newsletter") }}

A :class:`BlockLookup` is built for every request from the blocks the
store currently holds and handed to the template as ``render_block``.
It is never installed as an environment global, so concurrent requests
cannot see each other's lookup.

A block that cannot be found or rendered yields an empty string.  The
page around it still renders.
"""

import logging
from collections.abc import Iterable, MutableMapping
from typing import Any

from kida import Environment
from kida.template import Markup

from howl.models import PublishedBlock

logger = logging.getLogger("howl.blocks")

RENDER_BLOCK_NAME = "render_block"


class BlockLookup:
    """Slug-keyed renderer for published blocks.

    A block answers to its full slug (``/blocks/cta``) and to its last
    path segment (``cta``).  Full slugs always win; when two blocks share
    a last segment, the first in slug order keeps the short name.
    """

    __slots__ = ("_by_slug", "_env")

    def __init__(self, env: Environment, blocks: Iterable[PublishedBlock]) -> None:
        self._env = env
        by_slug: dict[str, PublishedBlock] = {}
        short: dict[str, PublishedBlock] = {}
        for block in sorted(blocks, key=lambda b: b.slug):
            by_slug[block.slug] = block
            short.setdefault(block.slug.rstrip("/").rsplit("/", 1)[-1], block)
        for name, block in short.items():
            by_slug.setdefault(name, block)
        self._by_slug = by_slug

    def __contains__(self, slug: object) -> bool:
        return isinstance(slug, str) and slug.strip() in self._by_slug

    def __len__(self) -> int:
        return len({id(block) for block in self._by_slug.values()})

    def get(self, slug: str) -> PublishedBlock | None:
        return self._by_slug.get(slug.strip())

    def render_block(self, slug: str) -> Markup | str:
        """Render the block named *slug*, or ``""`` if that is not possible."""
        block = self.get(slug) if isinstance(slug, str) else None
        if block is None:
            logger.warning("Block not found: %r", slug)
            return ""
        if not block.template_path:
            logger.warning("Block %s has no template assigned", block.slug)
            return ""
        try:
            template = self._env.get_template(block.template_path)
            html = template.render({"content": block.fields, "block": block})
        except Exception:
            logger.exception("Failed to render block %s (%s)", block.slug, block.template_path)
            return ""
        return Markup(html)

    __call__ = render_block


def register_block_lookup(
    context: MutableMapping[str, Any],
    env: Environment,
    blocks: Iterable[PublishedBlock],
) -> BlockLookup:
    """Build a lookup for *blocks* and install it into a template *context*."""
    lookup = BlockLookup(env, blocks)
    context[RENDER_BLOCK_NAME] = lookup
    return lookup
