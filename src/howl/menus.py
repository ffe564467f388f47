"""Navigation menus.

Menu items are stored flat with a ``parent_id``; templates want a tree::

    {% for item in menus.main.items %}
      <a href="{{ item.url }}">{{ item.title }}</a>
      {% for child in item.children %}...{% end %}
    {% end %}
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from howl.models import MenuItemRow
from howl.store import ContentStore

logger = logging.getLogger("howl.menus")


@dataclass(slots=True)
class MenuItem:
    """One navigation entry. ``children`` is filled while the tree is built."""

    id: int
    title: str
    url: str
    target: str = "_self"
    children: list[MenuItem] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class Menu:
    id: int
    name: str
    slug: str
    items: tuple[MenuItem, ...] = ()


def _item_url(row: MenuItemRow) -> str:
    if row.content_slug:
        return row.content_slug
    return row.url or "#"


def build_menu_tree(rows: Iterable[MenuItemRow]) -> tuple[MenuItem, ...]:
    """Nest flat menu rows under their parents.

    Siblings keep the order of *rows*, which the store returns by
    position.  An item whose parent is missing is promoted to the root.
    Items linked to a content record take that record's slug as URL.
    """
    ordered = list(rows)
    items = {
        row.id: MenuItem(id=row.id, title=row.title, url=_item_url(row), target=row.target)
        for row in ordered
    }
    roots: list[MenuItem] = []
    for row in ordered:
        item = items[row.id]
        parent = items.get(row.parent_id) if row.parent_id is not None else None
        if parent is None or parent is item:
            if row.parent_id is not None and parent is None:
                logger.debug("Menu item %d has missing parent %d", row.id, row.parent_id)
            roots.append(item)
        else:
            parent.children.append(item)
    return tuple(roots)


async def load_menus(store: ContentStore) -> dict[str, Menu]:
    """Every menu keyed by slug, with its item tree."""
    menus: dict[str, Menu] = {}
    for row in await store.list_menus():
        items = build_menu_tree(await store.list_menu_items(row.id))
        menus[row.slug] = Menu(id=row.id, name=row.name, slug=row.slug, items=items)
    return menus
