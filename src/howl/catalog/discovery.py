"""Filesystem discovery of annotated templates.

Walks the template root and returns template paths relative to it, always
``/``-separated and sorted so every sync visits files in the same order.

- Page templates: every matching file, recursively, except ``layouts/``
  and ``blocks/`` directories.
- Block templates: matching files directly under ``blocks/``.

Entries whose name starts with ``.`` or ``_`` are private (partials,
editor swap files) and never scanned.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

SKIPPED_DIRS = frozenset({"layouts", "blocks"})
BLOCKS_DIR = "blocks"
DEFAULT_SUFFIXES: tuple[str, ...] = (".html",)


def _is_private(name: str) -> bool:
    return name.startswith((".", "_"))


def _matches(path: Path, suffixes: Iterable[str]) -> bool:
    return path.is_file() and path.suffix in tuple(suffixes)


def scan_page_templates(
    root: str | Path,
    suffixes: Iterable[str] = DEFAULT_SUFFIXES,
) -> list[str]:
    """Discover page-like templates under *root*.

    Raises:
        FileNotFoundError: If *root* is not a directory.
    """
    base = Path(root)
    if not base.is_dir():
        raise FileNotFoundError(f"Template directory not found: {base}")

    suffixes = tuple(suffixes)
    found: list[str] = []
    _walk(base, base, suffixes, found)
    return sorted(found)


def _walk(directory: Path, root: Path, suffixes: tuple[str, ...], found: list[str]) -> None:
    for item in sorted(directory.iterdir()):
        if _is_private(item.name):
            continue
        if item.is_dir():
            if item.name in SKIPPED_DIRS:
                continue
            _walk(item, root, suffixes, found)
        elif _matches(item, suffixes):
            found.append(item.relative_to(root).as_posix())


def scan_block_templates(
    root: str | Path,
    suffixes: Iterable[str] = DEFAULT_SUFFIXES,
) -> list[str]:
    """Discover block templates directly under ``<root>/blocks``.

    A missing ``blocks/`` directory means no blocks.
    """
    blocks_dir = Path(root) / BLOCKS_DIR
    if not blocks_dir.is_dir():
        return []
    suffixes = tuple(suffixes)
    return sorted(
        f"{BLOCKS_DIR}/{item.name}"
        for item in blocks_dir.iterdir()
        if not _is_private(item.name) and _matches(item, suffixes)
    )
