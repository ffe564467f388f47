"""Request path normalization and module prefixing."""

from collections.abc import Container

ROOT = "/"


def normalize_path(path: str) -> str:
    """Canonical form of a request path.

    One trailing slash is stripped unless the path is ``/``.  An empty
    path becomes ``/`` and a missing leading slash is added.
    """
    if not path:
        return ROOT
    if not path.startswith("/"):
        path = "/" + path
    if path != ROOT and path.endswith("/"):
        path = path[:-1]
    return path or ROOT


def segments(path: str) -> list[str]:
    return [part for part in path.split("/") if part]


def first_segment(path: str) -> str | None:
    parts = segments(path)
    return parts[0] if parts else None


def apply_default_prefix(path: str, known_modules: Container[str], default_module: str) -> str:
    """Prefix *path* with the default module unless it already names a module.

    ``/about`` becomes ``/pages/about``; ``/products/widget`` is kept when
    ``products`` is known.  ``/`` is never prefixed.
    """
    head = first_segment(path)
    if head is None or head in known_modules:
        return path
    return f"/{default_module}{path}"


def module_index_name(path: str, known_modules: Container[str]) -> str | None:
    """The module a listing path such as ``/products`` names, else ``None``."""
    parts = segments(path)
    if len(parts) == 1 and parts[0] in known_modules:
        return parts[0]
    return None


def index_template_path(module: str, suffix: str = ".html") -> str:
    return f"{module}/index{suffix}"
