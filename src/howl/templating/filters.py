"""Built-in howl template filters.

Registered on every environment :func:`~howl.templating.create_environment`
builds.  They cover what content templates need most: excerpts, dates
from storage timestamps, optional attributes and query strings.
"""

import html
import re
from datetime import UTC, date, datetime
from typing import Any
from urllib.parse import quote, urlencode

from kida.template import Markup

_TAG_RE = re.compile(r"<[^>]*>")
_DATE_TOKEN_RE = re.compile(r"YYYY|MMM|MM|M|DD|D")
_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def truncate(value: Any, length: int = 255, end: str = "...") -> str:
    """Cut text to *length* characters, appending *end* when cut.

    Example:
        {{ content.body | strip_html | truncate(120) }}

    """
    if not value:
        return ""
    text = str(value)
    if len(text) <= length:
        return text
    return text[:length] + end


def strip_html(value: Any) -> str:
    """Remove markup tags, keeping their text."""
    if not value:
        return ""
    return _TAG_RE.sub("", str(value))


def _to_date(value: Any) -> date | None:
    if isinstance(value, datetime | date):
        return value
    if isinstance(value, int | float) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, UTC)
    if isinstance(value, str) and value.strip():
        text = value.strip().replace("Z", "+00:00")
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None
    return None


def format_date(value: Any, fmt: str = "YYYY-MM-DD") -> str:
    """Format a date with ``YYYY``, ``MMM``, ``MM``, ``M``, ``DD`` and ``D`` tokens.

    Accepts datetimes, dates, unix timestamps and ISO strings (including
    SQLite's ``YYYY-MM-DD HH:MM:SS``).  Anything unparseable gives ``""``.

    Example:
        {{ record.updated_at | date("MMM D, YYYY") }}  → "Mar 7, 2025"

    """
    parsed = _to_date(value)
    if parsed is None:
        return ""
    tokens = {
        "YYYY": f"{parsed.year:04d}",
        "MMM": _MONTH_ABBR[parsed.month - 1],
        "MM": f"{parsed.month:02d}",
        "M": str(parsed.month),
        "DD": f"{parsed.day:02d}",
        "D": str(parsed.day),
    }
    return _DATE_TOKEN_RE.sub(lambda m: tokens[m.group(0)], fmt)


def attr(value: Any, name: str) -> str | Markup:
    """Output an HTML attribute when value is truthy, else empty string.

    Example:
        <a href="{{ item.url }}"{{ item.target | attr("target") }}>

    """
    if not value:
        return ""
    return Markup(f' {name}="{html.escape(str(value))}"')


def qs(base: str, **params: Any) -> str:
    """Append query-string parameters to a URL path, skipping falsy values.

    Example:
        {{ "/products" | qs(page=page + 1, q=search) }}

    """
    filtered = {k: str(v) for k, v in params.items() if v}
    if not filtered:
        return base
    encoded = urlencode(filtered, quote_via=quote)
    sep = "&" if "?" in base else "?"
    return f"{base}{sep}{encoded}"


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """``{{ records | length | pluralize("product") }}`` → ``"3 products"``."""
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"


BUILTIN_FILTERS: dict[str, Any] = {
    "attr": attr,
    "date": format_date,
    "pluralize": pluralize,
    "qs": qs,
    "strip_html": strip_html,
    "truncate": truncate,
}
