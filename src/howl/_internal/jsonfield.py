"""Lenient JSON column parsing.

Content data, region lists and schema markup are stored as JSON text and
authored by hand.  A malformed value must never break a render, so these
helpers degrade to ``None`` / an empty container instead of raising.
"""

import json
from typing import Any


def parse_json_field(value: Any) -> Any:
    """Parse a JSON column value.

    Already-decoded values (dicts, lists) pass through.  ``None``, blank
    strings, malformed JSON and non-string scalars give ``None``.
    """
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        return value
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            return json.loads(value)
        except (ValueError, RecursionError):
            return None
    return None


def parse_json_object(value: Any) -> dict[str, Any]:
    """Parse a JSON column that should hold an object; anything else gives ``{}``."""
    parsed = parse_json_field(value)
    return parsed if isinstance(parsed, dict) else {}
