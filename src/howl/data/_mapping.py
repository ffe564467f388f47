"""Row-to-dataclass mapping for store rows.

SQLite hands back ints for boolean columns, strings for some numeric
columns, and ``None`` for SQL NULL.  Store models are frozen dataclasses
with plain annotations (``bool``, ``int | None``, ``float``); the mapper
coerces each column to the declared scalar type and drops columns the
model does not declare, so joined ``SELECT m.*, t.template_path`` rows map
cleanly onto narrower models.
"""

import dataclasses
import functools
import types
import typing
from typing import Any

_COERCIBLE: dict[type, Any] = {
    int: lambda v: int(v) if v != "" else 0,
    float: lambda v: float(v) if v != "" else 0.0,
    bool: lambda v: v.strip().lower() in ("1", "true") if isinstance(v, str) else bool(v),
    str: str,
}


@functools.cache
def _coercion_map(cls: type) -> dict[str, type | None]:
    """Return ``{field_name: scalar_type}`` for a dataclass, cached per class.

    Annotations are resolved with ``get_type_hints`` so models defined with
    postponed annotations still map.  ``X | None`` unwraps to ``X``; any
    other generic maps to ``None`` (passed through untouched).
    """
    hints = typing.get_type_hints(cls)
    result: dict[str, type | None] = {}
    for f in dataclasses.fields(cls):
        annotation = hints.get(f.name, f.type)
        if typing.get_origin(annotation) in (types.UnionType, typing.Union):
            args = [a for a in typing.get_args(annotation) if a is not type(None)]
            annotation = args[0] if len(args) == 1 else None
        result[f.name] = annotation if annotation in _COERCIBLE else None
    return result


def _coerce(value: Any, target: type | None) -> Any:
    if target is None or value is None:
        return value
    # bool is an int subclass; check it first so 1 does not pass as bool
    if target is bool:
        return value if isinstance(value, bool) else _COERCIBLE[bool](value)
    if isinstance(value, target) and not isinstance(value, bool):
        return value
    return _COERCIBLE[target](value)


def _require_dataclass(cls: type) -> None:
    if not dataclasses.is_dataclass(cls):
        msg = f"{cls.__name__} is not a dataclass; howl.data maps rows onto frozen dataclasses"
        raise TypeError(msg)


def map_row[T](cls: type[T], row: dict[str, Any]) -> T:
    """Map a dict-like row to a dataclass instance.

    Raises ``TypeError`` if a required field is missing from the row.
    """
    _require_dataclass(cls)
    coercion = _coercion_map(cls)
    return cls(**{k: _coerce(v, coercion[k]) for k, v in row.items() if k in coercion})


def map_rows[T](cls: type[T], rows: list[dict[str, Any]]) -> list[T]:
    """Map a list of dict-like rows to dataclass instances."""
    _require_dataclass(cls)
    coercion = _coercion_map(cls)
    return [
        cls(**{k: _coerce(v, coercion[k]) for k, v in row.items() if k in coercion})
        for row in rows
    ]
