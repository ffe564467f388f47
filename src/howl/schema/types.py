"""Region and template schema value types.

A template's editable contract is a tuple of :class:`RegionSpec` in
first-appearance order.  Both types are frozen; a schema is rebuilt from
markup on every catalog sync rather than patched.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

_WORD_START_RE = re.compile(r"\b\w")


def format_label(name: str) -> str:
    """Turn ``hero_title`` or ``hero-title`` into ``Hero Title``.

    Only the first character of each word is upper-cased; the rest of the
    word is kept as written (``seo_URL`` becomes ``Seo URL``).
    """
    spaced = name.replace("-", " ").replace("_", " ")
    return _WORD_START_RE.sub(lambda m: m.group(0).upper(), spaced)


class RegionType(StrEnum):
    """Field types an editable region may declare."""

    TEXT = "text"
    RICHTEXT = "richtext"
    TEXTAREA = "textarea"
    IMAGE = "image"
    CHECKBOX = "checkbox"
    SELECT = "select"
    REPEATER = "repeater"

    @classmethod
    def parse(cls, value: object) -> RegionType:
        """Parse an annotation value, degrading anything unknown to ``text``."""
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.TEXT


@dataclass(frozen=True, slots=True)
class RegionSpec:
    """One editable field a template exposes.

    Attributes:
        name: Key into a content record's field map. Unique per template.
        type: Field type.
        label: Display name for editors.
        required: Whether editors must fill the field.
        placeholder: Hint text for the editing UI.
        options: Choices, for ``select`` regions only.
        fields: Shape of each item, for ``repeater`` regions only.
            One level deep.
    """

    name: str
    type: RegionType = RegionType.TEXT
    label: str = ""
    required: bool = False
    placeholder: str = ""
    options: tuple[str, ...] = ()
    fields: tuple[RegionSpec, ...] = ()

    def __post_init__(self) -> None:
        if not self.label:
            object.__setattr__(self, "label", format_label(self.name))

    def default_value(self) -> Any:
        """Value used when a record has not set this field yet."""
        if self.type is RegionType.CHECKBOX:
            return False
        if self.type is RegionType.REPEATER:
            return []
        return ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted JSON shape."""
        result: dict[str, Any] = {
            "name": self.name,
            "type": str(self.type),
            "label": self.label,
            "required": self.required,
            "placeholder": self.placeholder,
        }
        if self.type is RegionType.SELECT:
            result["options"] = list(self.options)
        if self.type is RegionType.REPEATER:
            result["fields"] = [f.to_dict() for f in self.fields]
        return result

    @classmethod
    def from_dict(cls, raw: object, *, nested: bool = False) -> RegionSpec | None:
        """Build a region from persisted or authored JSON.

        Never raises.  Returns ``None`` when *raw* has no usable name.
        With ``nested=True`` (repeater sub-fields) a ``repeater`` type
        degrades to ``text``, keeping repeaters one level deep.
        """
        if not isinstance(raw, dict):
            return None
        name = raw.get("name")
        if not isinstance(name, str) or not name.strip():
            return None
        name = name.strip()

        region_type = RegionType.parse(raw.get("type"))
        if nested and region_type is RegionType.REPEATER:
            region_type = RegionType.TEXT

        label = raw.get("label")
        placeholder = raw.get("placeholder")
        required = raw.get("required", False)
        if isinstance(required, str):
            required = required.strip().lower() == "true"

        options: tuple[str, ...] = ()
        if region_type is RegionType.SELECT:
            raw_options = raw.get("options")
            if isinstance(raw_options, list):
                options = tuple(str(o) for o in raw_options)

        fields: tuple[RegionSpec, ...] = ()
        if region_type is RegionType.REPEATER:
            fields = parse_sub_fields(raw.get("fields"))

        return cls(
            name=name,
            type=region_type,
            label=label if isinstance(label, str) else "",
            required=bool(required),
            placeholder=placeholder if isinstance(placeholder, str) else "",
            options=options,
            fields=fields,
        )


def parse_sub_fields(raw: object) -> tuple[RegionSpec, ...]:
    """Parse a repeater's sub-field list, dropping malformed and duplicate entries."""
    if not isinstance(raw, list):
        return ()
    seen: set[str] = set()
    fields: list[RegionSpec] = []
    for item in raw:
        spec = RegionSpec.from_dict(item, nested=True)
        if spec is None or spec.name in seen:
            continue
        seen.add(spec.name)
        fields.append(spec)
    return tuple(fields)


@dataclass(frozen=True, slots=True)
class TemplateSchema:
    """The full editable contract of one template file.

    Attributes:
        template_path: Path relative to the template root (``/``-separated).
            Globally unique.
        display_name: Human name derived from the file name.
        content_type: Module owning the template.
        regions: Editable regions in first-appearance order.
    """

    template_path: str
    display_name: str
    content_type: str
    regions: tuple[RegionSpec, ...] = ()

    @property
    def region_names(self) -> tuple[str, ...]:
        return tuple(r.name for r in self.regions)

    def get(self, name: str) -> RegionSpec | None:
        for region in self.regions:
            if region.name == name:
                return region
        return None

    def regions_json(self) -> str:
        """Deterministic JSON for the persisted ``regions`` column."""
        return json.dumps([r.to_dict() for r in self.regions], separators=(",", ":"))
