"""Region extraction from template markup.

Templates declare editable regions with ``data-cms-*`` attributes on
ordinary elements::

    <h1 data-cms-region="hero_title" data-cms-label="Headline" data-cms-required="true">
      {{ content.hero_title }}
    </h1>

    <ul data-cms-region="features" data-cms-type="repeater"
        data-cms-fields='[{"name": "title"}, {"name": "icon", "type": "image"}]'>

Recognized attributes:

- ``data-cms-region``: region name (required)
- ``data-cms-type``: ``text`` (default), ``richtext``, ``textarea``,
  ``image``, ``checkbox``, ``select``, ``repeater``
- ``data-cms-label``: editor-facing label (default: title-cased name)
- ``data-cms-required``: ``"true"``, or present without a value
- ``data-cms-placeholder``: hint text
- ``data-cms-options``: ``select`` choices, JSON array or comma-separated
- ``data-cms-fields``: ``repeater`` sub-fields, JSON (HTML-escaped)

The scan is a two-step tokenizer, start tags then their attributes, bound
to this vocabulary.  It is not an HTML parser and never raises: anything
malformed degrades to the attribute's default.
"""

import html
import json
import re
from pathlib import PurePosixPath

from howl.schema.types import RegionSpec, RegionType, TemplateSchema, format_label, parse_sub_fields

ATTR_PREFIX = "data-cms-"
REGION_ATTR = "data-cms-region"

# A start tag; quoted values and {% ... %} / {{ ... }} runs may contain ">"
_START_TAG_RE = re.compile(
    r"""<[A-Za-z][\w:.-]*((?:\{%[\s\S]*?%\}|\{\{[\s\S]*?\}\}"""
    r"""|"[^"]*"|'[^']*'|[^'">{]|\{(?![{%]))*)>"""
)

# One attribute: name, then an optional double-quoted, single-quoted or bare value
_ATTR_RE = re.compile(
    r"""([^\s"'<>/=]+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'=<>`]+)))?"""
)


def _tag_attributes(attr_text: str) -> dict[str, str]:
    """Tokenize the attribute section of one start tag.

    Names are lower-cased and values HTML-unescaped.  A valueless
    attribute maps to ``""``.  When a name repeats, the first wins.
    """
    attrs: dict[str, str] = {}
    for match in _ATTR_RE.finditer(attr_text):
        name = match.group(1).lower()
        if not name.startswith(ATTR_PREFIX) or name in attrs:
            continue
        raw = next((g for g in match.group(2, 3, 4) if g is not None), "")
        attrs[name] = html.unescape(raw)
    return attrs


def _parse_fields(raw: str | None) -> tuple[RegionSpec, ...]:
    if not raw:
        return ()
    try:
        payload = json.loads(raw)
    except (ValueError, RecursionError):
        return ()
    return parse_sub_fields(payload)


def _parse_options(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    text = raw.strip()
    if text.startswith("["):
        try:
            payload = json.loads(text)
        except (ValueError, RecursionError):
            return ()
        if not isinstance(payload, list):
            return ()
        return tuple(str(o) for o in payload)
    return tuple(part.strip() for part in text.split(",") if part.strip())


def _region_from_attrs(name: str, attrs: dict[str, str]) -> RegionSpec:
    region_type = RegionType.parse(attrs.get("data-cms-type"))
    required = attrs.get("data-cms-required")
    return RegionSpec(
        name=name,
        type=region_type,
        label=attrs.get("data-cms-label", "").strip(),
        required=required is not None and required.strip().lower() in ("", "true"),
        placeholder=attrs.get("data-cms-placeholder", ""),
        options=(
            _parse_options(attrs.get("data-cms-options"))
            if region_type is RegionType.SELECT
            else ()
        ),
        fields=(
            _parse_fields(attrs.get("data-cms-fields"))
            if region_type is RegionType.REPEATER
            else ()
        ),
    )


def extract_regions(markup: str) -> tuple[RegionSpec, ...]:
    """Extract editable regions from template markup.

    Regions come back in first-appearance order.  A name declared twice
    keeps its first declaration; later ones are dropped.  Markup with no
    annotations yields an empty tuple.
    """
    regions: list[RegionSpec] = []
    seen: set[str] = set()
    for tag in _START_TAG_RE.finditer(markup):
        attr_text = tag.group(1)
        if REGION_ATTR not in attr_text.lower():
            continue
        attrs = _tag_attributes(attr_text)
        name = attrs.get(REGION_ATTR, "").strip()
        if not name or name in seen:
            continue
        seen.add(name)
        regions.append(_region_from_attrs(name, attrs))
    return tuple(regions)


def display_name_for(template_path: str) -> str:
    """``pages/about-us.html`` becomes ``About Us``."""
    return format_label(PurePosixPath(template_path).stem)


def content_type_for(template_path: str, default_module: str = "pages") -> str:
    """Owning module of a template: its top-level directory.

    Templates sitting directly in the template root have no directory to
    infer from and belong to *default_module*.
    """
    parts = PurePosixPath(template_path).parts
    if len(parts) < 2:
        return default_module
    return parts[0]


def build_schema(
    template_path: str,
    markup: str,
    *,
    default_module: str = "pages",
) -> TemplateSchema:
    """Build the full schema of one template from its path and markup."""
    return TemplateSchema(
        template_path=template_path,
        display_name=display_name_for(template_path),
        content_type=content_type_for(template_path, default_module),
        regions=extract_regions(markup),
    )
