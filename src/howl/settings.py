"""Typed view over the site settings key/value table.

The router reads a handful of well-known keys; everything else is passed
through to templates untouched as ``site``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from howl.store import ContentStore

DEFAULT_ROBOTS_TXT = "User-agent: *\nAllow: /"
DEFAULT_SITE_NAME = "Howl"


def _parse_record_id(value: str | None) -> int | None:
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


@dataclass(frozen=True, slots=True)
class SiteSettings:
    """Site-wide settings.

    Attributes:
        site_url: Absolute base URL without a trailing slash.
        site_name: Display name of the site.
        home_record_id: Content record served at ``/``, if overridden.
        default_meta_description: Description for pages that set none.
        robots_txt: Body served at ``/robots.txt``.
        values: Every raw setting, including the ones above.
    """

    site_url: str = ""
    site_name: str = DEFAULT_SITE_NAME
    home_record_id: int | None = None
    default_meta_description: str = ""
    robots_txt: str = DEFAULT_ROBOTS_TXT
    values: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_mapping(cls, values: Mapping[str, str | None]) -> SiteSettings:
        """Build settings from raw key/value pairs.

        A ``home_record_id`` that is not an integer is ignored.
        """
        raw = {key: value or "" for key, value in values.items()}
        return cls(
            site_url=raw.get("site_url", "").rstrip("/"),
            site_name=raw.get("site_name") or DEFAULT_SITE_NAME,
            home_record_id=_parse_record_id(raw.get("home_record_id")),
            default_meta_description=raw.get("default_meta_description", ""),
            robots_txt=raw.get("robots_txt") or DEFAULT_ROBOTS_TXT,
            values=MappingProxyType(raw),
        )

    def as_template_dict(self) -> dict[str, Any]:
        """The ``site`` mapping handed to templates."""
        return {
            **self.values,
            "site_url": self.site_url,
            "site_name": self.site_name,
        }


async def load_site_settings(store: ContentStore) -> SiteSettings:
    return SiteSettings.from_mapping(await store.get_settings())
