"""Tests for howl.schema.types: region value types and their JSON shape."""

import json

from howl.models import TemplateDefinition
from howl.schema import RegionSpec, RegionType, TemplateSchema, format_label


class TestFormatLabel:
    def test_underscores_and_dashes(self) -> None:
        assert format_label("hero_title") == "Hero Title"
        assert format_label("call-to-action") == "Call To Action"

    def test_keeps_inner_capitals(self) -> None:
        assert format_label("seo_URL") == "Seo URL"


class TestRegionSpec:
    def test_default_label(self) -> None:
        assert RegionSpec("cta_text").label == "Cta Text"

    def test_explicit_label_kept(self) -> None:
        assert RegionSpec("cta_text", label="Button").label == "Button"

    def test_default_values(self) -> None:
        assert RegionSpec("a").default_value() == ""
        assert RegionSpec("a", RegionType.CHECKBOX).default_value() is False
        assert RegionSpec("a", RegionType.REPEATER).default_value() == []

    def test_to_dict_plain(self) -> None:
        assert RegionSpec("title", required=True).to_dict() == {
            "name": "title",
            "type": "text",
            "label": "Title",
            "required": True,
            "placeholder": "",
        }

    def test_to_dict_select_and_repeater(self) -> None:
        select = RegionSpec("size", RegionType.SELECT, options=("s", "m"))
        assert select.to_dict()["options"] == ["s", "m"]
        repeater = RegionSpec("items", RegionType.REPEATER, fields=(RegionSpec("label"),))
        assert repeater.to_dict()["fields"][0]["name"] == "label"
        assert "fields" not in select.to_dict()

    def test_from_dict_rejects_nameless(self) -> None:
        assert RegionSpec.from_dict({"type": "text"}) is None
        assert RegionSpec.from_dict("title") is None

    def test_from_dict_string_required(self) -> None:
        region = RegionSpec.from_dict({"name": "a", "required": "true"})
        assert region is not None
        assert region.required is True


class TestTemplateSchema:
    def test_get_and_names(self) -> None:
        schema = TemplateSchema(
            "pages/a.html", "A", "pages", (RegionSpec("title"), RegionSpec("body"))
        )
        assert schema.region_names == ("title", "body")
        assert schema.get("body") == RegionSpec("body")
        assert schema.get("missing") is None

    def test_regions_json_roundtrips_through_definition(self) -> None:
        regions = (
            RegionSpec("title", required=True),
            RegionSpec("layout", RegionType.SELECT, options=("wide",)),
            RegionSpec("items", RegionType.REPEATER, fields=(RegionSpec("label"),)),
        )
        schema = TemplateSchema("pages/a.html", "A", "pages", regions)
        definition = TemplateDefinition(
            template_path="pages/a.html",
            name="A",
            content_type="pages",
            regions=schema.regions_json(),
        )
        assert definition.schema == schema

    def test_regions_json_is_compact(self) -> None:
        schema = TemplateSchema("a.html", "A", "pages", (RegionSpec("t"),))
        assert " " not in schema.regions_json()
        assert json.loads(schema.regions_json())[0]["name"] == "t"

    def test_malformed_persisted_regions_give_empty_schema(self) -> None:
        definition = TemplateDefinition("a.html", "A", "pages", regions="{not json")
        assert definition.schema.regions == ()
