"""Tests for howl.settings."""

from howl.settings import DEFAULT_ROBOTS_TXT, SiteSettings, load_site_settings


class TestFromMapping:
    def test_defaults(self) -> None:
        settings = SiteSettings.from_mapping({})
        assert settings.site_url == ""
        assert settings.site_name == "Howl"
        assert settings.home_record_id is None
        assert settings.robots_txt == DEFAULT_ROBOTS_TXT

    def test_trailing_slash_stripped(self) -> None:
        settings = SiteSettings.from_mapping({"site_url": "https://example.test/"})
        assert settings.site_url == "https://example.test"

    def test_home_record_id(self) -> None:
        assert SiteSettings.from_mapping({"home_record_id": " 7 "}).home_record_id == 7
        assert SiteSettings.from_mapping({"home_record_id": "seven"}).home_record_id is None
        assert SiteSettings.from_mapping({"home_record_id": ""}).home_record_id is None
        assert SiteSettings.from_mapping({"home_record_id": None}).home_record_id is None

    def test_blank_values_fall_back(self) -> None:
        settings = SiteSettings.from_mapping({"site_name": "", "robots_txt": ""})
        assert settings.site_name == "Howl"
        assert settings.robots_txt == DEFAULT_ROBOTS_TXT

    def test_template_dict_passes_everything_through(self) -> None:
        settings = SiteSettings.from_mapping(
            {"site_url": "https://example.test/", "twitter": "@howl"}
        )
        site = settings.as_template_dict()
        assert site["twitter"] == "@howl"
        assert site["site_url"] == "https://example.test"
        assert site["site_name"] == "Howl"


class TestLoad:
    async def test_from_store(self, store, seed) -> None:
        await seed.setting("site_name", "Acme")
        await seed.setting("home_record_id", "3")
        settings = await load_site_settings(store)
        assert settings.site_name == "Acme"
        assert settings.home_record_id == 3
        assert settings.values["site_name"] == "Acme"
