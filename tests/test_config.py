"""Tests for howl.config: HowlConfig frozen dataclass."""

from pathlib import Path

import pytest

from howl.config import HowlConfig


class TestHowlConfig:
    def test_defaults(self) -> None:
        cfg = HowlConfig()

        assert cfg.template_dir == "templates"
        assert cfg.template_suffix == ".html"
        assert cfg.autoescape is True
        assert cfg.default_module == "pages"
        assert cfg.not_found_template == "pages/404.html"
        assert cfg.server_error_template == "pages/500.html"
        assert cfg.database_url == "sqlite:///howl.db"
        assert cfg.echo_sql is False
        assert cfg.debug is False
        assert cfg.log_level == "info"

    def test_override(self) -> None:
        cfg = HowlConfig(default_module="site", debug=True, database_url="sqlite:///:memory:")

        assert cfg.default_module == "site"
        assert cfg.debug is True
        assert cfg.database_url == "sqlite:///:memory:"

    def test_frozen(self) -> None:
        cfg = HowlConfig()

        with pytest.raises(AttributeError):
            cfg.debug = True  # type: ignore[misc]

    def test_template_dir_as_path(self) -> None:
        cfg = HowlConfig(template_dir=Path("/site/templates"))
        assert cfg.template_dir == Path("/site/templates")
