"""Site configuration.

HowlConfig is a frozen dataclass: immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class HowlConfig:
    """Renderer configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = HowlConfig(template_dir="site/templates", debug=True)
    """

    # Templates
    template_dir: str | Path = "templates"
    template_suffix: str = ".html"
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True

    # Routing
    default_module: str = "pages"  # Owner of unprefixed paths like /about
    not_found_template: str = "pages/404.html"
    server_error_template: str = "pages/500.html"

    # Storage
    database_url: str = "sqlite:///howl.db"
    echo_sql: bool = False

    # Diagnostics
    debug: bool = False
    log_level: str = "info"
