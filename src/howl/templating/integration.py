"""Kida environment setup.

Builds the environment site templates and blocks render with, from
:class:`~howl.config.HowlConfig`.  Create it once per process; per-request
state (the block lookup) travels in the render context, never in the
environment's globals.
"""

from collections.abc import Callable, Mapping
from typing import Any

from kida import Environment, FileSystemLoader

from howl.config import HowlConfig
from howl.templating.filters import BUILTIN_FILTERS


def create_environment(
    config: HowlConfig,
    filters: Mapping[str, Callable[..., Any]] | None = None,
    globals_: Mapping[str, Any] | None = None,
) -> Environment:
    """Create a kida Environment rooted at ``config.template_dir``.

    User *filters* are registered after the built-ins and may override
    them.
    """
    env = Environment(
        loader=FileSystemLoader(str(config.template_dir)),
        autoescape=config.autoescape,
        auto_reload=config.debug,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )

    env.update_filters(BUILTIN_FILTERS)
    if filters:
        env.update_filters(dict(filters))

    for name, value in (globals_ or {}).items():
        env.add_global(name, value)

    return env


def render_template(env: Environment, template_path: str, context: Mapping[str, Any]) -> str:
    """Render a full template to string."""
    return env.get_template(template_path).render(dict(context))
