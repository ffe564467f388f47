"""Template environment and filters."""

from howl.templating.filters import BUILTIN_FILTERS
from howl.templating.integration import create_environment, render_template

__all__ = ["BUILTIN_FILTERS", "create_environment", "render_template"]
