"""Howl CLI: region inspection, catalog sync and offline rendering.

Entry point registered as ``howl`` in ``pyproject.toml``::

    [project.scripts]
    howl = "howl.cli:main"
"""

import argparse
import logging
import sys

from howl.config import HowlConfig

_DEFAULTS = HowlConfig()
_LOG_LEVELS = ("debug", "info", "warning", "error")


def _add_site_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--templates",
        default=str(_DEFAULTS.template_dir),
        help=f"Template root directory (default: {_DEFAULTS.template_dir})",
    )
    parser.add_argument(
        "--db",
        default=_DEFAULTS.database_url,
        help=f"Database URL (default: {_DEFAULTS.database_url})",
    )
    parser.add_argument(
        "--default-module",
        default=_DEFAULTS.default_module,
        help="Module owning paths and templates that name no module",
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``howl`` command."""
    parser = argparse.ArgumentParser(
        prog="howl",
        description="Howl: template-driven content rendering.",
    )
    parser.add_argument(
        "--log-level",
        choices=_LOG_LEVELS,
        default=_DEFAULTS.log_level,
        help="Logging verbosity",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- howl regions -----------------------------------------------------
    regions_parser = subparsers.add_parser("regions", help="Print a template's editable regions")
    regions_parser.add_argument("file", help="Template file to inspect")
    regions_parser.add_argument(
        "--templates",
        default=None,
        help="Template root the reported path is relative to",
    )
    regions_parser.add_argument("--default-module", default=_DEFAULTS.default_module)

    # -- howl sync --------------------------------------------------------
    sync_parser = subparsers.add_parser("sync", help="Sync the template catalog into the database")
    _add_site_options(sync_parser)

    # -- howl render ------------------------------------------------------
    render_parser = subparsers.add_parser("render", help="Render one site path")
    render_parser.add_argument("path", help="Request path, e.g. /about")
    _add_site_options(render_parser)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "regions":
        from howl.cli._regions import show_regions

        show_regions(args)
    elif args.command == "sync":
        from howl.cli._sync import run_sync

        run_sync(args)
    elif args.command == "render":
        from howl.cli._render import run_render

        run_render(args)
