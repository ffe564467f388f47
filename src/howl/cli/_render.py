"""``howl render``: render one path against a site database, without a server."""

import argparse
import sys

import anyio

from howl.config import HowlConfig
from howl.data import Database
from howl.errors import HowlError
from howl.render import RenderResult, SiteRenderer
from howl.store import SqlContentStore
from howl.templating import create_environment


async def _render(args: argparse.Namespace) -> RenderResult:
    config = HowlConfig(
        template_dir=args.templates,
        database_url=args.db,
        default_module=args.default_module,
    )
    async with Database(config.database_url) as db:
        store = SqlContentStore(db)
        await store.ensure_schema()
        renderer = SiteRenderer(config, store, create_environment(config))
        return await renderer.render(args.path)


def run_render(args: argparse.Namespace) -> None:
    try:
        result = anyio.run(_render, args)
    except HowlError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    print(f"{result.status} {result.content_type}", file=sys.stderr)
    for name, value in result.headers:
        print(f"{name}: {value}", file=sys.stderr)
    print(result.body)
    if result.status >= 400:
        raise SystemExit(1)
