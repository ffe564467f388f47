"""``howl sync``: apply migrations, then sync the template catalog."""

import argparse
import sys

import anyio

from howl.catalog import CatalogSync
from howl.data import Database
from howl.errors import HowlError
from howl.schema import TemplateSchema
from howl.store import SqlContentStore


async def _sync(args: argparse.Namespace) -> list[TemplateSchema]:
    async with Database(args.db) as db:
        store = SqlContentStore(db)
        await store.ensure_schema()
        sync = CatalogSync(store, args.templates, default_module=args.default_module)
        return await sync.run()


def run_sync(args: argparse.Namespace) -> None:
    try:
        schemas = anyio.run(_sync, args)
    except (HowlError, FileNotFoundError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    for schema in schemas:
        print(f"  {schema.template_path} ({schema.content_type}, {len(schema.regions)} regions)")
    print(f"Synced {len(schemas)} templates from {args.templates}")
