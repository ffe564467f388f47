"""``howl regions``: print the schema extracted from one template."""

import argparse
import json
import sys
from pathlib import Path

from howl.schema import build_schema


def _template_path(file: Path, root: str | None) -> str:
    if root is not None:
        try:
            return file.resolve().relative_to(Path(root).resolve()).as_posix()
        except ValueError:
            pass
    return file.name


def show_regions(args: argparse.Namespace) -> None:
    file = Path(args.file)
    try:
        markup = file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Error: cannot read {file}: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    schema = build_schema(
        _template_path(file, args.templates),
        markup,
        default_module=args.default_module,
    )
    payload = {
        "template_path": schema.template_path,
        "name": schema.display_name,
        "content_type": schema.content_type,
        "regions": [region.to_dict() for region in schema.regions],
    }
    print(json.dumps(payload, indent=2))
