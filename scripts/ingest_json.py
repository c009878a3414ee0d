#!/usr/bin/env python3
"""Walk JSON documents into an in-memory state tree and print the result.

Handy for checking how a captured API response will be laid out as tree
paths (array naming, pair collapse, kilometre companions) before wiring it
into a real store.

Usage
-----
::

    python scripts/ingest_json.py vehicle_data.json --root VIN123
    python scripts/ingest_json.py a.json b.json --root site --prefered-array-name timestamp
    python scripts/ingest_json.py --url https://example.invalid/api/1/vehicles --root fleet --json

Files are walked in order into the same tree, so feeding several snapshots
of one endpoint shows how types widen over time.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

import aiohttp  # noqa: E402

from pystatetree import EngineConfig, MemoryTreeStore, StateTreeError, TreeWalker, WalkOptions  # noqa: E402
from pystatetree._json import loads  # noqa: E402
from pystatetree._transport import fetch_json  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _parse_mapping(values: list[str]) -> dict[str, str]:
    """Parse ``KEY=VALUE`` pairs."""
    mapping: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep:
            raise SystemExit(f"Expected KEY=VALUE, got {item!r}")
        mapping[key] = value
    return mapping


def _build_options(args: argparse.Namespace) -> WalkOptions:
    return WalkOptions(
        write=args.write,
        force_index=args.force_index,
        channel_name=args.channel_name,
        prefered_array_name=args.prefered_array_name,
        prefered_array_desc=args.prefered_array_desc,
        auto_cast=args.auto_cast,
        descriptions=_parse_mapping(args.description),
        parse_base64=args.parse_base64,
        parse_base64_by_ids=tuple(args.base64_id),
        delete_before_update=args.delete_before_update,
        remove_passwords=args.remove_passwords,
    )


def _format_tree(store: MemoryTreeStore) -> str:
    lines: list[str] = []
    for path in sorted(store.nodes):
        node = store.nodes[path]
        indent = "  " * path.count(".")
        label = path.rsplit(".", 1)[-1]
        if node.kind == "channel":
            suffix = f"  ({node.name})" if node.name else ""
            lines.append(f"{indent}{label}/{suffix}")
            continue
        value = store.get_value(path)
        meta = f"{node.value_type}, {node.role}"
        if node.name and node.name != label:
            meta += f", name={node.name!r}"
        lines.append(f"{indent}{label} = {value!r}  [{meta}]")
    return "\n".join(lines)


async def _load_documents(args: argparse.Namespace) -> list[tuple[str, Any]]:
    documents: list[tuple[str, Any]] = []
    for file_name in args.files:
        text = Path(file_name).read_text(encoding="utf-8")
        documents.append((file_name, loads(text)))
    if args.url:
        headers = _parse_mapping(args.header)
        async with aiohttp.ClientSession() as http_session:
            documents.append((args.url, await fetch_json(http_session, args.url, headers=headers)))
    return documents


# ── main ─────────────────────────────────────────────────────


async def main() -> int:
    parser = argparse.ArgumentParser(
        description="Materialize JSON documents into an in-memory state tree.",
    )
    parser.add_argument("files", nargs="*", help="JSON files to ingest, in order")
    parser.add_argument("--url", help="Also fetch and ingest the JSON document at URL")
    parser.add_argument("--header", action="append", default=[], help="HTTP header KEY=VALUE for --url")
    parser.add_argument("--root", default="root", help="Root tree path (default: root)")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable DEBUG logging")
    parser.add_argument("--write", action="store_true", help="Create writable leaves")
    parser.add_argument("--force-index", action="store_true", help="Name array entries by index only")
    parser.add_argument("--channel-name", help="Display name of the root container")
    parser.add_argument("--prefered-array-name", help="Array entry naming field (A, A+B or A/B)")
    parser.add_argument("--prefered-array-desc", help="Field naming array entry containers")
    parser.add_argument("--auto-cast", action="store_true", help="Parse JSON-encoded string values")
    parser.add_argument("--description", action="append", default=[], help="Display name KEY=NAME")
    parser.add_argument("--parse-base64", action="store_true", help="Decode base64 strings everywhere")
    parser.add_argument("--base64-id", action="append", default=[], help="Always decode this key/path")
    parser.add_argument("--delete-before-update", action="store_true", help="Purge the root before ingesting")
    parser.add_argument("--remove-passwords", action="store_true", help="Skip password keys")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.files and not args.url:
        parser.error("nothing to ingest: pass at least one file or --url")

    try:
        documents = await _load_documents(args)
        config = EngineConfig.from_env()
    except (OSError, ValueError, StateTreeError) as exc:
        print(f"!! {exc}", file=sys.stderr)
        return 1

    store = MemoryTreeStore()
    walker = TreeWalker(store, config=config)
    options = _build_options(args)
    for _source, document in documents:
        await walker.walk(args.root, document, options)

    if args.json_mode:
        payload = json.dumps(
            {
                "tree": store.as_nested(),
                "nodes": {path: node.model_dump(mode="json") for path, node in sorted(store.nodes.items())},
            },
            indent=2,
            default=str,
            ensure_ascii=False,
        )
    else:
        out = [_section(f"TREE  root={args.root}  documents={len(documents)}"), _format_tree(store)]
        out.append(f"\n{len(store.nodes)} nodes, {len(store.writes)} writes")
        payload = "\n".join(out)

    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"Output written to {args.output}", file=sys.stderr)
    else:
        print(payload)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
