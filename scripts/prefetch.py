#!/usr/bin/env python
"""
Warm the apiwiki cache from the command line.

Usage:
    .venv/bin/python scripts/prefetch.py [options] NAME [NAME ...]

Each NAME is resolved exactly as the renderer would resolve it:

    Foo                 -> Template:Foo (redirects followed)
    File:Logo.png       -> image info + download into IMAGE_DIRECTORY
    File:Logo.png|thumb -> same, at the default thumbnail width

Options:
    --from-file PATH     Read additional names from PATH, one per line
    --dry-run            Show what would be resolved without touching anything

Example:
    .venv/bin/python scripts/prefetch.py Infobox Citation_needed "File:Example.jpg|thumb"
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

# Ensure apiwiki package is importable when run from project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from apiwiki.core.config import get_settings
from apiwiki.core.database import create_all_tables, dispose_engine, get_session_factory
from apiwiki.services.links import OutputBuffer
from apiwiki.services.names import FILE, get_namespace
from apiwiki.services.remote import MediaWikiClient
from apiwiki.services.store import WikiDB
from apiwiki.services.wiki_model import APIWikiModel


# ── Helpers ───────────────────────────────────────────────────────────────────

def _is_image(name: str) -> bool:
    prefix = name.split(":", 1)[0] if ":" in name else ""
    return get_namespace(prefix) is FILE


async def prefetch(names: list[str], dry_run: bool) -> int:
    if dry_run:
        for name in names:
            print(f"  [{'image' if _is_image(name) else 'template'}] {name}")
        print(f"\n[DRY RUN] {len(names)} names — nothing fetched.")
        return 0

    settings = get_settings()
    await create_all_tables()
    counts = {"resolved": 0, "missing": 0}

    async with MediaWikiClient(
        settings.wiki_api_url,
        username=settings.wiki_username,
        password=settings.wiki_password,
        timeout=settings.fetch_timeout,
        user_agent=settings.user_agent,
    ) as remote:
        model = APIWikiModel(WikiDB(get_session_factory()), remote, settings.resolver_config())
        for name in names:
            if _is_image(name):
                result = await model.parse_internal_image_link(FILE.name, name, OutputBuffer())
            else:
                result = await model.get_raw_wiki_content(name)
            if result is None:
                print(f"  [-] {name}")
                counts["missing"] += 1
            else:
                print(f"  [+] {name}")
                counts["resolved"] += 1

    await dispose_engine()
    print(f"\nPrefetch complete: {counts['resolved']} resolved, {counts['missing']} missing.")
    return 1 if counts["missing"] else 0


# ── CLI ───────────────────────────────────────────────────────────────────────

def main() -> None:
    parser = argparse.ArgumentParser(
        description="Resolve templates and images into the apiwiki cache.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("names", nargs="*", help="Template or File: names to resolve")
    parser.add_argument("--from-file", metavar="PATH", default=None,
                        help="Read additional names from PATH, one per line")
    parser.add_argument("--dry-run", action="store_true",
                        help="List the names without fetching anything")
    args = parser.parse_args()

    names = list(args.names)
    if args.from_file:
        path = Path(args.from_file).expanduser()
        if not path.exists():
            print(f"Error: file not found: {path}", file=sys.stderr)
            sys.exit(1)
        names.extend(line.strip() for line in path.read_text().splitlines() if line.strip())

    if not names:
        parser.error("no names given")

    sys.exit(asyncio.run(prefetch(names, args.dry_run)))


if __name__ == "__main__":
    main()
