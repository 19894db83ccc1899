from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from .clients.http import Fetcher
from .listing import favicon_url, story_from_url, thumbnail_targets
from .reader.composer import DocumentComposer
from .thumbnails import extractor
from .thumbnails.cache import ThumbnailCache
from .thumbnails.resolver import ThumbnailResolver
from .thumbnails.scheduler import FetchScheduler
from .thumbnails.session_store import FileSessionStore, MemorySessionStore


def _positive_int(value: str) -> int:
    ivalue = int(value)
    if ivalue <= 0:
        raise argparse.ArgumentTypeError("value must be a positive integer")
    return ivalue


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m hngrid",
        description="Preview images and inline reader documents for story listings.",
    )
    subparsers = parser.add_subparsers(
        dest="command", metavar="<command>", required=True
    )

    thumbs_cmd = subparsers.add_parser(
        "thumbs",
        help="Resolve a preview image for each page URL.",
    )
    thumbs_cmd.add_argument("urls", nargs="+", help="Page URLs to resolve.")
    thumbs_cmd.add_argument(
        "--concurrency",
        "-c",
        type=_positive_int,
        default=None,
        help="Maximum in-flight page fetches (defaults to hngrid.thumbs.concurrency).",
    )
    thumbs_cmd.add_argument(
        "--session-file",
        type=Path,
        default=None,
        help="Gzipped JSON cache shared by runs of one session (memory only when omitted).",
    )
    thumbs_cmd.add_argument(
        "--favicons",
        action="store_true",
        help="Print the site favicon URL for pages without a preview image.",
    )

    extract_cmd = subparsers.add_parser(
        "extract",
        help="Run image extraction on a saved HTML file.",
    )
    extract_cmd.add_argument("file", type=Path, help="HTML file to scan.")
    extract_cmd.add_argument("--base", required=True, help="URL the file was fetched from.")

    compose_cmd = subparsers.add_parser(
        "compose",
        help="Fetch a page and write it as a self-contained document.",
    )
    compose_cmd.add_argument("url", help="Article URL.")
    compose_cmd.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Destination file (stdout when omitted).",
    )

    return parser


async def run_thumbs(
    urls: List[str],
    *,
    concurrency: Optional[int] = None,
    session_file: Optional[Path] = None,
    favicons: bool = False,
    out: TextIO = sys.stdout,
) -> dict[str, Optional[str]]:
    """
    Resolve a preview image for each distinct URL and print ``url -> image``.

    The cache lives in memory for this run unless ``session_file`` names a
    store the caller scopes to one browsing session.
    """
    store = FileSessionStore(session_file) if session_file else MemorySessionStore()
    stories = {s.url: s for s in map(story_from_url, dict.fromkeys(urls))}
    results: dict[str, Optional[str]] = {}

    def _on_result(handle: str, image_url: Optional[str]) -> None:
        results[handle] = image_url
        story = stories[handle]
        shown = image_url
        if not shown and favicons and story.wants_thumbnail:
            shown = favicon_url(story.domain)
        out.write(f"{handle} -> {shown or '-'}\n")

    targets = thumbnail_targets(stories.values())
    for story in stories.values():
        if not story.wants_thumbnail:
            _on_result(story.url, None)

    async with Fetcher() as fetcher:
        resolver = ThumbnailResolver(fetcher, ThumbnailCache(store))
        scheduler = FetchScheduler(resolver, _on_result, limit=concurrency)
        for story in targets:
            scheduler.on_became_visible(story.url, story.url)
        await scheduler.join()
    return results


async def run_compose(url: str, output: Optional[Path], out: TextIO = sys.stdout) -> bool:
    async with Fetcher() as fetcher:
        doc = await DocumentComposer(fetcher).compose_url(url)
    if output is None:
        out.write(doc.markup)
    else:
        output.write_text(doc.markup, encoding="utf-8")
    return not doc.placeholder


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "thumbs":
        asyncio.run(
            run_thumbs(
                args.urls,
                concurrency=args.concurrency,
                session_file=args.session_file,
                favicons=args.favicons,
            )
        )
        return 0

    if args.command == "extract":
        if not args.file.is_file():
            parser.error(f"File {args.file} does not exist.")
        markup = args.file.read_text(encoding="utf-8", errors="replace")
        image_url = extractor.extract(markup, args.base)
        print(image_url or "-")
        return 0 if image_url else 1

    if args.command == "compose":
        return 0 if asyncio.run(run_compose(args.url, args.output)) else 1

    parser.print_help()
    return 2


__all__ = ["main", "build_parser", "run_thumbs", "run_compose"]
