"""Command-line entrypoint: ``python -m placefinder.main "pizza near"``."""

from __future__ import annotations

import argparse
import asyncio
import sys
from contextlib import nullcontext
from typing import Sequence

import httpx

from placefinder.config import get_settings
from placefinder.domain.languages import GoogleLanguage
from placefinder.logging import configure_logging, logger
from placefinder.services.exceptions import LocationError
from placefinder.services.finder import PlaceFinder


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="placefinder", description="Google Places autocomplete lookup.")
    parser.add_argument("query", help="Free text to complete.")
    parser.add_argument("--language", type=GoogleLanguage.parse, default=None, help="Locale code, e.g. pt-BR.")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds.")
    parser.add_argument("--details", action="store_true", help="Resolve details of the first match.")
    return parser


async def main(argv: Sequence[str] | None = None, *, client: httpx.AsyncClient | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("placefinder_starting", environment=settings.environment)

    async with httpx.AsyncClient() if client is None else nullcontext(client) as http_client:
        finder = PlaceFinder(http_client, settings=settings)
        try:
            matches = await finder.autocomplete(args.query, language=args.language, timeout=args.timeout)
            for match in matches:
                print(f"{match.main_text}\t{match.secondary_text}")
            if args.details and matches:
                place = await finder.resolve(matches[0], timeout=args.timeout)
                print(place.model_dump_json(exclude={"raw"}))
        except LocationError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
