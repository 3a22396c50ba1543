from __future__ import annotations

import argparse
import json
import logging
from typing import Optional

from loungedb.config import get_settings
from loungedb.services.airport_directory import load_default_directory

from .fetcher import Fetcher
from .pipeline import run_airports_stage, run_lounges_stage
from .store import StoreLayout


def main(argv: Optional[list] = None) -> int:
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Download airport and lounge records")
    parser.add_argument("--data-dir", default=settings.data_dir, help="Store root (airports in iata/, lounges in lounges/)")
    parser.add_argument("--base-url", default=settings.source_base_url, help="Upstream API host")
    parser.add_argument("--delay", type=float, default=None, help="Seconds to wait after each request")
    parser.add_argument("--no-skip-existing", dest="skip_existing", action="store_false",
                        help="Re-download records that are already stored")
    parser.add_argument("--limit", type=int, default=None, help="Only process the first N work items")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("airports", aliases=["downloadAllAirports"], help="Stage one: fetch every directory airport")
    lounges = sub.add_parser("lounges", aliases=["downloadAllLounges"],
                             help="Stage two: fetch every lounge listed in stored airport records")
    lounges.add_argument("--dedupe", action="store_true", help="Fetch each lounge id once")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    layout = StoreLayout(args.data_dir)
    headers = {"User-Agent": settings.user_agent, "Accept": "application/json"}
    with Fetcher(timeout=settings.http_timeout, headers=headers) as fetcher:
        if args.cmd in ("airports", "downloadAllAirports"):
            directory = load_default_directory()
            report = run_airports_stage(
                directory.codes(), layout, fetcher,
                base_url=args.base_url,
                delay=settings.airport_delay if args.delay is None else args.delay,
                skip_existing=args.skip_existing,
                limit=args.limit,
            )
        else:
            report = run_lounges_stage(
                layout, fetcher,
                base_url=args.base_url,
                delay=settings.lounge_delay if args.delay is None else args.delay,
                skip_existing=args.skip_existing,
                dedupe=args.dedupe,
                limit=args.limit,
            )

    print(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
