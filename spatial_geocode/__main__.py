from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from .config import Configuration
from .geocoding import GeocodingError
from .procedures import GEOCODE_PROVIDER_KEY, PREFIX, Geocode


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spatial-geocode",
        description="Look up the geographic location of an address.",
    )
    parser.add_argument("address")
    parser.add_argument(
        "-n",
        "--max-results",
        type=int,
        default=1,
        help="maximum number of results, 0 for as many as allowed (default: 1)",
    )
    parser.add_argument("--provider", help="osm, google, or the name of a templated provider")
    parser.add_argument(
        "--set",
        dest="settings",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help=f"setting under {PREFIX}, e.g. google.key=abc (repeatable)",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = Configuration.from_pairs(args.settings)
    except ValueError as e:
        print(f"spatial-geocode: {e}", file=sys.stderr)
        sys.exit(2)
    config = Configuration({f"{PREFIX}.{key}": value for key, value in settings.items()})
    if args.provider:
        config = config.merged({f"{PREFIX}.{GEOCODE_PROVIDER_KEY}": args.provider})

    try:
        for result in Geocode(config).geocode(args.address, args.max_results):
            print(json.dumps(result.to_record()))
    except GeocodingError as e:
        print(f"spatial-geocode: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
