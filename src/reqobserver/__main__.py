"""Command line entry point: ``python -m reqobserver ping``."""

import argparse
import sys

from pydantic import ValidationError

from reqobserver.config import ObserverSettings
from reqobserver.core.errors import ObserverError
from reqobserver.observer import RequestObserver


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reqobserver",
        description="Request observer utilities.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    ping = subparsers.add_parser(
        "ping", help="Check that the event datastore answers (readiness probe)."
    )
    ping.add_argument("--uri", help="MongoDB connection string")
    ping.add_argument("--database", help="Database name")
    ping.add_argument("--collection", help="Collection name")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {
        key: value
        for key, value in (
            ("mongo_uri", args.uri),
            ("database", args.database),
            ("collection", args.collection),
        )
        if value is not None
    }
    try:
        settings = ObserverSettings(**overrides)
    except ValidationError as exc:
        print(f"invalid settings: {exc}", file=sys.stderr)
        return 1

    try:
        observer = RequestObserver.from_settings(settings)
        observer.ping()
    except ObserverError as exc:
        print(exc, file=sys.stderr)
        return 1
    print("ok")
    return 0


if __name__ == "__main__":
    sys.exit(main())
