"""
PopDistance CLI entrypoint.

This CLI is intended for batch runs over dataset files and for serving the HTTP API.
It delegates parsing to `popdistance.ingestion` and computation to
`popdistance.engine.pairwise.distance`.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from popdistance.config.settings import get_settings
from popdistance.core.logging import configure_logging
from popdistance.domain.errors import DomainError, InvalidArgumentError
from popdistance.engine.pairwise import distance
from popdistance.ingestion.loader import load_dataset


def _cmd_compute(args: argparse.Namespace) -> int:
    """Handle the `compute` subcommand."""
    settings = get_settings()

    engine_updates: dict[str, Any] = {}
    if args.executor:
        engine_updates["executor"] = args.executor
    if args.workers is not None:
        engine_updates["max_workers"] = int(args.workers)
    engine = settings.engine.model_copy(update=engine_updates) if engine_updates else settings.engine

    try:
        aggregates = load_dataset(args.path, fmt=args.format, periods=args.period or None, settings=settings)
        results = distance(aggregates, engine=engine)
    except (InvalidArgumentError, DomainError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps([r.as_dict() for r in results], ensure_ascii=False, indent=2))
        return 0

    print(f"{'period':<8} {'a':<24} {'b':<24} {'distance_km':>14}")
    for r in results:
        row = r.as_dict()
        print(f"{row['period']:<8} {row['name_a']:<24} {row['name_b']:<24} {row['distance_km']:>14.3f}")
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("popdistance.api.app:app", host=args.host, port=int(args.port), log_config=None)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the PopDistance CLI."""
    parser = argparse.ArgumentParser(prog="popdistance")
    parser.add_argument("--log-level", default=None, help="Override the configured log level (e.g. DEBUG).")
    sub = parser.add_subparsers(dest="command", required=True)

    comp = sub.add_parser("compute", help="Compute population-weighted distances for a dataset file.")
    comp.add_argument("path", help="CSV or JSON dataset (year, country, population, city, ...).")
    comp.add_argument("--format", choices=["csv", "json"], default=None, help="Default: inferred from suffix.")
    comp.add_argument("--period", action="append", default=[], help="Repeatable. Only compute these periods.")
    comp.add_argument("--executor", choices=["process", "thread", "serial"], default=None)
    comp.add_argument("--workers", type=int, default=None, help="Worker pool size (default: CPU count).")
    comp.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    comp.set_defaults(func=_cmd_compute)

    srv = sub.add_parser("serve", help="Serve the HTTP API.")
    srv.add_argument("--host", default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.set_defaults(func=_cmd_serve)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m popdistance.cli`."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
