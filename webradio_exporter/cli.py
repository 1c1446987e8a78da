"""Command-line interface for serving the export API or exporting profiles."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Sequence

from radio_export.config import get_settings

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="webradio-exporter",
        description="Compile curated radio catalogues into player export bundles.",
    )
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Run the HTTP API (default)")
    serve.add_argument("--host", help="Bind address (defaults to HOST)")
    serve.add_argument("--port", type=int, help="Bind port (defaults to PORT)")

    export = subparsers.add_parser(
        "export", help="Write export files for one or more profiles"
    )
    export.add_argument("profile_ids", nargs="+", metavar="PROFILE_ID")
    return parser


def _serve(host: str | None, port: int | None) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "radio_export.main:app",
        host=host or settings.server_host,
        port=port or settings.server_port,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )
    return 0


def _export(profile_ids: Sequence[str]) -> int:
    from radio_export.main import build_services

    _, service = build_services(get_settings())
    exit_code = 0
    for profile_id in profile_ids:
        try:
            summary = service.export(profile_id)
        except KeyError:
            logger.error("Export profile %s not found", profile_id)
            exit_code = 1
            continue
        except ValueError as exc:
            logger.error("Skipping profile %s: %s", profile_id, exc)
            exit_code = 1
            continue
        print(json.dumps(summary, indent=2, ensure_ascii=False))
    return exit_code


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return its exit code."""

    args = _build_parser().parse_args(argv)
    if args.command == "export":
        return _export(args.profile_ids)
    return _serve(getattr(args, "host", None), getattr(args, "port", None))


if __name__ == "__main__":  # pragma: no cover - runtime entrypoint
    sys.exit(main())
