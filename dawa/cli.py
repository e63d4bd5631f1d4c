"""Command line interface: decode export files and query the service."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

import orjson

from dawa.clients.dawa import DawaClient
from dawa.config import load_config
from dawa.core.stream import RecordStream
from dawa.errors import DawaError
from dawa.importers import JSONFraming, import_file
from dawa.logging_setup import configure_logging
from dawa.models import ResourceKind
from dawa.query import ListQuery, ReverseQuery

logger = logging.getLogger(__name__)

KIND_CHOICES = [k.value for k in ResourceKind]


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the command line interface."""
    p = argparse.ArgumentParser(description="DAWA address client")
    p.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ERROR). Defaults to $LOG_LEVEL or INFO.",
    )
    p.add_argument("--host", default=None, help="Service base URL (env DAWA_HOST)")
    sub = p.add_subparsers(dest="cmd", required=True)

    imp = sub.add_parser("import", help="Decode an exported JSON or CSV file to JSON lines")
    imp.add_argument("path", type=Path, help="Export file")
    imp.add_argument("--kind", choices=KIND_CHOICES, default="adresser",
                     help="Resource kind in the file (default: adresser)")
    imp.add_argument("--format", dest="fmt", choices=["json", "csv"], default=None,
                     help="Export format (default: from the file suffix)")
    imp.add_argument("--bulk", action="store_true",
                     help="Decode JSON with the incremental whole-array parser")
    imp.add_argument("--strict", action="store_true", default=None,
                     help="Reject JSON keys with no matching field (env DAWA_STRICT_FIELDS)")
    imp.add_argument("--limit", type=int, default=None, help="Stop after N records")

    ls = sub.add_parser("list", help="List or autocomplete a resource kind")
    ls.add_argument("kind", choices=KIND_CHOICES)
    ls.add_argument("--q", default=None, help="Search text")
    ls.add_argument("--kode", nargs="*", default=[], help="Codes to match")
    ls.add_argument("--navn", default=None, help="Name to match")
    ls.add_argument("--autocomplete", action="store_true")
    ls.add_argument("--limit", type=int, default=None, help="Stop after N records")

    rv = sub.add_parser("reverse", help="Find the record containing a point")
    rv.add_argument("kind", choices=KIND_CHOICES)
    rv.add_argument("x", type=float, help="Longitude / easting")
    rv.add_argument("y", type=float, help="Latitude / northing")
    rv.add_argument("--srid", default=None, help="Coordinate system (default 4326)")
    return p


def _emit(record: Any) -> None:
    sys.stdout.write(orjson.dumps(record.to_json()).decode("utf-8") + "\n")


async def _drain(stream: RecordStream[Any], limit: Optional[int]) -> int:
    count = 0
    async with stream:
        async for record in stream:
            _emit(record)
            count += 1
            if limit is not None and count >= limit:
                break
    return count


async def _run_import(args: argparse.Namespace, strict_default: bool) -> int:
    fmt = args.fmt or ("csv" if args.path.suffix.lower() == ".csv" else "json")
    kwargs: dict = {}
    if fmt == "json":
        kwargs["framing"] = JSONFraming.BULK if args.bulk else JSONFraming.SCAN
        kwargs["strict"] = strict_default if args.strict is None else args.strict
    stream = await import_file(args.path, args.kind, fmt=fmt, **kwargs)
    return await _drain(stream, args.limit)


async def _run_list(args: argparse.Namespace, client: DawaClient) -> int:
    query = ListQuery(args.kind, autocomplete=args.autocomplete, host=client.host)
    if args.q:
        query.q(args.q)
    if args.kode:
        query.kode(*args.kode)
    if args.navn:
        query.navn(args.navn)
    return await _drain(await query.iter(client), args.limit)


async def _run_reverse(args: argparse.Namespace, client: DawaClient) -> int:
    query = ReverseQuery(args.kind, args.x, args.y, args.srid, host=client.host)
    record = await query.get(client)
    if record is None:
        return 0
    _emit(record)
    return 1


async def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI; returns the process exit status."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    config = load_config()
    if args.host:
        config.host = args.host.rstrip("/")

    try:
        if args.cmd == "import":
            count = await _run_import(args, config.strict_fields)
        else:
            async with DawaClient.from_config(config) as client:
                if args.cmd == "list":
                    count = await _run_list(args, client)
                else:
                    count = await _run_reverse(args, client)
    except DawaError as exc:
        logger.error("%s failed: %s", args.cmd, exc)
        return 1
    logger.info("%s: wrote %d records", args.cmd, count)
    return 0


def run() -> None:
    """Console-script entry point."""
    sys.exit(asyncio.run(main()))
