"""Tourmanager results CLI.

Fetches stages, rankings, selections, points and start-list favorites for one
event and prints them. Useful for checking what the scraper currently serves.
"""

import argparse
import asyncio
import logging
import sys
from collections.abc import Mapping

from dotenv import load_dotenv
from rich import print, print_json
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .config import EventConfig, Resource, load_base_url, load_event_config
from .names import format_rider_name
from .store import DataStore, StoreSnapshot

_RESOURCE_NAMES = {r.field: r for r in Resource}

_RANK_KEYS = ("rnk", "rank", "position")
_NAME_KEYS = ("ridername", "rider", "name")
_POINT_KEYS = ("pnt", "points")

# Status lines go to stderr so --json output stays parseable.
_stderr = Console(stderr=True)


def _first(row: Mapping[str, object], keys: tuple[str, ...]) -> object | None:
    for key in keys:
        value = row.get(key)
        if value not in (None, ""):
            return value
    return None


def format_record(row: object) -> str:
    """Format a record into a compact one-line string.

    Args:
        row: Record from any resource collection.

    Returns:
        str: e.g. ``"#1 Vingegaard (120 pts)"``. Rows without a known rank,
        rider or points field fall back to their sorted ``key=value`` pairs;
        values that are not objects are shown as-is.
    """
    if not isinstance(row, Mapping):
        return str(row)
    rank = _first(row, _RANK_KEYS)
    name = _first(row, _NAME_KEYS)
    pnt = _first(row, _POINT_KEYS)
    parts: list[str] = []
    if rank is not None:
        parts.append(f"#{rank}")
    if isinstance(name, str):
        parts.append(format_rider_name(name))
    if pnt is not None:
        parts.append(f"({pnt} pts)")
    if not parts:
        parts = [f"{k}={row[k]}" for k in sorted(row)]
    return " ".join(parts)


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    p = argparse.ArgumentParser(
        description="Fetch and print tourmanager event data"
    )
    p.add_argument(
        "resources",
        nargs="*",
        metavar="RESOURCE",
        help=(
            "Resources to fetch: "
            + ", ".join(sorted(_RESOURCE_NAMES))
            + " (default: all)"
        ),
    )
    p.add_argument(
        "--event-id", default=None, help="Override TOURMANAGER_EVENT_ID env var"
    )
    p.add_argument(
        "--event-year", default=None, help="Override TOURMANAGER_EVENT_YEAR env var"
    )
    p.add_argument(
        "--base-url", default=None, help="Override TOURMANAGER_BASE_URL env var"
    )
    p.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Request timeout in seconds (default: wait indefinitely)",
    )
    p.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Rows to print per resource (default: 10)",
    )
    p.add_argument(
        "--json", action="store_true", help="Dump raw collections as JSON"
    )
    p.add_argument(
        "--strict",
        action="store_true",
        help="Treat bodies that are not an array of objects as errors",
    )
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p


def _print_snapshot(snap: StoreSnapshot, resources: list[Resource], limit: int) -> None:
    for resource in resources:
        label = resource.field.capitalize()
        rows = snap.records(resource)
        if not isinstance(rows, tuple):
            # not an array: show the raw value
            print(f"[bold]{label}:[/bold] {escape(format_record(rows))}")
            continue
        print(f"[bold]{label}:[/bold] {len(rows)} records")
        for row in rows[: max(0, limit)]:
            print(f"  {escape(format_record(row))}")


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Args:
        argv: Optional list of arguments (defaults to ``sys.argv`` when None).

    Returns:
        int: Process exit code (``0`` on success, ``2`` if a fetch failed).
    """
    load_dotenv()
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=_stderr, show_path=False)],
    )

    unknown = [name for name in args.resources if name not in _RESOURCE_NAMES]
    if unknown:
        _stderr.print(
            f"[red]Error:[/red] unknown resource(s): {escape(', '.join(unknown))}"
        )
        return 2

    env_config = load_event_config()
    config = EventConfig(
        event_id=args.event_id or env_config.event_id,
        event_year=args.event_year or env_config.event_year,
    )
    base_url = args.base_url or load_base_url()
    resources = [_RESOURCE_NAMES[name] for name in args.resources] or list(Resource)

    store = DataStore(
        config=config, base_url=base_url, timeout=args.timeout, strict=args.strict
    )
    _stderr.print(
        f"[bold]Event:[/bold] {escape(config.event_id)} {escape(config.event_year)}"
        f" ({escape(base_url)})"
    )
    asyncio.run(store.fetch_many(resources))
    snap = store.snapshot()

    if args.json:
        print_json(data={r.field: snap.records(r) for r in resources})
    else:
        _print_snapshot(snap, resources, args.limit)

    failed = [r for r in resources if snap.statuses[r].error is not None]
    for r in failed:
        err = escape(str(snap.statuses[r].error))
        _stderr.print(f"[red]Failed to load {r.field}:[/red] {err}")
    return 2 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
