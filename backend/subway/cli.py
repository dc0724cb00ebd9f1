#!/usr/bin/env python3
"""CLI tool for seeding and inspecting a local subway database.

Usage:
    # Create a station
    python -m subway.cli create-station "Seoul Station"

    # List all stations
    python -m subway.cli list-stations

    # List all lines with their stations
    python -m subway.cli list-lines
"""

import argparse
import asyncio
import sys

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from subway.core.database import get_session_factory
from subway.schemas.stations import StationRequest
from subway.services.line_service import LineService
from subway.services.station_service import StationService


async def cmd_create_station(args: argparse.Namespace, session: AsyncSession) -> int:
    """
    Create a station.

    Args:
        args: Parsed command-line arguments
        session: Database session

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        station = await StationService(session).create_station(StationRequest(name=args.name))
    except HTTPException as e:
        print(f"❌ Error: {e.detail}", file=sys.stderr)
        return 1

    print("✅ Created station successfully!")
    print(f"   Station ID: {station.id}")
    print(f"   Name:       {station.name}")
    return 0


async def cmd_list_stations(args: argparse.Namespace, session: AsyncSession) -> int:
    """List all stations."""
    stations = await StationService(session).list_stations()

    if not stations:
        print("No stations found.")
        return 0

    print(f"\n{'ID':<8} {'Name':<40} {'Created'}")
    print("-" * 72)
    for station in stations:
        print(f"{station.id:<8} {station.name:<40} {station.created_at.strftime('%Y-%m-%d %H:%M:%S')}")
    return 0


async def cmd_list_lines(args: argparse.Namespace, session: AsyncSession) -> int:
    """List all lines with their ordered stations."""
    lines = await LineService(session).find_all_lines()

    if not lines:
        print("No lines found.")
        return 0

    print(f"\n{'ID':<8} {'Name':<20} {'Color':<12} {'Stations'}")
    print("-" * 72)
    for line in lines:
        station_names = " → ".join(station.name for station in line.stations)
        print(f"{line.id:<8} {line.name:<20} {line.color:<12} {station_names}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per handler."""
    parser = argparse.ArgumentParser(
        description="Subway database CLI tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    create_station_parser = subparsers.add_parser(
        "create-station",
        help="Create a new station",
    )
    create_station_parser.add_argument("name", type=str, help="Station name (must be unique)")

    subparsers.add_parser("list-stations", help="List all stations")
    subparsers.add_parser("list-lines", help="List all lines with their stations")

    return parser


COMMAND_HANDLERS = {
    "create-station": cmd_create_station,
    "list-stations": cmd_list_stations,
    "list-lines": cmd_list_lines,
}


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the CLI tool.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    handler = COMMAND_HANDLERS[args.command]

    async def run_with_session() -> int:
        async with get_session_factory()() as session:
            return await handler(args, session)

    return asyncio.run(run_with_session())


if __name__ == "__main__":
    sys.exit(main())
