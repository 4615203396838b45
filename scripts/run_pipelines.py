#!/usr/bin/env python3
"""
Pipeline Runner Script

Standalone script for running the analytics pipelines from cron or the
command line.

Usage:
    python scripts/run_pipelines.py                    # Run all pipelines
    python scripts/run_pipelines.py --metrics          # Player metrics only
    python scripts/run_pipelines.py --waiver           # Waiver recommendations for today
    python scripts/run_pipelines.py --waiver --date 2025-01-15
"""

import sys
import os

# Add the project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncio
import argparse
from datetime import date, datetime

import pytz

from core.logging import setup_logging
from core.settings import settings
from db.base import init_db, close_db
from pipelines import run_all_pipelines, run_pipeline
from schemas.common import ApiStatus
from schemas.pipeline import PipelineResult


def print_result(name: str, result: PipelineResult) -> None:
    """Print pipeline result in a readable format."""
    status_icon = "✓" if result.status == ApiStatus.SUCCESS else "✗"
    print(f"\n{status_icon} {name}")
    print(f"  Status: {result.status}")
    print(f"  Message: {result.message}")
    if result.records_processed is not None:
        print(f"  Records: {result.records_processed}")
    if result.duration_seconds is not None:
        print(f"  Duration: {result.duration_seconds:.2f}s")
    if result.error:
        print(f"  Error: {result.error[:200]}")


def parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date '{value}', expected YYYY-MM-DD")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run analytics pipelines for the fantasy basketball platform"
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--metrics",
        action="store_true",
        help="Run only the player metrics pipeline",
    )
    group.add_argument(
        "--waiver",
        action="store_true",
        help="Run only the waiver recommendations pipeline",
    )
    parser.add_argument(
        "--date",
        type=parse_date,
        default=None,
        help="Target date for waiver recommendations (default: today)",
    )
    return parser


async def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(
        log_level=settings.log_level,
        json_format=settings.log_format == "json",
        service_name=settings.service_name,
    )

    print("Initializing database connection...")
    init_db()

    tz = pytz.timezone(settings.timezone)
    start_time = datetime.now(tz)
    print(f"Pipeline run started at {start_time.isoformat()}")

    try:
        if args.metrics:
            results = {"player_metrics": await run_pipeline("player_metrics")}
        elif args.waiver:
            results = {
                "waiver_recommendations": await run_pipeline(
                    "waiver_recommendations", target_date=args.date
                )
            }
        else:
            results = await run_all_pipelines(target_date=args.date)

        print("\n" + "=" * 50)
        print("RESULTS SUMMARY")
        print("=" * 50)

        for name, result in results.items():
            print_result(name.replace("_", " ").title(), result)

        failures = [
            name
            for name, result in results.items()
            if result.status != ApiStatus.SUCCESS
        ]
        if failures:
            print(f"\n⚠ {len(failures)} pipeline(s) failed: {', '.join(failures)}")
            return 1

    finally:
        close_db()

    duration = (datetime.now(tz) - start_time).total_seconds()
    print(f"\nTotal duration: {duration:.2f}s")
    print("Pipeline run completed successfully!")
    return 0


def cli() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
