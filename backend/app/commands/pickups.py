#!/usr/bin/env python
# backend/app/commands/pickups.py
"""
Pickup scheduling commands.

Runs the availability, schedule-impact and reconciliation operations
against the configured database and prints the result as JSON.

Usage:
    python -m app.commands.pickups check-availability <location_id> <date> [time]
    python -m app.commands.pickups impact-of-change <location_id> <proposed_json> [--exclude ID]
    python -m app.commands.pickups impact-of-deletion <location_id> <schedule_id>
    python -m app.commands.pickups reconcile <household_id> <desired_json>

JSON arguments are given inline or as @path/to/file.json.
"""

import argparse
import json
import logging
from pathlib import Path
import sys
from typing import Any, Callable, List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.time_provider import SystemTimeProvider, TimeProvider
from app.database import SessionLocal
from app.schemas.food_parcel import DesiredParcelsInput
from app.schemas.results import (
    AvailabilityCheckResult,
    OperationResult,
    exceptions_from_validation_error,
)
from app.schemas.schedule import ScheduleInput
from app.services.location_availability_service import LocationAvailabilityService
from app.services.parcel_reconciliation_service import ParcelReconciliationService
from app.services.schedule_impact_service import ScheduleImpactService

logger = logging.getLogger(__name__)

_DESIRED_ADAPTER = TypeAdapter(List[DesiredParcelsInput])


def _load_json(raw: str) -> Any:
    """Parse an inline JSON argument, or the file it names when prefixed with @."""
    if raw.startswith("@"):
        raw = Path(raw[1:]).read_text(encoding="utf-8")
    return json.loads(raw)


def _emit(result: OperationResult) -> int:
    print(json.dumps(result.model_dump(mode="json"), indent=2))
    if not result.success:
        return 1
    if isinstance(result, AvailabilityCheckResult) and not result.available:
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Pickup scheduling operations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m app.commands.pickups check-availability 01J... 2025-06-10 14:30
  python -m app.commands.pickups impact-of-change 01J... @proposed.json --exclude 01J...
  python -m app.commands.pickups impact-of-deletion 01J... 01J...
  python -m app.commands.pickups reconcile 01J... '[{"location_id": "01J...", "windows": []}]'
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    availability_parser = subparsers.add_parser(
        "check-availability", help="Check whether a location is open"
    )
    availability_parser.add_argument("location_id")
    availability_parser.add_argument("date", help="Local date, YYYY-MM-DD")
    availability_parser.add_argument("time", nargs="?", help="Local time, HH:mm")

    change_parser = subparsers.add_parser(
        "impact-of-change", help="Count parcels a new or edited schedule would strand"
    )
    change_parser.add_argument("location_id")
    change_parser.add_argument("proposed", help="Schedule JSON, inline or @file")
    change_parser.add_argument(
        "--exclude", dest="exclude_schedule_id", help="Schedule being replaced by the proposal"
    )

    deletion_parser = subparsers.add_parser(
        "impact-of-deletion", help="Count parcels a schedule deletion would strand"
    )
    deletion_parser.add_argument("location_id")
    deletion_parser.add_argument("schedule_id")

    reconcile_parser = subparsers.add_parser(
        "reconcile", help="Replace a household's future pickup windows"
    )
    reconcile_parser.add_argument("household_id")
    reconcile_parser.add_argument("desired", help="Desired parcels JSON, inline or @file")

    return parser


def run_command(
    args: argparse.Namespace, db: Session, time_provider: TimeProvider
) -> OperationResult:
    if args.command == "check-availability":
        service = LocationAvailabilityService(db, time_provider)
        return service.check_location_availability(args.location_id, args.date, args.time)

    if args.command == "impact-of-change":
        try:
            proposed = ScheduleInput.model_validate(_load_json(args.proposed))
        except ValidationError as exc:
            return OperationResult.failure(*exceptions_from_validation_error(exc, "proposed"))
        return ScheduleImpactService(db, time_provider).check_parcels_affected_by_schedule_change(
            args.location_id, proposed, args.exclude_schedule_id
        )

    if args.command == "impact-of-deletion":
        return ScheduleImpactService(
            db, time_provider
        ).check_parcels_affected_by_schedule_deletion(args.location_id, args.schedule_id)

    if args.command == "reconcile":
        try:
            desired = _DESIRED_ADAPTER.validate_python(_load_json(args.desired))
        except ValidationError as exc:
            return OperationResult.failure(*exceptions_from_validation_error(exc, "parcels"))
        return ParcelReconciliationService(db, time_provider).update_household_parcels(
            args.household_id, desired
        )

    raise ValueError(f"Unknown command: {args.command}")


def main(
    argv: Optional[Sequence[str]] = None,
    session_factory: Optional[Callable[[], Session]] = None,
    time_provider: Optional[TimeProvider] = None,
) -> int:
    """Main entry point for the pickups command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 1

    db = (session_factory or SessionLocal)()
    try:
        try:
            result = run_command(args, db, time_provider or SystemTimeProvider())
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Could not read JSON argument: %s", exc)
            print(json.dumps({"success": False, "errors": [{"message": str(exc)}]}, indent=2))
            return 1
        return _emit(result)
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(
        level=settings.log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    sys.exit(main())
