"""
Vehicle Reference Resolution

CSV files name vehicles by their display name; entries reference them by id.
These two functions translate between the two using the roster the caller
already loaded.
"""

from typing import Optional

import structlog

from vehicle_ledger.models.entries import Vehicle

logger = structlog.get_logger(__name__)

UNKNOWN_VEHICLE = "Unknown Vehicle"


def resolve_vehicle(vehicle_name: str, roster: list[Vehicle]) -> Optional[str]:
    """
    Find the id of the vehicle with this name.

    Matching is case-insensitive and ignores surrounding whitespace.
    If several vehicles share the name, the first one in roster order wins
    and the ambiguity is logged.

    Returns:
        The vehicle id, or None if no vehicle has this name
    """
    if not vehicle_name or not vehicle_name.strip():
        return None

    wanted = vehicle_name.strip().casefold()
    matches = [v for v in roster if v.name.strip().casefold() == wanted]

    if not matches:
        return None

    if len(matches) > 1:
        logger.warning(
            "ambiguous_vehicle_name",
            vehicle_name=vehicle_name,
            vehicle_ids=[v.id for v in matches],
            chosen=matches[0].id,
        )

    return matches[0].id


def vehicle_name(vehicle_id: str, roster: list[Vehicle]) -> str:
    """Display name for a vehicle id, or "Unknown Vehicle"."""
    for vehicle in roster:
        if vehicle.id == vehicle_id:
            return vehicle.name
    return UNKNOWN_VEHICLE
