"""Pickup schedule parsing, change detection and imminence evaluation."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
import logging
from typing import Any, Iterable, Mapping

from homeassistant.util import dt as dt_util

from .const import IMMINENT_WINDOW_MS, KEY_MATAVFALL, KEY_RESTAVFALL, PICKUP_HOUR
from .exceptions import ScheduleFetchError

_LOGGER = logging.getLogger(__name__)


class WasteType(str, Enum):
    """Waste streams tracked by the integration."""

    ORGANIC = KEY_MATAVFALL
    RESIDUAL = KEY_RESTAVFALL


class PickupStatus(str, Enum):
    """Result of evaluating the next pickup against the current time."""

    IMMINENT = "imminent"
    NOT_IMMINENT = "not_imminent"
    STALE = "stale"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class PickupEntry:
    """A single upcoming pickup as reported by the remote service."""

    type: WasteType
    date: str


PickupRecord = dict[WasteType, str]


def parse_schedule(payload: Any) -> list[PickupEntry]:
    """
    Parse the next-pickup response into pickup entries.

    Args:
        payload: Decoded JSON from the next-pickup endpoint

    Returns:
        Entries for recognised waste types, in response order

    Raises:
        ScheduleFetchError: If the payload is not a list
    """
    if not isinstance(payload, list):
        raise ScheduleFetchError(f"Unexpected schedule payload: {payload!r}")

    entries = []
    for item in payload:
        if not isinstance(item, dict):
            _LOGGER.warning("Skipping malformed schedule item: %s", item)
            continue

        raw_type = item.get("type")
        pickup_date = item.get("pickup_date")
        if not raw_type or not pickup_date:
            _LOGGER.warning("Skipping schedule item without type or date: %s", item)
            continue

        try:
            waste_type = WasteType(str(raw_type).lower())
        except ValueError:
            _LOGGER.warning("Skipping unknown waste type: %s", raw_type)
            continue

        entries.append(PickupEntry(type=waste_type, date=str(pickup_date)))

    return entries


def detect_changes(
    previous: Mapping[WasteType, str | None], incoming: Iterable[PickupEntry]
) -> tuple[PickupRecord, set[WasteType]]:
    """
    Merge incoming pickup dates into the previous record.

    Dates are compared as exact values; a type with no previous date counts
    as changed.

    Returns:
        Tuple of the merged record and the set of changed waste types
    """
    updated: PickupRecord = {
        waste_type: value for waste_type, value in previous.items() if value is not None
    }
    changed: set[WasteType] = set()

    for entry in incoming:
        if updated.get(entry.type) != entry.date:
            updated[entry.type] = entry.date
            changed.add(entry.type)

    return updated, changed


def parse_pickup_date(value: str | date | None) -> date | None:
    """Parse a stored pickup date, returning None when absent or invalid."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if (parsed := dt_util.parse_date(value)) is not None:
        return parsed
    if (parsed_dt := dt_util.parse_datetime(value)) is not None:
        return parsed_dt.date()
    return None


def next_pickup(organic: str | date | None, residual: str | date | None) -> date | None:
    """Return the earliest of the two pickup dates, or None if either is missing."""
    organic_date = parse_pickup_date(organic)
    residual_date = parse_pickup_date(residual)
    if organic_date is None or residual_date is None:
        return None
    return min(organic_date, residual_date)


def evaluate_pickup(
    now: datetime, organic: str | date | None, residual: str | date | None
) -> PickupStatus:
    """
    Evaluate whether the next pickup is less than 24 hours away.

    The earliest date is placed at 06:00 in the time zone of ``now``. A pickup
    at or before ``now`` means the stored data is stale.
    """
    pickup_date = next_pickup(organic, residual)
    if pickup_date is None:
        return PickupStatus.UNKNOWN

    pickup_at = datetime.combine(pickup_date, time(PICKUP_HOUR), tzinfo=now.tzinfo)
    now = now.replace(microsecond=now.microsecond // 1000 * 1000)

    if now.tzinfo is not None:
        diff = pickup_at.astimezone(timezone.utc) - now.astimezone(timezone.utc)
    else:
        diff = pickup_at - now

    if diff <= timedelta(0):
        return PickupStatus.STALE
    if diff < timedelta(milliseconds=IMMINENT_WINDOW_MS):
        return PickupStatus.IMMINENT
    return PickupStatus.NOT_IMMINENT
