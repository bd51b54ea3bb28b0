"""
Diff between a household's desired pickup windows and its stored parcels.

Parcels are identified by (location, earliest, latest) compared as UTC
instants. A window moved to another location at the same time is therefore
one delete plus one insert. Past windows and past or picked-up parcels are
history: they are never inserted and never deleted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Set, Tuple, Union

from app.core.zoned_clock import ZonedClock, ensure_utc

ParcelKey = Tuple[str, datetime, datetime]


def parcel_key(location_id: str, earliest: datetime, latest: datetime) -> ParcelKey:
    return (location_id, ensure_utc(earliest), ensure_utc(latest))


@dataclass(frozen=True)
class TimeWindow:
    earliest: datetime
    latest: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "earliest", ensure_utc(self.earliest))
        object.__setattr__(self, "latest", ensure_utc(self.latest))
        if self.earliest >= self.latest:
            raise ValueError("Pickup window must end after it starts")


@dataclass(frozen=True)
class DesiredParcels:
    location_id: str
    windows: Tuple[TimeWindow, ...]


@dataclass(frozen=True)
class ExistingParcel:
    id: str
    location_id: str
    earliest: datetime
    latest: datetime
    is_picked_up: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "earliest", ensure_utc(self.earliest))
        object.__setattr__(self, "latest", ensure_utc(self.latest))

    @property
    def key(self) -> ParcelKey:
        return parcel_key(self.location_id, self.earliest, self.latest)


@dataclass(frozen=True)
class ParcelInsert:
    location_id: str
    earliest: datetime
    latest: datetime

    @property
    def key(self) -> ParcelKey:
        return parcel_key(self.location_id, self.earliest, self.latest)


@dataclass
class ParcelOperations:
    to_insert: List[ParcelInsert] = field(default_factory=list)
    to_delete: List[str] = field(default_factory=list)
    unchanged: List[str] = field(default_factory=list)
    skipped_past: List[TimeWindow] = field(default_factory=list)

    @property
    def is_noop(self) -> bool:
        return not self.to_insert and not self.to_delete

    @property
    def location_ids(self) -> Set[str]:
        return {insert.location_id for insert in self.to_insert}


def calculate_parcel_operations(
    desired: Iterable[DesiredParcels],
    existing: Iterable[ExistingParcel],
    now: Union[ZonedClock, datetime],
) -> ParcelOperations:
    now_utc = now.instant if isinstance(now, ZonedClock) else ensure_utc(now)
    operations = ParcelOperations()

    wanted: Dict[ParcelKey, ParcelInsert] = {}
    for group in desired:
        for window in group.windows:
            if window.earliest <= now_utc:
                operations.skipped_past.append(window)
                continue
            insert = ParcelInsert(group.location_id, window.earliest, window.latest)
            wanted.setdefault(insert.key, insert)

    existing = list(existing)
    stored_keys = {parcel.key for parcel in existing}
    for parcel in existing:
        if parcel.is_picked_up or parcel.earliest <= now_utc:
            continue
        if parcel.key in wanted:
            operations.unchanged.append(parcel.id)
        else:
            operations.to_delete.append(parcel.id)

    operations.to_insert = [insert for key, insert in wanted.items() if key not in stored_keys]
    return operations
