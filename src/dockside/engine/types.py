"""Common types and enums."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SortOrder(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"

    def flipped(self) -> "SortOrder":
        if self == SortOrder.ASCENDING:
            return SortOrder.DESCENDING
        return SortOrder.ASCENDING


class VolumeSortField(str, Enum):
    """Sortable columns of the volumes table."""

    NAME = "name"
    DRIVER = "driver"
    MOUNTPOINT = "mountpoint"
    CREATED = "created"


class MessageResponse(Enum):
    CONSUMED = "consumed"
    NOT_CONSUMED = "not_consumed"


@dataclass(frozen=True)
class VolumeRecord:
    """Snapshot of one volume as reported by the runtime."""

    name: str
    driver: str
    mountpoint: str
    created_at: str | None = None
    scope: str = "local"
    labels: tuple[tuple[str, str], ...] = ()

    def sort_value(self, sort_field: VolumeSortField) -> str:
        if sort_field == VolumeSortField.NAME:
            return self.name
        elif sort_field == VolumeSortField.DRIVER:
            return self.driver
        elif sort_field == VolumeSortField.MOUNTPOINT:
            return self.mountpoint
        return self.created_at or ""
