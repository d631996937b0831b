from __future__ import annotations

from dataclasses import dataclass
from functools import cmp_to_key
from typing import Callable, Generic, Iterable, TypeVar

from dockside.engine.types import SortOrder, VolumeRecord, VolumeSortField

F = TypeVar("F")


@dataclass
class SortState(Generic[F]):
    field: F
    order: SortOrder = SortOrder.ASCENDING

    def toggle_or_set(self, sort_field: F) -> None:
        """Flip the order for the current field, or switch field and reset to ascending."""
        if sort_field == self.field:
            self.order = self.order.flipped()
        else:
            self.field = sort_field
            self.order = SortOrder.ASCENDING

    def is_sorted_by(self, sort_field: F) -> bool:
        return sort_field == self.field

    def order_for(self, sort_field: F) -> SortOrder | None:
        if sort_field != self.field:
            return None
        return self.order


VolumeSortState = SortState[VolumeSortField]


def default_volume_sort() -> VolumeSortState:
    return SortState(field=VolumeSortField.NAME)


def _cmp(a: str, b: str) -> int:
    return (a > b) - (a < b)


def volume_comparator(state: VolumeSortState) -> Callable[[VolumeRecord, VolumeRecord], int]:
    sort_field = state.field
    sign = 1 if state.order == SortOrder.ASCENDING else -1

    def compare(a: VolumeRecord, b: VolumeRecord) -> int:
        return sign * _cmp(a.sort_value(sort_field), b.sort_value(sort_field))

    return compare


def sort_volumes(volumes: Iterable[VolumeRecord], state: VolumeSortState) -> list[VolumeRecord]:
    # sorted() is stable, and a negated comparator leaves ties in input order.
    return sorted(volumes, key=cmp_to_key(volume_comparator(state)))
