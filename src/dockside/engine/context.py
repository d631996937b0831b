"""Page transitions and the context they carry between pages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from dockside.engine.types import VolumeRecord


class PageId(str, Enum):
    VOLUMES = "volumes"
    DESCRIBE = "describe"


@dataclass(frozen=True)
class AppContext:
    """What the next page should show, and optionally where to go after it.

    `then` is a single stored transition, never a chain the pages walk: the
    describe page sends it back as-is when the user leaves.
    """

    volume: VolumeRecord | None = None
    then: Transition | None = None

    @property
    def volume_name(self) -> str | None:
        return self.volume.name if self.volume is not None else None


@dataclass(frozen=True)
class Transition:
    page: PageId
    context: AppContext = AppContext()

    @staticmethod
    def to_volumes(context: AppContext | None = None) -> "Transition":
        return Transition(page=PageId.VOLUMES, context=context or AppContext())

    @staticmethod
    def to_describe(context: AppContext) -> "Transition":
        return Transition(page=PageId.DESCRIBE, context=context)


def drill_down_context(volume: VolumeRecord) -> AppContext:
    """Context for describing `volume` that returns to the volumes page with it selected."""
    then = Transition.to_volumes(AppContext(volume=volume))
    return AppContext(volume=volume, then=then)
