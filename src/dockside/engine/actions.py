from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Protocol

from dockside.engine.client import VolumeClient
from dockside.engine.types import VolumeRecord


class ModalAction(Protocol):
    async def execute(self) -> None: ...


@dataclass(frozen=True)
class DeleteVolume:
    client: VolumeClient
    volume: VolumeRecord
    force: bool = False

    async def execute(self) -> None:
        await self.client.delete_volume(self.volume.name, force=self.force)

    def escalated(self) -> "DeleteVolume":
        """The same removal with `force` raised."""
        return replace(self, force=True)
