from __future__ import annotations

import asyncio
import logging

from dockside.engine.config import Command, Config
from dockside.engine.context import AppContext, Transition
from dockside.engine.help import PageHelp, PageHelpBuilder
from dockside.engine.types import MessageResponse, VolumeRecord

logger = logging.getLogger(__name__)

NAME = "Describe"


class DescribePage:
    """Detail view of one volume. Leaving it replays the context's continuation."""

    def __init__(self, tx: asyncio.Queue[Transition], config: Config | None = None) -> None:
        self.name = NAME
        self._tx = tx
        self._config = config or Config()
        self._context = AppContext()
        self.help: PageHelp = (
            PageHelpBuilder(NAME).add_input(self._config.keys.label(Command.BACK), "back").build()
        )

    @property
    def volume(self) -> VolumeRecord | None:
        return self._context.volume

    def initialise(self, context: AppContext) -> None:
        self._context = context

    def details(self) -> list[tuple[str, str]]:
        volume = self._context.volume
        if volume is None:
            return []
        rows = [
            ("Name", volume.name),
            ("Driver", volume.driver),
            ("Mountpoint", volume.mountpoint),
            ("Created", volume.created_at or ""),
            ("Scope", volume.scope),
        ]
        rows.extend((f"Label {key}", value) for key, value in volume.labels)
        return rows

    async def handle(self, key: str) -> MessageResponse:
        if key not in self._config.keys.keys_for(Command.BACK):
            return MessageResponse.NOT_CONSUMED
        then = self._context.then
        if then is None:
            then = Transition.to_volumes()
        logger.debug("Leaving describe page for %s", then.page.value)
        await self._tx.put(then)
        return MessageResponse.CONSUMED
