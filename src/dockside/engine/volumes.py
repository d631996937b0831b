from __future__ import annotations

import asyncio
import logging

from dockside.engine.actions import DeleteVolume
from dockside.engine.client import VolumeClient, VolumeClientError
from dockside.engine.config import Command, Config
from dockside.engine.context import AppContext, Transition, drill_down_context
from dockside.engine.help import PageHelp, PageHelpBuilder
from dockside.engine.modal import ActionOutcome, ConfirmationModal, ModalKind
from dockside.engine.navigation import ListNavigation
from dockside.engine.sorting import VolumeSortState, default_volume_sort, sort_volumes
from dockside.engine.types import MessageResponse, VolumeRecord, VolumeSortField

logger = logging.getLogger(__name__)

NAME = "Volumes"
FORCE_DELETE_MESSAGE = "An error occurred deleting this volume; would you like to try to force remove?"

_SORT_COMMANDS: dict[Command, VolumeSortField] = {
    Command.SORT_NAME: VolumeSortField.NAME,
    Command.SORT_DRIVER: VolumeSortField.DRIVER,
    Command.SORT_CREATED: VolumeSortField.CREATED,
    Command.SORT_MOUNTPOINT: VolumeSortField.MOUNTPOINT,
}


class PageError(Exception):
    """A recoverable failure while handling a key; shown to the user and dismissed."""


class ModalStateError(RuntimeError):
    """The page and its modal disagree about what is open."""


class VolumePage:
    """
    Controller for the volumes table.

    Every key first refreshes and resorts the list, then goes to the open
    confirmation modal if there is one, and only then to the page's own
    key table. Page changes are requested by putting a Transition on `tx`.
    """

    def __init__(
        self,
        client: VolumeClient,
        tx: asyncio.Queue[Transition],
        config: Config | None = None,
    ) -> None:
        self.name = NAME
        self._client = client
        self._tx = tx
        self._config = config or Config()
        self._dispatch = self._config.keys.page_table()
        self._volumes: list[VolumeRecord] = []
        self._navigation = ListNavigation()
        self.modal: ConfirmationModal | None = None
        self.sort_state: VolumeSortState = default_volume_sort()
        self.show_dangling = self._config.show_dangling
        self.help = self._build_help()

    @property
    def volumes(self) -> tuple[VolumeRecord, ...]:
        return tuple(self._volumes)

    @property
    def selected_index(self) -> int | None:
        return self._navigation.selected

    @property
    def selected_volume(self) -> VolumeRecord | None:
        idx = self._navigation.selected
        if idx is None or not (0 <= idx < len(self._volumes)):
            return None
        return self._volumes[idx]

    def _build_help(self) -> PageHelp:
        keys = self._config.keys
        return (
            PageHelpBuilder(NAME)
            .add_input(keys.label(Command.DELETE), "delete")
            .add_input(keys.label(Command.TOGGLE_DANGLING), "dangling")
            .add_input(keys.label(Command.TOP), "top")
            .add_input(keys.label(Command.BOTTOM), "bottom")
            .add_input(keys.label(Command.DESCRIBE), "describe")
            .build()
        )

    async def initialise(self, context: AppContext | None = None) -> None:
        """Load the list and select the volume named by `context`, else the first row."""
        try:
            await self._refresh()
        except VolumeClientError as exc:
            logger.warning("Initial volume refresh failed: %s", exc)
            raise PageError("unable to refresh volumes") from exc

        self._navigation.top(len(self._volumes))
        name = context.volume_name if context is not None else None
        if name is None:
            return
        for idx, volume in enumerate(self._volumes):
            if volume.name == name:
                self._navigation.select(idx)
                break

    async def handle(self, key: str) -> MessageResponse:
        try:
            await self._refresh()
        except VolumeClientError as exc:
            logger.warning("Volume refresh failed: %s", exc)
            raise PageError("unable to retrieve list of volumes") from exc

        response = await self._update_modal(key)
        if response == MessageResponse.CONSUMED:
            return response

        command = self._dispatch.get(key)
        if command is None:
            return MessageResponse.NOT_CONSUMED
        logger.debug("Volumes page command %s (key %s)", command.value, key)

        length = len(self._volumes)
        if command == Command.UP:
            self._navigation.decrement(length)
        elif command == Command.DOWN:
            self._navigation.increment(length)
        elif command == Command.TOP:
            self._navigation.top(length)
        elif command == Command.BOTTOM:
            self._navigation.bottom(length)
        elif command in _SORT_COMMANDS:
            self.sort_state.toggle_or_set(_SORT_COMMANDS[command])
            self._sort()
        elif command == Command.TOGGLE_DANGLING:
            self.show_dangling = not self.show_dangling
        elif command == Command.DELETE:
            volume = self.selected_volume
            if volume is None:
                return MessageResponse.NOT_CONSUMED
            self._open_modal(
                DeleteVolume(self._client, volume),
                f"Are you sure you wish to delete volume {volume.name}?",
                ModalKind.DELETE_VOLUME,
            )
        elif command == Command.DESCRIBE:
            await self._tx.put(Transition.to_describe(self.get_context()))
        else:
            return MessageResponse.NOT_CONSUMED
        return MessageResponse.CONSUMED

    def get_context(self) -> AppContext:
        volume = self.selected_volume
        if volume is None:
            raise PageError("no volume selected")
        return drill_down_context(volume)

    async def _refresh(self) -> None:
        volumes = await self._client.list_volumes(dangling=self.show_dangling)
        self._volumes = list(volumes)
        self._sort()
        self._navigation.clamp(len(self._volumes))

    def _sort(self) -> None:
        self._volumes = sort_volumes(self._volumes, self.sort_state)

    def _open_modal(self, action: DeleteVolume, message: str, kind: ModalKind) -> None:
        keys = self._config.keys
        modal = ConfirmationModal(
            "Delete",
            kind,
            confirm_keys=keys.keys_for(Command.CONFIRM),
            cancel_keys=keys.keys_for(Command.CANCEL),
        )
        modal.open(message, action)
        self.modal = modal

    async def _update_modal(self, key: str) -> MessageResponse:
        modal = self.modal
        if modal is None or not modal.is_open:
            return MessageResponse.NOT_CONSUMED

        action = modal.action
        update = await modal.update(key)
        if not modal.is_open:
            self.modal = None

        if update.outcome == ActionOutcome.FAILURE_ESCALATABLE:
            escalation = modal.discriminator.escalation
            if escalation is None or not isinstance(action, DeleteVolume):
                raise ModalStateError(f"modal {modal.discriminator.value} cannot be escalated")
            self._open_modal(action.escalated(), FORCE_DELETE_MESSAGE, escalation)
        elif update.outcome == ActionOutcome.FAILURE:
            raise PageError(f"{modal.title} failed: {update.error}") from update.error
        return update.response
