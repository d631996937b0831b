from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum

from dockside.engine.actions import ModalAction
from dockside.engine.client import VolumeClientError
from dockside.engine.types import MessageResponse

logger = logging.getLogger(__name__)

DEFAULT_CONFIRM_KEYS: tuple[str, ...] = ("enter", "y")
DEFAULT_CANCEL_KEYS: tuple[str, ...] = ("escape", "n")


class ModalKind(str, Enum):
    DELETE_VOLUME = "delete_volume"
    FORCE_DELETE_VOLUME = "force_delete_volume"

    @property
    def escalation(self) -> "ModalKind | None":
        """Kind of the follow-up prompt opened when this kind's action fails."""
        if self == ModalKind.DELETE_VOLUME:
            return ModalKind.FORCE_DELETE_VOLUME
        return None


class ModalState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"


class ActionOutcome(Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    FAILURE_ESCALATABLE = "failure_escalatable"


@dataclass(frozen=True, slots=True)
class ModalUpdate:
    response: MessageResponse
    outcome: ActionOutcome | None = None
    error: VolumeClientError | None = None


class ConfirmationModal:
    """Yes/no prompt guarding one asynchronous action."""

    def __init__(
        self,
        title: str,
        discriminator: ModalKind,
        confirm_keys: tuple[str, ...] = DEFAULT_CONFIRM_KEYS,
        cancel_keys: tuple[str, ...] = DEFAULT_CANCEL_KEYS,
    ) -> None:
        self.title = title
        self.discriminator = discriminator
        self.confirm_keys = confirm_keys
        self.cancel_keys = cancel_keys
        self.state = ModalState.CLOSED
        self.message: str | None = None
        self.action: ModalAction | None = None
        self._lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self.state == ModalState.OPEN

    def open(self, message: str, action: ModalAction | None) -> None:
        if not message:
            raise ValueError("A confirmation modal needs a message")
        self.message = message
        self.action = action
        self.state = ModalState.OPEN

    def close(self) -> None:
        self.state = ModalState.CLOSED
        self.message = None
        self.action = None

    async def update(self, key: str) -> ModalUpdate:
        if not self.is_open:
            return ModalUpdate(MessageResponse.NOT_CONSUMED)

        if key in self.cancel_keys:
            logger.debug("Modal %s cancelled", self.discriminator.value)
            self.close()
            return ModalUpdate(MessageResponse.CONSUMED)

        if key in self.confirm_keys:
            return await self._confirm()

        # An open modal captures all input.
        return ModalUpdate(MessageResponse.CONSUMED)

    async def _confirm(self) -> ModalUpdate:
        action = self.action
        if action is None:
            self.close()
            return ModalUpdate(MessageResponse.CONSUMED, ActionOutcome.SUCCESS)

        async with self._lock:
            try:
                await action.execute()
            except VolumeClientError as exc:
                self.close()
                if self.discriminator.escalation is not None:
                    logger.warning("Action %s failed, offering escalation: %s", self.discriminator.value, exc)
                    return ModalUpdate(MessageResponse.CONSUMED, ActionOutcome.FAILURE_ESCALATABLE, exc)
                logger.warning("Action %s failed: %s", self.discriminator.value, exc)
                return ModalUpdate(MessageResponse.CONSUMED, ActionOutcome.FAILURE, exc)

        self.close()
        return ModalUpdate(MessageResponse.CONSUMED, ActionOutcome.SUCCESS)
