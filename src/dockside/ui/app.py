from __future__ import annotations

import asyncio
import logging

from textual.app import App, ComposeResult
from textual.binding import Binding

from dockside.engine.client import VolumeClient
from dockside.engine.config import Config
from dockside.engine.context import PageId, Transition
from dockside.engine.describe import DescribePage
from dockside.engine.volumes import PageError, VolumePage
from dockside.ui.describe import DescribeScreen
from dockside.ui.volumes import VolumesScreen
from dockside.ui.widgets import ErrorDialog, describe_error

logger = logging.getLogger(__name__)


class DocksideApp(App[None]):
    CSS_PATH = "app.tcss"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self, client: VolumeClient, config: Config | None = None) -> None:
        super().__init__()
        self.config = config or Config()
        self.client = client
        self.transitions: asyncio.Queue[Transition] = asyncio.Queue()
        self.volume_page = VolumePage(client, self.transitions, self.config)
        self.describe_page = DescribePage(self.transitions, self.config)
        self._active_page: PageId | None = None

    def compose(self) -> ComposeResult:
        return []

    def on_mount(self) -> None:
        self.install_screen(VolumesScreen(self.volume_page), name=PageId.VOLUMES.value)
        self.install_screen(DescribeScreen(self.describe_page), name=PageId.DESCRIBE.value)
        self.transitions.put_nowait(Transition.to_volumes())
        self.run_worker(
            self._route_transitions(),
            name="transitions",
            group="transitions",
            exclusive=True,
        )

    async def _route_transitions(self) -> None:
        while True:
            transition = await self.transitions.get()
            await self.apply_transition(transition)

    async def apply_transition(self, transition: Transition) -> None:
        """Initialise the target page with the transition's context and show it."""
        logger.debug("Transition to %s", transition.page.value)
        error: PageError | None = None
        if transition.page == PageId.VOLUMES:
            try:
                await self.volume_page.initialise(transition.context)
            except PageError as exc:
                logger.warning("Volumes page failed to initialise: %s", describe_error(exc))
                error = exc
        elif transition.page == PageId.DESCRIBE:
            self.describe_page.initialise(transition.context)

        name = transition.page.value
        if self._active_page is None:
            await self.push_screen(name)
        elif self._active_page != transition.page:
            await self.switch_screen(name)
        else:
            screen = self.get_screen(name)
            if isinstance(screen, (VolumesScreen, DescribeScreen)):
                screen.refresh_view()
        self._active_page = transition.page

        if error is not None:
            await self.push_screen(ErrorDialog(describe_error(error)))
