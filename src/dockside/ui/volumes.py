from __future__ import annotations

import logging

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.events import Key
from textual.screen import Screen
from textual.widgets import Static

from dockside.engine.types import MessageResponse
from dockside.engine.volumes import PageError, VolumePage
from dockside.ui.widgets import (
    ConfirmDialog,
    ErrorDialog,
    HelpBar,
    VolumeTable,
    describe_error,
    header_labels,
    volume_rows,
)

logger = logging.getLogger(__name__)


class VolumesScreen(Screen):
    """Table of volumes with the delete confirmation drawn over it."""

    def __init__(self, page: VolumePage) -> None:
        super().__init__()
        self.page = page

    def compose(self) -> ComposeResult:
        yield Static("", id="volumes-title", markup=False)
        with Vertical(classes="box", id="volumes-panel"):
            yield VolumeTable(id="volumes-table", cursor_type="row", zebra_stripes=True)
        yield ConfirmDialog("", id="confirm-dialog", markup=False)
        yield HelpBar(self.page.help, id="help-bar")

    def on_screen_resume(self) -> None:
        self.refresh_view()

    async def on_key(self, event: Key) -> None:
        try:
            response = await self.page.handle(event.key)
        except PageError as exc:
            logger.warning("Volumes page error: %s", describe_error(exc))
            event.stop()
            self.refresh_view()
            self.app.push_screen(ErrorDialog(describe_error(exc)))
            return
        if response == MessageResponse.CONSUMED:
            event.stop()
            event.prevent_default()
        self.refresh_view()

    def refresh_view(self) -> None:
        """Redraw the table, title and overlay from the page's current state."""
        if not self.is_mounted:
            return
        volumes = self.page.volumes
        filter_label = "dangling" if self.page.show_dangling else "in use"
        self.query_one("#volumes-title", Static).update(
            f"{self.page.name} ({filter_label}) [{len(volumes)}]"
        )

        table = self.query_one(VolumeTable)
        table.clear(columns=True)
        table.add_columns(*header_labels(self.page.sort_state))
        table.add_rows(volume_rows(volumes))
        if self.page.selected_index is not None:
            table.move_cursor(row=self.page.selected_index)

        self.query_one(ConfirmDialog).show_modal(self.page.modal)
