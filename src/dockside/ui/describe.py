from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.events import Key
from textual.screen import Screen
from textual.widgets import DataTable, Static

from dockside.engine.describe import DescribePage
from dockside.engine.types import MessageResponse
from dockside.ui.widgets import HelpBar


class DescribeScreen(Screen):
    def __init__(self, page: DescribePage) -> None:
        super().__init__()
        self.page = page

    def compose(self) -> ComposeResult:
        yield Static("", id="describe-title", markup=False)
        with Vertical(classes="box", id="describe-panel"):
            yield DataTable(id="describe-table", show_header=False, cursor_type="none")
        yield HelpBar(self.page.help, id="help-bar")

    def on_screen_resume(self) -> None:
        self.refresh_view()

    async def on_key(self, event: Key) -> None:
        if await self.page.handle(event.key) == MessageResponse.CONSUMED:
            event.stop()
            event.prevent_default()

    def refresh_view(self) -> None:
        if not self.is_mounted:
            return
        volume = self.page.volume
        title = f"{self.page.name}: {volume.name}" if volume is not None else self.page.name
        self.query_one("#describe-title", Static).update(title)
        table = self.query_one("#describe-table", DataTable)
        table.clear(columns=True)
        table.add_columns("Field", "Value")
        table.add_rows(self.page.details())
