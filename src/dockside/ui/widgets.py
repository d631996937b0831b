from __future__ import annotations

from typing import Iterable

from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import DataTable, Label, Static

from dockside.engine.help import PageHelp
from dockside.engine.modal import ConfirmationModal
from dockside.engine.sorting import VolumeSortState
from dockside.engine.types import SortOrder, VolumeRecord, VolumeSortField

COLUMNS: tuple[tuple[str, VolumeSortField], ...] = (
    ("Name", VolumeSortField.NAME),
    ("Driver", VolumeSortField.DRIVER),
    ("Mountpoint", VolumeSortField.MOUNTPOINT),
    ("Created", VolumeSortField.CREATED),
)


def render_column_header(title: str, is_sorted: bool, order: SortOrder = SortOrder.ASCENDING) -> str:
    if not is_sorted:
        return title
    arrow = "▲" if order == SortOrder.ASCENDING else "▼"
    return f"{title} {arrow}"


def header_labels(sort_state: VolumeSortState) -> list[str]:
    return [
        render_column_header(
            title,
            sort_state.is_sorted_by(sort_field),
            sort_state.order_for(sort_field) or SortOrder.ASCENDING,
        )
        for title, sort_field in COLUMNS
    ]


def volume_rows(volumes: Iterable[VolumeRecord]) -> list[tuple[str, str, str, str]]:
    return [(v.name, v.driver, v.mountpoint, v.created_at or "") for v in volumes]


def describe_error(exc: BaseException) -> str:
    """Flatten an exception and its causes into one line."""
    parts: list[str] = []
    current: BaseException | None = exc
    while current is not None:
        text = str(current)
        if text and text not in parts:
            parts.append(text)
        current = current.__cause__
    return ": ".join(parts) or exc.__class__.__name__


class VolumeTable(DataTable, can_focus=False):
    """Row table driven entirely by the page controller's selection."""


class HelpBar(Static):
    def __init__(self, page_help: PageHelp, **kwargs) -> None:
        super().__init__(page_help.render(), markup=False, **kwargs)


class ConfirmDialog(Static):
    """Overlay showing the page's open confirmation modal, hidden otherwise."""

    def show_modal(self, modal: ConfirmationModal | None) -> None:
        if modal is None or not modal.is_open:
            self.display = False
            return
        confirm = "/".join(modal.confirm_keys)
        cancel = "/".join(modal.cancel_keys)
        self.border_title = modal.title
        self.update(f"{modal.message}\n\n<{confirm}> yes    <{cancel}> no")
        self.display = True


class ErrorDialog(ModalScreen[None]):
    """Dismissible error message; any key closes it."""

    def __init__(self, message: str) -> None:
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        yield Container(
            Label("Error", classes="error-dialog-title"),
            Static(self.message, markup=False, id="error-message"),
            Static("press any key to dismiss", classes="error-dialog-hint"),
            classes="error-dialog",
        )

    def on_key(self, event: Key) -> None:
        event.stop()
        self.dismiss(None)
