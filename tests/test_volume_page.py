"""Tests for the volumes page controller: key routing, escalation and drill-down."""

import asyncio

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from dockside.engine.client import VolumeClientError
from dockside.engine.config import Command, Config, KeyBindings
from dockside.engine.context import AppContext, PageId
from dockside.engine.describe import DescribePage
from dockside.engine.modal import ConfirmationModal, ModalKind
from dockside.engine.types import MessageResponse, SortOrder, VolumeSortField
from dockside.engine.volumes import FORCE_DELETE_MESSAGE, ModalStateError, PageError
from tests.helpers.factories import drain, make_client, make_page, make_volume
from tests.helpers.invariants import assert_modal_open_or_absent, assert_selection_valid


def _names(page) -> list[str]:
    return [v.name for v in page.volumes]


def test_initialise_selects_first_row() -> None:
    page, _client, _tx = make_page()
    asyncio.run(page.initialise())
    assert _names(page) == ["v1", "v2", "v3"]
    assert page.selected_index == 0
    assert page.selected_volume is not None
    assert page.selected_volume.name == "v1"


def test_initialise_selects_named_volume() -> None:
    page, _client, _tx = make_page()
    asyncio.run(page.initialise(AppContext(volume=make_volume("v3"))))
    assert page.selected_volume is not None
    assert page.selected_volume.name == "v3"


def test_initialise_with_unknown_volume_keeps_first_row() -> None:
    page, _client, _tx = make_page()
    asyncio.run(page.initialise(AppContext(volume=make_volume("gone"))))
    assert page.selected_index == 0


def test_initialise_on_empty_list_selects_nothing() -> None:
    page, _client, _tx = make_page(make_client([]))
    asyncio.run(page.initialise())
    assert page.selected_index is None
    assert page.selected_volume is None


def test_initialise_failure_is_wrapped() -> None:
    client = make_client()
    client.fail_listing = True
    page, _client, _tx = make_page(client)
    with pytest.raises(PageError, match="unable to refresh volumes") as info:
        asyncio.run(page.initialise())
    assert isinstance(info.value.__cause__, VolumeClientError)
    assert_selection_valid(page)
    assert page.selected_index is None


def test_failed_reinitialise_keeps_last_good_list_and_selection() -> None:
    page, client, _tx = make_page()

    async def scenario() -> None:
        await page.initialise(AppContext(volume=make_volume("v2")))
        client.fail_listing = True
        with pytest.raises(PageError):
            await page.initialise()

    asyncio.run(scenario())
    assert _names(page) == ["v1", "v2", "v3"]
    assert page.selected_volume is not None
    assert page.selected_volume.name == "v2"
    assert_selection_valid(page)


def test_navigation_keys() -> None:
    page, _client, _tx = make_page()

    async def scenario() -> list[int | None]:
        await page.initialise()
        seen = []
        for key in ("j", "down", "down", "k", "G", "g", "up"):
            assert await page.handle(key) == MessageResponse.CONSUMED
            seen.append(page.selected_index)
        return seen

    assert asyncio.run(scenario()) == [1, 2, 2, 1, 2, 0, 0]


def test_down_at_last_index_leaves_selection_unchanged() -> None:
    page, _client, _tx = make_page()

    async def scenario() -> None:
        await page.initialise(AppContext(volume=make_volume("v3")))
        await page.handle("j")

    asyncio.run(scenario())
    assert page.selected_index == 2


def test_bottom_on_empty_list_is_guarded() -> None:
    page, _client, _tx = make_page(make_client([]))

    async def scenario() -> MessageResponse:
        await page.initialise()
        return await page.handle("G")

    assert asyncio.run(scenario()) == MessageResponse.CONSUMED
    assert page.selected_index is None


def test_unknown_key_is_not_consumed() -> None:
    page, _client, _tx = make_page()

    async def scenario() -> MessageResponse:
        await page.initialise()
        return await page.handle("x")

    assert asyncio.run(scenario()) == MessageResponse.NOT_CONSUMED


def test_sort_keys_toggle_and_resort() -> None:
    client = make_client([])
    client.volumes = [
        make_volume("a", driver="nfs"),
        make_volume("b", driver="local"),
        make_volume("c", driver="overlay"),
    ]
    page, _client, _tx = make_page(client)

    async def scenario() -> None:
        await page.initialise()
        await page.handle("N")
        assert page.sort_state.order == SortOrder.DESCENDING
        assert _names(page) == ["c", "b", "a"]
        # The next refresh keeps the chosen order.
        await page.handle("x")
        assert _names(page) == ["c", "b", "a"]
        await page.handle("D")
        assert page.sort_state.field == VolumeSortField.DRIVER
        assert page.sort_state.order == SortOrder.ASCENDING
        assert _names(page) == ["b", "a", "c"]

    asyncio.run(scenario())


def test_toggle_dangling_changes_next_refresh() -> None:
    client = make_client(["v1", "v2", "v3"], in_use=["v2"])
    page, _client, _tx = make_page(client)

    async def scenario() -> None:
        await page.initialise()
        assert _names(page) == ["v1", "v3"]
        await page.handle("alt+d")
        assert page.show_dangling is False
        # Toggling does not re-fetch on its own.
        assert _names(page) == ["v1", "v3"]
        await page.handle("x")
        assert _names(page) == ["v2"]

    asyncio.run(scenario())
    assert client.list_calls == [True, True, False]


def test_refresh_failure_keeps_last_good_list() -> None:
    page, client, _tx = make_page()

    async def scenario() -> None:
        await page.initialise()
        await page.handle("j")
        client.fail_listing = True
        with pytest.raises(PageError, match="unable to retrieve list of volumes") as info:
            await page.handle("j")
        assert isinstance(info.value.__cause__, VolumeClientError)

    asyncio.run(scenario())
    assert _names(page) == ["v1", "v2", "v3"]
    assert page.selected_index == 1


def test_refresh_clamps_selection_when_list_shrinks() -> None:
    page, client, _tx = make_page()

    async def scenario() -> None:
        await page.initialise(AppContext(volume=make_volume("v3")))
        client.volumes = client.volumes[:1]
        await page.handle("x")

    asyncio.run(scenario())
    assert page.selected_index == 0


def test_delete_opens_modal_and_cancel_discards_it() -> None:
    page, client, _tx = make_page()

    async def scenario() -> None:
        await page.initialise()
        assert await page.handle("ctrl+d") == MessageResponse.CONSUMED
        assert page.modal is not None
        assert page.modal.discriminator == ModalKind.DELETE_VOLUME
        assert page.modal.message == "Are you sure you wish to delete volume v1?"
        # Navigation is captured by the open modal.
        assert await page.handle("j") == MessageResponse.CONSUMED
        assert page.selected_index == 0
        assert await page.handle("escape") == MessageResponse.CONSUMED
        assert page.modal is None

    asyncio.run(scenario())
    assert client.delete_calls == []


def test_delete_with_nothing_selected_is_not_consumed() -> None:
    page, _client, _tx = make_page(make_client([]))

    async def scenario() -> MessageResponse:
        await page.initialise()
        return await page.handle("ctrl+d")

    assert asyncio.run(scenario()) == MessageResponse.NOT_CONSUMED
    assert page.modal is None


def test_confirmed_delete_removes_volume_on_next_refresh() -> None:
    page, client, _tx = make_page()

    async def scenario() -> None:
        await page.initialise()
        await page.handle("ctrl+d")
        await page.handle("enter")
        assert page.modal is None
        await page.handle("x")

    asyncio.run(scenario())
    assert client.delete_calls == [("v1", False)]
    assert _names(page) == ["v2", "v3"]


def test_failed_delete_escalates_to_force_prompt() -> None:
    client = make_client(["v1", "v2", "v3"], in_use=["v1", "v2", "v3"])
    page, _client, _tx = make_page(client, show_dangling=False)

    async def scenario() -> None:
        await page.initialise()
        await page.handle("j")
        assert page.selected_volume is not None
        assert page.selected_volume.name == "v2"
        await page.handle("ctrl+d")
        assert await page.handle("enter") == MessageResponse.CONSUMED

    asyncio.run(scenario())
    assert client.delete_calls == [("v2", False)]
    modal = page.modal
    assert modal is not None
    assert modal.is_open
    assert modal.discriminator == ModalKind.FORCE_DELETE_VOLUME
    assert modal.message == FORCE_DELETE_MESSAGE
    assert modal.action.volume.name == "v2"
    assert modal.action.force is True


def test_confirmed_force_delete_succeeds() -> None:
    client = make_client(["v1", "v2"], in_use=["v1", "v2"])
    page, _client, _tx = make_page(client, show_dangling=False)

    async def scenario() -> None:
        await page.initialise()
        await page.handle("ctrl+d")
        await page.handle("enter")
        await page.handle("enter")
        await page.handle("x")

    asyncio.run(scenario())
    assert client.delete_calls == [("v1", False), ("v1", True)]
    assert page.modal is None
    assert _names(page) == ["v2"]


def test_escalated_failure_propagates() -> None:
    client = make_client(["v1", "v2"], in_use=["v1", "v2"], undeletable=["v1"])
    page, _client, _tx = make_page(client, show_dangling=False)

    async def scenario() -> None:
        await page.initialise()
        await page.handle("ctrl+d")
        await page.handle("enter")
        with pytest.raises(PageError) as info:
            await page.handle("enter")
        assert isinstance(info.value.__cause__, VolumeClientError)

    asyncio.run(scenario())
    assert client.delete_calls == [("v1", False), ("v1", True)]
    assert page.modal is None


def test_escalation_without_delete_action_is_an_internal_error() -> None:
    page, _client, _tx = make_page()

    class _Failing:
        async def execute(self) -> None:
            raise VolumeClientError("boom")

    async def scenario() -> None:
        await page.initialise()
        modal = ConfirmationModal("Delete", ModalKind.DELETE_VOLUME)
        modal.open("Really?", _Failing())
        page.modal = modal
        with pytest.raises(ModalStateError):
            await page.handle("enter")

    asyncio.run(scenario())


def test_describe_sends_drill_down_transition() -> None:
    page, _client, tx = make_page()

    async def scenario() -> None:
        await page.initialise()
        await page.handle("j")
        assert await page.handle("d") == MessageResponse.CONSUMED

    asyncio.run(scenario())
    (transition,) = drain(tx)
    assert transition.page == PageId.DESCRIBE
    assert transition.context.volume_name == "v2"
    assert transition.context.then is not None
    assert transition.context.then.page == PageId.VOLUMES
    assert transition.context.then.context.volume_name == "v2"


def test_describe_without_selection_raises() -> None:
    page, _client, tx = make_page(make_client([]))

    async def scenario() -> None:
        await page.initialise()
        with pytest.raises(PageError, match="no volume selected"):
            await page.handle("d")

    asyncio.run(scenario())
    assert drain(tx) == []


def test_rebound_keys_drive_dispatch() -> None:
    keys = dict(KeyBindings().keys)
    keys[Command.DOWN] = ("s",)
    keys[Command.DELETE] = ("X",)
    page, _client, _tx = make_page(config=Config(keys=KeyBindings.from_mapping(keys)))

    async def scenario() -> None:
        await page.initialise()
        assert await page.handle("j") == MessageResponse.NOT_CONSUMED
        await page.handle("s")
        assert page.selected_index == 1
        await page.handle("X")
        assert page.modal is not None

    asyncio.run(scenario())
    assert ("X", "delete") in page.help.inputs


@settings(max_examples=30)
@given(
    names=st.lists(st.text(alphabet="abcdefgh", min_size=1, max_size=6), min_size=1, max_size=8, unique=True),
    data=st.data(),
)
def test_drill_down_round_trip_restores_selection(names: list[str], data: st.DataObject) -> None:
    page, _client, tx = make_page(make_client(names))
    describe = DescribePage(tx)
    steps = data.draw(st.integers(min_value=0, max_value=len(names) - 1))

    async def scenario() -> str:
        await page.initialise()
        for _ in range(steps):
            await page.handle("j")
        assert page.selected_volume is not None
        before = page.selected_volume.name

        await page.handle("d")
        forward = tx.get_nowait()
        describe.initialise(forward.context)
        assert describe.volume is not None and describe.volume.name == before

        await page.handle("g")
        assert await describe.handle("escape") == MessageResponse.CONSUMED
        back = tx.get_nowait()
        assert back.page == PageId.VOLUMES
        await page.initialise(back.context)
        return before

    before = asyncio.run(scenario())
    assert page.selected_volume is not None
    assert page.selected_volume.name == before
    assert_selection_valid(page)
    assert_modal_open_or_absent(page)
