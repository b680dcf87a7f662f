# tests/test_commands.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from duenote.cli.bootstrap import create_initial_state, start_state
from duenote.cli.commands import CommandRegistry, registry
from duenote.core.state import AppState

from .fakes import GrantingGate, InMemoryBlobStore, RecordingNotices, RecordingSink


@pytest.fixture()
def app_state(settings: SimpleNamespace) -> AppState:
    return create_initial_state(
        settings=settings,
        reminder_sink=RecordingSink(),
        notices=RecordingNotices(),
        blob_store=InMemoryBlobStore(),
        permission_gate=GrantingGate(True),
    )


@pytest.mark.asyncio
async def test_command_registry_routes_and_aliases(app_state: AppState) -> None:
    reg = CommandRegistry()
    called: list[list[str]] = []

    async def h(state, args):
        called.append(args)
        return "ok"

    reg.register("a", h, "a", aliases=["x"])

    assert await reg.handle(app_state, "/a 1 2") == "ok"
    assert await reg.handle(app_state, "/X") == "ok"
    assert called == [["1", "2"], []]


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(app_state: AppState) -> None:
    reg = CommandRegistry()
    assert await reg.handle(app_state, "hello") is None
    assert "Unknown command" in (await reg.handle(app_state, "/nope") or "")
    assert "Empty command" in (await reg.handle(app_state, "/") or "")


@pytest.mark.asyncio
async def test_add_list_done_edit_delete_flow(app_state: AppState) -> None:
    await start_state(app_state)

    reply = await registry.handle(app_state, "/add 2999-01-01 10:00 low Water plants | balcony")
    assert reply is not None and reply.startswith("Added #1: Water plants")
    await registry.handle(app_state, "/add 2999-01-01 10:00 high Pay rent | landlord")

    listing = await registry.handle(app_state, "/list") or ""
    lines = listing.splitlines()
    assert "1. [ ] Pay rent (High)" in lines[1]
    assert "2. [ ] Water plants (Low)" in lines[3]
    assert "01 Jan 2999, 10:00 AM" in lines[1]

    assert await registry.handle(app_state, "/done 1") == "Completed: Pay rent."
    assert app_state.store[0].is_completed is True
    assert len(app_state.dispatcher.pending_ids()) == 1

    reply = await registry.handle(app_state, "/edit 1 2999-01-02 09:30 medium Pay rent now | landlord")
    assert reply is not None and reply.startswith("Updated: Pay rent now")
    # Edit keeps completion; the list re-sorts by due date.
    edited = app_state.store[1]
    assert edited.title == "Pay rent now" and edited.is_completed is True

    assert await registry.handle(app_state, "/del 2") == "Deleted: Pay rent now."
    assert [t.title for t in app_state.store.tasks] == ["Water plants"]

    status = await registry.handle(app_state, "/status") or ""
    assert "Tasks: 1 (1 open)" in status
    assert "Reminder lead time: 1 min" in status
    app_state.dispatcher.shutdown()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "line,expected",
    [
        ("/add", "Usage: /add"),
        ("/add 2999-01-01 10:00 low Title only", "Please fill all fields"),
        ("/add 2999-01-01 10:00 urgent T | d", "Unknown priority"),
        ("/add 01/01/2999 10:00 low T | d", "Bad date/time"),
        ("/done 3", "No task #3"),
        ("/del abc", "not a task number"),
        ("/edit", "Usage: /edit"),
    ],
)
async def test_bad_arguments_are_reported_not_raised(app_state: AppState, line: str, expected: str) -> None:
    reply = await registry.handle(app_state, line)
    assert reply is not None and expected in reply
    assert len(app_state.store) == 0


@pytest.mark.asyncio
async def test_denied_permission_is_noticed_but_tasks_still_added(settings: SimpleNamespace) -> None:
    notices = RecordingNotices()
    state = create_initial_state(
        settings=settings,
        reminder_sink=RecordingSink(),
        notices=notices,
        blob_store=InMemoryBlobStore(),
        permission_gate=GrantingGate(False),
    )

    await start_state(state)
    await registry.handle(state, "/add 2999-01-01 10:00 low T | d")

    assert state.notifications_granted is False
    assert notices.notices[0] == ("Permission Denied", "Notification permission is required for reminders")
    assert len(state.store) == 1
    assert "permission denied" in (await registry.handle(state, "/status") or "")
    state.dispatcher.shutdown()
