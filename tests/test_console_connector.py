# tests/test_console_connector.py

from __future__ import annotations

import asyncio
import builtins
import threading

import pytest

from duenote.connectors.console_connector import _start_stdin_reader


def _scripted_input(lines: list[str], end: type[BaseException] = EOFError):
    feed = iter(lines)

    def _input(prompt: str = "") -> str:
        try:
            return next(feed)
        except StopIteration:
            raise end() from None

    return _input


@pytest.mark.asyncio
async def test_stdin_reader_forwards_lines_then_eof(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(builtins, "input", _scripted_input(["/list", "/help"]))
    lines: asyncio.Queue[str | None] = asyncio.Queue()

    t = _start_stdin_reader(asyncio.get_running_loop(), lines)
    got = [await asyncio.wait_for(lines.get(), timeout=5) for _ in range(3)]

    assert got == ["/list", "/help", None]
    t.join(timeout=5)
    assert not t.is_alive()


@pytest.mark.parametrize("end", [EOFError, KeyboardInterrupt, RuntimeError])
def test_stdin_reader_exits_quietly_when_loop_is_closed(
    monkeypatch: pytest.MonkeyPatch, end: type[BaseException]
) -> None:
    errors: list[threading.ExceptHookArgs] = []
    monkeypatch.setattr(threading, "excepthook", errors.append)
    monkeypatch.setattr(builtins, "input", _scripted_input([], end))

    loop = asyncio.new_event_loop()
    lines: asyncio.Queue[str | None] = asyncio.Queue()
    loop.close()

    t = _start_stdin_reader(loop, lines)
    t.join(timeout=5)

    assert not t.is_alive()
    assert errors == []
    assert lines.empty()
