# src/duenote/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import threading
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

_EOF = None


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleReminderSink:
    """Prints fired reminders to the terminal."""

    async def deliver(self, *, notification_id: int, title: str, body: str) -> None:
        _print_ts(f"[REMINDER] {title}\n    {body}")


class ConsoleNoticeSink:
    """Prints non-fatal notices (the console stand-in for a snackbar)."""

    def notify(self, title: str, message: str) -> None:
        _print_ts(f"[NOTICE] {title}: {message}")


def _start_stdin_reader(loop: asyncio.AbstractEventLoop, lines: asyncio.Queue[str | None]) -> threading.Thread:
    """
    Read stdin on a daemon thread and hand lines to the loop.

    input() blocks; the loop must stay free so reminder timers fire meanwhile.
    A daemon thread also doesn't hold up interpreter exit on Ctrl+C.
    """

    def _reader() -> None:
        while True:
            try:
                line: str | None = input(">>> ")
            except (EOFError, KeyboardInterrupt, RuntimeError):
                # RuntimeError: no usable sys.stdin.
                line = _EOF
            try:
                loop.call_soon_threadsafe(lines.put_nowait, line)
            except RuntimeError:
                # Loop already closed.
                return
            if line is _EOF:
                return

    t = threading.Thread(target=_reader, name="console-stdin", daemon=True)
    t.start()
    return t


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (tasks=%d).", len(state.store))
    _print_ts("[CONSOLE] Use /help for commands, /list to see your tasks, /exit to quit.\n")

    lines: asyncio.Queue[str | None] = asyncio.Queue()
    _start_stdin_reader(asyncio.get_running_loop(), lines)

    while True:
        raw = await lines.get()
        if raw is _EOF:
            logger.info("Console EOF received, exiting.")
            break

        user_input = raw.strip()
        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = await command_registry.handle(state, user_input)
        except Exception:
            logger.exception("Command failed: %s", user_input)
            _print_ts("[ERROR] Command failed, see the log for details.")
            continue

        if reply is None:
            _print_ts("Commands start with '/'. Use /help to list them.")
            continue

        print(reply, flush=True)
