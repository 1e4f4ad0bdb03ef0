"""Main interactive event loop for the terminal UI.

A daemon reader thread decodes stdin into input messages; detached tasks post
their results to the same queue. This thread alone applies messages to the
model, polls the terminal size, and renders.
"""

from __future__ import annotations

import logging
import shutil
import threading
from collections.abc import Callable
from dataclasses import dataclass
from queue import Empty, Queue

from ..input import read_key
from .messages import Message, ResizeMsg, message_from_token
from .model import Model
from .state import ModelState
from .tasks import TaskRunner, drain_messages
from .terminal import TerminalController

LOGGER = logging.getLogger(__name__)

READ_TIMEOUT_MS = 120
POLL_SECONDS = 0.1


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Injected operations used by ``run_main_loop``."""

    render: Callable[[ModelState], None]
    terminal_size: Callable[[], tuple[int, int]]


def default_terminal_size() -> tuple[int, int]:
    term = shutil.get_terminal_size((80, 24))
    return term.columns, term.lines


class InputReader:
    """Daemon thread translating ``read_key`` tokens into queued messages."""

    def __init__(self, stdin_fd: int, inbox: Queue[Message]) -> None:
        self._stdin_fd = stdin_fd
        self._inbox = inbox
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name="vfsview-input", daemon=True)
        self._skip_next_lf = False

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()

    def normalize(self, token: str) -> str | None:
        """Fold CR/LF variants into ``ENTER``, dropping the LF of a CRLF pair."""
        if self._skip_next_lf and token == "ENTER_LF":
            self._skip_next_lf = False
            return None
        self._skip_next_lf = token == "ENTER_CR"
        if token in {"ENTER_CR", "ENTER_LF"}:
            return "ENTER"
        return token

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                token = read_key(self._stdin_fd, timeout_ms=READ_TIMEOUT_MS)
            except OSError as exc:
                LOGGER.error("stdin read failed: %s", exc)
                return
            if not token:
                continue
            normalized = self.normalize(token)
            if normalized is None:
                continue
            message = message_from_token(normalized)
            if message is not None:
                self._inbox.put(message)


def run_main_loop(
    model: Model,
    inbox: Queue[Message],
    runner: TaskRunner,
    callbacks: RuntimeLoopCallbacks,
) -> None:
    """Process messages until the model asks to quit.

    Each iteration checks the terminal size, renders when something changed,
    then waits briefly for the next batch of messages.
    """
    state = model.state
    last_size: tuple[int, int] | None = None
    dirty = True
    runner.submit_all(model.init())

    while not state.should_quit:
        size = callbacks.terminal_size()
        if size != last_size:
            last_size = size
            inbox.put(ResizeMsg(width=size[0], height=size[1]))

        if dirty:
            callbacks.render(state)
            dirty = False

        try:
            first = inbox.get(timeout=POLL_SECONDS)
        except Empty:
            continue
        for message in [first, *drain_messages(inbox)]:
            runner.submit_all(model.update(message))
            dirty = True
            if state.should_quit:
                break


def run_interactive(
    model: Model,
    terminal: TerminalController,
    stdin_fd: int,
    callbacks: RuntimeLoopCallbacks,
) -> None:
    """Run the loop inside raw mode with a reader thread and task pool."""
    inbox: Queue[Message] = Queue()
    runner = TaskRunner(inbox)
    reader = InputReader(stdin_fd, inbox)
    try:
        with terminal.raw_mode():
            reader.start()
            run_main_loop(model, inbox, runner, callbacks)
    finally:
        reader.stop()
        runner.shutdown(wait=False)
        LOGGER.info("event loop stopped")


__all__ = [
    "InputReader",
    "RuntimeLoopCallbacks",
    "default_terminal_size",
    "run_interactive",
    "run_main_loop",
]
