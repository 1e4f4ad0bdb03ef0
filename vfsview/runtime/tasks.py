"""Detached task execution feeding the inbound message queue."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from queue import Empty, Queue

from .messages import ErrorMsg, Message, Task

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


class TaskRunner:
    """Run zero-argument tasks on a thread pool and enqueue their messages.

    A task that raises yields an ``ErrorMsg`` instead of its result, so every
    submitted task produces exactly one message.
    """

    def __init__(self, inbox: Queue[Message], max_workers: int = DEFAULT_MAX_WORKERS) -> None:
        self._inbox = inbox
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="vfsview-task")
        self._closed = False

    def _run(self, task: Task) -> None:
        try:
            message = task()
        except Exception as exc:
            LOGGER.exception("detached task %r raised", task)
            message = ErrorMsg(error=exc)
        self._inbox.put(message)

    def submit(self, task: Task) -> None:
        if self._closed:
            LOGGER.debug("dropping task submitted after shutdown: %r", task)
            return
        self._executor.submit(self._run, task)

    def submit_all(self, tasks: Iterable[Task]) -> None:
        for task in tasks:
            self.submit(task)

    def shutdown(self, wait: bool = False) -> None:
        """Stop accepting work; queued tasks that have not started are dropped."""
        self._closed = True
        self._executor.shutdown(wait=wait, cancel_futures=True)


def drain_messages(inbox: Queue[Message]) -> list[Message]:
    """Drain all messages currently queued without blocking."""
    out: list[Message] = []
    while True:
        try:
            out.append(inbox.get_nowait())
        except Empty:
            break
    return out


__all__ = ["DEFAULT_MAX_WORKERS", "TaskRunner", "drain_messages"]
