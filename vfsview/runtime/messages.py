"""Closed set of messages consumed by ``Model.update``.

Input messages come from the reader thread and the resize poller; every other
message is the single result of one detached task.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Union

from ..entry import Entry
from ..preview.classify import PreviewKind


@dataclass(frozen=True)
class KeyMsg:
    key: str


@dataclass(frozen=True)
class MouseMsg:
    """Mouse event with 0-based cell coordinates.

    ``action`` is ``"press"``, ``"release"`` or ``"wheel"``; ``button`` is
    ``"left"``, ``"middle"``, ``"right"``, ``"wheel_up"`` or ``"wheel_down"``.
    """

    action: str
    button: str
    x: int
    y: int


@dataclass(frozen=True)
class ResizeMsg:
    width: int
    height: int


@dataclass(frozen=True)
class DirectoryLoadedMsg:
    path: str
    entries: tuple[Entry, ...]


@dataclass(frozen=True)
class DirectoryLoadFailedMsg:
    path: str
    error: str


@dataclass(frozen=True)
class PreviewLoadedMsg:
    generation: int
    content: str = ""
    error: str = ""
    kind: PreviewKind | None = None
    notice: bool = False


@dataclass(frozen=True)
class CommandExecutedMsg:
    """Completion of a shell command.

    ``sequence`` matches a terminal history entry; ``None`` marks a one-shot
    command submitted from COMMAND mode.
    """

    sequence: int | None
    output: str
    error: str = ""


@dataclass(frozen=True)
class MutationCompletedMsg:
    status: str = ""
    error: str = ""


@dataclass(frozen=True)
class ErrorMsg:
    error: BaseException


Message = Union[
    KeyMsg,
    MouseMsg,
    ResizeMsg,
    DirectoryLoadedMsg,
    DirectoryLoadFailedMsg,
    PreviewLoadedMsg,
    CommandExecutedMsg,
    MutationCompletedMsg,
    ErrorMsg,
]

Task = Callable[[], Message]

_MOUSE_TOKEN_BUTTONS = {
    "MOUSE_WHEEL_UP": ("wheel", "wheel_up"),
    "MOUSE_WHEEL_DOWN": ("wheel", "wheel_down"),
    "MOUSE_LEFT_DOWN": ("press", "left"),
    "MOUSE_LEFT_UP": ("release", "left"),
    "MOUSE_MIDDLE_DOWN": ("press", "middle"),
    "MOUSE_MIDDLE_UP": ("release", "middle"),
    "MOUSE_RIGHT_DOWN": ("press", "right"),
    "MOUSE_RIGHT_UP": ("release", "right"),
}


def message_from_token(token: str) -> KeyMsg | MouseMsg | None:
    """Turn a ``read_key`` token into an input message.

    Mouse tokens carry 1-based coordinates and become 0-based ``MouseMsg``
    values; unrecognised mouse reports yield ``None``.
    """
    if not token:
        return None
    if token.startswith("MOUSE"):
        name, _, coords = token.partition(":")
        mapped = _MOUSE_TOKEN_BUTTONS.get(name)
        if mapped is None:
            return None
        col_s, _, row_s = coords.partition(":")
        try:
            col = int(col_s)
            row = int(row_s)
        except ValueError:
            return None
        action, button = mapped
        return MouseMsg(action=action, button=button, x=col - 1, y=row - 1)
    return KeyMsg(token)


__all__ = [
    "KeyMsg",
    "MouseMsg",
    "ResizeMsg",
    "DirectoryLoadedMsg",
    "DirectoryLoadFailedMsg",
    "PreviewLoadedMsg",
    "CommandExecutedMsg",
    "MutationCompletedMsg",
    "ErrorMsg",
    "Message",
    "Task",
    "message_from_token",
]
