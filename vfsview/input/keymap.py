"""Static key-binding table for the browser.

Each action lists the key tokens (as produced by ``read_key`` after ENTER
normalization) that trigger it in normal mode, plus the labels shown in the
help screen and the short help bar.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Action(enum.Enum):
    UP = "up"
    DOWN = "down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    TOP = "top"
    BOTTOM = "bottom"
    ENTER = "enter"
    BACK = "back"
    DELETE = "delete"
    RENAME = "rename"
    COPY_PATH = "copy_path"
    NEW_FILE = "new_file"
    NEW_DIRECTORY = "new_directory"
    TOGGLE_PREVIEW = "toggle_preview"
    RELOAD = "reload"
    TERMINAL = "terminal"
    COMMAND = "command"
    QUIT = "quit"
    HELP = "help"


@dataclass(frozen=True)
class KeyBinding:
    action: Action
    keys: tuple[str, ...]
    label: str
    description: str


KEY_BINDINGS: tuple[KeyBinding, ...] = (
    KeyBinding(Action.UP, ("UP", "k"), "↑/k", "move up"),
    KeyBinding(Action.DOWN, ("DOWN", "j"), "↓/j", "move down"),
    KeyBinding(Action.PAGE_UP, ("PAGE_UP", "CTRL_U"), "PgUp/Ctrl+U", "page up"),
    KeyBinding(Action.PAGE_DOWN, ("PAGE_DOWN", "CTRL_D"), "PgDn/Ctrl+D", "page down"),
    KeyBinding(Action.TOP, ("HOME", "g"), "Home/g", "go to top"),
    KeyBinding(Action.BOTTOM, ("END", "G"), "End/G", "go to bottom"),
    KeyBinding(Action.ENTER, ("ENTER", "l"), "Enter/l", "open directory"),
    KeyBinding(Action.BACK, ("BACKSPACE", "h"), "Backspace/h", "parent directory"),
    KeyBinding(Action.DELETE, ("d", "DELETE"), "d/Del", "delete"),
    KeyBinding(Action.RENAME, ("r",), "r", "rename"),
    KeyBinding(Action.COPY_PATH, ("y",), "y", "copy path"),
    KeyBinding(Action.NEW_FILE, ("n",), "n", "new file"),
    KeyBinding(Action.NEW_DIRECTORY, ("N",), "N", "new directory"),
    KeyBinding(Action.TOGGLE_PREVIEW, ("p",), "p", "toggle preview"),
    KeyBinding(Action.RELOAD, ("CTRL_R",), "Ctrl+R", "reload"),
    KeyBinding(Action.TERMINAL, ("#",), "#", "terminal"),
    KeyBinding(Action.COMMAND, (":",), ":", "run command"),
    KeyBinding(Action.QUIT, ("q", "CTRL_C"), "q/Ctrl+C", "quit"),
    KeyBinding(Action.HELP, ("?",), "?", "help"),
)

_BINDINGS_BY_ACTION = {binding.action: binding for binding in KEY_BINDINGS}

# Keys that leave the help screen.
HELP_EXIT_KEYS = frozenset(_BINDINGS_BY_ACTION[Action.HELP].keys + _BINDINGS_BY_ACTION[Action.QUIT].keys + ("ESC",))
TERMINAL_TOGGLE_KEYS = frozenset(_BINDINGS_BY_ACTION[Action.TERMINAL].keys)

SHORT_HELP_ACTIONS: tuple[Action, ...] = (
    Action.ENTER,
    Action.BACK,
    Action.NEW_FILE,
    Action.DELETE,
    Action.TERMINAL,
    Action.HELP,
    Action.QUIT,
)


def binding_for(action: Action) -> KeyBinding:
    return _BINDINGS_BY_ACTION[action]


def keys_for(action: Action) -> tuple[str, ...]:
    return _BINDINGS_BY_ACTION[action].keys


def action_for_key(key: str) -> Action | None:
    for binding in KEY_BINDINGS:
        if key in binding.keys:
            return binding.action
    return None


__all__ = [
    "Action",
    "KeyBinding",
    "KEY_BINDINGS",
    "HELP_EXIT_KEYS",
    "TERMINAL_TOGGLE_KEYS",
    "SHORT_HELP_ACTIONS",
    "action_for_key",
    "binding_for",
    "keys_for",
]
