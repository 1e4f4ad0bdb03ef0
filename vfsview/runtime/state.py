from __future__ import annotations

import enum
from dataclasses import dataclass, field

from ..entry import Entry
from ..preview.classify import PreviewKind
from .line_input import LineEditor


class Mode(enum.Enum):
    NORMAL = "normal"
    INPUT = "input"
    COMMAND = "command"
    TERMINAL = "terminal"
    HELP = "help"


class InputKind(enum.Enum):
    NEW_FILE = "new_file"
    NEW_DIRECTORY = "new_directory"
    RENAME = "rename"
    DELETE = "delete"
    COMMAND = "command"


@dataclass
class TerminalEntry:
    """One command in the terminal history; output arrives later."""

    sequence_number: int
    working_path: str
    command_line: str
    output: str = ""
    error: str = ""
    completed: bool = False


@dataclass
class ModelState:
    current_path: str = "/"
    previous_dir_name: str | None = None
    entries: list[Entry] = field(default_factory=list)
    cursor: int = 0
    scroll_offset: int = 0
    mode: Mode = Mode.NORMAL
    input_kind: InputKind | None = None
    input_target: Entry | None = None
    input: LineEditor = field(default_factory=LineEditor)
    input_prompt: str = ""
    preview_generation: int = 0
    preview_content: str = ""
    preview_error: str = ""
    preview_kind: PreviewKind | None = None
    preview_notice: bool = False
    preview_loading: bool = False
    show_preview: bool = True
    terminal_history: list[TerminalEntry] = field(default_factory=list)
    terminal_input: LineEditor = field(default_factory=LineEditor)
    terminal_scroll: int = 0
    command_counter: int = 0
    command_output: str = ""
    clipboard_path: str | None = None
    status_message: str = ""
    error_message: str = ""
    loading: bool = False
    width: int = 80
    height: int = 24
    last_click_time: float = 0.0
    last_click_index: int = -1
    last_click_y: int = -1
    should_quit: bool = False

    @property
    def selected_entry(self) -> Entry | None:
        if 0 <= self.cursor < len(self.entries):
            return self.entries[self.cursor]
        return None


__all__ = ["Mode", "InputKind", "TerminalEntry", "ModelState"]
