"""Frame builders for the main, terminal and help views.

The ``build_*`` functions are pure: they turn a ``ModelState`` into exactly
``height`` display rows. ``render_frame`` writes those rows to the terminal
with absolute cursor positioning.
"""

from __future__ import annotations

import os
import sys

from ..entry import Entry
from ..runtime.layout import pane_widths, terminal_history_rows, visible_lines
from ..runtime.state import Mode, ModelState
from .ansi import RESET, clip_ansi_line, display_width, fit_ansi_line
from .help import build_help_view, short_help_bar, terminal_help_bar

TITLE_STYLE = "\033[1;38;5;45m"
BORDER_STYLE = "\033[38;5;240m"
SELECTED_STYLE = "\033[1;38;5;16;48;5;45m"
DIRECTORY_STYLE = "\033[38;5;81m"
MOUNT_STYLE = "\033[38;5;214m"
DIM_STYLE = "\033[2;38;5;250m"
ERROR_STYLE = "\033[1;38;5;203m"
STATUS_STYLE = "\033[38;5;114m"
PROMPT_STYLE = "\033[38;5;229m"
NOTICE_STYLE = "\033[3;38;5;180m"
CURSOR_CELL = "\033[7m \033[0m"

SIZE_COLUMN_WIDTH = 10
MAX_NAME_WIDTH = 40
MIN_NAME_WIDTH = 8


def _box(title: str, body: list[str], width: int, rows: int) -> list[str]:
    """Frame ``body`` in a rounded border ``width`` wide with ``rows`` inner rows."""
    if width < 4:
        return [" " * width for _ in range(rows + 2)]
    inner = width - 4
    label = f" {title} " if title else ""
    label = clip_ansi_line(label, width - 2)
    top = f"{BORDER_STYLE}╭{label}{'─' * max(0, width - 2 - display_width(label))}╮{RESET}"
    out = [top]
    for i in range(rows):
        text = body[i] if i < len(body) else ""
        out.append(f"{BORDER_STYLE}│{RESET} {fit_ansi_line(text, inner)} {BORDER_STYLE}│{RESET}")
    out.append(f"{BORDER_STYLE}╰{'─' * (width - 2)}╯{RESET}")
    return out


def _entry_row(entry: Entry, inner: int, selected: bool) -> str:
    name_width = max(MIN_NAME_WIDTH, min(MAX_NAME_WIDTH, inner - SIZE_COLUMN_WIDTH - 4))
    name = clip_ansi_line(entry.display_name, name_width)
    name = name + " " * max(0, name_width - display_width(name))
    text = f"{entry.icon} {name} {entry.display_size:>{SIZE_COLUMN_WIDTH}}"
    if selected:
        return f"{SELECTED_STYLE}{fit_ansi_line(text, inner)}{RESET}"
    if entry.is_mount:
        return f"{MOUNT_STYLE}{text}{RESET}"
    if entry.is_directory:
        return f"{DIRECTORY_STYLE}{text}{RESET}"
    return text


def file_list_lines(state: ModelState, inner: int, rows: int) -> list[str]:
    if not state.entries:
        return [f"{DIM_STYLE}{'Loading...' if state.loading else '(empty directory)'}{RESET}"]
    window = state.entries[state.scroll_offset : state.scroll_offset + rows]
    return [
        _entry_row(entry, inner, state.scroll_offset + offset == state.cursor)
        for offset, entry in enumerate(window)
    ]


def _entry_details(entry: Entry) -> list[str]:
    kind = "mount point" if entry.is_mount else ("directory" if entry.is_directory else entry.content_type)
    return [
        f"Modified: {entry.display_modified}",
        f"Mode: {entry.display_mode}",
        f"Type: {kind}",
    ]


def preview_lines(state: ModelState, rows: int) -> list[str]:
    """Preview pane body: command output, directory info, or file header plus content."""
    if state.command_output:
        lines = [f"{PROMPT_STYLE}--- Command output (Esc to clear) ---{RESET}"]
        lines.extend(state.command_output.splitlines())
        return lines[:rows]
    entry = state.selected_entry
    if entry is None:
        return []
    if entry.is_directory:
        return [f"{DIRECTORY_STYLE}Directory: {entry.name}{RESET}", f"Path: {entry.path}", *_entry_details(entry)]

    header = [f"File: {entry.name}", f"Size: {entry.display_size}", *_entry_details(entry), "--- Preview ---"]
    budget = max(0, rows - len(header))
    if state.preview_error:
        body = [f"{ERROR_STYLE}Error: {state.preview_error}{RESET}"]
    elif state.preview_loading:
        body = [f"{DIM_STYLE}Loading preview...{RESET}"]
    elif not state.preview_content:
        body = [f"{DIM_STYLE}(empty file){RESET}"]
    elif state.preview_notice:
        body = [f"{NOTICE_STYLE}{line}{RESET}" for line in state.preview_content.splitlines()]
    else:
        body = state.preview_content.splitlines()
    return header + body[:budget]


def status_line(state: ModelState, width: int) -> str:
    total = len(state.entries)
    position = state.cursor + 1 if total else 0
    left = f" {position}/{total} items"
    if state.error_message:
        right = f"{ERROR_STYLE}{state.error_message}{RESET}"
    elif state.status_message:
        right = f"{STATUS_STYLE}{state.status_message}{RESET}"
    else:
        right = ""
    gap = max(1, width - display_width(left) - display_width(right) - 1)
    return clip_ansi_line(f"{left}{' ' * gap}{right}", width)


def input_line(state: ModelState, width: int) -> str:
    if state.mode not in (Mode.INPUT, Mode.COMMAND):
        return ""
    editor = state.input
    before = editor.value[: editor.cursor]
    after = editor.value[editor.cursor :]
    return clip_ansi_line(f"{PROMPT_STYLE}{state.input_prompt}{RESET} {before}{CURSOR_CELL}{after}", width)


def build_main_view(state: ModelState, width: int, height: int) -> list[str]:
    rows = visible_lines(height)
    list_width, preview_width = pane_widths(width, state.show_preview)
    title = f"{TITLE_STYLE}VFS File Manager{RESET} - {state.current_path}"
    if state.loading:
        title += f" {DIM_STYLE}(loading){RESET}"

    list_box = _box("Files", file_list_lines(state, max(1, list_width - 4), rows), list_width, rows)
    if preview_width:
        preview_box = _box("Preview", preview_lines(state, rows), preview_width, rows)
        body = [left + right for left, right in zip(list_box, preview_box)]
    else:
        body = list_box

    lines = [clip_ansi_line(title, width), *body, status_line(state, width), input_line(state, width)]
    lines.append(clip_ansi_line(short_help_bar(), width))
    return _fill(lines, height)


def terminal_history_lines(state: ModelState) -> list[str]:
    lines: list[str] = []
    for entry in state.terminal_history:
        lines.append(
            f"{DIM_STYLE}[{entry.sequence_number}] {entry.working_path} >{RESET} {entry.command_line}"
        )
        if entry.output:
            lines.extend(entry.output.rstrip("\n").splitlines())
        if entry.error:
            lines.append(f"{ERROR_STYLE}Error: {entry.error}{RESET}")
    return lines


def build_terminal_view(state: ModelState, width: int, height: int) -> list[str]:
    """History scrolled ``terminal_scroll`` lines up from the bottom, then the prompt."""
    available = terminal_history_rows(height)
    history = terminal_history_lines(state)
    start = max(len(history) - available - state.terminal_scroll, 0)
    window = history[start : start + available]

    title = f"{TITLE_STYLE}VFS Terminal{RESET} - {state.current_path}"
    lines = [clip_ansi_line(title, width), f"{BORDER_STYLE}{'─' * width}{RESET}"]
    lines.extend(clip_ansi_line(line, width) for line in window)
    lines.extend("" for _ in range(available - len(window)))
    lines.append(f"{BORDER_STYLE}{'─' * width}{RESET}")
    editor = state.terminal_input
    prompt = f"{PROMPT_STYLE}{state.current_path} >{RESET} {editor.value[: editor.cursor]}{CURSOR_CELL}{editor.value[editor.cursor :]}"
    lines.append(clip_ansi_line(prompt, width))
    lines.append(clip_ansi_line(terminal_help_bar(), width))
    return _fill(lines, height)


def _fill(lines: list[str], height: int) -> list[str]:
    lines = lines[:height]
    lines.extend("" for _ in range(height - len(lines)))
    return lines


def build_frame(state: ModelState, width: int | None = None, height: int | None = None) -> list[str]:
    width = state.width if width is None else width
    height = state.height if height is None else height
    if state.mode is Mode.HELP:
        return build_help_view(width, height)
    if state.mode is Mode.TERMINAL:
        return build_terminal_view(state, width, height)
    return build_main_view(state, width, height)


def render_frame(state: ModelState, fd: int | None = None) -> None:
    """Write one full frame to ``fd`` (stdout by default)."""
    out: list[str] = ["\033[H\033[J"]
    for row, line in enumerate(build_frame(state)):
        out.append(f"\033[{row + 1};1H")
        out.append(line)
        out.append(RESET)
    target = sys.stdout.fileno() if fd is None else fd
    os.write(target, "".join(out).encode("utf-8", errors="replace"))


__all__ = [
    "build_frame",
    "build_help_view",
    "build_main_view",
    "build_terminal_view",
    "file_list_lines",
    "preview_lines",
    "render_frame",
    "status_line",
    "terminal_history_lines",
]
