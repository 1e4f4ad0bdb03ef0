"""Help screen content and the short key hint bar.

Built from the binding table so labels never drift from the actual keys.
Rendering helpers here are presentation-only and side-effect free.
"""

from __future__ import annotations

from ..input.keymap import KEY_BINDINGS, SHORT_HELP_ACTIONS, binding_for
from .ansi import clip_ansi_line, fit_ansi_line

KEY_STYLE = "\033[38;5;229m"
SECTION_STYLE = "\033[1;38;5;81m"
FRAME_STYLE = "\033[38;5;45m"
DIM_STYLE = "\033[2;38;5;250m"
RESET = "\033[0m"
HELP_TITLE = "vfsview help"

TERMINAL_HELP_LINES: tuple[str, ...] = (
    f"  {KEY_STYLE}Enter{RESET} run command   {KEY_STYLE}Up/Down{RESET} scroll   {KEY_STYLE}PgUp/PgDn{RESET} scroll 10",
    f"  {KEY_STYLE}#{RESET}/{KEY_STYLE}Esc{RESET} back to the file list",
)

INPUT_HELP_LINES: tuple[str, ...] = (
    f"  {KEY_STYLE}Enter{RESET} submit   {KEY_STYLE}Esc{RESET} cancel   {KEY_STYLE}Ctrl+U{RESET} clear line",
    f"  {KEY_STYLE}Left/Right/Home/End{RESET} move   {KEY_STYLE}Backspace/Del{RESET} erase",
)

MOUSE_HELP_LINES: tuple[str, ...] = (
    "  wheel moves the selection   click selects   double-click opens",
    "  right click goes to the parent directory",
)


def key_hint(label: str, description: str) -> str:
    return f"{KEY_STYLE}{label}{RESET} {description}"


def short_help_bar() -> str:
    hints = [key_hint(binding_for(action).label, binding_for(action).description) for action in SHORT_HELP_ACTIONS]
    return "  ".join(hints)


def terminal_help_bar() -> str:
    return "  ".join(
        (
            key_hint("Enter", "run"),
            key_hint("↑/↓", "scroll"),
            key_hint("PgUp/PgDn", "page"),
            key_hint("#/Esc", "back"),
        )
    )


def help_lines() -> list[str]:
    lines = ["", f"{SECTION_STYLE}File list{RESET}"]
    for binding in KEY_BINDINGS:
        lines.append(f"  {KEY_STYLE}{binding.label:<14}{RESET} {binding.description}")
    lines.extend(["", f"{SECTION_STYLE}Mouse{RESET}", *MOUSE_HELP_LINES])
    lines.extend(["", f"{SECTION_STYLE}Input prompts{RESET}", *INPUT_HELP_LINES])
    lines.extend(["", f"{SECTION_STYLE}Terminal{RESET}", *TERMINAL_HELP_LINES])
    lines.extend(["", f"{DIM_STYLE}Press ? / Esc / q to close{RESET}"])
    return lines


def build_help_view(width: int, height: int) -> list[str]:
    """Return ``height`` rows drawing the help modal centred on a blank screen."""
    modal_w = min(84, max(40, width - 10))
    modal_w = min(modal_w, max(4, width))
    body = help_lines()
    modal_h = min(len(body) + 3, max(4, height))
    x = max(0, (width - modal_w) // 2)
    y = max(0, (height - modal_h) // 2)
    inner_w = max(1, modal_w - 2)
    inner_h = max(1, modal_h - 2)

    title = f" {HELP_TITLE} "
    top_fill = max(0, inner_w - len(title))
    modal_rows = [f"{FRAME_STYLE}╭{title}{'─' * top_fill}╮{RESET}"]
    for i in range(inner_h):
        text = body[i] if i < len(body) else ""
        modal_rows.append(f"{FRAME_STYLE}│{RESET}{fit_ansi_line(' ' + text, inner_w)}{FRAME_STYLE}│{RESET}")
    modal_rows.append(f"{FRAME_STYLE}╰{'─' * inner_w}╯{RESET}")

    rows: list[str] = []
    for row in range(height):
        index = row - y
        if 0 <= index < len(modal_rows):
            rows.append(clip_ansi_line(" " * x + modal_rows[index], width))
        else:
            rows.append("")
    return rows


__all__ = [
    "build_help_view",
    "help_lines",
    "key_hint",
    "short_help_bar",
    "terminal_help_bar",
]
