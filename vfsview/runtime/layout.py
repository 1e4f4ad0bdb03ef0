"""Screen geometry shared by the model and the frame builders.

Main view, top to bottom: title row, list border, ``visible_lines`` entry rows,
list border, status row, input row, help bar. The terminal view reserves a
header, separator, prompt and help rows around its history area.
"""

from __future__ import annotations

RESERVED_ROWS = 8
MIN_VISIBLE_LINES = 5
FILE_LIST_TOP = 2
PREVIEW_HEADER_ROWS = 6
TERMINAL_RESERVED_ROWS = 6
PANE_CHROME_COLUMNS = 4


def visible_lines(height: int) -> int:
    return max(height - RESERVED_ROWS, MIN_VISIBLE_LINES)


def pane_widths(width: int, show_preview: bool) -> tuple[int, int]:
    """Return ``(list_width, preview_width)``; preview width is 0 when hidden."""
    if not show_preview:
        return max(1, width), 0
    list_width = max(1, width // 2)
    return list_width, max(0, width - list_width)


def preview_viewport(width: int, height: int, show_preview: bool) -> tuple[int, int]:
    """Cell budget available to preview content inside the preview box."""
    _, preview_width = pane_widths(width, show_preview)
    columns = max(1, preview_width - PANE_CHROME_COLUMNS)
    rows = max(1, visible_lines(height) - PREVIEW_HEADER_ROWS)
    return columns, rows


def terminal_history_rows(height: int) -> int:
    return max(1, height - TERMINAL_RESERVED_ROWS)


def adjust_scroll(cursor: int, offset: int, window: int) -> int:
    """Return a scroll offset keeping ``cursor`` inside ``[offset, offset + window)``."""
    if cursor < offset:
        return cursor
    if cursor >= offset + window:
        return cursor - window + 1
    return max(0, offset)


__all__ = [
    "FILE_LIST_TOP",
    "MIN_VISIBLE_LINES",
    "PREVIEW_HEADER_ROWS",
    "RESERVED_ROWS",
    "adjust_scroll",
    "pane_widths",
    "preview_viewport",
    "terminal_history_rows",
    "visible_lines",
]
