"""Terminal-safe text and Pygments syntax highlighting for previews.

Runs inside preview tasks, never on the message-processing thread.
"""

from __future__ import annotations

import logging
import posixpath
import re
from functools import lru_cache

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

LOGGER = logging.getLogger(__name__)

DEFAULT_STYLE = "monokai"
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


@lru_cache(maxsize=16)
def _formatter_for_style(style: str) -> Terminal256Formatter:
    try:
        get_style_by_name(style)
    except ClassNotFound:
        LOGGER.warning("unknown pygments style %r, using %s", style, DEFAULT_STYLE)
        style = DEFAULT_STYLE
    return Terminal256Formatter(style=style)


def colorize_source(source: str, path: str, style: str = DEFAULT_STYLE) -> str:
    """Return ``source`` with ANSI colours chosen by the lexer for ``path``.

    Files without a matching lexer are returned unchanged.
    """
    try:
        lexer = get_lexer_for_filename(posixpath.basename(path), source)
    except ClassNotFound:
        return source
    if isinstance(lexer, TextLexer):
        return source
    rendered = highlight(source, lexer, _formatter_for_style(style))
    if not source.endswith("\n") and rendered.endswith("\n"):
        rendered = rendered[:-1]
    return rendered


def prepare_text_preview(source: str, path: str, style: str = DEFAULT_STYLE) -> str:
    return colorize_source(sanitize_terminal_text(source), path, style)


__all__ = ["DEFAULT_STYLE", "colorize_source", "prepare_text_preview", "sanitize_terminal_text"]
