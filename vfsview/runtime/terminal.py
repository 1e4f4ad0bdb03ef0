"""Raw-mode session control for the browser.

Switches to the alternate screen with SGR mouse reporting on entry and puts
the saved tty attributes back on exit.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty
from collections.abc import Iterator

# Alternate screen, hidden cursor, button/drag mouse events in SGR encoding.
ENTER_TUI_SEQUENCE = b"\x1b[?1049h\x1b[?25l\x1b[?1000h\x1b[?1002h\x1b[?1006h"
LEAVE_TUI_SEQUENCE = b"\x1b[?1000l\x1b[?1002l\x1b[?1006l\x1b[?25h\x1b[?1049l"


class TerminalController:
    """Own the tty attributes of one interactive session."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_attrs = termios.tcgetattr(stdin_fd)

    def enter(self) -> None:
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, ENTER_TUI_SEQUENCE)

    def leave(self) -> None:
        os.write(self.stdout_fd, LEAVE_TUI_SEQUENCE)
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_attrs)

    @contextlib.contextmanager
    def raw_mode(self) -> Iterator[None]:
        """Run the enclosed block in raw mode; the terminal is restored even on error."""
        self.enter()
        try:
            yield
        finally:
            self.leave()


__all__ = ["ENTER_TUI_SEQUENCE", "LEAVE_TUI_SEQUENCE", "TerminalController"]
