"""Single-line text buffer used by INPUT, COMMAND and TERMINAL modes."""

from __future__ import annotations

from dataclasses import dataclass

MAX_INPUT_CHARS = 256


@dataclass
class LineEditor:
    value: str = ""
    cursor: int = 0
    focused: bool = False
    limit: int = MAX_INPUT_CHARS

    def focus(self, initial: str = "") -> None:
        self.value = initial[: self.limit]
        self.cursor = len(self.value)
        self.focused = True

    def blur(self) -> None:
        self.focused = False

    def clear(self) -> None:
        self.value = ""
        self.cursor = 0

    def handle_key(self, key: str) -> bool:
        """Apply one editing key; returns ``False`` for keys it ignores."""
        if key == "BACKSPACE":
            if self.cursor > 0:
                self.value = self.value[: self.cursor - 1] + self.value[self.cursor :]
                self.cursor -= 1
            return True
        if key == "DELETE":
            self.value = self.value[: self.cursor] + self.value[self.cursor + 1 :]
            return True
        if key == "LEFT":
            self.cursor = max(0, self.cursor - 1)
            return True
        if key == "RIGHT":
            self.cursor = min(len(self.value), self.cursor + 1)
            return True
        if key == "HOME":
            self.cursor = 0
            return True
        if key == "END":
            self.cursor = len(self.value)
            return True
        if key == "CTRL_U":
            self.clear()
            return True
        if key == "TAB":
            return self.insert(" ")
        if len(key) == 1 and key.isprintable():
            return self.insert(key)
        return False

    def insert(self, text: str) -> bool:
        if len(self.value) + len(text) > self.limit:
            return False
        self.value = self.value[: self.cursor] + text + self.value[self.cursor :]
        self.cursor += len(text)
        return True


__all__ = ["LineEditor", "MAX_INPUT_CHARS"]
