"""Command-line tokenizer and adapter for the embedded shell.

The adapter forwards tokens verbatim to the storage collaborator; its only
added behaviour is synthesising an error message for silent non-zero exits.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from .errors import StorageError
from .storage.backend import StorageService

LOGGER = logging.getLogger(__name__)

QUOTE_CHARS = frozenset({'"', "'"})


def tokenize(line: str) -> list[str]:
    """Split ``line`` on whitespace, honouring single and double quotes.

    Quote characters are consumed. Inside a quoted run the other quote
    character is literal. An unterminated quote is permissive: everything
    after it still accumulates into the current token.

    >>> tokenize('open "my file.txt" here')
    ['open', 'my file.txt', 'here']
    """
    tokens: list[str] = []
    current: list[str] = []
    quote: str | None = None
    for ch in line:
        if ch in QUOTE_CHARS:
            if quote is None:
                quote = ch
            elif ch == quote:
                quote = None
            else:
                current.append(ch)
            continue
        if quote is None and ch.isspace():
            if current:
                tokens.append("".join(current))
                current = []
            continue
        current.append(ch)
    if current:
        tokens.append("".join(current))
    return tokens


@dataclass(frozen=True)
class CommandResult:
    output: str
    exit_code: int
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0 and not self.error


class CommandAdapter:
    """Run tokenized command lines against a storage collaborator."""

    def __init__(self, storage: StorageService) -> None:
        self.storage = storage

    def execute(self, tokens: Sequence[str]) -> CommandResult:
        if not tokens:
            return CommandResult(output="", exit_code=0)
        try:
            output, exit_code = self.storage.execute(list(tokens))
        except StorageError as exc:
            LOGGER.warning("command %r failed: %s", tokens[0], exc)
            return CommandResult(output="", exit_code=1, error=str(exc))
        error = ""
        if exit_code != 0:
            error = f"command exited with code {exit_code}"
        return CommandResult(output=output, exit_code=exit_code, error=error)

    def run(self, line: str) -> CommandResult:
        return self.execute(tokenize(line))


__all__ = ["tokenize", "CommandResult", "CommandAdapter"]
