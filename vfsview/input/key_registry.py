"""Reusable key-combo registry primitives."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single action callback."""

    combos: tuple[str, ...]
    handler: Callable[[], object]


class KeyComboRegistry:
    """Small key-dispatch table returning whatever the bound handler returns."""

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[], object]] = {}

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing handlers for same combos."""
        for combo in binding.combos:
            self._handlers[combo] = binding.handler
        return self

    def register_bindings(self, bindings: Iterable[KeyComboBinding]) -> KeyComboRegistry:
        for binding in bindings:
            self.register_binding(binding)
        return self

    def handles(self, key: str) -> bool:
        return key in self._handlers

    def dispatch(self, key: str) -> object:
        """Invoke the handler bound to ``key``; unbound keys return ``None``."""
        handler = self._handlers.get(key)
        if handler is None:
            return None
        return handler()


__all__ = ["KeyComboBinding", "KeyComboRegistry"]
