"""Input-layer public API: terminal key decoding and the binding table."""

from .key_registry import KeyComboBinding, KeyComboRegistry
from .keymap import KEY_BINDINGS, Action, KeyBinding, action_for_key, keys_for
from .reader import ESC_SEQUENCE_TIMEOUT_MS, _PENDING_BYTES, read_key

__all__ = [
    "read_key",
    "_PENDING_BYTES",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyComboBinding",
    "KeyComboRegistry",
    "Action",
    "KeyBinding",
    "KEY_BINDINGS",
    "action_for_key",
    "keys_for",
]
