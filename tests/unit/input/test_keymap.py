from __future__ import annotations

import unittest

from vfsview.input import KEY_BINDINGS, Action, KeyComboBinding, KeyComboRegistry, action_for_key, keys_for
from vfsview.input.keymap import HELP_EXIT_KEYS, SHORT_HELP_ACTIONS, TERMINAL_TOGGLE_KEYS, binding_for


class KeymapTests(unittest.TestCase):
    def test_every_action_has_one_binding(self) -> None:
        self.assertEqual({binding.action for binding in KEY_BINDINGS}, set(Action))
        self.assertEqual(len(KEY_BINDINGS), len(Action))

    def test_no_key_is_bound_twice(self) -> None:
        keys = [key for binding in KEY_BINDINGS for key in binding.keys]
        self.assertEqual(len(keys), len(set(keys)))

    def test_lookup_helpers(self) -> None:
        self.assertIs(action_for_key("j"), Action.DOWN)
        self.assertIs(action_for_key("ENTER"), Action.ENTER)
        self.assertIsNone(action_for_key("z"))
        self.assertEqual(keys_for(Action.QUIT), ("q", "CTRL_C"))
        self.assertEqual(binding_for(Action.HELP).label, "?")

    def test_mode_exit_key_sets(self) -> None:
        self.assertEqual(HELP_EXIT_KEYS, {"?", "q", "CTRL_C", "ESC"})
        self.assertEqual(TERMINAL_TOGGLE_KEYS, {"#"})
        self.assertTrue(set(SHORT_HELP_ACTIONS) <= set(Action))


class KeyComboRegistryTests(unittest.TestCase):
    def test_dispatch_returns_handler_result(self) -> None:
        registry = KeyComboRegistry().register_binding(KeyComboBinding(("a", "b"), lambda: "handled"))
        self.assertTrue(registry.handles("b"))
        self.assertEqual(registry.dispatch("a"), "handled")
        self.assertIsNone(registry.dispatch("c"))
        self.assertFalse(registry.handles("c"))

    def test_later_binding_overrides_earlier(self) -> None:
        registry = KeyComboRegistry().register_bindings(
            [
                KeyComboBinding(("x",), lambda: 1),
                KeyComboBinding(("x",), lambda: 2),
            ]
        )
        self.assertEqual(registry.dispatch("x"), 2)


if __name__ == "__main__":
    unittest.main()
