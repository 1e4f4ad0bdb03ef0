"""Normal-mode behaviour of the interaction model.

Tasks returned by ``Model.update`` are executed synchronously here and their
messages fed straight back, which mirrors the runtime loop minus threading.
"""

from __future__ import annotations

import errno
import unittest
from unittest import mock

from vfsview.config import AppConfig
from vfsview.runtime.messages import (
    DirectoryLoadedMsg,
    ErrorMsg,
    KeyMsg,
    MouseMsg,
    ResizeMsg,
)
from vfsview.runtime.layout import FILE_LIST_TOP
from vfsview.runtime.model import Model
from vfsview.runtime.state import Mode
from vfsview.storage import MemoryBackend, VirtualFileSystem
from vfsview.storage.types import OpenFlags


def _store(files: dict[str, bytes] | None = None, dirs: tuple[str, ...] = ()) -> VirtualFileSystem:
    fs = VirtualFileSystem()
    fs.mount("/", MemoryBackend())
    for directory in dirs:
        fs.create_directory(directory)
    for path, data in (files or {}).items():
        with fs.open_for_write(path, OpenFlags.WRITE | OpenFlags.CREATE) as handle:
            handle.write(data)
    return fs


def _run(model: Model, tasks) -> None:
    pending = list(tasks)
    while pending:
        task = pending.pop(0)
        pending.extend(model.update(task()))


def _press(model: Model, *keys: str) -> None:
    for key in keys:
        _run(model, model.update(KeyMsg(key)))


def _started(fs: VirtualFileSystem, **kwargs) -> Model:
    model = Model(fs, **kwargs)
    _run(model, model.init())
    return model


def _names(model: Model) -> list[str]:
    return [entry.name for entry in model.state.entries]


class CursorTests(unittest.TestCase):
    def test_cursor_and_scroll_stay_in_bounds(self) -> None:
        fs = _store({f"/f{index:02d}.txt": b"x" for index in range(40)})
        model = _started(fs)
        window = model.visible_lines
        self.assertEqual(window, 16)

        keys = ["DOWN"] * 20 + ["PAGE_DOWN"] * 5 + ["UP"] * 3 + ["PAGE_UP"] * 2 + ["END", "HOME", "G", "k", "j"]
        for key in keys:
            _press(model, key)
            state = model.state
            self.assertGreaterEqual(state.cursor, 0)
            self.assertLess(state.cursor, len(state.entries))
            self.assertLessEqual(state.scroll_offset, state.cursor)
            self.assertLess(state.cursor, state.scroll_offset + window)

        self.assertEqual(model.state.cursor, 39)

    def test_page_moves_are_ten_rows(self) -> None:
        fs = _store({f"/f{index:02d}.txt": b"x" for index in range(40)})
        model = _started(fs)
        _press(model, "PAGE_DOWN")
        self.assertEqual(model.state.cursor, 10)
        _press(model, "CTRL_D", "CTRL_U", "CTRL_U")
        self.assertEqual(model.state.cursor, 0)

    def test_empty_directory_pins_cursor_to_zero(self) -> None:
        model = _started(_store())
        _press(model, "DOWN", "END", "PAGE_DOWN")
        self.assertEqual((model.state.cursor, model.state.scroll_offset), (0, 0))
        self.assertEqual(model.state.entries, [])

    def test_resize_keeps_cursor_visible(self) -> None:
        fs = _store({f"/f{index:02d}.txt": b"x" for index in range(40)})
        model = _started(fs)
        _press(model, *["DOWN"] * 12)
        model.update(ResizeMsg(width=100, height=10))
        self.assertEqual(model.visible_lines, 5)
        self.assertEqual(model.state.scroll_offset, 8)
        self.assertEqual((model.state.width, model.state.height), (100, 10))


class NavigationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.fs = _store(
            {"/a.txt": b"hello", "/sub/inner.txt": b"inside"},
            dirs=("/alpha", "/sub"),
        )
        self.model = _started(self.fs)

    def test_directories_listed_first(self) -> None:
        self.assertEqual(_names(self.model), ["alpha", "sub", "a.txt"])
        self.assertFalse(self.model.state.loading)

    def test_enter_back_restores_cursor_on_directory_left(self) -> None:
        _press(self.model, "DOWN", "ENTER")
        self.assertEqual(self.model.state.current_path, "/sub")
        self.assertEqual(_names(self.model), ["inner.txt"])
        self.assertEqual(self.model.state.preview_content, "inside")

        _press(self.model, "BACKSPACE")
        self.assertEqual(self.model.state.current_path, "/")
        self.assertEqual(self.model.state.cursor, 1)
        self.assertIsNone(self.model.state.previous_dir_name)

    def test_back_at_root_is_a_no_op(self) -> None:
        self.assertEqual(self.model.update(KeyMsg("h")), [])
        self.assertEqual(self.model.state.current_path, "/")

    def test_enter_on_file_sets_status(self) -> None:
        _press(self.model, "END", "ENTER")
        self.assertEqual(self.model.state.current_path, "/")
        self.assertEqual(self.model.state.status_message, "Cannot open file: a.txt")

    def test_file_preview_follows_cursor(self) -> None:
        self.assertEqual(self.model.state.preview_content, "")
        _press(self.model, "END")
        self.assertEqual(self.model.state.preview_content, "hello")
        self.assertFalse(self.model.state.preview_loading)

    def test_stale_listing_is_discarded(self) -> None:
        into_sub = self.model.update(KeyMsg("DOWN")) + self.model.update(KeyMsg("ENTER"))
        back_home = self.model.update(KeyMsg("BACKSPACE"))
        _run(self.model, back_home)
        _run(self.model, into_sub)
        self.assertEqual(self.model.state.current_path, "/")
        self.assertEqual(_names(self.model), ["alpha", "sub", "a.txt"])

    def test_listing_for_other_path_is_ignored(self) -> None:
        self.assertEqual(self.model.update(DirectoryLoadedMsg(path="/elsewhere", entries=())), [])
        self.assertEqual(len(self.model.state.entries), 3)

    def test_load_failure_sets_error_and_keeps_entries(self) -> None:
        _press(self.model, "DOWN")
        self.fs.remove_directory("/sub", True)
        _press(self.model, "ENTER")
        self.assertEqual(self.model.state.current_path, "/sub")
        self.assertTrue(self.model.state.error_message.startswith("Failed to load directory: "))
        self.assertEqual(_names(self.model), ["alpha", "sub", "a.txt"])

    def test_missing_start_path_reports_error(self) -> None:
        model = _started(self.fs, start_path="/missing")
        self.assertEqual(
            model.state.error_message,
            "Failed to load directory: no such file or directory: /missing",
        )
        self.assertEqual(model.state.entries, [])

    def test_reload_picks_up_external_changes(self) -> None:
        with self.fs.open_for_write("/b.txt", OpenFlags.WRITE | OpenFlags.CREATE):
            pass
        _press(self.model, "CTRL_R")
        self.assertEqual(_names(self.model), ["alpha", "sub", "a.txt", "b.txt"])


class PreviewGenerationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.fs = _store({"/a.txt": b"A", "/b.txt": b"B", "/c.txt": b"C"})
        self.model = _started(self.fs)

    def _two_moves(self):
        to_b = self.model.update(KeyMsg("DOWN"))
        to_c = self.model.update(KeyMsg("DOWN"))
        self.assertEqual((len(to_b), len(to_c)), (1, 1))
        return to_b[0](), to_c[0]()

    def test_older_result_arriving_last_is_dropped(self) -> None:
        stale, fresh = self._two_moves()
        self.model.update(fresh)
        self.model.update(stale)
        self.assertEqual(self.model.state.preview_content, "C")

    def test_older_result_arriving_first_is_dropped(self) -> None:
        stale, fresh = self._two_moves()
        self.model.update(stale)
        self.assertEqual(self.model.state.preview_content, "")
        self.assertTrue(self.model.state.preview_loading)
        self.model.update(fresh)
        self.assertEqual(self.model.state.preview_content, "C")

    def test_storage_error_surfaces_in_preview(self) -> None:
        self.fs.remove_file("/b.txt")
        _press(self.model, "DOWN")
        self.assertEqual(self.model.state.preview_error, "no such file or directory: /b.txt")
        self.assertEqual(self.model.state.preview_content, "")

    def test_host_error_ends_loading(self) -> None:
        failure = OSError(errno.EACCES, "Permission denied")
        with mock.patch.object(self.fs, "read_file", side_effect=failure):
            _press(self.model, "DOWN")
        self.assertFalse(self.model.state.preview_loading)
        self.assertIn("Permission denied", self.model.state.preview_error)

    def test_toggle_preview_off_drops_pending_result(self) -> None:
        pending = self.model.update(KeyMsg("DOWN"))
        self.assertEqual(self.model.update(KeyMsg("p")), [])
        self.model.update(pending[0]())
        self.assertFalse(self.model.state.show_preview)
        self.assertEqual(self.model.state.preview_content, "")

        _press(self.model, "p")
        self.assertEqual(self.model.state.preview_content, "B")

    def test_hidden_preview_from_config(self) -> None:
        model = _started(self.fs, config=AppConfig(show_preview=False))
        _press(model, "DOWN")
        self.assertFalse(model.state.show_preview)
        self.assertEqual(model.state.preview_content, "")


class NormalKeyTests(unittest.TestCase):
    def setUp(self) -> None:
        self.model = _started(_store({"/a.txt": b"x"}))

    def test_copy_path_overwrites_single_slot(self) -> None:
        _press(self.model, "y")
        self.assertEqual(self.model.state.clipboard_path, "/a.txt")
        self.assertEqual(self.model.state.status_message, "Copied: a.txt")

    def test_escape_clears_command_output_and_error(self) -> None:
        self.model.state.command_output = "old output"
        self.model.state.error_message = "old error"
        _press(self.model, "ESC")
        self.assertEqual((self.model.state.command_output, self.model.state.error_message), ("", ""))

    def test_task_exception_becomes_error_message(self) -> None:
        self.model.update(ErrorMsg(error=RuntimeError("boom")))
        self.assertEqual(self.model.state.error_message, "boom")

    def test_help_overlay_exits_on_help_quit_or_escape(self) -> None:
        for exit_key in ("?", "q", "CTRL_C", "ESC"):
            with self.subTest(exit_key=exit_key):
                _press(self.model, "?")
                self.assertIs(self.model.state.mode, Mode.HELP)
                _press(self.model, "j", "#")
                self.assertIs(self.model.state.mode, Mode.HELP)
                _press(self.model, exit_key)
                self.assertIs(self.model.state.mode, Mode.NORMAL)
                self.assertFalse(self.model.state.should_quit)

    def test_quit(self) -> None:
        _press(self.model, "q")
        self.assertTrue(self.model.state.should_quit)

    def test_unbound_key_is_ignored(self) -> None:
        self.model.state.error_message = "kept"
        self.assertEqual(self.model.update(KeyMsg("z")), [])
        self.assertEqual(self.model.state.error_message, "kept")


class MouseTests(unittest.TestCase):
    def setUp(self) -> None:
        self.fs = _store(dirs=("/d0", "/d1", "/d2"))
        self.times = [10.0]
        self.model = _started(self.fs, clock=lambda: self.times[0])

    def _click(self, row: int, button: str = "left", action: str = "press") -> None:
        _run(self.model, self.model.update(MouseMsg(action=action, button=button, x=3, y=FILE_LIST_TOP + row)))

    def test_click_selects_row(self) -> None:
        self._click(2)
        self.assertEqual(self.model.state.cursor, 2)
        self.assertEqual(self.model.state.current_path, "/")

    def test_double_click_enters_directory(self) -> None:
        self._click(1)
        self.times[0] = 10.3
        self._click(1)
        self.assertEqual(self.model.state.current_path, "/d1")

    def test_slow_second_click_only_selects(self) -> None:
        self._click(1)
        self.times[0] = 10.8
        self._click(1)
        self.assertEqual(self.model.state.current_path, "/")
        self.assertEqual(self.model.state.cursor, 1)

    def test_clicks_outside_list_are_ignored(self) -> None:
        self._click(-1)
        self._click(3)
        self._click(40)
        self.assertEqual(self.model.state.cursor, 0)

    def test_wheel_and_right_click(self) -> None:
        self._click(0, button="wheel_down", action="wheel")
        self._click(0, button="wheel_down", action="wheel")
        self.assertEqual(self.model.state.cursor, 2)
        self._click(0, button="wheel_up", action="wheel")
        self.assertEqual(self.model.state.cursor, 1)

        _press(self.model, "ENTER")
        self.assertEqual(self.model.state.current_path, "/d1")
        self._click(0, button="right")
        self.assertEqual(self.model.state.current_path, "/")
        self.assertEqual(self.model.state.cursor, 1)

    def test_mouse_ignored_outside_normal_mode(self) -> None:
        _press(self.model, "?")
        self._click(2)
        self.assertEqual(self.model.state.cursor, 0)


if __name__ == "__main__":
    unittest.main()
