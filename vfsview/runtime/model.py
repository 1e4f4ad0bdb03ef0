"""Interaction state machine for the browser.

``Model.update`` applies one message to the owned ``ModelState`` and returns
the detached tasks to run next. The model never performs storage I/O itself:
each task is a closure over values captured at dispatch time and reports back
with exactly one message.

Stale results are filtered when applied. Preview results must carry the
current preview generation, directory listings must be for the current path,
and command completions are matched to history entries by sequence number.
"""

from __future__ import annotations

import logging
import posixpath
import time
from collections.abc import Callable

from ..config import AppConfig
from ..entry import Entry
from ..errors import StorageError, ValidationError
from ..input.key_registry import KeyComboBinding, KeyComboRegistry
from ..input.keymap import HELP_EXIT_KEYS, KEY_BINDINGS, TERMINAL_TOGGLE_KEYS, Action
from ..operations import (
    child_path,
    copy_file,
    create_directory,
    create_file,
    delete_entry,
    list_entries,
    rename_destination,
)
from ..preview import generate_preview
from ..preview.classify import PreviewKind
from ..render.highlight import prepare_text_preview
from ..shell import CommandAdapter
from ..storage.backend import StorageService
from .layout import FILE_LIST_TOP, adjust_scroll, preview_viewport, visible_lines
from .messages import (
    CommandExecutedMsg,
    DirectoryLoadedMsg,
    DirectoryLoadFailedMsg,
    ErrorMsg,
    KeyMsg,
    Message,
    MouseMsg,
    MutationCompletedMsg,
    PreviewLoadedMsg,
    ResizeMsg,
    Task,
)
from .state import InputKind, Mode, ModelState, TerminalEntry

LOGGER = logging.getLogger(__name__)

ROOT_PATH = "/"
PAGE_STEP = 10
TERMINAL_PAGE_STEP = 10
YES_ANSWERS = frozenset({"y", "yes"})


class Model:
    """Owns ``ModelState`` and dispatches messages by mode."""

    def __init__(
        self,
        storage: StorageService,
        config: AppConfig | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        start_path: str = ROOT_PATH,
    ) -> None:
        self.storage = storage
        self.config = config if config is not None else AppConfig()
        self.adapter = CommandAdapter(storage)
        self._clock = clock
        self.state = ModelState(current_path=start_path, show_preview=self.config.show_preview)
        handlers: dict[Action, Callable[[], list[Task]]] = {
            Action.UP: lambda: self._move_cursor(-1),
            Action.DOWN: lambda: self._move_cursor(1),
            Action.PAGE_UP: lambda: self._move_cursor(-PAGE_STEP),
            Action.PAGE_DOWN: lambda: self._move_cursor(PAGE_STEP),
            Action.TOP: lambda: self._select(0),
            Action.BOTTOM: lambda: self._select(len(self.state.entries) - 1),
            Action.ENTER: self._enter_selected,
            Action.BACK: self._go_back,
            Action.DELETE: self._begin_delete,
            Action.RENAME: self._begin_rename,
            Action.COPY_PATH: self._copy_path,
            Action.NEW_FILE: lambda: self._begin_input(InputKind.NEW_FILE, "New file name:"),
            Action.NEW_DIRECTORY: lambda: self._begin_input(InputKind.NEW_DIRECTORY, "New directory name:"),
            Action.TOGGLE_PREVIEW: self._toggle_preview,
            Action.RELOAD: self._reload,
            Action.TERMINAL: self._open_terminal,
            Action.COMMAND: lambda: self._begin_input(InputKind.COMMAND, "Command:"),
            Action.QUIT: self._quit,
            Action.HELP: self._open_help,
        }
        self._normal_keys = KeyComboRegistry().register_bindings(
            KeyComboBinding(binding.keys, handlers[binding.action]) for binding in KEY_BINDINGS
        )

    # -- entry points -----------------------------------------------------

    def init(self) -> list[Task]:
        """Tasks to run before the first message: the initial listing."""
        return self._reload()

    def update(self, msg: Message) -> list[Task]:
        """Apply ``msg`` to the state and return follow-up tasks."""
        if isinstance(msg, KeyMsg):
            return self._handle_key(msg.key)
        if isinstance(msg, MouseMsg):
            return self._handle_mouse(msg)
        if isinstance(msg, ResizeMsg):
            return self._handle_resize(msg)
        if isinstance(msg, DirectoryLoadedMsg):
            return self._apply_directory_loaded(msg)
        if isinstance(msg, DirectoryLoadFailedMsg):
            return self._apply_directory_load_failed(msg)
        if isinstance(msg, PreviewLoadedMsg):
            return self._apply_preview(msg)
        if isinstance(msg, CommandExecutedMsg):
            return self._apply_command_executed(msg)
        if isinstance(msg, MutationCompletedMsg):
            return self._apply_mutation(msg)
        if isinstance(msg, ErrorMsg):
            LOGGER.error("task failed: %r", msg.error)
            self._set_error(str(msg.error) or type(msg.error).__name__)
            return []
        LOGGER.debug("ignoring unknown message %r", msg)
        return []

    @property
    def visible_lines(self) -> int:
        return visible_lines(self.state.height)

    # -- status helpers ---------------------------------------------------

    def _set_status(self, text: str) -> None:
        self.state.status_message = text
        self.state.error_message = ""

    def _set_error(self, text: str) -> None:
        self.state.error_message = text

    # -- key dispatch -----------------------------------------------------

    def _handle_key(self, key: str) -> list[Task]:
        mode = self.state.mode
        if mode is Mode.HELP:
            if key in HELP_EXIT_KEYS:
                self.state.mode = Mode.NORMAL
            return []
        if mode in (Mode.INPUT, Mode.COMMAND):
            return self._handle_input_key(key)
        if mode is Mode.TERMINAL:
            return self._handle_terminal_key(key)
        return self._handle_normal_key(key)

    def _handle_normal_key(self, key: str) -> list[Task]:
        if key == "ESC":
            self.state.command_output = ""
            self.state.error_message = ""
            return []
        if not self._normal_keys.handles(key):
            return []
        self.state.error_message = ""
        tasks = self._normal_keys.dispatch(key)
        return list(tasks) if tasks else []

    # -- cursor movement --------------------------------------------------

    def _move_cursor(self, delta: int) -> list[Task]:
        return self._select(self.state.cursor + delta)

    def _select(self, index: int) -> list[Task]:
        """Clamp ``index`` into the entry list, keep it visible, refresh preview."""
        state = self.state
        if not state.entries:
            state.cursor = 0
            state.scroll_offset = 0
            return []
        index = max(0, min(index, len(state.entries) - 1))
        changed = index != state.cursor
        state.cursor = index
        state.scroll_offset = adjust_scroll(index, state.scroll_offset, self.visible_lines)
        if not changed:
            return []
        return self._refresh_preview()

    # -- navigation -------------------------------------------------------

    def _enter_selected(self) -> list[Task]:
        entry = self.state.selected_entry
        if entry is None:
            return []
        if not entry.is_directory:
            self._set_status(f"Cannot open file: {entry.name}")
            return []
        return self._navigate(entry.path)

    def _go_back(self) -> list[Task]:
        current = self.state.current_path
        if current == ROOT_PATH:
            return []
        trimmed = current.rstrip("/")
        parent = posixpath.dirname(trimmed) or ROOT_PATH
        return self._navigate(parent, remember=posixpath.basename(trimmed))

    def _navigate(self, path: str, remember: str | None = None) -> list[Task]:
        state = self.state
        state.current_path = path
        state.cursor = 0
        state.scroll_offset = 0
        state.previous_dir_name = remember
        return self._reload()

    def _reload(self) -> list[Task]:
        """Invalidate the preview and list ``current_path`` again."""
        state = self.state
        state.loading = True
        self._clear_preview()
        return [self._load_directory_task(state.current_path)]

    def _load_directory_task(self, path: str) -> Task:
        storage = self.storage

        def load() -> Message:
            try:
                entries = list_entries(storage, path)
            except StorageError as exc:
                LOGGER.warning("listing %s failed: %s", path, exc)
                return DirectoryLoadFailedMsg(path=path, error=str(exc))
            return DirectoryLoadedMsg(path=path, entries=tuple(entries))

        return load

    def _apply_directory_loaded(self, msg: DirectoryLoadedMsg) -> list[Task]:
        state = self.state
        if msg.path != state.current_path:
            LOGGER.debug("discarding listing for %s (now at %s)", msg.path, state.current_path)
            return []
        state.loading = False
        state.entries = list(msg.entries)
        target = state.cursor
        if state.previous_dir_name is not None:
            for index, entry in enumerate(state.entries):
                if entry.name == state.previous_dir_name:
                    target = index
                    break
            state.previous_dir_name = None
        if not state.entries:
            state.cursor = 0
            state.scroll_offset = 0
        else:
            state.cursor = max(0, min(target, len(state.entries) - 1))
            state.scroll_offset = adjust_scroll(state.cursor, state.scroll_offset, self.visible_lines)
        return self._refresh_preview()

    def _apply_directory_load_failed(self, msg: DirectoryLoadFailedMsg) -> list[Task]:
        state = self.state
        if msg.path != state.current_path:
            return []
        state.loading = False
        state.previous_dir_name = None
        self._set_error(f"Failed to load directory: {msg.error}")
        return []

    # -- preview ----------------------------------------------------------

    def _clear_preview(self) -> int:
        state = self.state
        state.preview_generation += 1
        state.preview_content = ""
        state.preview_error = ""
        state.preview_kind = None
        state.preview_notice = False
        state.preview_loading = False
        return state.preview_generation

    def _refresh_preview(self) -> list[Task]:
        generation = self._clear_preview()
        state = self.state
        entry = state.selected_entry
        if not state.show_preview or entry is None or entry.is_directory:
            return []
        state.preview_loading = True
        width, height = preview_viewport(state.width, state.height, True)
        return [self._preview_task(generation, entry.path, width, height)]

    def _preview_task(self, generation: int, path: str, width: int, height: int) -> Task:
        storage = self.storage
        threshold = self.config.text_control_ratio
        style = self.config.pygments_style

        def preview() -> Message:
            try:
                result = generate_preview(storage, path, width, height, control_ratio_threshold=threshold)
            except StorageError as exc:
                LOGGER.warning("preview of %s failed: %s", path, exc)
                return PreviewLoadedMsg(generation=generation, error=str(exc))
            except Exception as exc:
                # Still answer this generation so the pane leaves its loading state.
                LOGGER.exception("preview of %s raised", path)
                return PreviewLoadedMsg(generation=generation, error=str(exc) or type(exc).__name__)
            content = result.text
            if result.kind is PreviewKind.TEXT and not result.notice:
                content = prepare_text_preview(content, path, style)
            return PreviewLoadedMsg(
                generation=generation,
                content=content,
                kind=result.kind,
                notice=result.notice,
            )

        return preview

    def _apply_preview(self, msg: PreviewLoadedMsg) -> list[Task]:
        state = self.state
        if msg.generation != state.preview_generation:
            LOGGER.debug("discarding preview generation %d (current %d)", msg.generation, state.preview_generation)
            return []
        state.preview_content = msg.content
        state.preview_error = msg.error
        state.preview_kind = msg.kind
        state.preview_notice = msg.notice
        state.preview_loading = False
        return []

    def _toggle_preview(self) -> list[Task]:
        self.state.show_preview = not self.state.show_preview
        return self._refresh_preview()

    # -- simple actions ---------------------------------------------------

    def _copy_path(self) -> list[Task]:
        entry = self.state.selected_entry
        if entry is None:
            return []
        self.state.clipboard_path = entry.path
        self._set_status(f"Copied: {entry.name}")
        return []

    def _open_terminal(self) -> list[Task]:
        state = self.state
        state.mode = Mode.TERMINAL
        state.terminal_input.clear()
        state.terminal_input.focus()
        state.terminal_scroll = 0
        return []

    def _open_help(self) -> list[Task]:
        self.state.mode = Mode.HELP
        return []

    def _quit(self) -> list[Task]:
        self.state.should_quit = True
        return []

    # -- input / command modes --------------------------------------------

    def _begin_input(
        self,
        kind: InputKind,
        prompt: str,
        initial: str = "",
        target: Entry | None = None,
    ) -> list[Task]:
        state = self.state
        state.mode = Mode.COMMAND if kind is InputKind.COMMAND else Mode.INPUT
        state.input_kind = kind
        state.input_target = target
        state.input_prompt = prompt
        state.input.focus(initial)
        return []

    def _begin_rename(self) -> list[Task]:
        entry = self.state.selected_entry
        if entry is None:
            return []
        return self._begin_input(InputKind.RENAME, "New name:", initial=entry.name, target=entry)

    def _begin_delete(self) -> list[Task]:
        entry = self.state.selected_entry
        if entry is None:
            return []
        return self._begin_input(InputKind.DELETE, f"Delete {entry.name}? (y/n):", target=entry)

    def _finish_input(self) -> None:
        state = self.state
        state.input.clear()
        state.input.blur()
        state.mode = Mode.NORMAL
        state.input_kind = None
        state.input_target = None
        state.input_prompt = ""

    def _handle_input_key(self, key: str) -> list[Task]:
        if key == "ESC":
            self._finish_input()
            return []
        if key == "ENTER":
            return self._submit_input()
        self.state.input.handle_key(key)
        return []

    def _submit_input(self) -> list[Task]:
        state = self.state
        kind = state.input_kind
        value = state.input.value.strip()
        if kind is InputKind.COMMAND:
            state.input.clear()
            if not value:
                return []
            return [self._command_task(None, value)]

        target = state.input_target
        directory = state.current_path
        self._finish_input()
        if not value:
            return []
        try:
            return self._mutation_tasks(kind, value, directory, target)
        except ValidationError as exc:
            self._set_error(str(exc))
            return []

    def _mutation_tasks(
        self,
        kind: InputKind | None,
        value: str,
        directory: str,
        target: Entry | None,
    ) -> list[Task]:
        storage = self.storage
        if kind is InputKind.NEW_FILE:
            path = child_path(directory, value)
            return [
                self._mutation_task(
                    lambda: create_file(storage, path),
                    f"Created file: {posixpath.basename(path)}",
                    "Failed to create file",
                )
            ]
        if kind is InputKind.NEW_DIRECTORY:
            path = child_path(directory, value)
            return [
                self._mutation_task(
                    lambda: create_directory(storage, path),
                    f"Created directory: {posixpath.basename(path)}",
                    "Failed to create directory",
                )
            ]
        if target is None:
            return []
        if kind is InputKind.RENAME:
            destination = rename_destination(target, value)
            if destination == target.path:
                return []
            return [self._rename_task(target, destination)]
        if kind is InputKind.DELETE:
            if value.lower() not in YES_ANSWERS:
                return []
            return [
                self._mutation_task(
                    lambda: delete_entry(storage, target),
                    f"Deleted: {target.name}",
                    "Failed to delete",
                )
            ]
        return []

    def _mutation_task(self, operation: Callable[[], None], success: str, failure_prefix: str) -> Task:
        def mutate() -> Message:
            try:
                operation()
            except StorageError as exc:
                LOGGER.warning("%s: %s", failure_prefix, exc)
                return MutationCompletedMsg(error=f"{failure_prefix}: {exc}")
            LOGGER.info(success)
            return MutationCompletedMsg(status=success)

        return mutate

    def _rename_task(self, entry: Entry, destination: str) -> Task:
        storage = self.storage

        def rename() -> Message:
            try:
                copy_file(storage, entry.path, destination)
            except StorageError as exc:
                LOGGER.warning("rename of %s failed: %s", entry.path, exc)
                return MutationCompletedMsg(error=f"Failed to rename: {exc}")
            try:
                storage.remove_file(entry.path)
            except StorageError as exc:
                LOGGER.warning("removing %s after copy failed: %s", entry.path, exc)
                return MutationCompletedMsg(error=f"Failed to remove old file: {exc}")
            return MutationCompletedMsg(status=f"Renamed: {entry.name} -> {posixpath.basename(destination)}")

        return rename

    def _apply_mutation(self, msg: MutationCompletedMsg) -> list[Task]:
        if msg.error:
            self.state.status_message = ""
            self._set_error(msg.error)
        else:
            self._set_status(msg.status)
        return self._reload()

    # -- commands and terminal --------------------------------------------

    def _command_task(self, sequence: int | None, line: str) -> Task:
        adapter = self.adapter

        def execute() -> Message:
            try:
                result = adapter.run(line)
            except Exception as exc:
                LOGGER.exception("command %r raised", line)
                return CommandExecutedMsg(sequence=sequence, output="", error=str(exc) or type(exc).__name__)
            return CommandExecutedMsg(sequence=sequence, output=result.output, error=result.error)

        return execute

    def _apply_command_executed(self, msg: CommandExecutedMsg) -> list[Task]:
        state = self.state
        if msg.sequence is None:
            state.command_output = msg.output
            self._set_status("Command executed")
            if msg.error:
                self._set_error(msg.error)
            return self._reload()
        for entry in state.terminal_history:
            if entry.sequence_number == msg.sequence:
                entry.output = msg.output
                entry.error = msg.error
                entry.completed = True
                break
        else:
            LOGGER.debug("no terminal entry for command %d", msg.sequence)
        return self._reload()

    def _handle_terminal_key(self, key: str) -> list[Task]:
        state = self.state
        if key in TERMINAL_TOGGLE_KEYS or key == "ESC":
            state.terminal_input.blur()
            state.mode = Mode.NORMAL
            return []
        if key == "ENTER":
            return self._submit_terminal()
        if key == "UP":
            self._scroll_terminal(1)
        elif key == "DOWN":
            self._scroll_terminal(-1)
        elif key == "PAGE_UP":
            self._scroll_terminal(TERMINAL_PAGE_STEP)
        elif key == "PAGE_DOWN":
            self._scroll_terminal(-TERMINAL_PAGE_STEP)
        else:
            state.terminal_input.handle_key(key)
        return []

    def _scroll_terminal(self, delta: int) -> None:
        state = self.state
        limit = len(state.terminal_history) * self.config.terminal_lines_per_entry
        state.terminal_scroll = max(0, min(state.terminal_scroll + delta, limit))

    def _submit_terminal(self) -> list[Task]:
        state = self.state
        line = state.terminal_input.value.strip()
        state.terminal_input.clear()
        if not line:
            return []
        state.command_counter += 1
        entry = TerminalEntry(
            sequence_number=state.command_counter,
            working_path=state.current_path,
            command_line=line,
        )
        state.terminal_history.append(entry)
        state.terminal_scroll = 0
        return [self._command_task(entry.sequence_number, line)]

    # -- mouse and resize -------------------------------------------------

    def _handle_mouse(self, msg: MouseMsg) -> list[Task]:
        state = self.state
        if state.mode is not Mode.NORMAL:
            return []
        if msg.action == "wheel":
            return self._move_cursor(-1 if msg.button == "wheel_up" else 1)
        if msg.action != "press":
            return []
        if msg.button == "right":
            return self._go_back()
        if msg.button != "left":
            return []
        row = msg.y - FILE_LIST_TOP
        index = state.scroll_offset + row
        if row < 0 or row >= self.visible_lines or index >= len(state.entries):
            return []
        now = self._clock()
        double_click = (
            index == state.cursor
            and index == state.last_click_index
            and msg.y == state.last_click_y
            and now - state.last_click_time <= self.config.double_click_seconds
        )
        if double_click:
            state.last_click_time = 0.0
            state.last_click_index = -1
            state.last_click_y = -1
            return self._enter_selected()
        state.last_click_time = now
        state.last_click_index = index
        state.last_click_y = msg.y
        return self._select(index)

    def _handle_resize(self, msg: ResizeMsg) -> list[Task]:
        state = self.state
        state.width = max(1, msg.width)
        state.height = max(1, msg.height)
        if state.entries:
            state.scroll_offset = adjust_scroll(state.cursor, state.scroll_offset, self.visible_lines)
        return []


__all__ = ["Model", "PAGE_STEP", "TERMINAL_PAGE_STEP", "YES_ANSWERS"]
