"""Application state for the dotenv manager: cursor, selection, prompts, status."""

from __future__ import annotations

import os
import time
from dataclasses import dataclass

from .actions import save_file
from .parser import LineType, ParsedData, VariableGroup, parse_file
from .watcher import FileWatcher

ICON_CHECKBOX_OFF = "[ ]"
ICON_CHECKBOX_ON = "[✓]"
ICON_RADIO_OFF = " "
ICON_RADIO_ON = "*"
ICON_POINTER = "> "
ICON_EMPTY_VALUE = "<empty>"

HEADER_HEIGHT = 1
FOOTER_HEIGHT = 2
SCROLL_OFF = 2
STATUS_TIMEOUT = 2.0

MSG_SAVED = "Saved successfully!"
MSG_SAVED_QUITTING = "Saved successfully! Quitting..."
MSG_NO_CHANGES = "No changes to save."
MSG_RELOADED = "File reloaded successfully."
MSG_RELOADING = "Reloading..."
MSG_SAVING = "Saving..."
MSG_CHANGED_RELOADING = "File changed, reloading..."
MSG_KEPT = "Kept local changes. File change ignored."
MSG_NO_RELOAD_PENDING = "Error: No reload action pending."


@dataclass
class ListItem:
    """One row of the list: a group header or one of a group's values."""

    is_disabled: bool = False
    group_index: int = 0
    value_index: int = -1
    is_active: bool = False
    prefix: str = ""
    is_group_header: bool = False
    key: str = ""
    value: str = ""
    is_empty_value: bool = False


class Model:
    """State of the interactive editor and the key handling that changes it."""

    def __init__(
        self,
        file_path: str | os.PathLike[str],
        parsed_data: ParsedData | None,
        watcher: FileWatcher | None = None,
    ) -> None:
        self.file_path = os.fspath(file_path)
        self.parsed_data = parsed_data
        self.watcher = watcher

        self.cursor = 0
        self.focus_index = 0

        self.width = 0
        self.height = 0
        self.y_offset = 0
        self.viewport_height = 0

        self.modified = False
        self.quitting = False
        self.show_quit_prompt = False
        self.quitting_after_save = False
        self.show_reload_prompt = False
        self.pending_reload = False

        self.status_message = ""
        self._timers: list[tuple[float, str]] = []

    # --- list construction -------------------------------------------------

    def build_list_items(self) -> list[ListItem]:
        """Flatten the groups into header rows followed by their value rows."""
        items: list[ListItem] = []
        if self.parsed_data is None:
            return items

        for group_idx, key in enumerate(self.parsed_data.group_order):
            group = self.parsed_data.variable_groups[key]
            marker = ICON_CHECKBOX_ON if group.is_active else ICON_CHECKBOX_OFF
            items.append(
                ListItem(
                    prefix=marker + " ",
                    key=group.key,
                    is_group_header=True,
                    group_index=group_idx,
                    value_index=-1,
                    is_active=group.is_active,
                )
            )
            if not group.lines:
                continue

            checked = self._checked_index(group)
            for value_idx, line in enumerate(group.lines):
                if line.type is not LineType.VARIABLE:
                    continue
                radio = ICON_RADIO_ON if value_idx == checked else ICON_RADIO_OFF
                is_empty = line.value == ""
                items.append(
                    ListItem(
                        prefix=f"   {radio} ",
                        value=ICON_EMPTY_VALUE if is_empty else line.value,
                        is_disabled=not group.is_active,
                        is_empty_value=is_empty,
                        group_index=group_idx,
                        value_index=value_idx,
                        is_active=group.is_active and group.active_line_idx == value_idx,
                    )
                )
        return items

    @staticmethod
    def _checked_index(group: VariableGroup) -> int:
        if group.is_active:
            return group.active_line_idx
        idx = group.last_active_line_idx
        if 0 <= idx < len(group.lines) and group.lines[idx].type is LineType.VARIABLE:
            return idx
        return -1

    # --- viewport ----------------------------------------------------------

    def resize(self, width: int, height: int) -> None:
        """Record a new terminal size and keep the cursor on screen."""
        self.width = width
        self.height = height
        self.viewport_height = max(0, height - HEADER_HEIGHT - FOOTER_HEIGHT)
        self._refresh_viewport()
        self.ensure_cursor_visible()

    def _max_y_offset(self, count: int) -> int:
        return max(0, count - self.viewport_height)

    def _set_y_offset(self, offset: int, count: int) -> None:
        self.y_offset = min(max(offset, 0), self._max_y_offset(count))

    def _refresh_viewport(self) -> None:
        count = len(self.build_list_items())
        if self.y_offset > count - 1:
            self.y_offset = self._max_y_offset(count)

    def ensure_cursor_visible(self) -> None:
        """Clamp the cursor, scroll so it stays inside the margins, update focus."""
        items = self.build_list_items()
        count = len(items)

        if self.cursor < 0:
            self.cursor = 0
        elif self.cursor >= count:
            self.cursor = count - 1

        if count == 0:
            return

        min_visible = self.y_offset
        max_visible = self.y_offset + self.viewport_height - 1

        if self.cursor < min_visible + SCROLL_OFF:
            self._set_y_offset(max(0, self.cursor - SCROLL_OFF), count)
        elif self.cursor > max_visible - SCROLL_OFF:
            self._set_y_offset(
                min(
                    count - self.viewport_height,
                    self.cursor - self.viewport_height + 1 + SCROLL_OFF,
                ),
                count,
            )

        if 0 <= self.cursor < count:
            self.focus_index = items[self.cursor].group_index

    def move_up(self) -> None:
        if self.cursor > 0:
            self.cursor -= 1
            self.ensure_cursor_visible()

    def move_down(self) -> None:
        if self.cursor < len(self.build_list_items()) - 1:
            self.cursor += 1
            self.ensure_cursor_visible()

    # --- selection ---------------------------------------------------------

    def toggle_selection(self) -> bool:
        """Toggle the group under the cursor or select its value; True if changed."""
        items = self.build_list_items()
        if not 0 <= self.cursor < len(items) or self.parsed_data is None:
            return False

        item = items[self.cursor]
        order = self.parsed_data.group_order
        if not 0 <= item.group_index < len(order):
            return False
        group = self.parsed_data.variable_groups.get(order[item.group_index])
        if group is None:
            return False

        if item.is_group_header:
            if not group.is_active:
                restore = group.last_active_line_idx
                valid = (
                    0 <= restore < len(group.lines)
                    and group.lines[restore].type is LineType.VARIABLE
                )
                if not valid:
                    restore = next(
                        (
                            i
                            for i, line in enumerate(group.lines)
                            if line.type is LineType.VARIABLE
                        ),
                        -1,
                    )
                group.active_line_idx = restore
            else:
                if group.active_line_idx != -1:
                    group.last_active_line_idx = group.active_line_idx
                group.active_line_idx = -1
            group.is_active = not group.is_active
            return True

        if not 0 <= item.value_index < len(group.lines):
            return False
        if group.is_active and group.active_line_idx == item.value_index:
            return False
        group.is_active = True
        group.active_line_idx = item.value_index
        group.last_active_line_idx = item.value_index
        return True

    # --- status ------------------------------------------------------------

    def set_status(self, message: str, timeout: float | None = None) -> None:
        """Show message; with a timeout, clear it later unless replaced meanwhile."""
        self.status_message = message
        if timeout is not None:
            self._timers.append((time.monotonic() + timeout, message))

    def tick(self, now: float | None = None) -> None:
        """Fire any status timers that are due at monotonic time now."""
        if now is None:
            now = time.monotonic()
        pending = []
        for deadline, message in self._timers:
            if now >= deadline:
                if self.status_message == message:
                    self.status_message = ""
            else:
                pending.append((deadline, message))
        self._timers = pending

    # --- file operations ---------------------------------------------------

    def save(self) -> None:
        """Write the current state to disk and update status and quit state."""
        if self.parsed_data is None:
            self._on_error("no data to save")
            return
        try:
            save_file(self.file_path, self.parsed_data)
        except OSError as exc:
            self._on_error(f"failed to write to file {self.file_path}: {exc}")
            return

        self.modified = False
        if self.quitting_after_save:
            self.quitting_after_save = False
            self.status_message = MSG_SAVED_QUITTING
            self.shutdown()
            return
        self.set_status(MSG_SAVED, STATUS_TIMEOUT)

    def reload(self) -> None:
        """Re-read the file from disk, discarding local state."""
        try:
            data = parse_file(self.file_path)
        except (OSError, UnicodeError) as exc:
            self._on_error(f"failed to reload file: {exc}")
            return
        self.parsed_data = data
        self.modified = False
        self.cursor = 0
        self.focus_index = 0
        self.set_status(MSG_RELOADED, STATUS_TIMEOUT)
        self._refresh_viewport()
        self.ensure_cursor_visible()

    def _on_error(self, error: object) -> None:
        self.status_message = f"Error: {error}"
        self.quitting_after_save = False
        self.show_quit_prompt = False
        self.show_reload_prompt = False

    def _confirm_reload(self) -> None:
        self.status_message = MSG_RELOADING
        self.show_reload_prompt = False
        self.modified = False
        self.reload()

    # --- watcher events ----------------------------------------------------

    def on_file_changed(self) -> None:
        """React to an external change: reload, or ask first if there are edits."""
        if self.modified:
            self.show_reload_prompt = True
            self.pending_reload = True
            self.status_message = ""
        else:
            self.status_message = MSG_CHANGED_RELOADING
            self.reload()

    def on_watcher_error(self, error: object) -> None:
        self.status_message = f"Watcher Error: {error}"

    def shutdown(self) -> None:
        """Mark the model as quitting and stop the watcher."""
        self.quitting = True
        if self.watcher is not None:
            self.watcher.stop()

    # --- keys --------------------------------------------------------------

    def handle_key(self, key: str) -> bool:
        """Handle one key name such as 'q', 'up' or 'ctrl+s'; True once quitting."""
        if self.status_message and not self.status_message.startswith("Error:"):
            self.status_message = ""

        if self.show_quit_prompt:
            self._handle_quit_prompt(key)
        elif self.show_reload_prompt:
            self._handle_reload_prompt(key)
        else:
            self._handle_main_key(key)

        self._refresh_viewport()
        return self.quitting

    def _handle_main_key(self, key: str) -> None:
        if key in ("ctrl+c", "q"):
            if self.modified:
                self.show_quit_prompt = True
            else:
                self.shutdown()
        elif key in ("up", "k"):
            self.move_up()
        elif key in ("down", "j"):
            self.move_down()
        elif key == " ":
            if self.toggle_selection():
                self.modified = True
        elif key == "ctrl+s":
            if self.modified:
                self.status_message = MSG_SAVING
                self.save()
            else:
                self.set_status(MSG_NO_CHANGES, STATUS_TIMEOUT)

    def _handle_quit_prompt(self, key: str) -> None:
        if key in ("y", "Y"):
            self.status_message = MSG_SAVING
            self.quitting_after_save = True
            self.save()
        elif key in ("n", "N"):
            self.shutdown()
        elif key in ("c", "C", "esc"):
            self.show_quit_prompt = False
            self.quitting_after_save = False
            self.status_message = ""

    def _handle_reload_prompt(self, key: str) -> None:
        choice = key.lower()
        if choice == "r":
            self.show_reload_prompt = False
            if self.pending_reload:
                self.pending_reload = False
                self._confirm_reload()
            else:
                self.status_message = MSG_NO_RELOAD_PENDING
        elif choice in ("k", "esc"):
            self.show_reload_prompt = False
            self.pending_reload = False
            self.status_message = MSG_KEPT