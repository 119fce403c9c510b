"""Rendering of the model into styled text rows."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass, replace

from .model import ICON_POINTER, Model

FOREGROUND = "#f8f8f2"
COMMENT = "#6272a4"
GREEN = "#50fa7b"
ORANGE = "#ffb86c"
PINK = "#ff79c7"
PURPLE = "#bd93f9"
RED = "#ff5555"
YELLOW = "#f1fa8c"

TITLE = "envtoggle"
HELP_TEXT = "↑/↓/j/k: Navigate | Space: Toggle/Select | Ctrl+S: Save | q/Ctrl+C: Quit"
QUIT_PROMPT = "Save changes before quitting? ([Y]es/[N]o/[C]ancel)"
RELOAD_PROMPT = (
    "File changed externally. [R]eload (lose TUI changes) / [K]eep TUI changes?"
)
MODIFIED_MARK = " [MODIFIED]"
HEADER_PADDING = 1


def _char_width(char: str) -> int:
    if unicodedata.combining(char):
        return 0
    return 2 if unicodedata.east_asian_width(char) in ("W", "F") else 1


def _width(text: str) -> int:
    return sum(_char_width(c) for c in text)


@dataclass(frozen=True)
class Style:
    """Text attributes; colours are '#rrggbb' strings or None for the default."""

    foreground: str | None = None
    background: str | None = None
    bold: bool = False
    faint: bool = False

    def inherit(self, other: Style) -> Style:
        """Return this style with unset attributes taken from other."""
        return Style(
            foreground=self.foreground or other.foreground,
            background=self.background or other.background,
            bold=self.bold or other.bold,
            faint=self.faint or other.faint,
        )


@dataclass(frozen=True)
class Segment:
    """A run of text drawn in one style."""

    text: str
    style: Style = Style()

    @property
    def width(self) -> int:
        return _width(self.text)


NORMAL_LINE = Style(FOREGROUND)
FOCUSED_LINE = Style(PINK, bold=True)
DISABLED_LINE = Style(COMMENT)
EMPTY_VALUE = Style(YELLOW)
KEY_STYLE = Style(FOREGROUND, bold=True)
HEADER = Style(FOREGROUND, PURPLE, bold=True)
FOOTER = Style(COMMENT)
MODIFIED_STATUS = Style(ORANGE, bold=True)
STATUS_MESSAGE = Style(GREEN)
ERROR_MESSAGE = Style(RED, bold=True)
PROMPT = Style(PINK, bold=True)

Row = list[Segment]


def _fit(segments: Row, width: int, fill: Style) -> Row:
    """Cut the row to width cells and pad it with fill-styled spaces."""
    if width <= 0:
        return segments
    out: Row = []
    used = 0
    for seg in segments:
        if used >= width:
            break
        kept = []
        for char in seg.text:
            w = _char_width(char)
            if used + w > width:
                break
            kept.append(char)
            used += w
        if kept:
            out.append(Segment("".join(kept), seg.style))
    if used < width:
        out.append(Segment(" " * (width - used), fill))
    return out


def _plain(row: Row) -> str:
    return "".join(seg.text for seg in row)


def render_header(model: Model) -> Row:
    """The title bar: title on the left, file name and modified mark on the right."""
    file_info = f"File: {model.file_path}"
    modified = MODIFIED_MARK if model.modified else ""
    spaces = max(
        0,
        model.width - _width(TITLE) - _width(file_info) - _width(modified)
        - 2 * HEADER_PADDING,
    )
    pad = " " * HEADER_PADDING
    segments = [Segment(pad + TITLE + " " * spaces + file_info, HEADER)]
    if modified:
        segments.append(Segment(modified, MODIFIED_STATUS.inherit(HEADER)))
    segments.append(Segment(pad, HEADER))
    return _fit(segments, model.width, HEADER)


def render_footer(model: Model) -> list[Row]:
    """A blank margin row, then the prompt, status message or key help."""
    if model.show_quit_prompt:
        content = Segment(QUIT_PROMPT, PROMPT)
    elif model.show_reload_prompt:
        content = Segment(RELOAD_PROMPT, PROMPT)
    elif model.status_message:
        style = (
            ERROR_MESSAGE if model.status_message.startswith("Error:") else STATUS_MESSAGE
        )
        content = Segment(model.status_message, style)
    else:
        content = Segment(HELP_TEXT, FOOTER)
    return [[], _fit([content], model.width, FOOTER)]


def render_list(model: Model) -> list[Row]:
    """One styled row for every list item, in order."""
    rows: list[Row] = []
    for i, item in enumerate(model.build_list_items()):
        if i == model.cursor:
            pointer = Segment(ICON_POINTER, FOCUSED_LINE)
            line_style = FOCUSED_LINE
            value_style = line_style
        elif item.is_disabled:
            pointer = Segment("  ", NORMAL_LINE)
            line_style = DISABLED_LINE
            value_style = replace(EMPTY_VALUE, faint=True) if item.is_empty_value else line_style
        else:
            pointer = Segment("  ", NORMAL_LINE)
            line_style = NORMAL_LINE
            value_style = EMPTY_VALUE if item.is_empty_value else line_style

        icon_style = line_style
        if not item.is_disabled and item.is_active:
            icon_style = replace(icon_style, foreground=STATUS_MESSAGE.foreground)

        if item.is_group_header:
            body = Segment(item.key, KEY_STYLE.inherit(line_style))
        else:
            body = Segment(item.value, value_style)
        rows.append([pointer, Segment(item.prefix, icon_style), body])
    return rows


def visible_rows(model: Model) -> list[Row]:
    """The list rows that fall inside the scrolled viewport."""
    rows = render_list(model)
    return rows[model.y_offset : model.y_offset + model.viewport_height]


def render(model: Model) -> str:
    """The whole screen as plain text."""
    if model.quitting:
        return model.status_message + "\n" if model.status_message else ""
    if model.width == 0:
        return "Initializing..."
    body = [_plain(row) for row in visible_rows(model)]
    body += [""] * (model.viewport_height - len(body))
    lines = [_plain(render_header(model)), *body]
    lines += [_plain(row) for row in render_footer(model)]
    return "\n".join(lines)