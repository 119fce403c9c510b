"""Command-line entry point and curses front end."""

from __future__ import annotations

import argparse
import curses
import os
import sys

from .model import Model
from .parser import parse_file
from .view import Segment, Style, render_footer, render_header, visible_rows
from .watcher import FileChanged, FileWatcher, WatcherError

_POLL_MS = 100
_CHAR_KEYS = {"\x03": "ctrl+c", "\x13": "ctrl+s", "\x1b": "esc"}
_CUBE = (0, 95, 135, 175, 215, 255)
_BASIC = (
    (0, 0, 0), (205, 0, 0), (0, 205, 0), (205, 205, 0),
    (0, 0, 238), (205, 0, 205), (0, 205, 205), (229, 229, 229),
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="envtoggle",
        description=(
            "A terminal interface for viewing, editing and managing variables "
            "in a .env file. Without a file argument, '.env' in the current "
            "directory is used."
        ),
    )
    parser.add_argument("file", nargs="?", default=".env", help="the dotenv file")
    return parser


def _key_name(ch: str | int) -> str | None:
    if isinstance(ch, int):
        return {curses.KEY_UP: "up", curses.KEY_DOWN: "down"}.get(ch)
    return _CHAR_KEYS.get(ch, ch)


def _rgb(colour: str) -> tuple[int, int, int]:
    value = colour.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def _nearest(channel: int) -> int:
    return min(range(len(_CUBE)), key=lambda i: abs(_CUBE[i] - channel))


class _Palette:
    """Maps styles to curses attributes, using colour pairs when available."""

    def __init__(self) -> None:
        self.colours = 0
        self._pairs: dict[tuple[int, int], int] = {}
        try:
            curses.start_color()
            curses.use_default_colors()
            if curses.has_colors():
                self.colours = curses.COLORS
        except curses.error:
            self.colours = 0

    def _index(self, colour: str | None) -> int:
        if colour is None:
            return -1
        r, g, b = _rgb(colour)
        if self.colours >= 256:
            return 16 + 36 * _nearest(r) + 6 * _nearest(g) + _nearest(b)
        return min(
            range(len(_BASIC)),
            key=lambda i: sum((a - c) ** 2 for a, c in zip(_BASIC[i], (r, g, b))),
        )

    def attr(self, style: Style) -> int:
        attr = 0
        if style.bold:
            attr |= curses.A_BOLD
        if style.faint:
            attr |= curses.A_DIM
        if not self.colours:
            return attr
        key = (self._index(style.foreground), self._index(style.background))
        pair = self._pairs.get(key)
        if pair is None:
            pair = len(self._pairs) + 1
            try:
                curses.init_pair(pair, *key)
            except curses.error:
                return attr
            self._pairs[key] = pair
        return attr | curses.color_pair(pair)


def _draw(stdscr, model: Model, palette: _Palette) -> None:
    stdscr.erase()
    rows: list[list[Segment]] = [render_header(model), *visible_rows(model)]
    rows += [[]] * (model.viewport_height - (len(rows) - 1))
    rows += render_footer(model)
    for y, row in enumerate(rows):
        x = 0
        for seg in row:
            try:
                stdscr.addstr(y, x, seg.text, palette.attr(seg.style))
            except curses.error:
                pass
            x += seg.width
    stdscr.refresh()


def _drain_watcher(model: Model) -> None:
    if model.watcher is None:
        return
    while (event := model.watcher.next_event(timeout=0)) is not None:
        if isinstance(event, FileChanged):
            model.on_file_changed()
        elif isinstance(event, WatcherError):
            model.on_watcher_error(event)


def run_app(stdscr, model: Model) -> None:
    """Run the interactive loop on a curses screen until the user quits."""
    try:
        curses.raw()
        curses.curs_set(0)
    except curses.error:
        pass
    stdscr.keypad(True)
    stdscr.timeout(_POLL_MS)
    palette = _Palette()
    size = None

    while not model.quitting:
        height, width = stdscr.getmaxyx()
        if (height, width) != size:
            size = (height, width)
            model.resize(width, height)
        model.tick()
        _draw(stdscr, model, palette)
        try:
            ch = stdscr.get_wch()
        except curses.error:
            ch = None
        if ch is not None:
            key = _key_name(ch)
            if key is not None:
                model.handle_key(key)
        _drain_watcher(model)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    path = args.file

    try:
        os.stat(path)
    except FileNotFoundError:
        print(f"Error: File not found at {path}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Error checking file {path}: {exc}", file=sys.stderr)
        return 1

    try:
        data = parse_file(path)
    except (OSError, UnicodeError) as exc:
        print(f"Error parsing file {path}: {exc}", file=sys.stderr)
        return 1

    watcher = FileWatcher()
    watcher.start(path)
    model = Model(path, data, watcher)
    try:
        curses.wrapper(run_app, model)
    except curses.error as exc:
        print(f"Error running program: {exc}", file=sys.stderr)
        return 1
    finally:
        watcher.stop()

    print("envtoggle exited.")
    return 0