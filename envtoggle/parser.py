"""Parsing of dotenv files into lines and groups of alternative values."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable

# Whitespace class limited to ASCII blanks, so that Unicode spaces do not
# count as separators around '#' and '='.
_WS = r"[\t\n\f\r ]"
_VARIABLE_RE = re.compile(
    rf"^{_WS}*(#)?{_WS}*([A-Za-z_][A-Za-z0-9_]*){_WS}*={_WS}*(.*)$"
)
_VALUE_TRIM = " \"'"


class LineType(Enum):
    """Kind of a line in a dotenv file."""

    BLANK = "Blank"
    COMMENT = "Comment"
    VARIABLE = "Variable"


@dataclass(eq=False)
class Line:
    """One line of the file; identity matters, so equality is by object."""

    original_content: str
    type: LineType
    line_number: int
    key: str = ""
    value: str = ""
    is_commented_out: bool = False


@dataclass
class VariableGroup:
    """All lines that assign the same key, and which of them is in use."""

    key: str
    lines: list[Line] = field(default_factory=list)
    is_active: bool = False
    active_line_idx: int = -1
    last_active_line_idx: int = 0


@dataclass
class ParsedData:
    """Every line in file order plus the variable groups in first-seen order."""

    lines: list[Line] = field(default_factory=list)
    variable_groups: dict[str, VariableGroup] = field(default_factory=dict)

    @property
    def group_order(self) -> list[str]:
        return list(self.variable_groups)

    def debug_dump(self) -> str:
        """Return a readable listing of all lines and groups."""
        out = ["--- All Lines ---"]
        for line in self.lines:
            text = f"L{line.line_number} [{line.type.value}]: {line.original_content}"
            if line.type is LineType.VARIABLE:
                commented = "true" if line.is_commented_out else "false"
                text += f" (Key: {line.key}, Val: {line.value}, Commented: {commented})"
            out.append(text)

        out.append("")
        out.append(f"--- Variable Groups (Order: [{' '.join(self.group_order)}] ) ---")
        for group in self.variable_groups.values():
            active = "true" if group.is_active else "false"
            out.append(
                f"Group: {group.key} (Active: {active}, "
                f"ActiveIdx: {group.active_line_idx}, "
                f"LastActiveIdx: {group.last_active_line_idx})"
            )
            for i, line in enumerate(group.lines):
                marker = "*" if group.is_active and i == group.active_line_idx else " "
                out.append(f"  {marker} [{i}] L{line.line_number}: {line.original_content}")
        return "\n".join(out) + "\n"


def _classify(text: str, number: int) -> Line:
    if not text.strip():
        return Line(text, LineType.BLANK, number)
    match = _VARIABLE_RE.match(text)
    if match:
        return Line(
            original_content=text,
            type=LineType.VARIABLE,
            line_number=number,
            key=match.group(2),
            value=match.group(3).strip(_VALUE_TRIM),
            is_commented_out=match.group(1) == "#",
        )
    # Anything else, including malformed lines, is preserved as a comment.
    return Line(text, LineType.COMMENT, number)


def _set_initial_states(groups: Iterable[VariableGroup]) -> None:
    for group in groups:
        variable_idxs = [
            i for i, line in enumerate(group.lines) if line.type is LineType.VARIABLE
        ]
        uncommented = [i for i in variable_idxs if not group.lines[i].is_commented_out]
        if uncommented:
            group.is_active = True
            group.active_line_idx = uncommented[0]
            group.last_active_line_idx = uncommented[0]
        else:
            group.is_active = False
            group.active_line_idx = -1
            group.last_active_line_idx = variable_idxs[0] if variable_idxs else -1


def parse_lines(lines: Iterable[str]) -> ParsedData:
    """Parse an iterable of text lines; a trailing newline on each is dropped."""
    data = ParsedData()
    for number, raw in enumerate(lines, start=1):
        text = raw[:-1] if raw.endswith("\n") else raw
        if text.endswith("\r"):
            text = text[:-1]
        line = _classify(text, number)
        if line.type is LineType.VARIABLE:
            group = data.variable_groups.setdefault(line.key, VariableGroup(line.key))
            group.lines.append(line)
        data.lines.append(line)
    _set_initial_states(data.variable_groups.values())
    return data


def parse_file(path: str | os.PathLike[str]) -> ParsedData:
    """Read and parse a dotenv file."""
    text = Path(path).read_bytes().decode("utf-8", "surrogateescape")
    pieces = text.split("\n")
    if pieces[-1] == "":
        pieces.pop()
    return parse_lines(pieces)