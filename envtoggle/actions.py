"""Writing the selected state of a parsed dotenv file back to disk."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from .parser import Line, LineType, ParsedData, VariableGroup

logger = logging.getLogger(__name__)


def reconstruct_variable_line(line: Line, group: VariableGroup, index: int) -> str:
    """Return the line's text, commented or uncommented to match the group state."""
    original = line.original_content
    commented = original.strip().startswith("#")
    should_be_active = group.is_active and group.active_line_idx == index

    if should_be_active:
        if not commented:
            return original
        idx = original.find("#")
        prefix, suffix = original[:idx], original[idx + 1 :]
        if suffix.startswith(" "):
            suffix = suffix[1:]
        return prefix + suffix

    if commented:
        return original
    body = original.lstrip(" \t")
    indentation = original[: len(original) - len(body)]
    return f"{indentation}# {body}"


def _render_line(line: Line, data: ParsedData) -> str:
    if line.type is not LineType.VARIABLE:
        return line.original_content
    group = data.variable_groups.get(line.key)
    if group is None:
        return "# Error: Orphaned variable line! -> " + line.original_content
    index = next((i for i, member in enumerate(group.lines) if member is line), -1)
    if index == -1:
        return "# Error: Could not find line in its group! -> " + line.original_content
    return reconstruct_variable_line(line, group, index)


def render_content(data: ParsedData) -> str:
    """Build the full file text for the current state; it always ends in a newline."""
    content = "".join(_render_line(line, data) + "\n" for line in data.lines)
    if not content.endswith("\n"):
        content += "\n"
    return content


def backup_file(src: str | os.PathLike[str], dst: str | os.PathLike[str]) -> None:
    """Copy src to dst; a missing src is not an error."""
    try:
        shutil.copyfile(src, dst)
    except FileNotFoundError:
        if os.path.exists(src):
            raise


def save_file(path: str | os.PathLike[str], data: ParsedData) -> None:
    """Back up the file to '<path>.bak', then overwrite it with the current state."""
    backup_path = os.fspath(path) + ".bak"
    try:
        backup_file(path, backup_path)
    except OSError as exc:
        logger.warning("Failed to create backup %s: %s", backup_path, exc)

    content = render_content(data)
    Path(path).write_bytes(content.encode("utf-8", "surrogateescape"))