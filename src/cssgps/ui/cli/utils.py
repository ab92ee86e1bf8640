"""Helpers shared by CLI commands: positions, settings and output files."""

from __future__ import annotations

from pathlib import Path
import re
from typing import NoReturn

import typer

from cssgps.core.config import (
    SETTINGS_FILENAMES,
    GeneratorSettings,
    discover_settings_file,
    load_settings,
)
from cssgps.core.exceptions import CssGpsError, PositionError, exception_hint

from .state import emit_error, emit_info


_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def offset_from_position(text: str, line: int, column: int) -> int:
    """Convert a 1-based line/column pair into a character offset.

    Only ``\\n``, ``\\r\\n`` and ``\\r`` end a line. A trailing line break opens
    an empty last line, as editors display it.
    """
    if line < 1 or column < 1:
        raise PositionError(f"Line and column are 1-based (got {line}:{column}).")
    breaks = list(_LINE_BREAK_RE.finditer(text))
    line_count = len(breaks) + 1
    if line > line_count:
        raise PositionError(f"Line {line} is past the end of the document ({line_count} lines).")
    start = breaks[line - 2].end() if line > 1 else 0
    end = breaks[line - 1].start() if line <= len(breaks) else len(text)
    if column > end - start + 1:
        raise PositionError(f"Column {column} is past the end of line {line}.")
    return start + column - 1


def resolve_offset(text: str, offset: int | None, line: int | None, column: int) -> int:
    """Return the cursor offset from either ``--offset`` or ``--line/--column``."""
    if offset is not None and line is not None:
        raise typer.BadParameter("Use either --offset or --line/--column, not both.")
    if offset is not None:
        if offset > len(text):
            raise PositionError(f"Offset {offset} is past the end of the document.")
        return offset
    if line is not None:
        return offset_from_position(text, line, column)
    raise typer.BadParameter("A position is required: pass --offset or --line/--column.")


def resolve_workspace(workspace: Path | None) -> Path:
    return workspace if workspace is not None else Path.cwd()


def settings_path_for(config: Path | None, workspace: Path | None) -> Path:
    """Return the settings file to read or create."""
    if config is not None:
        return config
    root = resolve_workspace(workspace)
    discovered = discover_settings_file(root)
    return discovered if discovered is not None else root / SETTINGS_FILENAMES[0]


def load_cli_settings(config: Path | None, workspace: Path | None) -> GeneratorSettings:
    """Load settings from ``--config`` or the workspace, falling back to defaults."""
    if config is not None:
        if not config.is_file():
            raise CssGpsError(f"Settings file '{config}' does not exist.")
        return load_settings(config)
    discovered = discover_settings_file(resolve_workspace(workspace))
    if discovered is None:
        return GeneratorSettings()
    emit_info(f"Using settings from {discovered}")
    return load_settings(discovered)


def load_existing_settings(path: Path) -> GeneratorSettings:
    """Load ``path`` when it exists, otherwise start from defaults."""
    return load_settings(path) if path.is_file() else GeneratorSettings()


def fail(message: str, *, exception: BaseException | None = None, code: int = 1) -> NoReturn:
    """Report ``message`` and terminate the command."""
    hint = exception_hint(exception) if exception is not None else None
    if hint and hint not in message:
        message = f"{message} ({hint})"
    emit_error(message, exception=exception)
    raise typer.Exit(code=code) from exception


def write_output_file(path: Path, content: str) -> None:
    """Write ``content`` to ``path`` using UTF-8 without translating newlines."""
    try:
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)
    except OSError as exc:
        raise CssGpsError(f"Unable to write '{path}'.") from exc


__all__ = [
    "fail",
    "load_cli_settings",
    "load_existing_settings",
    "offset_from_position",
    "resolve_offset",
    "resolve_workspace",
    "settings_path_for",
    "write_output_file",
]
