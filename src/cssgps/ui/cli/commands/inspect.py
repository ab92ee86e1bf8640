"""Read-only inspection commands: ``cssgps ancestors`` and ``cssgps options``."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from cssgps.api import read_document
from cssgps.core.context import GenerationContext
from cssgps.core.exceptions import CssGpsError
from cssgps.core.options import all_options
from cssgps.core.scanner import ancestor_chain_to_string, compute_ancestor_chain, locate_element

from .._options import (
    INPUTS_PANEL,
    ColumnOption,
    ConfigOption,
    FileArgument,
    LineOption,
    OffsetOption,
    WorkspaceOption,
)
from ..presenter import present_options
from ..state import get_cli_state
from ..utils import fail, load_cli_settings, resolve_offset, resolve_workspace


def ancestors(
    file: FileArgument,
    offset: OffsetOption = None,
    line: LineOption = None,
    column: ColumnOption = 1,
) -> None:
    """Print the ancestor chain of the element at the cursor."""
    try:
        text = read_document(file)
        cursor = resolve_offset(text, offset, line, column)
    except CssGpsError as exc:
        fail(str(exc), exception=exc)

    element = locate_element(text, cursor)
    if element is None:
        fail("No HTML element found at the given position.")
    chain = compute_ancestor_chain(text, element.start_offset)
    typer.echo(ancestor_chain_to_string(chain))


def options(
    file: Annotated[
        Path | None,
        typer.Argument(
            metavar="[FILE]",
            help="Optional markup file; shows each option's value for the element at the cursor.",
            exists=True,
            dir_okay=False,
            resolve_path=True,
            rich_help_panel=INPUTS_PANEL,
        ),
    ] = None,
    offset: OffsetOption = None,
    line: LineOption = None,
    column: ColumnOption = 1,
    config: ConfigOption = None,
    workspace: WorkspaceOption = None,
) -> None:
    """List available options, optionally evaluated against an element."""
    state = get_cli_state()
    registered = all_options()
    if file is None:
        present_options(state, registered)
        return

    try:
        settings = load_cli_settings(config, workspace)
        text = read_document(file)
        cursor = resolve_offset(text, offset, line, column)
    except CssGpsError as exc:
        fail(str(exc), exception=exc)

    element = locate_element(text, cursor, marker_attribute=settings.path_marker.attribute)
    if element is None:
        fail("No HTML element found at the given position.")
    context = GenerationContext.for_file(
        file, text, element.start_offset, workspace_root=resolve_workspace(workspace)
    )
    values = {option.id: option.generate(context, settings) for option in registered}
    present_options(state, registered, values)


__all__ = ["ancestors", "options"]
