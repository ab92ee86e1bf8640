"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
POSITION_PANEL = "Position"
GENERATION_PANEL = "Generation"
OUTPUT_PANEL = "Output"
SETTINGS_PANEL = "Settings"

FileArgument = Annotated[
    Path,
    typer.Argument(
        metavar="FILE",
        help="Markup file containing the target element.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

OffsetOption = Annotated[
    int | None,
    typer.Option(
        "--offset",
        "-o",
        min=0,
        help="Character offset of the cursor inside FILE.",
        rich_help_panel=POSITION_PANEL,
    ),
]

LineOption = Annotated[
    int | None,
    typer.Option(
        "--line",
        "-l",
        min=1,
        help="1-based line of the cursor (used with --column).",
        rich_help_panel=POSITION_PANEL,
    ),
]

ColumnOption = Annotated[
    int,
    typer.Option(
        "--column",
        "-c",
        min=1,
        help="1-based column of the cursor on --line.",
        rich_help_panel=POSITION_PANEL,
    ),
]

RuleOption = Annotated[
    str | None,
    typer.Option(
        "--rule",
        "-r",
        help="Preset (ruleAlpha, ruleBeta, ruleGamma) or custom rule identifier.",
        rich_help_panel=GENERATION_PANEL,
    ),
]

OptionIdsOption = Annotated[
    list[str] | None,
    typer.Option(
        "--option",
        help="Ad hoc option identifier; repeat to build a rule on the fly.",
        rich_help_panel=GENERATION_PANEL,
    ),
]

SeparatorOption = Annotated[
    str,
    typer.Option(
        "--separator",
        help="Separator used between ad hoc option segments.",
        rich_help_panel=GENERATION_PANEL,
    ),
]

PathMarkerOption = Annotated[
    bool | None,
    typer.Option(
        "--marker/--no-marker",
        help="Also write the path marker attribute (defaults to the settings file).",
        show_default=False,
        rich_help_panel=GENERATION_PANEL,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        help="Settings file (YAML). Defaults to cssgps.yml in the workspace.",
        dir_okay=False,
        resolve_path=True,
        rich_help_panel=SETTINGS_PANEL,
    ),
]

WorkspaceOption = Annotated[
    Path | None,
    typer.Option(
        "--workspace",
        "-w",
        help="Workspace root used for relative paths and settings discovery.",
        file_okay=False,
        resolve_path=True,
        rich_help_panel=SETTINGS_PANEL,
    ),
]

InPlaceOption = Annotated[
    bool,
    typer.Option(
        "--in-place",
        "-i",
        help="Rewrite FILE instead of printing the updated document.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

OutputOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        help="Write the updated document to this path.",
        dir_okay=False,
        resolve_path=True,
        rich_help_panel=OUTPUT_PANEL,
    ),
]
