"""Implementation of the ``cssgps generate`` and ``cssgps apply`` commands."""

from __future__ import annotations

from pathlib import Path

import typer

from cssgps.api import ClassNameService, GenerationOutcome, GenerationRequest, read_document
from cssgps.core.config import DEFAULT_SEPARATOR
from cssgps.core.exceptions import CssGpsError

from .._options import (
    ColumnOption,
    ConfigOption,
    FileArgument,
    InPlaceOption,
    LineOption,
    OffsetOption,
    OptionIdsOption,
    OutputOption,
    PathMarkerOption,
    RuleOption,
    SeparatorOption,
    WorkspaceOption,
)
from ..diagnostics import CliEmitter
from ..presenter import present_outcome_summary
from ..state import emit_warning, get_cli_state
from ..utils import (
    fail,
    load_cli_settings,
    resolve_offset,
    resolve_workspace,
    write_output_file,
)


_SERVICE = ClassNameService()


def run_service(
    file: Path,
    *,
    offset: int | None,
    line: int | None,
    column: int,
    rule: str | None,
    option_ids: list[str] | None,
    separator: str,
    marker: bool | None,
    config: Path | None,
    workspace: Path | None,
    apply_edit: bool,
) -> GenerationOutcome:
    """Build a request from CLI arguments and run it through the service."""
    state = get_cli_state()
    try:
        settings = load_cli_settings(config, workspace)
        text = read_document(file)
        cursor = resolve_offset(text, offset, line, column)
        request = GenerationRequest(
            file_path=file,
            offset=cursor,
            document_text=text,
            workspace_root=resolve_workspace(workspace),
            rule_id=rule,
            option_ids=tuple(option_ids or ()),
            separator=separator,
            settings=settings,
            emit_path_marker=marker,
            emitter=CliEmitter(state=state),
        )
        outcome = _SERVICE.apply(request) if apply_edit else _SERVICE.generate(request)
    except CssGpsError as exc:
        fail(str(exc), exception=exc)

    if not outcome.ok:
        fail(outcome.message or "Class name generation failed.")
    present_outcome_summary(state, outcome)
    return outcome


def generate(
    file: FileArgument,
    offset: OffsetOption = None,
    line: LineOption = None,
    column: ColumnOption = 1,
    rule: RuleOption = None,
    option_ids: OptionIdsOption = None,
    separator: SeparatorOption = DEFAULT_SEPARATOR,
    marker: PathMarkerOption = None,
    config: ConfigOption = None,
    workspace: WorkspaceOption = None,
) -> None:
    """Print the class name generated for the element at the cursor."""
    outcome = run_service(
        file,
        offset=offset,
        line=line,
        column=column,
        rule=rule,
        option_ids=option_ids,
        separator=separator,
        marker=marker,
        config=config,
        workspace=workspace,
        apply_edit=False,
    )
    typer.echo(outcome.class_name)


def apply(
    file: FileArgument,
    offset: OffsetOption = None,
    line: LineOption = None,
    column: ColumnOption = 1,
    rule: RuleOption = None,
    option_ids: OptionIdsOption = None,
    separator: SeparatorOption = DEFAULT_SEPARATOR,
    marker: PathMarkerOption = None,
    config: ConfigOption = None,
    workspace: WorkspaceOption = None,
    in_place: InPlaceOption = False,
    output: OutputOption = None,
) -> None:
    """Add the generated class to the element's opening tag."""
    if in_place and output is not None:
        raise typer.BadParameter("Use either --in-place or --output, not both.")

    outcome = run_service(
        file,
        offset=offset,
        line=line,
        column=column,
        rule=rule,
        option_ids=option_ids,
        separator=separator,
        marker=marker,
        config=config,
        workspace=workspace,
        apply_edit=True,
    )
    if outcome.edit is not None and not outcome.edit.changed:
        emit_warning(f"Element already carries class '{outcome.class_name}'.")

    target = file if in_place else output
    if target is None:
        typer.echo(outcome.updated_text, nl=False)
        return
    try:
        if target != file or (outcome.edit is not None and outcome.edit.changed):
            write_output_file(target, outcome.updated_text)
    except CssGpsError as exc:
        fail(str(exc), exception=exc)
    typer.echo(outcome.class_name)


__all__ = ["apply", "generate", "run_service"]
