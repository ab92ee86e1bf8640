"""Management of preset and custom rules: ``cssgps rules ...``."""

from __future__ import annotations

import time
from typing import Annotated

import typer

from cssgps.core.config import (
    DEFAULT_SEPARATOR,
    CustomRuleConfig,
    remove_custom_rule,
    save_settings,
    upsert_custom_rule,
)
from cssgps.core.exceptions import CssGpsError
from cssgps.core.rules import PRESET_RULES, available_rules, rule_from_custom

from .._options import ConfigOption, SeparatorOption, WorkspaceOption
from ..presenter import present_rules
from ..state import emit_info, get_cli_state
from ..utils import fail, load_cli_settings, load_existing_settings, settings_path_for


rules_app = typer.Typer(
    help="List, create and delete class name rules.",
    context_settings={"help_option_names": ["--help"]},
)


@rules_app.command(name="list")
def list_rules(
    config: ConfigOption = None,
    workspace: WorkspaceOption = None,
) -> None:
    """Show preset rules followed by custom rules from the settings file."""
    try:
        settings = load_cli_settings(config, workspace)
        rules = available_rules(settings)
    except CssGpsError as exc:
        fail(str(exc), exception=exc)
    present_rules(get_cli_state(), rules)


@rules_app.command(name="add")
def add_rule(
    name: Annotated[str, typer.Argument(help="Display name of the rule.")],
    option_ids: Annotated[
        list[str],
        typer.Option("--option", help="Option identifier; repeat in output order."),
    ],
    rule_id: Annotated[
        str | None,
        typer.Option("--id", help="Identifier; reusing one replaces that rule."),
    ] = None,
    separator: SeparatorOption = DEFAULT_SEPARATOR,
    config: ConfigOption = None,
    workspace: WorkspaceOption = None,
) -> None:
    """Create or replace a custom rule in the settings file."""
    if not name.strip():
        raise typer.BadParameter("Rule name must not be empty.")
    identifier = rule_id or f"rule_{int(time.time() * 1000)}"
    if identifier in PRESET_RULES:
        raise typer.BadParameter(f"'{identifier}' is a preset rule and cannot be redefined.")

    path = settings_path_for(config, workspace)
    try:
        record = CustomRuleConfig(
            id=identifier, name=name.strip(), options=option_ids, separator=separator
        )
        rule = rule_from_custom(record)
        settings = upsert_custom_rule(load_existing_settings(path), record)
        save_settings(settings, path)
    except CssGpsError as exc:
        fail(str(exc), exception=exc)
    emit_info(f"Saved settings to {path}")
    typer.echo(f"{rule.id}: {rule.pattern()}")


@rules_app.command(name="remove")
def remove_rule(
    rule_id: Annotated[str, typer.Argument(help="Identifier of the custom rule to delete.")],
    config: ConfigOption = None,
    workspace: WorkspaceOption = None,
) -> None:
    """Delete a custom rule from the settings file."""
    path = settings_path_for(config, workspace)
    try:
        settings = load_existing_settings(path)
        if settings.find_custom_rule(rule_id) is None:
            fail(f"No custom rule named '{rule_id}'.")
        save_settings(remove_custom_rule(settings, rule_id), path)
    except CssGpsError as exc:
        fail(str(exc), exception=exc)
    typer.echo(f"Removed {rule_id}")


__all__ = ["add_rule", "list_rules", "remove_rule", "rules_app"]
