"""Rich-aware presenters for CLI listings."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from typing import TYPE_CHECKING

from rich import box
from rich.table import Table
from rich.text import Text

from cssgps.core.config import GeneratorSettings
from cssgps.core.options import Option, active_release
from cssgps.core.rules import Rule

from .state import CLIState


if TYPE_CHECKING:  # pragma: no cover - typing only
    from cssgps.api import GenerationOutcome


def _build_table(
    *,
    title: str | None,
    columns: Sequence[str],
    header_style: str = "bold cyan",
) -> Table:
    """Create a Rich table with the house style."""
    table = Table(
        title=title or None,
        box=box.SQUARE,
        show_edge=True,
        header_style=header_style,
    )
    for column in columns:
        table.add_column(column)
    return table


def present_options(
    state: CLIState,
    options: Sequence[Option],
    values: dict[str, str] | None = None,
) -> None:
    """Print registered options, with generated values when available."""
    columns = ["Id", "Name", "Description"]
    columns.append("Value" if values is not None else "Example")
    table = _build_table(title="Options", columns=columns)
    for option in options:
        if values is not None:
            value = values.get(option.id, "")
            sample = Text(value, style="green") if value else Text("(empty)", style="dim")
        else:
            sample = Text(option.example, style="dim")
        table.add_row(option.id, option.name, option.description, sample)
    state.console.print(table)


def present_rules(state: CLIState, rules: Sequence[Rule]) -> None:
    """Print preset and custom rules with their patterns."""
    table = _build_table(title="Rules", columns=["Id", "Name", "Kind", "Pattern", "Example"])
    for rule in rules:
        kind = Text("preset", style="cyan") if rule.preset else Text("custom", style="magenta")
        table.add_row(rule.id, rule.name, kind, rule.pattern(), Text(rule.example(), style="dim"))
    state.console.print(table)


def present_releases(state: CLIState, settings: GeneratorSettings, today: date) -> None:
    """Print configured releases, marking the active and expired ones."""
    table = _build_table(
        title=f"Releases (today: {today.isoformat()})",
        columns=["Name", "Expiry", "Status"],
    )
    current = active_release(settings.releases, today)
    for entry in settings.releases:
        expiry = entry.expiry_date
        if expiry is None:
            status = Text("invalid date", style="red")
        elif entry is current:
            status = Text("active", style="bold green")
        elif expiry < today:
            status = Text("expired", style="yellow")
        else:
            status = Text("upcoming")
        table.add_row(entry.name, entry.expiry, status)
    state.console.print(table)
    if current is None:
        state.console.print(
            Text(f"No active release; using default '{settings.default_release}'.", style="dim")
        )


def present_outcome_summary(state: CLIState, outcome: GenerationOutcome) -> None:
    """Describe a generation outcome on stderr when verbose."""
    if state.verbosity < 1 or outcome.element is None:
        return
    element = outcome.element
    rule_name = outcome.rule.name if outcome.rule is not None else "ad hoc"
    table = _build_table(title="Generation", columns=["Field", "Value"])
    table.add_row("Element", f"<{element.tag_name}> [{element.start_offset}, {element.end_offset})")
    table.add_row("Rule", rule_name)
    table.add_row("Class", outcome.class_name or "")
    if outcome.marker_value:
        table.add_row("Path marker", outcome.marker_value)
    table.add_row("Status", outcome.status.value)
    for entry in state.consume_events("release_expired"):
        table.add_row("Expired release", f"{entry.get('name')} ({entry.get('expiry')})")
    state.err_console.print(table)


__all__ = [
    "present_options",
    "present_outcome_summary",
    "present_releases",
    "present_rules",
]
