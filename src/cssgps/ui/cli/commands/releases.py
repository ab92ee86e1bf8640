"""Management of time-windowed release labels: ``cssgps releases ...``."""

from __future__ import annotations

from typing import Annotated

import typer

from cssgps.core.config import (
    ReleaseEntry,
    add_release as add_release_entry,
    remove_release as remove_release_entry,
    save_settings,
)
from cssgps.core.exceptions import CssGpsError
from cssgps.core.options import active_release, sanitize_class_token, utc_today

from .._options import ConfigOption, WorkspaceOption
from ..presenter import present_releases
from ..state import get_cli_state
from ..utils import fail, load_cli_settings, load_existing_settings, settings_path_for


releases_app = typer.Typer(
    help="Inspect and edit release labels used by the releaseName option.",
    context_settings={"help_option_names": ["--help"]},
)


@releases_app.command(name="list")
def list_releases(
    config: ConfigOption = None,
    workspace: WorkspaceOption = None,
) -> None:
    """Show releases with their status for the current UTC day."""
    try:
        settings = load_cli_settings(config, workspace)
    except CssGpsError as exc:
        fail(str(exc), exception=exc)
    present_releases(get_cli_state(), settings, utc_today())


@releases_app.command(name="current")
def current_release(
    config: ConfigOption = None,
    workspace: WorkspaceOption = None,
) -> None:
    """Print the release label the releaseName option would emit today."""
    try:
        settings = load_cli_settings(config, workspace)
    except CssGpsError as exc:
        fail(str(exc), exception=exc)
    entry = active_release(settings.releases, utc_today())
    label = entry.name if entry is not None else settings.default_release
    typer.echo(sanitize_class_token(label))


@releases_app.command(name="add")
def add_release(
    name: Annotated[str, typer.Argument(help="Release label.")],
    expiry: Annotated[str, typer.Argument(help="Last day (UTC) of the release, YYYY-MM-DD.")],
    config: ConfigOption = None,
    workspace: WorkspaceOption = None,
) -> None:
    """Add a release, keeping the list ordered by expiry."""
    if not name.strip():
        raise typer.BadParameter("Release name must not be empty.")
    path = settings_path_for(config, workspace)
    try:
        settings = add_release_entry(
            load_existing_settings(path), ReleaseEntry(name=name.strip(), expiry=expiry)
        )
        save_settings(settings, path)
    except CssGpsError as exc:
        fail(str(exc), exception=exc)
    typer.echo(f"Added {name.strip()} (expires {expiry})")


@releases_app.command(name="remove")
def remove_release(
    name: Annotated[str, typer.Argument(help="Release label to delete.")],
    config: ConfigOption = None,
    workspace: WorkspaceOption = None,
) -> None:
    """Delete every release with the given name."""
    path = settings_path_for(config, workspace)
    try:
        settings = load_existing_settings(path)
        if not any(entry.name == name for entry in settings.releases):
            fail(f"No release named '{name}'.")
        save_settings(remove_release_entry(settings, name), path)
    except CssGpsError as exc:
        fail(str(exc), exception=exc)
    typer.echo(f"Removed {name}")


__all__ = ["add_release", "current_release", "list_releases", "releases_app", "remove_release"]
