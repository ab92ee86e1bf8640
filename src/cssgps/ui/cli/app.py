"""Typer application wiring for the cssgps CLI."""

from __future__ import annotations

from typing import Annotated

import typer

from cssgps import __version__
from cssgps.ui.cli.commands import (
    ancestors,
    apply,
    generate,
    options,
    releases_app,
    rules_app,
)

from .state import debug_enabled, emit_error, set_cli_state


app = typer.Typer(
    help="Generate location-derived CSS class names for HTML-like markup.",
    context_settings={"help_option_names": ["--help"]},
    no_args_is_help=True,
)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"cssgps {__version__}")
        raise typer.Exit()


@app.callback()
def cli(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
        ),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            help="Show full tracebacks when an unexpected error occurs.",
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_print_version,
            is_eager=True,
            help="Show the installed version and exit.",
        ),
    ] = False,
) -> None:
    """Configure diagnostics shared by every command."""
    set_cli_state(ctx=ctx, verbosity=verbose, debug=debug)


app.command()(generate)
app.command()(apply)
app.command()(ancestors)
app.command()(options)
app.add_typer(rules_app, name="rules")
app.add_typer(releases_app, name="releases")


def main() -> None:
    """Entry point compatible with console scripts."""
    try:
        app()
    except typer.Exit:
        raise
    except KeyboardInterrupt as exc:
        if debug_enabled():
            raise
        emit_error("Operation cancelled by user.", exception=exc)
        raise typer.Exit(code=1) from exc
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - last-resort reporting
        from .state import get_cli_state

        state = get_cli_state()
        if state.show_tracebacks:
            from rich.traceback import Traceback

            tb = Traceback.from_exception(
                type(exc),
                exc,
                exc.__traceback__,
                show_locals=state.verbosity >= 2,
            )
            state.err_console.print(tb)
        else:
            emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["app", "main"]
