"""Public CLI exports for cssgps."""

from __future__ import annotations

from .app import app, main
from .commands import ancestors, apply, generate, options
from .state import debug_enabled, emit_error, emit_warning, get_cli_state


__all__ = [
    "ancestors",
    "app",
    "apply",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "generate",
    "get_cli_state",
    "main",
    "options",
]
