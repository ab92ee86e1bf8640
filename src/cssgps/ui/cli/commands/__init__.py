"""CLI command implementations exposed via ``cssgps.ui.cli``.

The generation commands are plain functions registered on the root Typer
application; rule and release management live in dedicated sub-applications.
"""

from __future__ import annotations

from .generate import apply, generate
from .inspect import ancestors, options
from .releases import releases_app
from .rules import rules_app


__all__ = ["ancestors", "apply", "generate", "options", "releases_app", "rules_app"]
