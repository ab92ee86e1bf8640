"""Primary public API for cssgps."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as _pkg_version

from cssgps.api import ClassNameService, GenerationOutcome, GenerationRequest, OutcomeStatus
from cssgps.core.config import GeneratorSettings, ReleaseEntry, load_settings
from cssgps.core.context import GenerationContext
from cssgps.core.mutator import TextEdit, apply_class, apply_path_marker, build_edit
from cssgps.core.options import OptionIds, all_options, get_option
from cssgps.core.rules import PRESET_RULES, Rule, compose, resolve_rule
from cssgps.core.scanner import (
    ElementInfo,
    ancestor_chain_to_string,
    compute_ancestor_chain,
    is_self_closing_tag,
    locate_element,
)


try:
    __version__ = _pkg_version("cssgps")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "PRESET_RULES",
    "ClassNameService",
    "ElementInfo",
    "GenerationContext",
    "GenerationOutcome",
    "GenerationRequest",
    "GeneratorSettings",
    "OptionIds",
    "OutcomeStatus",
    "ReleaseEntry",
    "Rule",
    "TextEdit",
    "__version__",
    "all_options",
    "ancestor_chain_to_string",
    "apply_class",
    "apply_path_marker",
    "build_edit",
    "compose",
    "compute_ancestor_chain",
    "get_option",
    "is_self_closing_tag",
    "load_settings",
    "locate_element",
    "resolve_rule",
]
