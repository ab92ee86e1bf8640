"""Core scanning, generation and mutation primitives."""

from __future__ import annotations

from .config import (
    CustomRuleConfig,
    GeneratorSettings,
    PathMarkerConfig,
    ReleaseEntry,
    load_settings,
)
from .context import GenerationContext
from .exceptions import (
    ConfigurationError,
    CssGpsError,
    PositionError,
    UnknownOptionError,
    UnknownRuleError,
)
from .locator import AttributeSpan, find_attribute, find_attributes
from .mutator import TextEdit, apply_class, apply_path_marker, build_edit
from .options import Option, OptionIds, all_options, get_option
from .rules import PRESET_RULES, Rule, compose, resolve_rule
from .scanner import (
    ElementInfo,
    ancestor_chain_to_string,
    compute_ancestor_chain,
    is_self_closing_tag,
    locate_element,
)


__all__ = [
    "PRESET_RULES",
    "AttributeSpan",
    "ConfigurationError",
    "CssGpsError",
    "CustomRuleConfig",
    "ElementInfo",
    "GenerationContext",
    "GeneratorSettings",
    "Option",
    "OptionIds",
    "PathMarkerConfig",
    "PositionError",
    "ReleaseEntry",
    "Rule",
    "TextEdit",
    "UnknownOptionError",
    "UnknownRuleError",
    "all_options",
    "ancestor_chain_to_string",
    "apply_class",
    "apply_path_marker",
    "build_edit",
    "compose",
    "compute_ancestor_chain",
    "find_attribute",
    "find_attributes",
    "get_option",
    "is_self_closing_tag",
    "load_settings",
    "locate_element",
    "resolve_rule",
]
