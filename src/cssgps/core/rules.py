"""Rule declaration and composition.

A rule is an ordered list of option identifiers plus a separator. Presets are
fixed in code; custom rules are records persisted by the host and rebuilt
here from settings on every call. Composition evaluates options strictly in
rule order and drops empty segments so a missing prefix never produces a
leading separator.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .config import DEFAULT_SEPARATOR, CustomRuleConfig, GeneratorSettings
from .context import GenerationContext
from .exceptions import UnknownRuleError
from .options import Option, OptionIds, resolve_options


@dataclass(frozen=True, slots=True)
class Rule:
    """Ordered combination of options joined by a separator."""

    id: str
    name: str
    description: str
    option_ids: tuple[str, ...]
    separator: str = DEFAULT_SEPARATOR
    preset: bool = False

    @property
    def options(self) -> tuple[Option, ...]:
        return resolve_options(self.option_ids)

    def generate(self, context: GenerationContext, settings: GeneratorSettings) -> str:
        """Compose the class name for ``context``."""
        return compose(self.options, context, settings, self.separator)

    def pattern(self) -> str:
        """Return a ``{optionId}--{optionId}`` preview of the rule."""
        return self.separator.join(f"{{{option_id}}}" for option_id in self.option_ids)

    def example(self) -> str:
        """Return a sample output built from each option's example value."""
        return self.separator.join(option.example or option.id for option in self.options)


def compose(
    options: Iterable[Option],
    context: GenerationContext,
    settings: GeneratorSettings,
    separator: str = DEFAULT_SEPARATOR,
) -> str:
    """Run ``options`` in order and join their non-empty outputs."""
    parts: list[str] = []
    for option in options:
        value = option.generate(context, settings)
        if value:
            parts.append(value)
    return separator.join(parts)


RULE_ALPHA = Rule(
    id="ruleAlpha",
    name="Rule Alpha",
    description="Project Prefix + Abbreviated File Path + Path Hash",
    option_ids=(OptionIds.PROJECT_PREFIX, OptionIds.ABBREVIATED_PATH, OptionIds.PATH_HASH),
    preset=True,
)

RULE_BETA = Rule(
    id="ruleBeta",
    name="Rule Beta",
    description="Project Prefix + Abbreviated DOM Position + DOM Hash",
    option_ids=(OptionIds.PROJECT_PREFIX, OptionIds.ABBREVIATED_DOM, OptionIds.DOM_HASH),
    preset=True,
)

RULE_GAMMA = Rule(
    id="ruleGamma",
    name="Rule Gamma",
    description="Project Prefix + Reversed File Name",
    option_ids=(OptionIds.PROJECT_PREFIX, OptionIds.REVERSED_FILE_NAME),
    preset=True,
)

PRESET_RULES: dict[str, Rule] = {rule.id: rule for rule in (RULE_ALPHA, RULE_BETA, RULE_GAMMA)}


def rule_from_custom(record: CustomRuleConfig) -> Rule:
    """Build a rule from a persisted custom rule record."""
    resolve_options(record.options)
    return Rule(
        id=record.id,
        name=record.name,
        description=f"Custom rule '{record.name}'",
        option_ids=tuple(record.options),
        separator=record.separator,
    )


def rule_from_options(option_ids: Sequence[str], separator: str = DEFAULT_SEPARATOR) -> Rule:
    """Build an unnamed rule from an ad hoc option list."""
    resolve_options(option_ids)
    return Rule(
        id="adhoc",
        name="Ad hoc",
        description="Options selected on the command line",
        option_ids=tuple(option_ids),
        separator=separator,
    )


def available_rules(settings: GeneratorSettings) -> list[Rule]:
    """Return presets followed by the custom rules declared in ``settings``."""
    return [*PRESET_RULES.values(), *(rule_from_custom(rule) for rule in settings.custom_rules)]


def resolve_rule(rule_id: str, settings: GeneratorSettings) -> Rule:
    """Return the preset or custom rule registered under ``rule_id``."""
    preset = PRESET_RULES.get(rule_id)
    if preset is not None:
        return preset
    record = settings.find_custom_rule(rule_id)
    if record is not None:
        return rule_from_custom(record)
    known = [*PRESET_RULES, *(rule.id for rule in settings.custom_rules)]
    msg = f"Unknown rule '{rule_id}'. Available: {', '.join(known)}"
    raise UnknownRuleError(msg)


__all__ = [
    "PRESET_RULES",
    "RULE_ALPHA",
    "RULE_BETA",
    "RULE_GAMMA",
    "Rule",
    "available_rules",
    "compose",
    "resolve_rule",
    "rule_from_custom",
    "rule_from_options",
]
