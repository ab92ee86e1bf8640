"""Configuration models consumed by the option generators.

GeneratorSettings

`project_prefix` (`str`)
: Free text placed in front of generated names. Truncated to 50 characters
  and sanitised before use; empty disables the segment.

`path_hash_length` (`int`)
: Number of hexadecimal characters kept from the relative path hash (4-32).

`dom_hash_length` (`int`)
: Number of hexadecimal characters kept from the ancestor chain hash (4-32).

`abbr_length` (`int`)
: Characters kept from each folder or tag name by the abbreviating options.

`reversed_name_case` (`"lowercase" | "uppercase" | "preserve"`)
: Case applied to the reversed file name.

`releases` (`list[ReleaseEntry]`)
: Release labels with an ISO `YYYY-MM-DD` expiry date. The earliest release
  that has not expired yet is used.

`default_release` (`str`)
: Label used when every release has expired.

`custom_rules` (`list[CustomRuleConfig]`)
: User-defined option sequences with their separator.

`path_marker` (`PathMarkerConfig`)
: Whether to write a secondary attribute recording the condensed file path,
  and under which attribute name.

Keys may be written in snake_case or in the camelCase used by the editor
settings (``projectPrefix``, ``pathHashLength`` and so on).
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
import logging
import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel
import yaml

from .exceptions import ConfigurationError
from .locator import DEFAULT_PATH_MARKER


logger = logging.getLogger(__name__)

SETTINGS_FILENAMES = ("cssgps.yml", "cssgps.yaml", ".cssgps.yml", ".cssgps.yaml")

DEFAULT_SEPARATOR = "--"
DEFAULT_HASH_LENGTH = 8
DEFAULT_ABBR_LENGTH = 3
DEFAULT_RELEASE = "stable"
PREFIX_MAX_LENGTH = 50

ReversedNameCase = Literal["lowercase", "uppercase", "preserve"]


class _SettingsModel(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ReleaseEntry(_SettingsModel):
    """Release label paired with the last UTC day on which it applies."""

    name: str
    expiry: str = Field(description="ISO date (YYYY-MM-DD)")

    @field_validator("expiry", mode="before")
    @classmethod
    def _coerce_expiry(cls, value: Any) -> Any:
        # YAML turns unquoted ISO dates into date objects.
        if isinstance(value, date):
            return value.isoformat()[:10]
        return value

    @property
    def expiry_date(self) -> date | None:
        """Parse ``expiry``; unparseable values yield ``None``."""
        try:
            return date.fromisoformat(self.expiry.strip())
        except (AttributeError, ValueError):
            return None


class CustomRuleConfig(_SettingsModel):
    """Persisted definition of a user rule."""

    id: str
    name: str
    options: list[str] = Field(default_factory=list)
    separator: str = DEFAULT_SEPARATOR


class PathMarkerConfig(_SettingsModel):
    """Secondary attribute recording where a class name came from."""

    enabled: bool = False
    attribute: str = DEFAULT_PATH_MARKER

    @field_validator("attribute")
    @classmethod
    def _check_attribute(cls, value: str) -> str:
        candidate = value.strip()
        if not candidate or any(char.isspace() or char in "\"'<>=/" for char in candidate):
            msg = f"Invalid attribute name: {value!r}"
            raise ValueError(msg)
        return candidate


class GeneratorSettings(_SettingsModel):
    """Explicit parameter bundle passed to every generation call."""

    project_prefix: str = ""
    path_hash_length: int = Field(default=DEFAULT_HASH_LENGTH, ge=4, le=32)
    dom_hash_length: int = Field(default=DEFAULT_HASH_LENGTH, ge=4, le=32)
    abbr_length: int = Field(default=DEFAULT_ABBR_LENGTH, ge=1, le=32)
    reversed_name_case: ReversedNameCase = "lowercase"
    releases: list[ReleaseEntry] = Field(default_factory=list)
    default_release: str = DEFAULT_RELEASE
    custom_rules: list[CustomRuleConfig] = Field(default_factory=list)
    path_marker: PathMarkerConfig = Field(default_factory=PathMarkerConfig)

    def find_custom_rule(self, rule_id: str) -> CustomRuleConfig | None:
        """Return the custom rule registered under ``rule_id``."""
        for rule in self.custom_rules:
            if rule.id == rule_id:
                return rule
        return None


def discover_settings_file(workspace: str | os.PathLike[str] | None = None) -> Path | None:
    """Return the first settings file found at the root of ``workspace``."""
    root = Path(workspace) if workspace is not None else Path.cwd()
    for name in SETTINGS_FILENAMES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def settings_from_mapping(payload: Any) -> GeneratorSettings:
    """Validate an already-parsed mapping into settings."""
    if payload is None:
        return GeneratorSettings()
    if not isinstance(payload, dict):
        msg = f"Settings must be a mapping, not {type(payload).__name__}."
        raise ConfigurationError(msg)
    try:
        return GeneratorSettings.model_validate(payload)
    except ValidationError as exc:
        msg = f"Invalid settings: {exc.error_count()} validation error(s)."
        raise ConfigurationError(msg) from exc


def load_settings(path: str | os.PathLike[str] | None) -> GeneratorSettings:
    """Load settings from a YAML file; ``None`` yields the defaults."""
    if path is None:
        return GeneratorSettings()
    settings_path = Path(path)
    try:
        raw_text = settings_path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Unable to read settings file '{settings_path}'."
        raise ConfigurationError(msg) from exc
    try:
        payload = yaml.safe_load(raw_text)
    except yaml.YAMLError as exc:
        msg = f"Settings file '{settings_path}' is not valid YAML."
        raise ConfigurationError(msg) from exc
    logger.debug("Loaded settings from %s", settings_path)
    return settings_from_mapping(payload)


def save_settings(settings: GeneratorSettings, path: str | os.PathLike[str]) -> Path:
    """Write ``settings`` as YAML using the camelCase keys."""
    settings_path = Path(path)
    payload = settings.model_dump(mode="json", by_alias=True)
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    settings_path.write_text(
        yaml.safe_dump(payload, sort_keys=False, allow_unicode=True),
        encoding="utf-8",
    )
    return settings_path


def upsert_custom_rule(settings: GeneratorSettings, rule: CustomRuleConfig) -> GeneratorSettings:
    """Return settings where ``rule`` replaces the rule with the same id or is appended."""
    rules = list(settings.custom_rules)
    for index, existing in enumerate(rules):
        if existing.id == rule.id:
            rules[index] = rule
            break
    else:
        rules.append(rule)
    return settings.model_copy(update={"custom_rules": rules})


def remove_custom_rule(settings: GeneratorSettings, rule_id: str) -> GeneratorSettings:
    """Return settings without the custom rule ``rule_id``."""
    rules = [rule for rule in settings.custom_rules if rule.id != rule_id]
    return settings.model_copy(update={"custom_rules": rules})


def _sorted_releases(releases: Iterable[ReleaseEntry]) -> list[ReleaseEntry]:
    return sorted(releases, key=lambda entry: entry.expiry_date or date.max)


def add_release(settings: GeneratorSettings, release: ReleaseEntry) -> GeneratorSettings:
    """Return settings with ``release`` added and the list ordered by expiry."""
    if release.expiry_date is None:
        msg = f"Release '{release.name}' has an invalid expiry date: {release.expiry!r}."
        raise ConfigurationError(msg)
    releases = _sorted_releases([*settings.releases, release])
    return settings.model_copy(update={"releases": releases})


def remove_release(settings: GeneratorSettings, name: str) -> GeneratorSettings:
    """Return settings without any release called ``name``."""
    releases = [entry for entry in settings.releases if entry.name != name]
    return settings.model_copy(update={"releases": releases})


__all__ = [
    "DEFAULT_ABBR_LENGTH",
    "DEFAULT_HASH_LENGTH",
    "DEFAULT_RELEASE",
    "DEFAULT_SEPARATOR",
    "PREFIX_MAX_LENGTH",
    "SETTINGS_FILENAMES",
    "CustomRuleConfig",
    "GeneratorSettings",
    "PathMarkerConfig",
    "ReleaseEntry",
    "ReversedNameCase",
    "add_release",
    "discover_settings_file",
    "load_settings",
    "remove_custom_rule",
    "remove_release",
    "save_settings",
    "settings_from_mapping",
    "upsert_custom_rule",
]
