"""Option generators producing individual class name segments.

Each option is a plain function registered with the ``@option`` decorator.
The decorator records an :class:`Option` descriptor (identifier, display
name, description) in a module-level registry so rules can refer to options
by the identifiers persisted in user settings.

Options are pure: their output depends only on the
:class:`~cssgps.core.context.GenerationContext` and the
:class:`~cssgps.core.config.GeneratorSettings` passed in (plus the current UTC
day for the release option). Missing input yields an empty string, which the
rule composer drops.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timezone
import hashlib
import logging
import re

from .config import PREFIX_MAX_LENGTH, GeneratorSettings, ReleaseEntry
from .context import GenerationContext
from .exceptions import UnknownOptionError
from .scanner import ancestor_chain_to_string, compute_ancestor_chain


logger = logging.getLogger(__name__)

OptionCallable = Callable[[GenerationContext, GeneratorSettings], str]

EXCLUDED_DOM_TAGS: frozenset[str] = frozenset({"html", "head", "body", "script", "style"})
SKIP_PATH_ROOTS: frozenset[str] = frozenset({"www", "htdocs", "public_html", "src", "app"})
ABBREVIATION_SEPARATOR = "-"

_WHITESPACE_RE = re.compile(r"\s+")
_INVALID_TOKEN_CHARS_RE = re.compile(r"[^a-z0-9\-_]")
_EXTENSION_RE = re.compile(r"\.[^/.]+$")


class OptionIds:
    """Identifiers under which options are persisted in custom rules."""

    PROJECT_PREFIX = "projectPrefix"
    PATH_HASH = "pathHash"
    REVERSED_FILE_NAME = "reversedFileName"
    DOM_HASH = "domHash"
    ABBREVIATED_DOM = "abbreviatedDomPosition"
    ABBREVIATED_PATH = "abbreviatedFilePath"
    RELEASE_NAME = "releaseName"


@dataclass(frozen=True, slots=True)
class Option:
    """Descriptor tying an option identifier to its generator."""

    id: str
    name: str
    description: str
    handler: OptionCallable
    example: str = ""

    def generate(self, context: GenerationContext, settings: GeneratorSettings) -> str:
        """Run the generator for ``context``."""
        return self.handler(context, settings)


_REGISTRY: dict[str, Option] = {}


def option(
    option_id: str,
    *,
    name: str,
    description: str,
    example: str = "",
) -> Callable[[OptionCallable], OptionCallable]:
    """Decorator registering a generator under ``option_id``."""

    def decorator(handler: OptionCallable) -> OptionCallable:
        if option_id in _REGISTRY:
            msg = f"Option '{option_id}' is already registered"
            raise ValueError(msg)
        _REGISTRY[option_id] = Option(
            id=option_id,
            name=name,
            description=description,
            handler=handler,
            example=example,
        )
        return handler

    return decorator


def get_option(option_id: str) -> Option:
    """Return the option registered under ``option_id``."""
    try:
        return _REGISTRY[option_id]
    except KeyError:
        msg = f"Unknown option '{option_id}'. Available: {', '.join(_REGISTRY)}"
        raise UnknownOptionError(msg) from None


def all_options() -> list[Option]:
    """Return every registered option in registration order."""
    return list(_REGISTRY.values())


def resolve_options(option_ids: Iterable[str]) -> tuple[Option, ...]:
    """Map identifiers to options, preserving order."""
    return tuple(get_option(option_id) for option_id in option_ids)


# Helpers --------------------------------------------------------------------


def sanitize_class_token(value: str) -> str:
    """Turn free text into a CSS-class-safe token."""
    lowered = value.lower()
    hyphenated = _WHITESPACE_RE.sub("-", lowered)
    return _INVALID_TOKEN_CHARS_RE.sub("", hyphenated)


def truncated_md5(text: str, length: int) -> str:
    """Return the first ``length`` hex characters of the MD5 digest of ``text``."""
    digest = hashlib.md5(text.encode("utf-8"), usedforsecurity=False).hexdigest()
    return digest[: max(length, 0)]


def abbreviate(segments: Sequence[str], length: int) -> str:
    """Keep the first ``length`` lowercase characters of each segment."""
    return ABBREVIATION_SEPARATOR.join(segment[:length].lower() for segment in segments)


def utc_today() -> date:
    """Return the current day in UTC."""
    return datetime.now(timezone.utc).date()


def _active_entries(releases: Iterable[ReleaseEntry], today: date) -> list[ReleaseEntry]:
    dated = [
        (entry, expiry)
        for entry in releases
        if (expiry := entry.expiry_date) is not None and expiry >= today
    ]
    # sorted() is stable, so ties keep their configured order.
    dated.sort(key=lambda item: item[1])
    return [entry for entry, _expiry in dated]


def active_release(releases: Iterable[ReleaseEntry], today: date) -> ReleaseEntry | None:
    """Return the unexpired release with the earliest expiry, if any."""
    entries = _active_entries(releases, today)
    return entries[0] if entries else None


def expired_releases(releases: Iterable[ReleaseEntry], today: date) -> list[ReleaseEntry]:
    """Return releases whose expiry day is strictly before ``today``."""
    return [
        entry
        for entry in releases
        if (expiry := entry.expiry_date) is not None and expiry < today
    ]


def split_path(relative_path: str) -> list[str]:
    """Split a path on either separator, dropping empty segments."""
    return [segment for segment in relative_path.replace("\\", "/").split("/") if segment]


def strip_extension(segment: str) -> str:
    return _EXTENSION_RE.sub("", segment)


def abbreviate_path(relative_path: str, length: int) -> str:
    """Abbreviate a path after skipping conventional web roots."""
    segments = split_path(relative_path)
    if not segments:
        return ""

    start = 0
    for index, segment in enumerate(segments):
        if segment.lower() in SKIP_PATH_ROOTS:
            start = index + 1
            break

    meaningful = segments[start:] or segments
    meaningful = [*meaningful[:-1], strip_extension(meaningful[-1])]
    return abbreviate(meaningful, length)


# Generators -----------------------------------------------------------------


@option(
    OptionIds.PROJECT_PREFIX,
    name="Project Prefix",
    description="Custom text prefix for the entire project (max 50 chars)",
    example="my-project",
)
def project_prefix(context: GenerationContext, settings: GeneratorSettings) -> str:
    prefix = settings.project_prefix
    if not prefix:
        return ""
    return sanitize_class_token(prefix[:PREFIX_MAX_LENGTH])


@option(
    OptionIds.PATH_HASH,
    name="Path Hash",
    description="Hash of the relative file path",
    example="a3f2b9c1",
)
def path_hash(context: GenerationContext, settings: GeneratorSettings) -> str:
    if not context.relative_path:
        return ""
    return truncated_md5(context.relative_path, settings.path_hash_length)


@option(
    OptionIds.REVERSED_FILE_NAME,
    name="Reversed File Name",
    description="File name reversed (without extension)",
    example="llib_ytilitu",
)
def reversed_file_name(context: GenerationContext, settings: GeneratorSettings) -> str:
    if not context.file_name:
        return ""
    reversed_name = context.file_name[::-1]
    if settings.reversed_name_case == "uppercase":
        return reversed_name.upper()
    if settings.reversed_name_case == "lowercase":
        return reversed_name.lower()
    return reversed_name


@option(
    OptionIds.DOM_HASH,
    name="DOM Hash",
    description="Hash of the DOM ancestor chain",
    example="e7c3a1b9",
)
def dom_hash(context: GenerationContext, settings: GeneratorSettings) -> str:
    chain = ancestor_chain_to_string(
        compute_ancestor_chain(context.document_text, context.element_offset)
    )
    if not chain:
        return ""
    return truncated_md5(chain, settings.dom_hash_length)


@option(
    OptionIds.ABBREVIATED_DOM,
    name="Abbreviated DOM Position",
    description="Abbreviated ancestor tag names (e.g., div-sec-hea-spa)",
    example="div-sec-hea-spa",
)
def abbreviated_dom_position(context: GenerationContext, settings: GeneratorSettings) -> str:
    ancestors = compute_ancestor_chain(context.document_text, context.element_offset)
    kept = [tag for tag in ancestors if tag.lower() not in EXCLUDED_DOM_TAGS]
    if not kept:
        return ""
    return abbreviate(kept, settings.abbr_length)


@option(
    OptionIds.ABBREVIATED_PATH,
    name="Abbreviated File Path",
    description="Abbreviated folder/file names (e.g., int-tem-cli-uti)",
    example="tem-adm-use",
)
def abbreviated_file_path(context: GenerationContext, settings: GeneratorSettings) -> str:
    if not context.relative_path:
        return ""
    return abbreviate_path(context.relative_path, settings.abbr_length)


@option(
    OptionIds.RELEASE_NAME,
    name="Release Name",
    description="Current active release name based on expiry dates",
    example="release-1",
)
def release_name(context: GenerationContext, settings: GeneratorSettings) -> str:
    current = active_release(settings.releases, utc_today())
    if current is not None:
        return sanitize_class_token(current.name)
    logger.debug("No active release, falling back to '%s'", settings.default_release)
    return sanitize_class_token(settings.default_release)


__all__ = [
    "EXCLUDED_DOM_TAGS",
    "SKIP_PATH_ROOTS",
    "Option",
    "OptionIds",
    "abbreviate",
    "abbreviate_path",
    "active_release",
    "all_options",
    "expired_releases",
    "get_option",
    "option",
    "resolve_options",
    "sanitize_class_token",
    "truncated_md5",
    "utc_today",
]
