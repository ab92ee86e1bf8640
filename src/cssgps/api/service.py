"""Orchestration of locate, generate and mutate for embedding hosts.

The service never writes to disk. It returns a :class:`GenerationOutcome`
whose ``status`` tells the host whether there is anything to apply; missing
elements and empty class names are ordinary statuses rather than exceptions
so hosts can report them without special control flow.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
import logging
from pathlib import Path

from cssgps.core.config import DEFAULT_SEPARATOR, GeneratorSettings
from cssgps.core.context import GenerationContext
from cssgps.core.diagnostics import DiagnosticEmitter, ensure_emitter
from cssgps.core.exceptions import CssGpsError
from cssgps.core.mutator import TextEdit, build_edit
from cssgps.core.options import (
    OptionIds,
    abbreviate_path,
    active_release,
    expired_releases,
    utc_today,
)
from cssgps.core.rules import RULE_BETA, Rule, resolve_rule, rule_from_options
from cssgps.core.scanner import ElementInfo, locate_element


logger = logging.getLogger(__name__)

__all__ = [
    "ClassNameService",
    "GenerationOutcome",
    "GenerationRequest",
    "OutcomeStatus",
    "path_marker_value",
    "read_document",
]


class OutcomeStatus(str, Enum):
    """Result categories reported back to the host."""

    GENERATED = "generated"
    APPLIED = "applied"
    UNCHANGED = "unchanged"
    NOT_FOUND = "not_found"
    EMPTY = "empty"


_FAILURE_MESSAGES = {
    OutcomeStatus.NOT_FOUND: "No HTML element found at the given position.",
    OutcomeStatus.EMPTY: (
        "Could not generate a class name: every option produced an empty value. "
        "Check the project prefix, releases and rule options."
    ),
}


@dataclass(slots=True)
class GenerationRequest:
    """Description of a single locate/generate/mutate cycle."""

    file_path: Path
    offset: int
    document_text: str | None = None
    workspace_root: Path | None = None
    rule_id: str | None = None
    option_ids: Sequence[str] = field(default_factory=tuple)
    separator: str = DEFAULT_SEPARATOR
    settings: GeneratorSettings | None = None
    emit_path_marker: bool | None = None
    emitter: DiagnosticEmitter | None = None


@dataclass(slots=True)
class GenerationOutcome:
    """Captured outcome of :class:`ClassNameService` execution."""

    status: OutcomeStatus
    rule: Rule | None = None
    element: ElementInfo | None = None
    class_name: str = ""
    marker_value: str | None = None
    edit: TextEdit | None = None
    document_text: str = ""

    @property
    def ok(self) -> bool:
        return self.status not in _FAILURE_MESSAGES

    @property
    def message(self) -> str | None:
        """User-facing explanation for failed outcomes."""
        return _FAILURE_MESSAGES.get(self.status)

    @property
    def updated_text(self) -> str:
        """Return the document with the edit applied (or unchanged)."""
        if self.edit is None:
            return self.document_text
        return self.edit.apply(self.document_text)


def read_document(path: Path) -> str:
    """Read a markup file as UTF-8 text, keeping its line endings."""
    try:
        with Path(path).open(encoding="utf-8", newline="") as handle:
            return handle.read()
    except OSError as exc:
        msg = f"Unable to read '{path}'."
        raise CssGpsError(msg) from exc


def path_marker_value(context: GenerationContext, settings: GeneratorSettings) -> str:
    """Return the condensed file path written to the path marker attribute."""
    condensed = abbreviate_path(context.relative_path, settings.abbr_length)
    return condensed or context.relative_path


class ClassNameService:
    """High-level façade running a rule against one element of a document."""

    def __init__(self, emitter: DiagnosticEmitter | None = None) -> None:
        self._emitter = emitter

    def select_rule(self, request: GenerationRequest, settings: GeneratorSettings) -> Rule:
        """Pick the rule named by the request, an ad hoc option list, or the default."""
        if request.option_ids:
            return rule_from_options(request.option_ids, request.separator)
        if request.rule_id:
            return resolve_rule(request.rule_id, settings)
        return RULE_BETA

    def generate(self, request: GenerationRequest) -> GenerationOutcome:
        """Locate the element and compute its class name without editing."""
        emitter = ensure_emitter(request.emitter or self._emitter)
        settings = request.settings or GeneratorSettings()
        rule = self.select_rule(request, settings)
        text = (
            request.document_text
            if request.document_text is not None
            else read_document(request.file_path)
        )

        element = locate_element(
            text, request.offset, marker_attribute=settings.path_marker.attribute
        )
        if element is None:
            logger.debug("Nothing to operate on at offset %d", request.offset)
            return GenerationOutcome(OutcomeStatus.NOT_FOUND, rule=rule, document_text=text)
        emitter.event(
            "element_located",
            {"tag": element.tag_name, "start": element.start_offset, "end": element.end_offset},
        )

        context = GenerationContext.for_file(
            request.file_path,
            text,
            element.start_offset,
            workspace_root=request.workspace_root,
        )
        self._report_expired_releases(rule, settings, emitter)

        class_name = rule.generate(context, settings)
        if not class_name:
            return GenerationOutcome(
                OutcomeStatus.EMPTY, rule=rule, element=element, document_text=text
            )
        emitter.event("class_generated", {"class_name": class_name, "rule": rule.name})

        emit_marker = (
            request.emit_path_marker
            if request.emit_path_marker is not None
            else settings.path_marker.enabled
        )
        marker = path_marker_value(context, settings) if emit_marker else None
        return GenerationOutcome(
            OutcomeStatus.GENERATED,
            rule=rule,
            element=element,
            class_name=class_name,
            marker_value=marker,
            document_text=text,
        )

    def apply(self, request: GenerationRequest) -> GenerationOutcome:
        """Generate the class name and compute the edit adding it to the element."""
        outcome = self.generate(request)
        if not outcome.ok or outcome.element is None:
            return outcome

        settings = request.settings or GeneratorSettings()
        edit = build_edit(
            outcome.document_text,
            outcome.element,
            outcome.class_name,
            marker_value=outcome.marker_value,
            marker_attribute=settings.path_marker.attribute,
        )
        outcome.edit = edit
        outcome.status = OutcomeStatus.APPLIED if edit.changed else OutcomeStatus.UNCHANGED
        return outcome

    @staticmethod
    def _report_expired_releases(
        rule: Rule, settings: GeneratorSettings, emitter: DiagnosticEmitter
    ) -> None:
        if OptionIds.RELEASE_NAME not in rule.option_ids or not settings.releases:
            return
        today = utc_today()
        if active_release(settings.releases, today) is not None:
            return
        for entry in expired_releases(settings.releases, today):
            emitter.event("release_expired", {"name": entry.name, "expiry": entry.expiry})
