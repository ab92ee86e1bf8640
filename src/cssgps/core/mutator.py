"""In-place rewriting of a located opening tag.

Mutations are pure functions from the old opening tag text and its located
spans to new tag text. Nothing outside ``[start_offset, end_offset)`` is ever
produced, so the result can be applied as a single :class:`TextEdit`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .locator import CLASS_ATTRIBUTE, AttributeSpan, closing_insert_offset, find_attributes
from .scanner import ElementInfo


_DOUBLE_QUOTE = '"'
_QUOTE_ENTITIES = {'"': "&quot;", "'": "&#39;"}


@dataclass(frozen=True, slots=True)
class TextEdit:
    """Replacement of ``document[start:end]`` by ``replacement``."""

    start: int
    end: int
    replacement: str
    original: str = ""

    @property
    def changed(self) -> bool:
        return self.replacement != self.original

    def apply(self, document_text: str) -> str:
        """Return ``document_text`` with the span substituted."""
        return document_text[: self.start] + self.replacement + document_text[self.end :]


def _escape(value: str, quote: str) -> str:
    quote = quote or _DOUBLE_QUOTE
    entity = _QUOTE_ENTITIES.get(quote)
    return value.replace(quote, entity) if entity else value


def _replace_value(tag_text: str, element: ElementInfo, span: AttributeSpan, value: str) -> str:
    local = span.shifted(-element.start_offset)
    if local.quoted:
        rendered = _escape(value, local.quote)
    else:
        rendered = f'"{_escape(value, _DOUBLE_QUOTE)}"'
    return tag_text[: local.value_start] + rendered + tag_text[local.value_end :]


def _insert_attribute(tag_text: str, name: str, value: str) -> str:
    position = closing_insert_offset(tag_text)
    attribute = f' {name}="{_escape(value, _DOUBLE_QUOTE)}"'
    return tag_text[:position] + attribute + tag_text[position:]


def class_tokens(value: str | None) -> list[str]:
    """Split a class attribute value into tokens."""
    return value.split() if value else []


def apply_class(tag_text: str, element: ElementInfo, new_class: str) -> str:
    """Add ``new_class`` to the element's class attribute.

    Returns ``tag_text`` untouched when the class is already present, so
    applying the same class twice is a no-op.
    """
    if not new_class:
        return tag_text

    span = element.class_attribute
    if span is None:
        return _insert_attribute(tag_text, CLASS_ATTRIBUTE, new_class)

    if new_class in class_tokens(span.value):
        return tag_text

    existing = span.value.rstrip()
    combined = f"{existing} {new_class}" if existing.strip() else new_class
    return _replace_value(tag_text, element, span, combined)


def apply_path_marker(
    tag_text: str,
    element: ElementInfo,
    value: str,
    attribute: str | None = None,
) -> str:
    """Set the path marker attribute to ``value``, inserting it when absent."""
    name = (attribute or element.marker_attribute).lower()
    span = element.attributes.get(name)
    if span is None:
        return _insert_attribute(tag_text, name, value)
    if span.value == value and span.quoted:
        return tag_text
    return _replace_value(tag_text, element, span, value)


def relocate(element: ElementInfo, tag_text: str) -> ElementInfo:
    """Return ``element`` with attribute spans recomputed for ``tag_text``."""
    name_end = 1 + len(element.tag_name)
    attributes = {
        name: span.shifted(element.start_offset)
        for name, span in find_attributes(tag_text, name_end, len(tag_text)).items()
    }
    return replace(
        element,
        end_offset=element.start_offset + len(tag_text),
        attributes=attributes,
    )


def build_edit(
    document_text: str,
    element: ElementInfo,
    new_class: str,
    *,
    marker_value: str | None = None,
    marker_attribute: str | None = None,
) -> TextEdit:
    """Return the single edit that applies ``new_class`` (and the marker)."""
    original = element.tag_text(document_text)
    updated = apply_class(original, element, new_class)
    if marker_value:
        current = relocate(element, updated) if updated != original else element
        updated = apply_path_marker(updated, current, marker_value, marker_attribute)
    return TextEdit(
        start=element.start_offset,
        end=element.end_offset,
        replacement=updated,
        original=original,
    )


__all__ = [
    "TextEdit",
    "apply_class",
    "apply_path_marker",
    "build_edit",
    "class_tokens",
    "relocate",
]
