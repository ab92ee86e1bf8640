"""Attribute lookup inside a single opening tag.

The locator never looks outside the ``[start, end)`` window it is given, which
is always the literal text of one opening tag. Every span it returns is an
absolute offset into the host document so the mutator can splice values in
place without re-scanning.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import re


CLASS_ATTRIBUTE = "class"
DEFAULT_PATH_MARKER = "data-css-gps"

_ATTRIBUTE_RE = re.compile(
    r"""(?<![\w:.-])([A-Za-z_:][\w:.-]*)\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'=<>`]+?)(?=\s|/?>|$))"""
)


@dataclass(frozen=True, slots=True)
class AttributeSpan:
    """Location of a ``name="value"`` pair inside the document text."""

    name: str
    value: str
    start: int
    end: int
    value_start: int
    value_end: int
    quote: str = '"'

    @property
    def quoted(self) -> bool:
        return bool(self.quote)

    def shifted(self, delta: int) -> AttributeSpan:
        """Return a copy with every offset moved by ``delta``."""
        return replace(
            self,
            start=self.start + delta,
            end=self.end + delta,
            value_start=self.value_start + delta,
            value_end=self.value_end + delta,
        )


def find_attributes(document_text: str, start: int, end: int) -> dict[str, AttributeSpan]:
    """Collect attribute spans within ``document_text[start:end]``.

    Names are lowercased. When an attribute is repeated the first occurrence
    wins, matching how browsers resolve duplicates.
    """
    attributes: dict[str, AttributeSpan] = {}
    for match in _ATTRIBUTE_RE.finditer(document_text, start, end):
        name = match.group(1).lower()
        if name in attributes:
            continue
        if match.group(2) is not None:
            group, quote = 2, '"'
        elif match.group(3) is not None:
            group, quote = 3, "'"
        else:
            group, quote = 4, ""
        attributes[name] = AttributeSpan(
            name=name,
            value=match.group(group),
            start=match.start(),
            end=match.end(),
            value_start=match.start(group),
            value_end=match.end(group),
            quote=quote,
        )
    return attributes


def find_attribute(document_text: str, start: int, end: int, name: str) -> AttributeSpan | None:
    """Return the span of a single attribute, or ``None`` when it is absent."""
    return find_attributes(document_text, start, end).get(name.lower())


def closing_insert_offset(tag_text: str) -> int:
    """Return the offset inside ``tag_text`` where a new attribute belongs.

    New attributes go right before the closing ``>``; for ``/>`` they go
    before the slash, and in both cases ahead of any trailing whitespace so
    that ``<br />`` becomes ``<br class="x" />``.
    """
    position = len(tag_text) - 1 if tag_text.endswith(">") else len(tag_text)
    if position > 0 and tag_text[position - 1] == "/":
        position -= 1
    while position > 0 and tag_text[position - 1].isspace():
        position -= 1
    return position


__all__ = [
    "CLASS_ATTRIBUTE",
    "DEFAULT_PATH_MARKER",
    "AttributeSpan",
    "closing_insert_offset",
    "find_attribute",
    "find_attributes",
]
