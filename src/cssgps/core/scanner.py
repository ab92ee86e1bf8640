"""Error-tolerant markup scanning over raw document text.

The scanner deliberately avoids building a tree. Two questions are answered
directly from character offsets:

`locate_element`
: which opening tag sits at (or immediately before) a cursor offset, together
  with the spans of the attributes the mutator may rewrite.

`compute_ancestor_chain`
: which tags are still open when the scan reaches a given offset, tracked with
  a plain list used as a stack. Misnested or unbalanced markup never raises:
  unmatched closers are ignored and unclosed openers simply stay on the stack.

Both run in time linear in the document length.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
import logging
import re

from .locator import CLASS_ATTRIBUTE, DEFAULT_PATH_MARKER, AttributeSpan, find_attributes


logger = logging.getLogger(__name__)

SELF_CLOSING_TAGS: frozenset[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"
CHAIN_SEPARATOR = ">"

_TAG_NAME_RE = re.compile(r"<([A-Za-z]\w*)")
_OPENING_TAG_RE = re.compile(r"<([A-Za-z]\w*)([^>]*?)(/?)>")
_CLOSING_TAG_RE = re.compile(r"</([A-Za-z]\w*)\s*>")


@dataclass(frozen=True, slots=True)
class ElementInfo:
    """Opening tag located around a cursor offset.

    ``start_offset``/``end_offset`` delimit the opening tag including ``<`` and
    ``>`` as a half-open span over the document text.
    """

    tag_name: str
    start_offset: int
    end_offset: int
    attributes: dict[str, AttributeSpan] = field(default_factory=dict)
    marker_attribute: str = DEFAULT_PATH_MARKER

    @property
    def class_attribute(self) -> AttributeSpan | None:
        return self.attributes.get(CLASS_ATTRIBUTE)

    @property
    def has_class(self) -> bool:
        return CLASS_ATTRIBUTE in self.attributes

    @property
    def class_value(self) -> str | None:
        span = self.class_attribute
        return span.value if span is not None else None

    @property
    def path_marker(self) -> AttributeSpan | None:
        return self.attributes.get(self.marker_attribute.lower())

    @property
    def has_path_marker(self) -> bool:
        return self.path_marker is not None

    def tag_text(self, document_text: str) -> str:
        """Return the literal opening tag text from the document."""
        return document_text[self.start_offset : self.end_offset]


def is_self_closing_tag(tag_name: str) -> bool:
    """Return True when ``tag_name`` is a void element."""
    return tag_name.lower() in SELF_CLOSING_TAGS


def locate_element(
    document_text: str,
    cursor_offset: int,
    *,
    marker_attribute: str = DEFAULT_PATH_MARKER,
) -> ElementInfo | None:
    """Locate the nearest opening tag at or before ``cursor_offset``.

    The match is approximate: the closest preceding ``<`` that does not start
    a closing tag wins, whether or not the cursor is actually inside that
    element's content. Returns ``None`` when there is no such ``<``, when it
    is never followed by ``>``, or when it does not open a named tag.
    """
    if not document_text:
        return None

    position = min(max(cursor_offset, 0), len(document_text) - 1)
    tag_start = -1
    while position >= 0:
        if document_text[position] == "<" and document_text[position + 1 : position + 2] != "/":
            tag_start = position
            break
        position -= 1

    if tag_start == -1:
        logger.debug("No opening tag before offset %d", cursor_offset)
        return None

    tag_close = document_text.find(">", tag_start)
    if tag_close == -1:
        logger.debug("Unterminated tag at offset %d", tag_start)
        return None

    name_match = _TAG_NAME_RE.match(document_text, tag_start, tag_close + 1)
    if name_match is None:
        return None

    tag_end = tag_close + 1
    attributes = find_attributes(document_text, name_match.end(), tag_end)
    return ElementInfo(
        tag_name=name_match.group(1),
        start_offset=tag_start,
        end_offset=tag_end,
        attributes=attributes,
        marker_attribute=marker_attribute,
    )


def _remove_topmost(stack: list[str], tag_name: str) -> None:
    for index in range(len(stack) - 1, -1, -1):
        if stack[index] == tag_name:
            del stack[index]
            return


def compute_ancestor_chain(document_text: str, element_offset: int) -> list[str]:
    """Return the open tag names enclosing ``element_offset``, root first.

    The tag starting exactly at ``element_offset`` (if any) is appended last
    so the chain ends with the target element itself.
    """
    stack: list[str] = []
    limit = min(max(element_offset, 0), len(document_text))
    index = 0

    while index < limit:
        if document_text.startswith(COMMENT_OPEN, index):
            comment_end = document_text.find(COMMENT_CLOSE, index + len(COMMENT_OPEN))
            if comment_end == -1:
                index = len(document_text)
                break
            index = comment_end + len(COMMENT_CLOSE)
            continue

        if document_text[index] == "<":
            following = document_text[index + 1 : index + 2]
            if following == "/":
                closing = _CLOSING_TAG_RE.match(document_text, index)
                if closing is not None:
                    _remove_topmost(stack, closing.group(1).lower())
                    index = closing.end()
                    continue
            elif following != "!":
                opening = _OPENING_TAG_RE.match(document_text, index)
                if opening is not None:
                    tag_name = opening.group(1).lower()
                    if not opening.group(3) and not is_self_closing_tag(tag_name):
                        stack.append(tag_name)
                    index = opening.end()
                    continue

        index += 1

    target = _TAG_NAME_RE.match(document_text, limit)
    if target is not None:
        stack.append(target.group(1).lower())

    return stack


def ancestor_chain_to_string(sequence: Iterable[str]) -> str:
    """Join an ancestor chain into the ``body>div>span`` form used for hashing."""
    return CHAIN_SEPARATOR.join(sequence)


__all__ = [
    "SELF_CLOSING_TAGS",
    "ElementInfo",
    "ancestor_chain_to_string",
    "compute_ancestor_chain",
    "is_self_closing_tag",
    "locate_element",
]
