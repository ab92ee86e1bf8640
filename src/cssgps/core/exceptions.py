"""Custom exception hierarchy for class name generation."""

from __future__ import annotations


class CssGpsError(RuntimeError):
    """Base exception for class name generation failures."""


class ConfigurationError(CssGpsError):
    """Raised when a settings file cannot be read or validated."""


class UnknownRuleError(CssGpsError):
    """Raised when a rule identifier matches neither a preset nor a custom rule."""


class UnknownOptionError(CssGpsError):
    """Raised when a rule references an option identifier that is not registered."""


class PositionError(CssGpsError):
    """Raised when a line/column position falls outside the document."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None
