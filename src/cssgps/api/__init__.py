"""Facade for embedding class name generation in other tools.

`ClassNameService` runs one locate/generate/mutate cycle described by a
`GenerationRequest` and returns a `GenerationOutcome`. Hosts apply
`outcome.edit` to their own document model; the service never writes files.

Usage Example
:
    >>> from pathlib import Path
    >>> from cssgps.api import ClassNameService, GenerationRequest
    >>> outcome = ClassNameService().apply(
    ...     GenerationRequest(
    ...         file_path=Path("/site/src/pages/about.html"),
    ...         document_text="<body><div><p>Hi</p></div></body>",
    ...         offset=11,
    ...         workspace_root=Path("/site"),
    ...         option_ids=("abbreviatedDomPosition",),
    ...     )
    ... )
    >>> outcome.edit.replacement
    '<p class="div-p">'
"""

from __future__ import annotations

from .service import (
    ClassNameService,
    GenerationOutcome,
    GenerationRequest,
    OutcomeStatus,
    path_marker_value,
    read_document,
)


__all__ = [
    "ClassNameService",
    "GenerationOutcome",
    "GenerationRequest",
    "OutcomeStatus",
    "path_marker_value",
    "read_document",
]
