"""Per-invocation generation context shared by every option."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path, PurePath


@dataclass(frozen=True, slots=True)
class GenerationContext:
    """Read-only snapshot handed to option generators.

    ``relative_path`` always uses ``/`` separators so hashes derived from it
    stay identical across platforms. ``element_offset`` should point at the
    ``<`` of the target element for DOM-derived options to be meaningful.
    """

    file_path: str
    relative_path: str
    file_name: str
    file_extension: str
    element_offset: int
    document_text: str

    def __post_init__(self) -> None:
        if not 0 <= self.element_offset <= len(self.document_text):
            msg = (
                f"Element offset {self.element_offset} is outside the document "
                f"(length {len(self.document_text)})."
            )
            raise ValueError(msg)

    @classmethod
    def for_file(
        cls,
        file_path: str | os.PathLike[str],
        document_text: str,
        element_offset: int,
        *,
        workspace_root: str | os.PathLike[str] | None = None,
    ) -> GenerationContext:
        """Derive the path fields for ``file_path`` relative to ``workspace_root``."""
        absolute = Path(file_path).expanduser().absolute()
        return cls(
            file_path=str(absolute),
            relative_path=relative_path_for(absolute, workspace_root),
            file_name=absolute.stem,
            file_extension=absolute.suffix[1:] if absolute.suffix else "",
            element_offset=element_offset,
            document_text=document_text,
        )


def relative_path_for(
    file_path: str | os.PathLike[str],
    workspace_root: str | os.PathLike[str] | None,
) -> str:
    """Return ``file_path`` relative to ``workspace_root`` in POSIX form.

    Files outside the workspace, or calls without one, keep their absolute
    path.
    """
    absolute = Path(file_path).expanduser().absolute()
    if workspace_root is not None:
        root = Path(workspace_root).expanduser().absolute()
        try:
            return absolute.relative_to(root).as_posix()
        except ValueError:
            pass
    return PurePath(absolute).as_posix()


__all__ = ["GenerationContext", "relative_path_for"]
