"""Checks and previews for a comment body stored in a file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

# GitHub rejects comment bodies much above this size.
COMMENT_SIZE_WARNING_BYTES = 65_536
PREVIEW_LINES = 10


class CommentFileError(ValueError):
    """Raised when a comment file cannot be posted."""


@dataclass(frozen=True)
class CommentFile:
    path: Path
    size: int
    warnings: list[str] = field(default_factory=list)

    @property
    def size_kb(self) -> int:
        return round(self.size / 1024)


def validate_comment_file(path: Path | str) -> CommentFile:
    path = Path(path)
    if not path.is_file():
        raise CommentFileError(f"File does not exist or is not readable: {path}")
    try:
        content = path.read_bytes()
    except OSError as e:
        raise CommentFileError(f"File does not exist or is not readable: {path} ({e})") from e
    if not content:
        raise CommentFileError(f"File is empty: {path}")

    warnings = []
    if len(content) > COMMENT_SIZE_WARNING_BYTES:
        warnings.append(
            f"File is large ({round(len(content) / 1024)}KB). GitHub has comment size limits."
        )
    return CommentFile(path=path, size=len(content), warnings=warnings)


def preview(path: Path, lines: int = PREVIEW_LINES) -> str:
    """Numbered first ``lines`` lines of the file plus a size summary."""
    content = path.read_text(encoding="utf-8", errors="replace")
    all_lines = content.split("\n")
    out = [f"{i + 1:>3}: {line}" for i, line in enumerate(all_lines[:lines])]
    if len(all_lines) > lines:
        out.append(f"... ({len(all_lines) - lines} more lines)")
    out.append(f"Total: {len(all_lines)} lines, {round(len(content) / 1024)}KB")
    return "\n".join(out)
