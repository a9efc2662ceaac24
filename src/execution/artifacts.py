"""Timestamped scratch files written to the temp directory."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

DEFAULT_TEMP_DIR = Path("temp")


def create_timestamped_file(
    content: str,
    prefix: str,
    suffix: str = "txt",
    temp_dir: Path | str = DEFAULT_TEMP_DIR,
) -> Path:
    """Write ``content`` to ``<temp_dir>/<prefix>-<timestamp>.<suffix>``.

    The directory is created if needed. Files are never overwritten; a
    numeric counter is appended when the timestamp collides.
    """
    directory = Path(temp_dir)
    directory.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")

    path = directory / f"{prefix}-{stamp}.{suffix}"
    counter = 1
    while path.exists():
        path = directory / f"{prefix}-{stamp}-{counter}.{suffix}"
        counter += 1

    path.write_text(content, encoding="utf-8")
    return path


def remove_quietly(path: Path) -> bool:
    """Delete a scratch file; returns False when it was already gone."""
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True
