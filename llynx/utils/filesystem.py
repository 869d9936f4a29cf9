"""Filesystem utilities for llynx."""

import os
from pathlib import Path


def ensure_directory(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists

    Returns:
        The directory path
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_text_file(path: Path, content: str) -> None:
    """Write UTF-8 text to a file, creating parent directories.

    Args:
        path: Path to the file
        content: Content to write
    """
    ensure_directory(path.parent)
    path.write_text(content, encoding="utf-8")


def relative_to_cwd(path: str | Path, cwd: Path | None = None) -> str:
    """Express a path relative to the working directory when it lies below it.

    Paths outside the working directory are returned unchanged.

    Args:
        path: Path to shorten
        cwd: Working directory (defaults to the process working directory)
    """
    base = Path.cwd() if cwd is None else cwd
    candidate = Path(path)
    if not candidate.is_absolute():
        return str(candidate)
    try:
        return str(candidate.relative_to(base))
    except ValueError:
        return os.fspath(candidate)
