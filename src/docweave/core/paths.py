"""Filename helpers used when deriving output artefacts from inputs."""

from __future__ import annotations

import os
from pathlib import Path

from .exceptions import OutputLockedError


def with_ext(path: str | os.PathLike[str], ext: str) -> Path:
    """Return ``path`` with its extension replaced by ``ext``.

    The extension may be given with or without its leading dot. Paths without
    an extension gain one.
    """
    suffix = ext if ext.startswith(".") or not ext else f".{ext}"
    candidate = Path(path)
    if not suffix:
        return candidate.with_suffix("")
    return candidate.with_suffix(suffix)


def same_path(first: str | os.PathLike[str], second: str | os.PathLike[str]) -> bool:
    """Return True when both paths point at the same location."""
    try:
        return Path(first).resolve() == Path(second).resolve()
    except OSError:
        return Path(first).absolute() == Path(second).absolute()


def ensure_removable(path: str | os.PathLike[str]) -> None:
    """Delete an existing output up front so a locked file fails early."""
    target = Path(path)
    if not target.exists():
        return
    try:
        target.unlink()
    except OSError as exc:
        raise OutputLockedError(
            f"The file '{target}' cannot be removed (it may be open in a PDF viewer)."
        ) from exc


__all__ = ["ensure_removable", "same_path", "with_ext"]
