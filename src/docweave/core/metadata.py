"""YAML front matter helpers for Markdown sources."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import yaml


__all__ = ["front_matter_title", "output_formats", "split_front_matter"]


def split_front_matter(source: str) -> tuple[dict[str, Any], str]:
    """Split YAML front matter from Markdown content, returning metadata and body."""
    candidate = source.lstrip("\ufeff")
    lines = candidate.splitlines()
    if not lines or lines[0].strip() != "---":
        return {}, source

    front_matter_lines: list[str] = []
    closing_index: int | None = None
    for idx, line in enumerate(lines[1:], start=1):
        stripped = line.strip()
        if stripped in {"---", "..."}:
            closing_index = idx
            break
        front_matter_lines.append(line)

    if closing_index is None:
        return {}, source

    raw_block = "\n".join(front_matter_lines)
    try:
        metadata = yaml.safe_load(raw_block) or {}
    except yaml.YAMLError:
        return {}, source

    if not isinstance(metadata, dict):
        metadata = {}

    body = "\n".join(lines[closing_index + 1 :])
    if source.endswith("\n"):
        body += "\n"

    return metadata, body


def front_matter_title(metadata: Mapping[str, Any]) -> str | None:
    """Return the document title declared in front matter, if any."""
    value = metadata.get("title")
    if value is None or isinstance(value, (list, dict)):
        return None
    title = str(value).strip()
    return title or None


def output_formats(metadata: Mapping[str, Any]) -> list[str]:
    """Return the output format names declared under ``output``."""
    value = metadata.get("output")
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Mapping):
        return [str(key) for key in value]
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if isinstance(item, str)]
    return []
