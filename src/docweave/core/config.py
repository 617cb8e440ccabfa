"""Configuration models for docweave.

Settings are read from ``docweave.yml`` (or any YAML file passed explicitly).
Every section is optional; omitted values fall back to the defaults below.

WatchConfig

`interval` (`float`)
: Pause in seconds between two polling cycles. Must not be negative.

`missing` (`"fail" | "skip"`)
: Behaviour when a watched file disappears: abort the watch, or warn and
  keep polling until the file comes back.

LatexConfig

`engine` (`str`)
: LaTeX program driven by latexmk (``pdflatex``, ``xelatex``, ``lualatex``)
  or ``tectonic``.

`clean` (`bool`)
: Remove auxiliary files after a successful build.

`shell_escape` (`bool`)
: Pass ``--shell-escape`` to the engine.

PandocConfig / Rst2PdfConfig

`command` (`str`)
: Program name or path.

`options` (`list[str]`)
: Extra command-line arguments appended to every call.

MarkdownConfig

`extensions` (`list[str]`)
: Python-Markdown extensions enabled when rendering HTML.

WordPressConfig

`url` (`str | None`)
: Site root, e.g. ``https://blog.example.org``.

`username` / `password` (`str | None`)
: Credentials for an application password. The password falls back to the
  ``DOCWEAVE_WP_PASSWORD`` environment variable.

`publish` (`bool`)
: Publish immediately instead of saving a draft.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
import yaml

from .exceptions import ConfigError


DEFAULT_CONFIG_NAME = "docweave.yml"
PASSWORD_ENV_VAR = "DOCWEAVE_WP_PASSWORD"


class WatchConfig(BaseModel):
    """Polling behaviour of the watch loop."""

    model_config = ConfigDict(extra="forbid")

    interval: float = Field(default=1.0, ge=0)
    missing: Literal["fail", "skip"] = "fail"


class LatexConfig(BaseModel):
    """LaTeX engine selection."""

    model_config = ConfigDict(extra="forbid")

    engine: str = "pdflatex"
    clean: bool = True
    shell_escape: bool = False


class PandocConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    command: str = "pandoc"
    to: str = "html"
    options: list[str] = Field(default_factory=list)


class Rst2PdfConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    command: str = "rst2pdf"
    options: list[str] = Field(default_factory=list)


class MarkdownConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    extensions: list[str] = Field(
        default_factory=lambda: ["extra", "toc", "codehilite", "smarty"]
    )


class WordPressConfig(BaseModel):
    """Blog endpoint and credentials."""

    model_config = ConfigDict(extra="forbid")

    url: str | None = None
    username: str | None = None
    password: str | None = None
    publish: bool = True

    @model_validator(mode="after")
    def _password_from_env(self) -> WordPressConfig:
        if self.password is None:
            self.password = os.environ.get(PASSWORD_ENV_VAR) or None
        return self


class DocweaveConfig(BaseModel):
    """Top-level configuration document."""

    model_config = ConfigDict(extra="forbid")

    watch: WatchConfig = Field(default_factory=WatchConfig)
    latex: LatexConfig = Field(default_factory=LatexConfig)
    pandoc: PandocConfig = Field(default_factory=PandocConfig)
    rst2pdf: Rst2PdfConfig = Field(default_factory=Rst2PdfConfig)
    markdown: MarkdownConfig = Field(default_factory=MarkdownConfig)
    wordpress: WordPressConfig = Field(default_factory=WordPressConfig)


def load_config(path: str | os.PathLike[str] | None = None) -> DocweaveConfig:
    """Load configuration from ``path`` or ``./docweave.yml`` when present."""
    if path is None:
        candidate = Path.cwd() / DEFAULT_CONFIG_NAME
        if not candidate.exists():
            return DocweaveConfig()
    else:
        candidate = Path(path)

    try:
        raw = candidate.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration file '{candidate}': {exc}") from exc

    try:
        payload: Any = yaml.safe_load(raw) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in '{candidate}': {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigError(f"Configuration file '{candidate}' must contain a mapping.")

    try:
        return DocweaveConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in '{candidate}': {exc}") from exc


__all__ = [
    "DEFAULT_CONFIG_NAME",
    "PASSWORD_ENV_VAR",
    "DocweaveConfig",
    "LatexConfig",
    "MarkdownConfig",
    "PandocConfig",
    "Rst2PdfConfig",
    "WatchConfig",
    "WordPressConfig",
    "load_config",
]
