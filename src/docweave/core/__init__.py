"""Core building blocks: the watch loop, configuration and diagnostics."""

from __future__ import annotations

from .config import DocweaveConfig, load_config
from .diagnostics import DiagnosticEmitter, LoggingEmitter, NullEmitter
from .exceptions import (
    ConfigError,
    ConversionError,
    DocweaveError,
    OutputLockedError,
    PublishError,
    ToolNotFoundError,
    WatchConfigurationError,
    WatchTargetError,
)
from .paths import ensure_removable, same_path, with_ext
from .watch import WatchLoop, watch


__all__ = [
    "ConfigError",
    "ConversionError",
    "DiagnosticEmitter",
    "DocweaveConfig",
    "DocweaveError",
    "LoggingEmitter",
    "NullEmitter",
    "OutputLockedError",
    "PublishError",
    "ToolNotFoundError",
    "WatchConfigurationError",
    "WatchLoop",
    "WatchTargetError",
    "ensure_removable",
    "load_config",
    "same_path",
    "watch",
    "with_ext",
]
