"""Primary public API for docweave."""

from __future__ import annotations

from docweave.adapters.highlight import HighlightTheme, get_theme, list_themes, theme_definitions
from docweave.adapters.pandoc import pandoc_convert
from docweave.adapters.rst2pdf import rst2pdf
from docweave.adapters.wordpress import WordPressClient, apply_shortcodes
from docweave.api import (
    compile_document,
    compile_pdf,
    convert_document,
    publish_post,
    render_html,
    render_pdf,
)
from docweave.core.config import DocweaveConfig, load_config
from docweave.core.exceptions import (
    ConversionError,
    DocweaveError,
    OutputLockedError,
    PublishError,
    ToolNotFoundError,
    WatchConfigurationError,
    WatchTargetError,
)
from docweave.core.paths import with_ext
from docweave.core.watch import WatchLoop, watch
from docweave.version import get_version


__version__ = get_version()

__all__ = [
    "ConversionError",
    "DocweaveConfig",
    "DocweaveError",
    "HighlightTheme",
    "OutputLockedError",
    "PublishError",
    "ToolNotFoundError",
    "WatchConfigurationError",
    "WatchLoop",
    "WatchTargetError",
    "WordPressClient",
    "__version__",
    "apply_shortcodes",
    "compile_document",
    "compile_pdf",
    "convert_document",
    "get_theme",
    "get_version",
    "list_themes",
    "load_config",
    "pandoc_convert",
    "publish_post",
    "render_html",
    "render_pdf",
    "rst2pdf",
    "theme_definitions",
    "watch",
    "with_ext",
]
