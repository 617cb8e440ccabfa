"""High-level conversion entry points.

Each function delegates the actual work to an external tool and only handles
file naming around it:

- :func:`compile_pdf` builds a PDF next to its source with latexmk, Tectonic
  or rst2pdf.
- :func:`render_pdf` builds a PDF at an arbitrary location, replacing any
  previous output and cleaning intermediates.
- :func:`convert_document` runs Pandoc, or a caller-supplied wrapper.
- :func:`render_html` renders Markdown with Python-Markdown.
- :func:`publish_post` renders Markdown and posts it to WordPress.
- :func:`compile_document` picks one of the above from a file extension and is
  the default compile action of :func:`docweave.watch`.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
import os
from pathlib import Path
import shutil
from typing import Any, Literal
import warnings

from docweave.adapters.latex import (
    DEFAULT_ENGINE,
    LatexMessageSeverity,
    build_engine_command,
    clean_intermediates,
    missing_dependencies,
    resolve_engine,
    run_engine_command,
)
from docweave.adapters.markdown import markdown_to_html, render_markdown
from docweave.adapters.pandoc import pandoc_convert
from docweave.adapters.rst2pdf import rst2pdf
from docweave.adapters.wordpress import WordPressClient, apply_shortcodes
from docweave.core.diagnostics import DiagnosticEmitter
from docweave.core.exceptions import ConversionError, ToolNotFoundError
from docweave.core.metadata import front_matter_title, output_formats, split_front_matter
from docweave.core.paths import ensure_removable, same_path, with_ext


MARKDOWN_SUFFIXES = frozenset({".md", ".markdown", ".mdown"})
LATEX_SUFFIXES = frozenset({".tex", ".latex"})
RST_SUFFIXES = frozenset({".rst", ".rest"})

DEFAULT_POST_TITLE = "A post from docweave"
# Code blocks must keep their ``language-x`` classes for shortcodes, so no codehilite here.
POST_MARKDOWN_EXTENSIONS = ("extra", "smarty")

PostAction = Literal["new_post", "edit_post", "new_page"]
PandocWrapper = Callable[..., Any]


def _markdown_to_latex(
    source: Path,
    output: str | os.PathLike[str] | None,
    *,
    emitter: DiagnosticEmitter | None,
) -> Path:
    target = with_ext(output, "tex") if output is not None else with_ext(source, "tex")
    return pandoc_convert(
        source, to="latex", output=target, options=["--standalone"], emitter=emitter
    )


def _latex_failure(result_messages: Sequence[Any], returncode: int, label: str) -> str:
    for message in result_messages:
        if message.severity is LatexMessageSeverity.ERROR:
            return f"{label} failed: {message.summary}"
    return f"{label} failed with exit code {returncode}"


def compile_pdf(
    input: str | os.PathLike[str],
    output: str | os.PathLike[str] | None = None,
    compiler: str | None = None,
    *,
    clean: bool = False,
    shell_escape: bool = False,
    options: Sequence[str] = (),
    emitter: DiagnosticEmitter | None = None,
) -> Path:
    """Compile ``input`` to PDF next to the compiled document and return its path.

    LaTeX sources go through latexmk (``compiler`` names the engine, default
    ``pdflatex``) or Tectonic (``compiler="tectonic"``). reStructuredText goes
    through rst2pdf, which is also selected explicitly with
    ``compiler="rst2pdf"``. Markdown is first converted to LaTeX by Pandoc;
    ``output`` then names that intermediate ``.tex`` file.
    """
    source = Path(input)
    suffix = source.suffix.lower()

    document = source
    if suffix in MARKDOWN_SUFFIXES:
        document = _markdown_to_latex(source, output, emitter=emitter)

    if compiler is None:
        compiler = "rst2pdf" if document.suffix.lower() in RST_SUFFIXES else DEFAULT_ENGINE

    if compiler.strip().lower() == "rst2pdf":
        if document.suffix.lower() not in RST_SUFFIXES:
            raise ConversionError("The rst2pdf compiler requires a .rst input file.")
        return rst2pdf(document, options=options, emitter=emitter)

    choice = resolve_engine(compiler)
    missing = missing_dependencies(choice)
    if missing:
        raise ToolNotFoundError(missing[0], f"It is required to build PDFs with {choice.label}.")
    command = build_engine_command(
        choice, document, shell_escape=shell_escape, extra_args=list(options)
    )
    workdir = document.parent.resolve()
    result = run_engine_command(command, workdir=workdir, emitter=emitter)
    if not result.succeeded:
        raise ConversionError(
            _latex_failure(result.messages, result.returncode, choice.label),
            command=result.command,
            returncode=result.returncode,
            output=result.output or None,
        )
    if clean:
        clean_intermediates(workdir / document.name)
    return with_ext(document, "pdf")


def render_pdf(
    input: str | os.PathLike[str],
    output: str | os.PathLike[str] | None = None,
    compiler: str = "xelatex",
    *,
    clean: bool = True,
    shell_escape: bool = False,
    options: Sequence[str] = (),
    emitter: DiagnosticEmitter | None = None,
) -> Path:
    """Build ``input`` into the PDF file ``output`` and return ``output``.

    Unlike :func:`compile_pdf`, the output may live in any directory. An
    existing output is removed before building so that a file held open by a
    viewer fails fast. When ``clean`` is set, auxiliary files and any LaTeX
    generated from Markdown are removed afterwards.
    """
    source = Path(input)
    target = Path(output) if output is not None else with_ext(source, "pdf")
    ensure_removable(target)

    generated_tex: Path | None = None
    document = source
    if source.suffix.lower() in MARKDOWN_SUFFIXES:
        generated_tex = _markdown_to_latex(source, None, emitter=emitter)
        document = generated_tex
    elif source.suffix.lower() in RST_SUFFIXES:
        compiler = "rst2pdf"

    try:
        pdf_path = compile_pdf(
            document,
            compiler=compiler,
            clean=False,
            shell_escape=shell_escape,
            options=options,
            emitter=emitter,
        )
    finally:
        if clean:
            if document.suffix.lower() in LATEX_SUFFIXES:
                clean_intermediates(document)
            if generated_tex is not None and generated_tex.exists():
                generated_tex.unlink()

    if not same_path(target, pdf_path):
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(pdf_path), str(target))
    return target


def convert_document(
    input: str | os.PathLike[str],
    to: str = "html",
    *,
    output: str | os.PathLike[str] | None = None,
    options: Sequence[str] = (),
    command: str = "pandoc",
    wrapper: PandocWrapper | None = None,
    emitter: DiagnosticEmitter | None = None,
    **wrapper_options: Any,
) -> Any:
    """Convert ``input`` to the format ``to`` with Pandoc.

    When ``wrapper`` is supplied it is called as ``wrapper(input, to,
    **wrapper_options)`` instead, and its return value is passed through.
    """
    if wrapper is not None:
        return wrapper(input, to, **wrapper_options)
    return pandoc_convert(
        input, to=to, output=output, options=options, command=command, emitter=emitter
    )


def _warn_if_pandoc_document(metadata: dict[str, Any], label: str) -> None:
    formats = output_formats(metadata)
    if not formats:
        return
    if any(fmt == "html" or fmt.startswith("markdown") for fmt in formats):
        return
    warnings.warn(
        f"{label} declares the output format(s) {', '.join(formats)}; "
        "it probably needs convert_document() (Pandoc) rather than render_html().",
        stacklevel=3,
    )


def render_html(
    input: str | os.PathLike[str] | None = None,
    output: str | os.PathLike[str] | None = None,
    *,
    text: str | None = None,
    extensions: Sequence[str] | None = None,
) -> Path | str:
    """Render Markdown to HTML.

    With ``text`` the rendered HTML fragment is returned. Otherwise ``input``
    is rendered into a standalone page (``output`` or the input name with an
    ``.html`` extension) and the page path is returned.
    """
    if text is not None:
        document = render_markdown(text, extensions)
        _warn_if_pandoc_document(document.front_matter, "The Markdown text")
        return document.html

    if input is None:
        raise ValueError("Either an input file or Markdown text is required.")

    source = Path(input)
    metadata, _body = split_front_matter(source.read_text(encoding="utf-8"))
    _warn_if_pandoc_document(metadata, f"'{source}'")
    return markdown_to_html(source, output, extensions)


def publish_post(
    input: str | os.PathLike[str],
    client: WordPressClient,
    title: str | None = None,
    *,
    shortcode: bool | Sequence[bool] = False,
    action: PostAction = "new_post",
    post_id: int | None = None,
    publish: bool = True,
    extensions: Sequence[str] | None = None,
    **meta: Any,
) -> int:
    """Render a Markdown file and publish it to WordPress; return the post id.

    The title defaults to the ``title`` front matter entry. Additional
    keyword arguments (``categories``, ``tags``, ``excerpt`` ...) are sent
    with the post.
    """
    source = Path(input)
    document = render_markdown(
        source.read_text(encoding="utf-8"),
        list(extensions) if extensions is not None else list(POST_MARKDOWN_EXTENSIONS),
    )
    resolved_title = title or front_matter_title(document.front_matter) or DEFAULT_POST_TITLE
    content: dict[str, Any] = {
        "title": resolved_title,
        "content": apply_shortcodes(document.html, shortcode),
        **meta,
    }

    if action == "edit_post":
        if post_id is None:
            raise ValueError("post_id is required to edit an existing post.")
        return client.edit_post(post_id, content, publish=publish)
    if action == "new_page":
        return client.new_page(content, publish=publish)
    if action == "new_post":
        return client.new_post(content, publish=publish)
    raise ValueError(f"Unknown action '{action}' (expected new_post, edit_post or new_page).")


def compile_document(
    path: str | os.PathLike[str],
    to: str | None = None,
    *,
    compiler: str | None = None,
    extensions: Sequence[str] | None = None,
    emitter: DiagnosticEmitter | None = None,
) -> Path | str:
    """Build ``path`` into ``to`` (``pdf``, ``html`` or a Pandoc format).

    Without ``to``, LaTeX and reStructuredText sources become PDF and Markdown
    becomes HTML.
    """
    source = Path(path)
    suffix = source.suffix.lower()

    if to is None:
        if suffix in LATEX_SUFFIXES or suffix in RST_SUFFIXES:
            to = "pdf"
        elif suffix in MARKDOWN_SUFFIXES:
            to = "html"
        else:
            raise ConversionError(
                f"Cannot guess how to build '{source}'; pass an explicit output format."
            )

    target = to.strip().lower()
    if target == "pdf":
        return compile_pdf(source, compiler=compiler, emitter=emitter)
    if target == "html" and suffix in MARKDOWN_SUFFIXES:
        return render_html(source, extensions=extensions)
    return convert_document(source, to=target, emitter=emitter)


__all__ = [
    "DEFAULT_POST_TITLE",
    "compile_document",
    "compile_pdf",
    "convert_document",
    "publish_post",
    "render_html",
    "render_pdf",
]
