from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from docweave.adapters import _process
from docweave.api import conversion
from docweave.api.conversion import (
    DEFAULT_POST_TITLE,
    compile_document,
    compile_pdf,
    convert_document,
    publish_post,
    render_html,
    render_pdf,
)
from docweave.core.exceptions import ConversionError, ToolNotFoundError


class _StubResult:
    def __init__(self, returncode: int = 0, stdout: str = "", stderr: str = "") -> None:
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


@pytest.fixture
def latex_tools(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, Any]]:
    """Pretend latexmk is installed and produces a PDF next to the main file."""
    calls: list[dict[str, Any]] = []

    def fake_run(cmd: list[str], **kwargs: Any) -> _StubResult:
        calls.append({"command": cmd, "cwd": kwargs.get("cwd")})
        workdir = Path(kwargs["cwd"])
        stem = Path(cmd[-1]).stem
        (workdir / f"{stem}.pdf").write_bytes(b"%PDF-1.5")
        (workdir / f"{stem}.aux").write_text("", encoding="utf-8")
        (workdir / f"{stem}.log").write_text("", encoding="utf-8")
        return _StubResult()

    monkeypatch.setattr(conversion, "missing_dependencies", lambda _choice: [])
    monkeypatch.setattr(_process.subprocess, "run", fake_run)
    return calls


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_compile_pdf_runs_latexmk_in_source_directory(
    tmp_path: Path, latex_tools: list[dict[str, Any]]
) -> None:
    tex = _write(tmp_path / "paper.tex", "\\documentclass{article}")

    pdf = compile_pdf(tex)

    assert pdf == tmp_path / "paper.pdf"
    assert pdf.exists()
    assert latex_tools[0]["cwd"] == tmp_path.resolve()
    assert latex_tools[0]["command"][:2] == ["latexmk", "-pdf"]
    assert latex_tools[0]["command"][-1] == "paper.tex"
    assert (tmp_path / "paper.aux").exists()


def test_compile_pdf_clean_removes_intermediates(
    tmp_path: Path, latex_tools: list[dict[str, Any]]
) -> None:
    tex = _write(tmp_path / "paper.tex", "\\documentclass{article}")

    compile_pdf(tex, compiler="lualatex", clean=True)

    assert latex_tools[0]["command"][1] == "-pdflua"
    assert not (tmp_path / "paper.aux").exists()
    assert (tmp_path / "paper.pdf").exists()


def test_compile_pdf_reports_first_latex_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    tex = _write(tmp_path / "paper.tex", "\\foo")
    monkeypatch.setattr(conversion, "missing_dependencies", lambda _choice: [])
    monkeypatch.setattr(
        _process.subprocess,
        "run",
        lambda cmd, **_kw: _StubResult(returncode=12, stdout="! Undefined control sequence.\n"),
    )

    with pytest.raises(ConversionError) as excinfo:
        compile_pdf(tex)

    assert str(excinfo.value) == "latexmk (pdflatex) failed: Undefined control sequence."
    assert excinfo.value.returncode == 12


def test_compile_pdf_requires_engine(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    tex = _write(tmp_path / "paper.tex", "")
    monkeypatch.setattr(conversion, "missing_dependencies", lambda _choice: ["latexmk"])

    with pytest.raises(ToolNotFoundError, match="latexmk"):
        compile_pdf(tex)


def test_compile_pdf_converts_markdown_through_pandoc(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, latex_tools: list[dict[str, Any]]
) -> None:
    source = _write(tmp_path / "notes.md", "# Notes\n")
    seen: dict[str, Any] = {}

    def fake_pandoc(input: Path, to: str, output: Path, options: list[str], **_kw: Any) -> Path:
        seen.update(input=input, to=to, output=output, options=options)
        return _write(Path(output), "\\documentclass{article}")

    monkeypatch.setattr(conversion, "pandoc_convert", fake_pandoc)

    pdf = compile_pdf(source)

    assert seen == {
        "input": source,
        "to": "latex",
        "output": tmp_path / "notes.tex",
        "options": ["--standalone"],
    }
    assert pdf == tmp_path / "notes.pdf"


def test_compile_pdf_uses_rst2pdf_for_restructuredtext(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    source = _write(tmp_path / "guide.rst", "Guide\n=====\n")
    seen: list[Path] = []

    def fake_rst2pdf(input: Path, **_kw: Any) -> Path:
        seen.append(input)
        return input.with_suffix(".pdf")

    monkeypatch.setattr(conversion, "rst2pdf", fake_rst2pdf)

    assert compile_pdf(source) == tmp_path / "guide.pdf"
    assert seen == [source]


def test_compile_pdf_rejects_rst2pdf_for_latex(tmp_path: Path) -> None:
    tex = _write(tmp_path / "paper.tex", "")

    with pytest.raises(ConversionError, match=r"\.rst input"):
        compile_pdf(tex, compiler="rst2pdf")


def test_render_pdf_moves_output_and_cleans(
    tmp_path: Path, latex_tools: list[dict[str, Any]]
) -> None:
    tex = _write(tmp_path / "src" / "paper.tex", "\\documentclass{article}")
    target = tmp_path / "dist" / "final.pdf"
    target.parent.mkdir()
    target.write_bytes(b"stale")

    result = render_pdf(tex, target)

    assert result == target
    assert target.read_bytes() == b"%PDF-1.5"
    assert latex_tools[0]["command"][1] == "-pdfxe"
    assert sorted(path.name for path in (tmp_path / "src").iterdir()) == ["paper.tex"]


def test_render_pdf_removes_generated_latex(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, latex_tools: list[dict[str, Any]]
) -> None:
    source = _write(tmp_path / "notes.md", "# Notes\n")
    monkeypatch.setattr(
        conversion,
        "pandoc_convert",
        lambda input, to, output, options, **_kw: _write(Path(output), "\\documentclass{article}"),
    )

    result = render_pdf(source)

    assert result == tmp_path / "notes.pdf"
    assert sorted(path.name for path in tmp_path.iterdir()) == ["notes.md", "notes.pdf"]


def test_convert_document_prefers_wrapper() -> None:
    calls: list[tuple[Any, ...]] = []

    def wrapper(input: str, to: str, **options: Any) -> str:
        calls.append((input, to, options))
        return "converted.docx"

    result = convert_document("post.md", "docx", wrapper=wrapper, reference_doc="ref.docx")

    assert result == "converted.docx"
    assert calls == [("post.md", "docx", {"reference_doc": "ref.docx"})]


def test_convert_document_defaults_to_pandoc(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict[str, Any] = {}

    def fake_pandoc(input: str, **kwargs: Any) -> Path:
        seen.update(kwargs, input=input)
        return Path("post.html")

    monkeypatch.setattr(conversion, "pandoc_convert", fake_pandoc)

    assert convert_document("post.md") == Path("post.html")
    assert seen["to"] == "html"
    assert seen["command"] == "pandoc"


def test_render_html_text_mode_returns_fragment() -> None:
    assert render_html(text="*hi*", extensions=["extra"]).strip() == "<p><em>hi</em></p>"


def test_render_html_warns_about_pandoc_formats(tmp_path: Path) -> None:
    source = _write(tmp_path / "report.md", "---\noutput: pdf_document\n---\nBody\n")

    with pytest.warns(UserWarning, match="pdf_document"):
        output = render_html(source, extensions=["extra"])

    assert output == tmp_path / "report.html"


def test_render_html_requires_input_or_text() -> None:
    with pytest.raises(ValueError):
        render_html()


class _RecordingClient:
    def __init__(self) -> None:
        self.calls: list[tuple[str, Any, dict[str, Any], bool]] = []

    def new_post(self, content: dict[str, Any], *, publish: bool = True) -> int:
        self.calls.append(("new_post", None, content, publish))
        return 1

    def edit_post(self, post_id: int, content: dict[str, Any], *, publish: bool = True) -> int:
        self.calls.append(("edit_post", post_id, content, publish))
        return post_id

    def new_page(self, content: dict[str, Any], *, publish: bool = True) -> int:
        self.calls.append(("new_page", None, content, publish))
        return 3


def test_publish_post_uses_front_matter_title_and_shortcodes(tmp_path: Path) -> None:
    source = _write(
        tmp_path / "post.md",
        "---\ntitle: Fitting models\n---\n```python\nfit()\n```\n",
    )
    client = _RecordingClient()

    post_id = publish_post(source, client, shortcode=True, tags=["stats"])  # type: ignore[arg-type]

    assert post_id == 1
    action, _id, content, publish = client.calls[0]
    assert action == "new_post"
    assert publish is True
    assert content["title"] == "Fitting models"
    assert content["tags"] == ["stats"]
    assert '[sourcecode language="python"]fit()\n[/sourcecode]' in content["content"]


def test_publish_post_actions(tmp_path: Path) -> None:
    source = _write(tmp_path / "post.md", "Body\n")
    client = _RecordingClient()

    assert publish_post(source, client, action="edit_post", post_id=9, publish=False) == 9  # type: ignore[arg-type]
    assert publish_post(source, client, "About", action="new_page") == 3  # type: ignore[arg-type]

    assert client.calls[0][2]["title"] == DEFAULT_POST_TITLE
    assert client.calls[0][3] is False
    assert client.calls[1][2]["title"] == "About"

    with pytest.raises(ValueError, match="post_id"):
        publish_post(source, client, action="edit_post")  # type: ignore[arg-type]
    with pytest.raises(ValueError, match="Unknown action"):
        publish_post(source, client, action="delete")  # type: ignore[arg-type]


@pytest.fixture
def dispatch(monkeypatch: pytest.MonkeyPatch) -> list[tuple[str, Path, Any]]:
    calls: list[tuple[str, Path, Any]] = []
    monkeypatch.setattr(
        conversion, "compile_pdf", lambda path, **kw: calls.append(("pdf", path, kw["compiler"]))
    )
    monkeypatch.setattr(
        conversion, "render_html", lambda path, **kw: calls.append(("html", path, kw["extensions"]))
    )
    monkeypatch.setattr(
        conversion, "convert_document", lambda path, **kw: calls.append(("pandoc", path, kw["to"]))
    )
    return calls


def test_compile_document_guesses_target_from_extension(
    dispatch: list[tuple[str, Path, Any]],
) -> None:
    compile_document("paper.tex", compiler="xelatex")
    compile_document("guide.rst")
    compile_document("notes.md", extensions=["extra"])
    compile_document("notes.md", "DOCX")

    assert dispatch == [
        ("pdf", Path("paper.tex"), "xelatex"),
        ("pdf", Path("guide.rst"), None),
        ("html", Path("notes.md"), ["extra"]),
        ("pandoc", Path("notes.md"), "docx"),
    ]


def test_compile_document_rejects_unknown_extension(
    dispatch: list[tuple[str, Path, Any]],
) -> None:
    with pytest.raises(ConversionError, match="Cannot guess"):
        compile_document("data.csv")
    assert dispatch == []


def test_compile_document_keeps_markdown_source_for_markdown_writers(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    source = _write(tmp_path / "notes.md", "# Notes\n")
    commands: list[list[str]] = []

    def fake_run(cmd: list[str], **_kwargs: Any) -> _StubResult:
        commands.append(cmd)
        return _StubResult()

    monkeypatch.setattr(_process.subprocess, "run", fake_run)

    output = compile_document(source, "gfm")

    assert output == tmp_path / "notes.gfm"
    assert commands[0][-1] == str(tmp_path / "notes.gfm")
    assert source.read_text(encoding="utf-8") == "# Notes\n"
