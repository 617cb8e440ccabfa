from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from docweave.adapters import _process, pandoc as pandoc_mod
from docweave.adapters.pandoc import default_output, format_extension, pandoc_convert
from docweave.adapters.rst2pdf import rst2pdf
from docweave.core.exceptions import ConversionError, ToolNotFoundError


class _StubResult:
    def __init__(self, returncode: int = 0, stdout: str = "", stderr: str = "") -> None:
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class _RecordingEmitter:
    debug_enabled = False

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        return

    def error(self, message: str, exc: BaseException | None = None) -> None:
        return

    def event(self, name: str, payload: Any) -> None:
        self.events.append((name, dict(payload)))


def test_run_tool_captures_text_output(monkeypatch: pytest.MonkeyPatch) -> None:
    recorded: dict[str, Any] = {}

    def fake_run(cmd: list[str], **kwargs: Any) -> _StubResult:
        recorded["command"] = cmd
        recorded.update(kwargs)
        return _StubResult(stdout="ok")

    monkeypatch.setattr(_process.subprocess, "run", fake_run)
    emitter = _RecordingEmitter()

    result = _process.run_tool(["tool", Path("in.txt")], emitter=emitter)

    assert result.stdout == "ok"
    assert recorded["command"] == ["tool", "in.txt"]
    assert recorded["check"] is False
    assert recorded["capture_output"] is True
    assert recorded["text"] is True
    assert emitter.events == [("tool_run", {"command": ["tool", "in.txt"]})]


def test_run_tool_reports_missing_program(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd: list[str], **_kwargs: Any) -> _StubResult:
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(_process.subprocess, "run", fake_run)

    with pytest.raises(ToolNotFoundError) as excinfo:
        _process.run_tool(["rst2pdf", "doc.rst"])

    assert excinfo.value.tool == "rst2pdf"


def test_rst2pdf_returns_generated_pdf(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    source = tmp_path / "guide.rst"
    source.write_text("Title\n=====\n", encoding="utf-8")
    recorded: dict[str, list[str]] = {}

    def fake_run(cmd: list[str], **_kwargs: Any) -> _StubResult:
        recorded["command"] = cmd
        Path(cmd[3]).write_bytes(b"%PDF-1.4")
        return _StubResult()

    monkeypatch.setattr(_process.subprocess, "run", fake_run)

    output = rst2pdf(source, options=["-s", "twocolumn"])

    assert output == tmp_path / "guide.pdf"
    assert recorded["command"] == [
        "rst2pdf",
        str(source),
        "-o",
        str(tmp_path / "guide.pdf"),
        "-s",
        "twocolumn",
    ]


def test_rst2pdf_without_output_raises(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    source = tmp_path / "guide.rst"
    source.write_text("Title\n=====\n", encoding="utf-8")
    monkeypatch.setattr(
        _process.subprocess,
        "run",
        lambda cmd, **_kw: _StubResult(returncode=1, stderr="[ERROR] bad directive\n"),
    )

    with pytest.raises(ConversionError, match="conversion by rst2pdf failed") as excinfo:
        rst2pdf(source, command="/opt/rst2pdf/bin/rst2pdf")

    assert excinfo.value.returncode == 1
    assert excinfo.value.output == "[ERROR] bad directive"
    assert excinfo.value.command[0] == "/opt/rst2pdf/bin/rst2pdf"


@pytest.mark.parametrize(
    ("to", "extension"),
    [
        ("html", "html"),
        ("html5", "html"),
        ("latex", "tex"),
        ("gfm+smart", "md"),
        ("markdown-citations", "md"),
        ("docx", "docx"),
        ("plain", "txt"),
    ],
)
def test_format_extension(to: str, extension: str) -> None:
    assert format_extension(to) == extension


def test_default_output_follows_format() -> None:
    assert default_output("notes/post.md", "latex") == Path("notes/post.tex")


def test_pandoc_convert_builds_command(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    source = tmp_path / "post.md"
    recorded: dict[str, list[str]] = {}

    def fake_run(cmd: list[str], **_kwargs: Any) -> _StubResult:
        recorded["command"] = cmd
        return _StubResult()

    monkeypatch.setattr(_process.subprocess, "run", fake_run)

    output = pandoc_convert(source, "docx", options=["--toc"])

    assert output == tmp_path / "post.docx"
    assert recorded["command"] == [
        "pandoc",
        str(source),
        "--to",
        "docx",
        "--output",
        str(tmp_path / "post.docx"),
        "--toc",
    ]


def test_pandoc_convert_failure_carries_stderr(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        _process.subprocess,
        "run",
        lambda cmd, **_kw: _StubResult(returncode=64, stderr="Unknown output format nope\n"),
    )

    with pytest.raises(ConversionError, match="exit code 64: Unknown output format nope"):
        pandoc_convert("post.md", "nope", output="out.txt")

    assert pandoc_mod.format_extension("nope") == "nope"


@pytest.mark.parametrize(
    ("source", "to", "expected"),
    [
        ("notes.md", "gfm", "notes.gfm"),
        ("notes.md", "markdown+smart", "notes.markdown"),
        ("paper.tex", "latex", "paper.latex"),
        ("page.html", "html5", "page.html5"),
    ],
)
def test_default_output_never_names_the_source(source: str, to: str, expected: str) -> None:
    assert default_output(source, to) == Path(expected)


def test_pandoc_convert_refuses_to_overwrite_source(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    source = tmp_path / "page.html"
    source.write_text("<p>hi</p>", encoding="utf-8")
    calls: list[list[str]] = []
    monkeypatch.setattr(
        _process.subprocess, "run", lambda cmd, **_kw: calls.append(cmd) or _StubResult()
    )

    with pytest.raises(ConversionError, match="overwrite the source"):
        pandoc_convert(source, "html")
    with pytest.raises(ConversionError, match="overwrite the source"):
        pandoc_convert(source, "docx", output=source)

    assert calls == []
    assert source.read_text(encoding="utf-8") == "<p>hi</p>"
