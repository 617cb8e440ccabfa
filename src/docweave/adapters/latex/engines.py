"""LaTeX engine helpers (latexmk and Tectonic)."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
import shlex
import shutil
from typing import Literal

from docweave.core.diagnostics import DiagnosticEmitter

from .._process import run_tool
from .log import LatexMessage, parse_latex_log, parse_latex_lines


EngineBackend = Literal["tectonic", "latexmk"]

DEFAULT_ENGINE = "pdflatex"

# latexmk output mode per engine program.
_LATEXMK_PDF_FLAGS = {
    "pdflatex": "-pdf",
    "xelatex": "-pdfxe",
    "lualatex": "-pdflua",
}

INTERMEDIATE_SUFFIXES = (
    ".aux",
    ".log",
    ".out",
    ".toc",
    ".lof",
    ".lot",
    ".fls",
    ".fdb_latexmk",
    ".synctex.gz",
    ".bbl",
    ".bcf",
    ".blg",
    ".run.xml",
    ".nav",
    ".snm",
    ".vrb",
    ".xdv",
    ".idx",
    ".ind",
    ".ilg",
)


@dataclass(slots=True)
class EngineChoice:
    """Resolved backend and latexmk program selection."""

    backend: EngineBackend
    latexmk_engine: str | None

    @property
    def label(self) -> str:
        if self.backend == "tectonic":
            return "tectonic"
        return f"latexmk ({self.latexmk_engine})"


@dataclass(slots=True)
class EngineCommand:
    """Executable command plus metadata."""

    argv: list[str]
    log_path: Path
    pdf_path: Path


@dataclass(slots=True)
class EngineResult:
    """Outcome of a LaTeX build run."""

    returncode: int
    messages: list[LatexMessage]
    command: list[str]
    log_path: Path
    pdf_path: Path
    output: str = ""

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


def resolve_engine(preference: str | None) -> EngineChoice:
    """Resolve the engine backend and latexmk program to use."""
    candidate = preference.strip() if preference else ""
    if candidate.lower() == "tectonic":
        return EngineChoice(backend="tectonic", latexmk_engine=None)
    return EngineChoice(backend="latexmk", latexmk_engine=candidate or DEFAULT_ENGINE)


def _latexmk_engine_flags(engine: str, shell_escape: bool) -> list[str]:
    tokens = shlex.split(engine) or [DEFAULT_ENGINE]
    program = Path(tokens[0]).name.lower()
    pdf_flag = _LATEXMK_PDF_FLAGS.get(program, "-pdf")

    if shell_escape and not any(token in {"-shell-escape", "--shell-escape"} for token in tokens):
        tokens.append("--shell-escape")
    tokens.extend(["%O", "%S"])

    if pdf_flag == "-pdfxe":
        return [pdf_flag, f"-xelatex={' '.join(tokens)}"]
    if pdf_flag == "-pdflua":
        return [pdf_flag, f"-lualatex={' '.join(tokens)}"]
    return [pdf_flag, f"-pdflatex={' '.join(tokens)}"]


def build_engine_command(
    choice: EngineChoice,
    main_tex_path: Path,
    *,
    shell_escape: bool = False,
    extra_args: tuple[str, ...] | list[str] = (),
) -> EngineCommand:
    """Construct the command compiling ``main_tex_path`` from its directory."""
    log_path = main_tex_path.with_suffix(".log")
    pdf_path = main_tex_path.with_suffix(".pdf")

    if choice.backend == "tectonic":
        argv = [
            "tectonic",
            "-X",
            "compile",
            main_tex_path.name,
            "--keep-logs",
            "--keep-intermediates",
            "--outdir",
            ".",
        ]
        if shell_escape:
            argv.append("-Z")
            argv.append("shell-escape")
        argv.extend(extra_args)
        return EngineCommand(argv=argv, log_path=log_path, pdf_path=pdf_path)

    engine = choice.latexmk_engine or DEFAULT_ENGINE
    command = [
        "latexmk",
        *_latexmk_engine_flags(engine, shell_escape),
        "-interaction=nonstopmode",
        "-halt-on-error",
        "-file-line-error",
        *extra_args,
        main_tex_path.name,
    ]
    return EngineCommand(argv=command, log_path=log_path, pdf_path=pdf_path)


def missing_dependencies(choice: EngineChoice) -> list[str]:
    """Return missing executables required by the selected engine."""
    missing: list[str] = []

    def _check(binary: str) -> None:
        if shutil.which(binary) is None:
            missing.append(binary)

    if choice.backend == "tectonic":
        _check("tectonic")
    else:
        _check("latexmk")
        tokens = shlex.split(choice.latexmk_engine or DEFAULT_ENGINE)
        if tokens:
            _check(tokens[0])
    return missing


def run_engine_command(
    command: EngineCommand,
    *,
    workdir: Path,
    env: Mapping[str, str] | None = None,
    emitter: DiagnosticEmitter | None = None,
) -> EngineResult:
    """Execute the engine command and collect diagnostics on failure."""
    process = run_tool(command.argv, cwd=workdir, env=env, emitter=emitter)
    output = "\n".join(
        segment.rstrip() for segment in (process.stdout or "", process.stderr or "") if segment
    )
    messages: list[LatexMessage] = []
    if process.returncode != 0:
        log_path = workdir / command.log_path.name
        messages = parse_latex_log(log_path) or parse_latex_lines(output.splitlines())
    return EngineResult(
        returncode=process.returncode,
        messages=messages,
        command=list(command.argv),
        log_path=command.log_path,
        pdf_path=command.pdf_path,
        output=output,
    )


def clean_intermediates(tex_path: Path, *, keep_log: bool = False) -> list[Path]:
    """Remove auxiliary files produced next to ``tex_path``; return removed paths."""
    removed: list[Path] = []
    stem = tex_path.with_suffix("")
    for suffix in INTERMEDIATE_SUFFIXES:
        if keep_log and suffix == ".log":
            continue
        candidate = stem.parent / f"{stem.name}{suffix}"
        if candidate.exists():
            candidate.unlink()
            removed.append(candidate)
    return removed


__all__ = [
    "DEFAULT_ENGINE",
    "INTERMEDIATE_SUFFIXES",
    "EngineChoice",
    "EngineCommand",
    "EngineResult",
    "build_engine_command",
    "clean_intermediates",
    "missing_dependencies",
    "resolve_engine",
    "run_engine_command",
]
