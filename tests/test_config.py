from __future__ import annotations

from pathlib import Path

import pytest

from docweave.core.config import PASSWORD_ENV_VAR, DocweaveConfig, load_config
from docweave.core.exceptions import ConfigError


def test_defaults_without_config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(PASSWORD_ENV_VAR, raising=False)

    config = load_config()

    assert config == DocweaveConfig()
    assert config.watch.interval == 1.0
    assert config.watch.missing == "fail"
    assert config.latex.engine == "pdflatex"
    assert config.markdown.extensions == ["extra", "toc", "codehilite", "smarty"]
    assert config.wordpress.password is None


def test_loads_docweave_yml_from_working_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / "docweave.yml").write_text(
        "watch:\n  interval: 0.25\n  missing: skip\nlatex:\n  engine: xelatex\n",
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)

    config = load_config()

    assert config.watch.interval == 0.25
    assert config.watch.missing == "skip"
    assert config.latex.engine == "xelatex"
    assert config.pandoc.command == "pandoc"


def test_wordpress_password_falls_back_to_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = tmp_path / "site.yml"
    path.write_text("wordpress:\n  url: https://blog.example.org\n  username: ada\n", encoding="utf-8")
    monkeypatch.setenv(PASSWORD_ENV_VAR, "app-secret")

    config = load_config(path)

    assert config.wordpress.url == "https://blog.example.org"
    assert config.wordpress.password == "app-secret"


@pytest.mark.parametrize(
    "content",
    [
        "watch: [unclosed\n",
        "- just\n- a list\n",
        "watch:\n  interval: -2\n",
        "unknown_section: {}\n",
    ],
)
def test_invalid_files_raise_config_error(tmp_path: Path, content: str) -> None:
    path = tmp_path / "docweave.yml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path)


def test_unreadable_file_raises_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Unable to read"):
        load_config(tmp_path / "missing.yml")
