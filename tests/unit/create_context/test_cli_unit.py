from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from create_context import __version__, cli
from create_context.exceptions import OutputWriteError, TraversalError

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


@pytest.mark.unit
def test_parse_args_without_arguments_uses_defaults() -> None:
    settings = cli.parse_args([])

    assert settings.root.resolve() == Path.cwd().resolve()
    assert settings.output == Path("context.md")
    assert settings.config is None
    assert settings.log_file == ""


@pytest.mark.unit
def test_parse_args_parses_options(tmp_path: Path) -> None:
    settings = cli.parse_args(
        [
            "--root",
            str(tmp_path),
            "--output",
            "ctx.md",
            "--config",
            "rules.yml",
            "--debug",
        ],
    )

    assert settings.root == tmp_path
    assert settings.output == Path("ctx.md")
    assert settings.config == Path("rules.yml")
    assert settings.debug is True


@pytest.mark.unit
def test_parse_args_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.parse_args(["--version"])

    assert exc_info.value.code == 0
    captured = capsys.readouterr()
    assert __version__ in captured.out


@pytest.mark.unit
def test_main_returns_1_on_traversal_failure(tmp_path: Path, mocker: MockerFixture) -> None:
    mocker.patch.object(cli, "walk_files", side_effect=TraversalError(root=tmp_path, reason="boom"))
    write = mocker.patch.object(cli, "write_document")

    exit_code = cli.main(["--root", str(tmp_path)])

    assert exit_code == 1
    write.assert_not_called()
    assert not (tmp_path / "context.md").exists()


@pytest.mark.unit
def test_main_returns_1_on_write_failure(tmp_path: Path, mocker: MockerFixture) -> None:
    (tmp_path / "a.py").write_text("x = 1\n", encoding="utf-8")
    mocker.patch.object(
        cli,
        "write_document",
        side_effect=OutputWriteError(path=tmp_path / "context.md", reason="disk full"),
    )

    assert cli.main(["--root", str(tmp_path)]) == 1


@pytest.mark.unit
def test_main_returns_1_on_invalid_config(tmp_path: Path) -> None:
    rules = tmp_path / "rules.yml"
    rules.write_text("bogus: 1\n", encoding="utf-8")

    assert cli.main(["--root", str(tmp_path), "--config", str(rules)]) == 1
    assert not (tmp_path / "context.md").exists()


@pytest.mark.unit
def test_main_excludes_its_own_output(tmp_path: Path, mocker: MockerFixture) -> None:
    (tmp_path / "a.py").write_text("x = 1\n", encoding="utf-8")
    (tmp_path / "out").mkdir()
    assemble = mocker.spy(cli, "assemble")

    assert cli.main(["--root", str(tmp_path), "--output", "out/ctx.md"]) == 0

    config = assemble.call_args.args[2]
    assert "./out/ctx.md" in config.exclude_paths


@pytest.mark.unit
def test_main_output_exclusion_is_anchored_at_root(tmp_path: Path) -> None:
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "notes.md").write_text("keep me\n", encoding="utf-8")
    (tmp_path / "notes.md").write_text("previous export\n", encoding="utf-8")

    assert cli.main(["--root", str(tmp_path), "--output", "notes.md"]) == 0

    text = (tmp_path / "notes.md").read_text(encoding="utf-8")
    assert "### `docs/notes.md`" in text
    assert "keep me" in text
    assert "previous export" not in text


@pytest.mark.unit
def test_main_keeps_nested_files_named_like_default_output(tmp_path: Path) -> None:
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "context.md").write_text("nested context\n", encoding="utf-8")

    assert cli.main(["--root", str(tmp_path)]) == 0

    text = (tmp_path / "context.md").read_text(encoding="utf-8")
    assert "### `docs/context.md`" in text
    assert "### `context.md`" not in text
