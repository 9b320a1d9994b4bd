from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from create_context import cli


@pytest.mark.integration
def test_main_uses_walk_results_and_writes_document(
    tmp_path: Path,
    mocker: MockerFixture,
) -> None:
    repo = tmp_path
    file_path = repo / "src" / "app.py"
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text("print('hi')", encoding="utf-8")
    (repo / "src" / "ignored.py").write_text("print('no')", encoding="utf-8")

    mocker.patch.object(cli, "walk_files", return_value=["src/app.py"])

    exit_code = cli.main(["--root", str(repo)])

    output = repo / "context.md"
    assert exit_code == 0
    assert output.exists()
    text = output.read_text(encoding="utf-8")
    assert "### `src/app.py`" in text
    assert "ignored.py" not in text


@pytest.mark.integration
def test_main_prints_statistics_report(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    (tmp_path / "a.py").write_text("x" * 400, encoding="utf-8")
    (tmp_path / "big.txt").write_text("y" * 2048, encoding="utf-8")
    rules = tmp_path / "rules.yml"
    rules.write_text("exclude_paths: [rules.yml]\nmax_file_size_kb: 1\n", encoding="utf-8")

    exit_code = cli.main(["--root", str(tmp_path), "--config", str(rules)])

    assert exit_code == 0
    out = capsys.readouterr().out
    assert "Context file created: context.md" in out
    assert "Files found by path search: 2" in out
    assert "File content skipped (size limit): 1" in out
    assert ".py: ~100 tokens (1 files processed)" in out
