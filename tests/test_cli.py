"""Tests for the CLI interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from codefetch.cli import main


@pytest.fixture
def runner():
    return CliRunner()


def _fetch(runner: CliRunner, project: Path, *args: str):
    return runner.invoke(
        main, ["fetch", "--path", str(project), "--encoder", "simple", *args]
    )


class TestCLIInit:
    def test_init_creates_files(self, runner: CliRunner, tmp_project: Path):
        result = runner.invoke(main, ["init", "--path", str(tmp_project)])
        assert result.exit_code == 0, result.output
        assert (tmp_project / ".codefetchignore").exists()
        config = json.loads((tmp_project / "codefetch.config.json").read_text())
        assert config["token_encoder"] == "cl100k"

    def test_init_twice(self, runner: CliRunner, tmp_project: Path):
        runner.invoke(main, ["init", "--path", str(tmp_project)])
        result = runner.invoke(main, ["init", "--path", str(tmp_project)])
        assert result.exit_code == 0
        assert "already exists" in result.output

    def test_init_nonexistent_path(self, runner: CliRunner):
        result = runner.invoke(main, ["init", "--path", "/nonexistent/path"])
        assert result.exit_code != 0


class TestCLIFetch:
    def test_fetch_to_stdout(self, runner: CliRunner, tmp_project: Path):
        result = _fetch(runner, tmp_project)
        assert result.exit_code == 0, result.output
        assert "# File Contents" in result.output
        assert "## a.ts" in result.output
        assert "## b/c.ts" in result.output
        assert not (tmp_project / "codefetch").exists()

    def test_fetch_to_file(self, runner: CliRunner, tmp_project: Path):
        result = _fetch(runner, tmp_project, "-o", "out.md")
        assert result.exit_code == 0, result.output

        output = tmp_project / "codefetch" / "out.md"
        assert output.exists()
        assert output.read_text().startswith("# File Contents\n\n## ")
        assert (tmp_project / ".codefetchignore").exists()
        assert "Summary" in result.output

        # The previous output is not fed back in
        result = _fetch(runner, tmp_project, "-o", "again.md")
        assert result.exit_code == 0, result.output
        assert "out.md" not in (tmp_project / "codefetch" / "again.md").read_text()

    @pytest.mark.parametrize("mode", [[], ["--stream"]])
    def test_custom_output_dir_is_not_fed_back(
        self, runner: CliRunner, tmp_project: Path, mode: list[str]
    ):
        (tmp_project / "codefetch.config.json").write_text(json.dumps({"output_dir": "context"}))
        for _ in range(2):
            result = _fetch(runner, tmp_project, *mode, "-o", "doc.ts")
            assert result.exit_code == 0, result.output

        text = (tmp_project / "context" / "doc.ts").read_text()
        assert "## a.ts" in text
        assert "## context/" not in text
        assert text.count("## ") == 2

    def test_tiny_budget(self, runner: CliRunner, tmp_project: Path):
        result = _fetch(runner, tmp_project, "--max-tokens", "1")
        assert result.exit_code == 0, result.output
        assert "Remaining files truncated due to token limit (1)" in result.output
        assert "## a.ts" not in result.output

    def test_zero_budget_rejected(self, runner: CliRunner, tmp_project: Path):
        result = _fetch(runner, tmp_project, "--max-tokens", "0")
        assert result.exit_code != 0

    def test_unknown_encoder(self, runner: CliRunner, tmp_project: Path):
        result = runner.invoke(
            main, ["fetch", "--path", str(tmp_project), "--encoder", "bogus"]
        )
        assert result.exit_code == 1
        assert "Unsupported token encoder" in result.output

    def test_tree(self, runner: CliRunner, tmp_project: Path):
        result = _fetch(runner, tmp_project, "--tree")
        assert result.exit_code == 0, result.output
        assert "# Project Structure" in result.output
        assert result.output.index("# Project Structure") < result.output.index("## a.ts")

    def test_no_line_numbers(self, runner: CliRunner, tmp_project: Path):
        result = _fetch(runner, tmp_project, "--no-line-numbers")
        assert result.exit_code == 0, result.output
        assert "\nexport const a1 = 1;\n" in result.output
        assert "   1 export const a1" not in result.output

    def test_extension_filter(self, runner: CliRunner, tmp_project: Path):
        (tmp_project / "guide.md").write_text("# guide")
        result = _fetch(runner, tmp_project, "-e", "md")
        assert result.exit_code == 0, result.output
        assert "## guide.md" in result.output
        assert "## a.ts" not in result.output

    def test_stream(self, runner: CliRunner, tmp_project: Path):
        result = _fetch(runner, tmp_project, "--stream")
        assert result.exit_code == 0, result.output
        assert "# File Contents" in result.output
        assert "## a.ts" in result.output
        assert "## b/c.ts" in result.output

    def test_stream_to_file(self, runner: CliRunner, tmp_project: Path):
        result = _fetch(runner, tmp_project, "--stream", "-o", "stream.md")
        assert result.exit_code == 0, result.output
        text = (tmp_project / "codefetch" / "stream.md").read_text()
        assert text.count("## ") == 2

    def test_fetch_nonexistent_path(self, runner: CliRunner):
        result = runner.invoke(main, ["fetch", "--path", "/nonexistent/path"])
        assert result.exit_code != 0

    def test_config_file_is_used(self, runner: CliRunner, tmp_project: Path):
        (tmp_project / "codefetch.config.json").write_text(
            json.dumps({"token_encoder": "simple", "extensions": ["md"]})
        )
        (tmp_project / "notes.md").write_text("notes")
        result = runner.invoke(main, ["fetch", "--path", str(tmp_project)])
        assert result.exit_code == 0, result.output
        assert "## notes.md" in result.output
        assert "## a.ts" not in result.output

    def test_invalid_config_file(self, runner: CliRunner, tmp_project: Path):
        (tmp_project / "codefetch.config.json").write_text("{broken")
        result = _fetch(runner, tmp_project)
        assert result.exit_code == 1

    def test_filesystem_cache(self, runner: CliRunner, tmp_project: Path, tmp_path_factory):
        cache_dir = tmp_path_factory.mktemp("cache")
        (tmp_project / "codefetch.config.json").write_text(json.dumps({
            "cache": {"enabled": True, "backend": "filesystem", "directory": str(cache_dir)},
        }))
        first = _fetch(runner, tmp_project)
        second = _fetch(runner, tmp_project)
        assert first.exit_code == 0, first.output
        assert first.output == second.output
        assert (cache_dir / "cache.db").exists()

    def test_no_cache_flag_overrides_config(
        self, runner: CliRunner, tmp_project: Path, tmp_path_factory
    ):
        cache_dir = tmp_path_factory.mktemp("cache")
        (tmp_project / "codefetch.config.json").write_text(json.dumps({
            "cache": {"enabled": True, "backend": "filesystem", "directory": str(cache_dir)},
        }))
        result = _fetch(runner, tmp_project, "--no-cache")
        assert result.exit_code == 0, result.output
        assert not (cache_dir / "cache.db").exists()


class TestCLIConfig:
    def test_config_set_and_get(self, runner: CliRunner, tmp_project: Path):
        result = runner.invoke(
            main, ["config", "set", "max_tokens", "500", "--path", str(tmp_project)]
        )
        assert result.exit_code == 0, result.output

        result = runner.invoke(main, ["config", "get", "max_tokens", "--path", str(tmp_project)])
        assert result.exit_code == 0
        assert "500" in result.output

    def test_config_set_nested(self, runner: CliRunner, tmp_project: Path):
        result = runner.invoke(
            main, ["config", "set", "cache.enabled", "true", "--path", str(tmp_project)]
        )
        assert result.exit_code == 0, result.output
        config = json.loads((tmp_project / "codefetch.config.json").read_text())
        assert config["cache"]["enabled"] is True

    def test_config_set_unknown_key(self, runner: CliRunner, tmp_project: Path):
        result = runner.invoke(
            main, ["config", "set", "nope", "1", "--path", str(tmp_project)]
        )
        assert result.exit_code == 1

    def test_config_show(self, runner: CliRunner, tmp_project: Path):
        result = runner.invoke(main, ["config", "show", "--path", str(tmp_project)])
        assert result.exit_code == 0
        assert "token_encoder" in result.output

    def test_config_set_extensions_list_syntax(self, runner: CliRunner, tmp_project: Path):
        result = runner.invoke(
            main, ["config", "set", "extensions", ".ts,js", "--path", str(tmp_project)]
        )
        assert result.exit_code == 0, result.output
        config = json.loads((tmp_project / "codefetch.config.json").read_text())
        assert config["extensions"] == [".ts", ".js"]
