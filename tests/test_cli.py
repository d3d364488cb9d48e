"""Tests for the prunedts command line interface."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from prunedts import __version__
from prunedts.cli import app

FIXTURES = Path(__file__).parent / "fixtures"

runner = CliRunner()


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A temporary working directory holding the database rollup."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "database.d.ts").write_text(
        (FIXTURES / "database.d.ts").read_text(encoding="utf-8"), encoding="utf-8"
    )
    return tmp_path


class TestVersion:
    """Tests for --version."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"prunedts version {__version__}" in result.stdout


class TestInitCommand:
    """Tests for the init command."""

    def test_init_writes_defaults(self, project: Path):
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 0
        data = json.loads((project / ".prunedts" / "config.json").read_text(encoding="utf-8"))
        assert data["internal_tag"] == "@internal"
        assert data["extractor"] == {"command": ["api-extractor"], "timeout": 300}

    def test_init_carries_pyproject_settings(self, project: Path):
        (project / "pyproject.toml").write_text('[tool.prunedts]\nexclude = ["legacy/"]\n', encoding="utf-8")
        assert runner.invoke(app, ["init"]).exit_code == 0
        data = json.loads((project / ".prunedts" / "config.json").read_text(encoding="utf-8"))
        assert data["exclude"] == ["legacy/"]

    def test_init_refuses_to_overwrite(self, project: Path):
        assert runner.invoke(app, ["init"]).exit_code == 0
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 1
        assert "already exists" in result.stdout
        assert runner.invoke(app, ["init", "--force"]).exit_code == 0


class TestPruneCommand:
    """Tests for the prune command."""

    def test_prune_writes_output_and_results(self, project: Path):
        result = runner.invoke(app, ["prune", "database.d.ts", "public.d.ts"])

        assert result.exit_code == 0, result.stdout
        expected = (FIXTURES / "database.public.d.ts").read_text(encoding="utf-8")
        assert (project / "public.d.ts").read_text(encoding="utf-8") == expected

        with open(project / ".prunedts" / "results.json") as f:
            data = json.load(f)
        assert data["summary"]["dropped"] == 4

    def test_prune_custom_results_path(self, project: Path):
        result = runner.invoke(app, ["prune", "database.d.ts", "public.d.ts", "--results", "out.json", "-v"])
        assert result.exit_code == 0, result.stdout
        assert (project / "out.json").exists()

    def test_prune_with_config(self, project: Path):
        (project / "prunedts.json").write_text(json.dumps({"internal_tag": "@hidden"}), encoding="utf-8")
        (project / "hidden.d.ts").write_text(
            "/** @hidden */\nexport declare const a: number;\nexport declare const b: number;\n",
            encoding="utf-8",
        )

        result = runner.invoke(app, ["prune", "hidden.d.ts", "public.d.ts", "--config", "prunedts.json"])

        assert result.exit_code == 0, result.stdout
        assert (project / "public.d.ts").read_text(encoding="utf-8") == "export declare const b: number;\n"

    def test_prune_parse_error(self, project: Path):
        (project / "broken.d.ts").write_text("export declare class A {\n", encoding="utf-8")

        result = runner.invoke(app, ["prune", "broken.d.ts", "public.d.ts"])

        assert result.exit_code == 1
        assert "Parse error" in result.stdout
        assert not (project / "public.d.ts").exists()

    def test_prune_missing_input(self, project: Path):
        result = runner.invoke(app, ["prune", "missing.d.ts", "public.d.ts"])
        assert result.exit_code == 1
        assert "Error" in result.stdout

    def test_prune_reports_unresolved(self, project: Path):
        (project / "ext.d.ts").write_text("export declare function f(): Missing;\n", encoding="utf-8")
        result = runner.invoke(app, ["prune", "ext.d.ts", "public.d.ts"])
        assert result.exit_code == 0
        assert "Missing" in result.stdout


class TestBatchCommand:
    """Tests for the batch command."""

    def test_batch_prunes_every_file(self, project: Path):
        src = project / "types"
        (src / "nested").mkdir(parents=True)
        (src / "a.d.ts").write_text("declare class Hidden {\n}\nexport declare const a: number;\n", encoding="utf-8")
        (src / "nested" / "b.d.ts").write_text("export declare const b: number;\n", encoding="utf-8")
        (src / "node_modules").mkdir()
        (src / "node_modules" / "dep.d.ts").write_text("export {};\n", encoding="utf-8")

        result = runner.invoke(app, ["batch", "types", "--output-dir", "out"])

        assert result.exit_code == 0, result.stdout
        assert (project / "out" / "a.d.ts").read_text(encoding="utf-8") == "export declare const a: number;\n"
        assert (project / "out" / "nested" / "b.d.ts").exists()
        assert not (project / "out" / "node_modules").exists()
        with open(project / ".prunedts" / "results.json") as f:
            assert len(json.load(f)["files"]) == 2

    def test_batch_continues_after_failure(self, project: Path):
        src = project / "types"
        src.mkdir()
        (src / "bad.d.ts").write_text("declare class A {\n", encoding="utf-8")
        (src / "good.d.ts").write_text("export declare const g: number;\n", encoding="utf-8")

        result = runner.invoke(app, ["batch", "types", "--output-dir", "out"])

        assert result.exit_code == 1
        assert (project / "out" / "good.d.ts").exists()
        assert not (project / "out" / "bad.d.ts").exists()

    def test_batch_no_files(self, project: Path):
        (project / "empty").mkdir()
        result = runner.invoke(app, ["batch", "empty", "--output-dir", "out"])
        assert result.exit_code == 0
        assert "No .d.ts files" in result.stdout


class TestShowCommand:
    """Tests for the show command."""

    def test_show_after_prune(self, project: Path):
        runner.invoke(app, ["prune", "database.d.ts", "public.d.ts"])

        result = runner.invoke(app, ["show"])
        assert result.exit_code == 0
        assert "Statements kept" in result.stdout

        verbose = runner.invoke(app, ["show", "--verbose"])
        assert verbose.exit_code == 0
        assert "_repoManagerDatabaseFromApp" in verbose.stdout

    def test_show_missing_results(self, project: Path):
        result = runner.invoke(app, ["show"])
        assert result.exit_code == 1
        assert "not found" in result.stdout


class TestGenerateCommand:
    """Tests for the generate command."""

    def test_generate_missing_extractor(self, project: Path):
        (project / "prunedts.json").write_text(
            json.dumps({"extractor": {"command": "prunedts-no-such-extractor"}}), encoding="utf-8"
        )
        result = runner.invoke(
            app,
            [
                "generate",
                "--package", "database",
                "--package-root", ".",
                "--typescript-dts", "dist/index.d.ts",
                "--rollup-dts", "dist/database.d.ts",
                "--untrimmed-rollup-dts", "dist/internal.d.ts",
                "--public-dts", "dist/public.d.ts",
                "--config", "prunedts.json",
            ],
        )
        assert result.exit_code == 1
        assert "not found" in result.stdout
        assert not (project / "dist" / "public.d.ts").exists()
