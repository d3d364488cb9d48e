"""Tests for the exclusion module."""

from pathlib import Path

from prunedts.config import get_batch_excludes, resolve_config
from prunedts.exclusion import DEFAULT_EXCLUDES, FileExcluder, find_declaration_files


def touch(path: Path) -> Path:
    """Helper to create an empty file with its parents."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("export {};\n", encoding="utf-8")
    return path


class TestDefaultExcludes:
    """Tests for default exclusion patterns."""

    def test_default_excludes_list(self) -> None:
        assert "node_modules" in DEFAULT_EXCLUDES
        assert ".git" in DEFAULT_EXCLUDES
        assert ".prunedts" in DEFAULT_EXCLUDES

    def test_excludes_node_modules(self, tmp_path: Path) -> None:
        """Should exclude declarations shipped by dependencies."""
        excluder = FileExcluder(tmp_path)
        assert excluder.should_exclude(tmp_path / "node_modules" / "@firebase" / "app" / "index.d.ts")

    def test_does_not_exclude_sources(self, tmp_path: Path) -> None:
        excluder = FileExcluder(tmp_path)
        assert not excluder.should_exclude(tmp_path / "dist" / "index.d.ts")
        assert not excluder.should_exclude(tmp_path / "index.d.ts")

    def test_outside_project_not_excluded(self, tmp_path: Path) -> None:
        excluder = FileExcluder(tmp_path / "project")
        assert not excluder.should_exclude(tmp_path / "elsewhere" / "node_modules" / "a.d.ts")


class TestGitignore:
    """Tests for .gitignore patterns."""

    def test_gitignore_patterns(self, tmp_path: Path) -> None:
        (tmp_path / ".gitignore").write_text("# build output\ntmp/\n*.test.d.ts\n", encoding="utf-8")
        excluder = FileExcluder(tmp_path)

        assert excluder.should_exclude(tmp_path / "tmp" / "index.d.ts")
        assert excluder.should_exclude(tmp_path / "dist" / "api.test.d.ts")
        assert not excluder.should_exclude(tmp_path / "dist" / "api.d.ts")
        assert str(tmp_path / ".gitignore") in excluder.sources

    def test_include_ignored_bypasses_everything(self, tmp_path: Path) -> None:
        (tmp_path / ".gitignore").write_text("tmp/\n", encoding="utf-8")
        excluder = FileExcluder(tmp_path, include_ignored=True)

        assert not excluder.should_exclude(tmp_path / "tmp" / "index.d.ts")
        assert not excluder.should_exclude(tmp_path / "node_modules" / "index.d.ts")


class TestConfiguredExcludes:
    """Tests for patterns coming from configuration."""

    def test_pyproject_excludes_applied_once(self, tmp_path: Path) -> None:
        """pyproject.toml is read by the config layer only, never a second time here."""
        (tmp_path / "pyproject.toml").write_text('[tool.prunedts]\nexclude = ["legacy/"]\n', encoding="utf-8")
        config = resolve_config(tmp_path)
        excluder = FileExcluder(tmp_path, extra_excludes=get_batch_excludes(config))
        assert excluder.should_exclude(tmp_path / "legacy" / "old.d.ts")
        assert excluder.patterns.count("legacy/") == 1
        assert "config" in excluder.sources

    def test_pyproject_not_read_without_config(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[tool.prunedts]\nexclude = ["legacy/"]\n', encoding="utf-8")
        excluder = FileExcluder(tmp_path)
        assert excluder.patterns == DEFAULT_EXCLUDES

    def test_extra_excludes(self, tmp_path: Path) -> None:
        excluder = FileExcluder(tmp_path, extra_excludes=["*.internal.d.ts"])
        assert excluder.should_exclude(tmp_path / "dist" / "db.internal.d.ts")


class TestFindDeclarationFiles:
    """Tests for find_declaration_files function."""

    def test_finds_sorted_declarations(self, tmp_path: Path) -> None:
        b = touch(tmp_path / "b" / "index.d.ts")
        a = touch(tmp_path / "a.d.ts")
        touch(tmp_path / "a.ts")
        touch(tmp_path / "node_modules" / "dep" / "index.d.ts")

        assert find_declaration_files(tmp_path) == [a, b]

    def test_respects_excluder(self, tmp_path: Path) -> None:
        touch(tmp_path / "keep.d.ts")
        touch(tmp_path / "skip.d.ts")
        excluder = FileExcluder(tmp_path, extra_excludes=["skip.d.ts"])

        assert [p.name for p in find_declaration_files(tmp_path, excluder)] == ["keep.d.ts"]
