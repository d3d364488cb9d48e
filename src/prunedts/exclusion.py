"""Declaration file discovery with gitignore-style exclusion.

Handles .gitignore patterns, configured excludes (from the config file or
``[tool.prunedts].exclude``, merged by :mod:`prunedts.config`) and default
patterns using the pathspec library.
"""

from dataclasses import dataclass, field
from pathlib import Path

import pathspec

DECLARATION_GLOB = "*.d.ts"


@dataclass
class ExclusionConfig:
    """Configuration for file exclusion."""

    gitignore_patterns: list[str] = field(default_factory=list)
    configured_patterns: list[str] = field(default_factory=list)
    default_patterns: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)


# Patterns that are always excluded
DEFAULT_EXCLUDES = [
    "node_modules",
    ".git",
    ".prunedts",
    "coverage",
]


class FileExcluder:
    """Decides which declaration files a batch run skips."""

    def __init__(
        self,
        project_root: Path,
        include_ignored: bool = False,
        extra_excludes: list[str] | None = None,
    ) -> None:
        """Initialize the file excluder.

        Args:
            project_root: Root directory of the project.
            include_ignored: If True, don't exclude any files (bypass all patterns).
            extra_excludes: Configured patterns to exclude (see get_batch_excludes).
        """
        self.project_root = project_root
        self.include_ignored = include_ignored
        self._config = ExclusionConfig()
        self._spec: pathspec.PathSpec | None = None

        if not include_ignored:
            self._load_patterns(extra_excludes or [])
            self._build_spec()

    def _load_patterns(self, extra_excludes: list[str]) -> None:
        self._config.default_patterns = list(DEFAULT_EXCLUDES)
        self._config.sources.append("defaults")
        self._load_gitignore()
        if extra_excludes:
            self._config.configured_patterns = list(extra_excludes)
            self._config.sources.append("config")

    def _load_gitignore(self) -> None:
        gitignore_path = self.project_root / ".gitignore"
        if not gitignore_path.exists():
            return
        try:
            content = gitignore_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return
        self._config.gitignore_patterns = [
            line.strip()
            for line in content.splitlines()
            if line.strip() and not line.startswith("#")
        ]
        self._config.sources.append(str(gitignore_path))

    def _build_spec(self) -> None:
        self._spec = pathspec.PathSpec.from_lines("gitignore", self.patterns)

    def should_exclude(self, file_path: Path) -> bool:
        """Check if a file should be excluded.

        Args:
            file_path: Path to the file to check.

        Returns:
            True if the file should be excluded, False otherwise.
        """
        if self.include_ignored or self._spec is None:
            return False

        try:
            rel_path = file_path.relative_to(self.project_root)
        except ValueError:
            return False

        if self._spec.match_file(rel_path.as_posix()):
            return True

        # Directory patterns like "node_modules" match any parent component
        return any(self._spec.match_file(part) for part in rel_path.parts[:-1])

    def filter_files(self, files: list[Path]) -> list[Path]:
        if self.include_ignored:
            return files
        return [f for f in files if not self.should_exclude(f)]

    @property
    def sources(self) -> list[str]:
        return self._config.sources

    @property
    def patterns(self) -> list[str]:
        return (
            self._config.default_patterns
            + self._config.gitignore_patterns
            + self._config.configured_patterns
        )


def find_declaration_files(root: Path, excluder: FileExcluder | None = None) -> list[Path]:
    """Find every ``.d.ts`` file under ``root`` that is not excluded, sorted."""
    excluder = excluder or FileExcluder(root)
    files = sorted(p for p in root.rglob(DECLARATION_GLOB) if p.is_file())
    return excluder.filter_files(files)
