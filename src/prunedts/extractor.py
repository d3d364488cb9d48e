"""Two-pass API Extractor orchestration.

The first pass rolls the compiler's declarations up into a single file.
That rollup is pruned down to the public surface, and the second pass
generates the ``<package>.api.md`` report from the pruned file. Every
invocation gets an explicit configuration; nothing is shared between the
two passes except files on disk.
"""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, Sequence

from rich.console import Console

from prunedts.errors import ExtractorError
from prunedts.models.results import PruneResults
from prunedts.output.json_writer import write_json
from prunedts.paths import (
    REPORT_SUFFIX,
    get_extractor_config_path,
    get_package_json_path,
    get_report_path,
    get_tsconfig_path,
)
from prunedts.pipeline import Settings, prune_file

console = Console()

# Messages that would otherwise fail the run on pruned rollups
SILENCED_EXTRACTOR_MESSAGES = ("ae-missing-release-tag", "ae-unresolved-link")
SILENCED_TSDOC_MESSAGES = ("tsdoc-undefined-tag",)


@dataclass(frozen=True)
class PackagePaths:
    """Files involved in generating one package's public API."""

    package_name: str
    package_root: Path
    typescript_dts: Path  # Entry point emitted by the TypeScript compiler
    rollup_dts: Path  # Bundled declarations, public and private
    untrimmed_rollup_dts: Path  # Bundle that also keeps @internal exports
    public_dts: Path  # Customer-facing output

    @classmethod
    def resolve(
        cls,
        package_name: str,
        package_root: Path,
        typescript_dts: Path,
        rollup_dts: Path,
        untrimmed_rollup_dts: Path,
        public_dts: Path,
    ) -> PackagePaths:
        return cls(
            package_name=package_name,
            package_root=package_root.resolve(),
            typescript_dts=typescript_dts.resolve(),
            rollup_dts=rollup_dts.resolve(),
            untrimmed_rollup_dts=untrimmed_rollup_dts.resolve(),
            public_dts=public_dts.resolve(),
        )


@dataclass(frozen=True)
class ExtractorStageConfig:
    """Explicit configuration of a single extraction tool invocation."""

    package_name: str
    entry_point: Path
    rollup_dts: Path
    untrimmed_rollup_dts: Path
    report_folder: Path
    dts_rollup_enabled: bool
    api_report_enabled: bool
    base_config: Path | None = None

    @property
    def report_file_name(self) -> str:
        return f"{self.package_name}{REPORT_SUFFIX}"

    def to_dict(self) -> dict:
        """Return the api-extractor.json document for this stage."""
        extractor_messages = {
            message: {"logLevel": "none"} for message in SILENCED_EXTRACTOR_MESSAGES
        }
        extractor_messages["ae-forgotten-export"] = {
            "logLevel": "error" if self.api_report_enabled else "none"
        }

        result: dict = {}
        if self.base_config is not None:
            result["extends"] = str(self.base_config)
        result.update(
            {
                "mainEntryPointFilePath": str(self.entry_point),
                "dtsRollup": {
                    "enabled": self.dts_rollup_enabled,
                    "publicTrimmedFilePath": str(self.rollup_dts),
                    "untrimmedFilePath": str(self.untrimmed_rollup_dts),
                },
                "tsdocMetadata": {"enabled": False},
                "apiReport": {
                    "enabled": self.api_report_enabled,
                    "reportFileName": self.report_file_name,
                    "reportFolder": str(self.report_folder),
                },
                "messages": {
                    "extractorMessageReporting": extractor_messages,
                    "tsdocMessageReporting": {
                        message: {"logLevel": "none"} for message in SILENCED_TSDOC_MESSAGES
                    },
                },
            }
        )
        return result


class Extractor(Protocol):
    """Anything that can run the extraction tool on a config file."""

    def invoke(self, config_path: Path) -> None:
        """Run one extraction pass, raising ExtractorError on failure."""
        ...


class ApiExtractorCli:
    """Runs the ``api-extractor`` command line tool in local build mode."""

    def __init__(
        self,
        command: Sequence[str] = ("api-extractor",),
        timeout: int = 300,
        cwd: Path | None = None,
    ) -> None:
        if not command:
            raise ExtractorError("Extractor command is empty")
        self.command = list(command)
        self.timeout = timeout
        self.cwd = cwd

    def build_command(self, config_path: Path) -> list[str]:
        return [*self.command, "run", "--local", "--config", str(config_path)]

    def invoke(self, config_path: Path) -> None:
        if shutil.which(self.command[0]) is None:
            raise ExtractorError(f"Extractor command not found: {self.command[0]}")

        cmd = self.build_command(config_path)
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                cwd=self.cwd,
            )
        except subprocess.TimeoutExpired as e:
            raise ExtractorError(f"Extractor timed out after {self.timeout}s") from e
        except FileNotFoundError as e:
            raise ExtractorError(f"Extractor command not found: {self.command[0]}") from e

        if result.returncode != 0:
            output = (result.stderr or result.stdout).strip()
            raise ExtractorError(f"Extractor exited with status {result.returncode}: {output}")


def write_typescript_config(package_root: Path, scratch_dir: Path) -> Path:
    """Write the tsconfig.json the extraction tool compiles against."""
    tsconfig = {
        "extends": str(package_root / "tsconfig.json"),
        "include": [str(package_root / "src")],
        "compilerOptions": {"downlevelIteration": True},
    }
    path = get_tsconfig_path(scratch_dir)
    write_json(tsconfig, path)
    return path


def write_package_json(package_name: str, scratch_dir: Path, scope: str | None = None) -> Path:
    """Write the package.json naming the package being extracted."""
    name = f"@{scope}/{package_name}" if scope else package_name
    path = get_package_json_path(scratch_dir)
    write_json({"name": name}, path)
    return path


def write_extractor_config(stage: ExtractorStageConfig, scratch_dir: Path) -> Path:
    """Write the api-extractor.json for one stage and return its path."""
    path = get_extractor_config_path(scratch_dir)
    write_json(stage.to_dict(), path)
    return path


@dataclass
class ApiReportRun:
    """Outcome of a full two-pass run."""

    results: PruneResults
    report_path: Path
    stages: list[ExtractorStageConfig] = field(default_factory=list)


class ApiReportPipeline:
    """Rollup, prune, then report, strictly in that order."""

    def __init__(
        self,
        paths: PackagePaths,
        scratch_dir: Path,
        report_folder: Path,
        extractor: Extractor | None = None,
        settings: Settings | None = None,
        base_config: Path | None = None,
        package_scope: str | None = None,
    ) -> None:
        self.paths = paths
        self.scratch_dir = scratch_dir
        self.report_folder = report_folder
        self.settings = settings or Settings()
        self.extractor = extractor or ApiExtractorCli(
            self.settings.extractor_command,
            self.settings.extractor_timeout,
            cwd=scratch_dir,
        )
        self.base_config = base_config
        self.package_scope = package_scope

    def rollup_stage(self) -> ExtractorStageConfig:
        return self._stage(self.paths.typescript_dts, dts_rollup=True, api_report=False)

    def report_stage(self) -> ExtractorStageConfig:
        return self._stage(self.paths.public_dts, dts_rollup=False, api_report=True)

    def _stage(self, entry_point: Path, dts_rollup: bool, api_report: bool) -> ExtractorStageConfig:
        return ExtractorStageConfig(
            package_name=self.paths.package_name,
            entry_point=entry_point,
            rollup_dts=self.paths.rollup_dts,
            untrimmed_rollup_dts=self.paths.untrimmed_rollup_dts,
            report_folder=self.report_folder,
            dts_rollup_enabled=dts_rollup,
            api_report_enabled=api_report,
            base_config=self.base_config,
        )

    def _invoke(self, stage: ExtractorStageConfig) -> None:
        config_path = write_extractor_config(stage, self.scratch_dir)
        console.print(f"[dim]Extractor config:[/] {config_path}")
        self.extractor.invoke(config_path)

    def run(self) -> ApiReportRun:
        """Run both extraction passes around the pruning step.

        Raises:
            ExtractorError: If either extraction pass fails
            ParseError: If the rollup cannot be parsed
        """
        name = self.paths.package_name
        console.print(f"Configuring API Extractor for [bold]{name}[/]")
        self.scratch_dir.mkdir(parents=True, exist_ok=True)
        write_typescript_config(self.paths.package_root, self.scratch_dir)
        write_package_json(name, self.scratch_dir, self.package_scope)

        rollup = self.rollup_stage()
        self._invoke(rollup)
        console.print("Generated rollup DTS")

        results = prune_file(self.paths.rollup_dts, self.paths.public_dts, self.settings, quiet=True)
        console.print("Pruned DTS file")

        report = self.report_stage()
        self._invoke(report)
        report_path = get_report_path(self.report_folder, name)
        console.print(f"API report for {name} written to {self.report_folder}")

        return ApiReportRun(results=results, report_path=report_path, stages=[rollup, report])
