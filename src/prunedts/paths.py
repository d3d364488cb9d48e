"""Centralized path management for prunedts output and scratch files."""

from pathlib import Path

# Directory name for prunedts outputs
PRUNEDTS_DIR = ".prunedts"

# File names within the .prunedts directory
CONFIG_FILE = "config.json"
RESULTS_FILE = "results.json"

# Scratch files written for each extraction tool invocation
API_EXTRACTOR_FILE = "api-extractor.json"
TSCONFIG_FILE = "tsconfig.json"
PACKAGE_JSON_FILE = "package.json"

REPORT_SUFFIX = ".api.md"


def get_prunedts_dir(project_path: Path) -> Path:
    """Get the .prunedts directory path for a project."""
    return project_path / PRUNEDTS_DIR


def ensure_prunedts_dir(project_path: Path) -> Path:
    """Ensure .prunedts directory exists and return its path."""
    prunedts_dir = get_prunedts_dir(project_path)
    prunedts_dir.mkdir(parents=True, exist_ok=True)
    return prunedts_dir


def get_config_path(project_path: Path) -> Path:
    """Get the config.json path for a project."""
    return get_prunedts_dir(project_path) / CONFIG_FILE


def get_results_path(project_path: Path) -> Path:
    """Get the results.json path for a project."""
    return get_prunedts_dir(project_path) / RESULTS_FILE


def get_report_path(report_folder: Path, package_name: str) -> Path:
    """Get the API report path the second extraction pass writes."""
    return report_folder / f"{package_name}{REPORT_SUFFIX}"


def get_extractor_config_path(scratch_dir: Path) -> Path:
    return scratch_dir / API_EXTRACTOR_FILE


def get_tsconfig_path(scratch_dir: Path) -> Path:
    return scratch_dir / TSCONFIG_FILE


def get_package_json_path(scratch_dir: Path) -> Path:
    return scratch_dir / PACKAGE_JSON_FILE
