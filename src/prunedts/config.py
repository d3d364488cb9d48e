"""Configuration loading and saving for prunedts."""

import json
import shlex
from pathlib import Path

import tomli

from prunedts.analysis.markers import DEFAULT_INTERNAL_TAG
from prunedts.analysis.pruner import TS_LIB_GLOBALS
from prunedts.errors import ConfigError
from prunedts.paths import get_config_path

DEFAULT_REPORT_FOLDER = "common/api-review"
DEFAULT_BASE_EXTRACTOR_CONFIG = "config/api-extractor.json"
DEFAULT_EXTRACTOR_COMMAND = ["api-extractor"]
DEFAULT_EXTRACTOR_TIMEOUT = 300
DEFAULT_PACKAGE_SCOPE = "firebase"


def load_config(config_path: Path) -> dict:
    """Load a prunedts JSON configuration file."""
    with open(config_path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {config_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a JSON object in {config_path}")
    return data


def save_config(config: dict, config_path: Path) -> None:
    """Save configuration to a JSON file."""
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2)


def default_config() -> dict:
    """Configuration holding every setting at its default value."""
    return {
        "internal_tag": DEFAULT_INTERNAL_TAG,
        "known_globals": [],
        "package_scope": DEFAULT_PACKAGE_SCOPE,
        "report_folder": DEFAULT_REPORT_FOLDER,
        "exclude": [],
        "extractor": {
            "command": list(DEFAULT_EXTRACTOR_COMMAND),
            "timeout": DEFAULT_EXTRACTOR_TIMEOUT,
        },
    }


def load_pyproject_config(project_root: Path) -> dict:
    """Load the [tool.prunedts] table from pyproject.toml, if any."""
    pyproject_path = project_root / "pyproject.toml"
    if not pyproject_path.exists():
        return {}

    with open(pyproject_path, "rb") as f:
        try:
            data = tomli.load(f)
        except tomli.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {pyproject_path}: {e}") from e

    return data.get("tool", {}).get("prunedts", {})


def resolve_config(project_root: Path, config_path: Path | None = None) -> dict:
    """Merge pyproject.toml settings with a JSON config file.

    Keys from the JSON file win. Without an explicit ``config_path`` the
    project's .prunedts/config.json is used when it exists.
    """
    config = dict(load_pyproject_config(project_root))

    if config_path is None:
        default_path = get_config_path(project_root)
        if default_path.exists():
            config_path = default_path
    elif not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    if config_path is not None:
        config.update(load_config(config_path))
    return config


def get_internal_tag(config: dict) -> str:
    """Get the release tag that marks exports as internal."""
    tag = config.get("internal_tag", DEFAULT_INTERNAL_TAG)
    if not isinstance(tag, str) or not tag.startswith("@") or len(tag) < 2:
        raise ConfigError(f"internal_tag must look like '@internal', got {tag!r}")
    return tag


def get_known_globals(config: dict) -> frozenset[str]:
    """Get names that resolve outside the declaration file."""
    return TS_LIB_GLOBALS | frozenset(config.get("known_globals", []))


def get_package_scope(config: dict) -> str | None:
    """Get the npm scope used for the scratch package.json (e.g. "firebase")."""
    scope = config.get("package_scope", DEFAULT_PACKAGE_SCOPE)
    return scope.lstrip("@") if scope else None


def get_report_folder(config: dict, project_root: Path) -> Path:
    """Get the folder receiving <package>.api.md reports."""
    return (project_root / config.get("report_folder", DEFAULT_REPORT_FOLDER)).resolve()


def get_base_extractor_config(config: dict, project_root: Path) -> Path | None:
    """Get the api-extractor.json every generated config extends."""
    extractor = config.get("extractor", {})
    configured = extractor.get("base_config")
    if configured:
        return (project_root / configured).resolve()

    default_path = project_root / DEFAULT_BASE_EXTRACTOR_CONFIG
    return default_path.resolve() if default_path.exists() else None


def get_extractor_command(config: dict) -> list[str]:
    """Get the command line that launches the extraction tool."""
    command = config.get("extractor", {}).get("command", DEFAULT_EXTRACTOR_COMMAND)
    if isinstance(command, str):
        return shlex.split(command)
    return list(command)


def get_extractor_timeout(config: dict) -> int:
    """Get the extraction tool timeout in seconds."""
    return int(config.get("extractor", {}).get("timeout", DEFAULT_EXTRACTOR_TIMEOUT))


def get_batch_excludes(config: dict) -> list[str]:
    """Get gitignore-style patterns excluded from batch runs."""
    exclude = config.get("exclude", [])
    return [exclude] if isinstance(exclude, str) else list(exclude)
