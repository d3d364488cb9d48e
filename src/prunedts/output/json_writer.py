"""JSON output writers for results and extraction tool configs."""

import json
from pathlib import Path

from prunedts.models.results import PruneResults


def write_json(data: dict, output_path: Path) -> None:
    """Write a JSON document with the project's formatting."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")


def write_results(results: PruneResults, output_path: Path) -> None:
    """Write the results.json file."""
    write_json(results.to_dict(), output_path)


def write_batch_results(results: list[PruneResults], output_path: Path) -> None:
    """Write the results of a batch run, one entry per file."""
    write_json({"version": "1.0", "files": [r.to_dict() for r in results]}, output_path)


def load_results(results_path: Path) -> dict:
    """Load a results.json file."""
    with open(results_path, "r", encoding="utf-8") as f:
        return json.load(f)
