"""Atomic writer for declaration text."""

import os
import tempfile
from pathlib import Path


def write_declaration(text: str, output_path: Path) -> None:
    """Write ``text`` to ``output_path`` atomically.

    The text goes to a temporary file in the destination directory which
    then replaces the target, so readers never see a partial file.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        dir=output_path.parent,
        prefix=f".{output_path.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        os.replace(tmp_name, output_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
