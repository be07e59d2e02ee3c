from __future__ import annotations

from pathlib import Path
from typing import List

from ..errors import PreconditionError


def collect_artifacts(source: Path) -> List[Path]:
    """Return the local artifact set for a directory or a single file.

    Directories are listed non-recursively and filtered to regular files,
    sorted by name so the upload order is deterministic.
    """
    src = Path(source).expanduser().resolve()
    if not src.exists():
        raise PreconditionError(f"Dist has not been built: {src} does not exist.")

    if src.is_file():
        return [src]

    files = sorted((p for p in src.iterdir() if p.is_file()), key=lambda p: p.name)
    if not files:
        raise PreconditionError(f"No files found in the dist directory: {src}")
    return files
