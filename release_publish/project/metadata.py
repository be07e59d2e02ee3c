from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from ..errors import PreconditionError


DEFAULT_METADATA_FILES = ("package.json", "pyproject.toml")


def resolve_metadata_path(cwd: Path, explicit: Optional[str] = None) -> Path:
    """Pick the project metadata file.

    Precedence:
      1) explicit path (flag or config)
      2) <cwd>/package.json
      3) <cwd>/pyproject.toml
    """
    if explicit and str(explicit).strip():
        p = Path(str(explicit).strip()).expanduser()
        return (p if p.is_absolute() else cwd / p).resolve()

    for name in DEFAULT_METADATA_FILES:
        p = cwd / name
        if p.exists():
            return p.resolve()
    return (cwd / DEFAULT_METADATA_FILES[0]).resolve()


def _version_from_json(data: Dict[str, Any]) -> str:
    return str(data.get("version") or "").strip()


def _version_from_toml(data: Dict[str, Any]) -> str:
    project = data.get("project")
    if isinstance(project, dict) and project.get("version"):
        return str(project["version"]).strip()
    tool = data.get("tool")
    poetry = tool.get("poetry") if isinstance(tool, dict) else None
    if isinstance(poetry, dict) and poetry.get("version"):
        return str(poetry["version"]).strip()
    return ""


def read_version(path: Path) -> str:
    """Read the `version` field of a project metadata file (JSON or TOML)."""
    p = Path(path)
    if not p.exists():
        raise PreconditionError(f"Cannot find a project metadata file: {p}")

    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise PreconditionError(f"Cannot read project metadata file {p}: {e}")

    try:
        if p.suffix.lower() == ".toml":
            version = _version_from_toml(tomllib.loads(text))
        else:
            data = json.loads(text)
            if not isinstance(data, dict):
                raise PreconditionError(f"Project metadata must be a JSON object: {p}")
            version = _version_from_json(data)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        raise PreconditionError(f"Cannot parse project metadata file {p}: {e}")

    if not version:
        raise PreconditionError(f"No version found in {p}")
    return version
