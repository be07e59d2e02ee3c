from __future__ import annotations

import json
from pathlib import Path

import pytest

from _testutil import ensure_repo_on_path

ensure_repo_on_path()

from release_publish.errors import PreconditionError  # noqa: E402
from release_publish.project.metadata import read_version, resolve_metadata_path  # noqa: E402


def test_package_json_version(tmp_path: Path) -> None:
    p = tmp_path / "package.json"
    p.write_text(json.dumps({"name": "widget", "version": "1.4.2"}), encoding="utf-8")
    assert read_version(p) == "1.4.2"


def test_pyproject_project_version(tmp_path: Path) -> None:
    p = tmp_path / "pyproject.toml"
    p.write_text('[project]\nname = "widget"\nversion = "0.9.0"\n', encoding="utf-8")
    assert read_version(p) == "0.9.0"


def test_pyproject_poetry_version(tmp_path: Path) -> None:
    p = tmp_path / "pyproject.toml"
    p.write_text('[tool.poetry]\nname = "widget"\nversion = "2.0.0"\n', encoding="utf-8")
    assert read_version(p) == "2.0.0"


def test_missing_version(tmp_path: Path) -> None:
    p = tmp_path / "package.json"
    p.write_text(json.dumps({"name": "widget"}), encoding="utf-8")
    with pytest.raises(PreconditionError, match="No version found"):
        read_version(p)


def test_invalid_json(tmp_path: Path) -> None:
    p = tmp_path / "package.json"
    p.write_text("{not json", encoding="utf-8")
    with pytest.raises(PreconditionError, match="Cannot parse"):
        read_version(p)


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(PreconditionError, match="Cannot find a project metadata file"):
        read_version(tmp_path / "package.json")


def test_resolve_prefers_package_json_then_pyproject(tmp_path: Path) -> None:
    assert resolve_metadata_path(tmp_path) == (tmp_path / "package.json").resolve()

    (tmp_path / "pyproject.toml").write_text("[project]\nversion='1'\n", encoding="utf-8")
    assert resolve_metadata_path(tmp_path) == (tmp_path / "pyproject.toml").resolve()

    (tmp_path / "package.json").write_text("{}", encoding="utf-8")
    assert resolve_metadata_path(tmp_path) == (tmp_path / "package.json").resolve()

    assert resolve_metadata_path(tmp_path, "meta/v.json") == (tmp_path / "meta" / "v.json").resolve()
