from __future__ import annotations

from pathlib import Path

import pytest

from _testutil import ensure_repo_on_path

ensure_repo_on_path()

from release_publish.config import PublishSettings, resolve_config_path, resolve_settings  # noqa: E402
from release_publish.errors import ConfigError  # noqa: E402


def test_defaults_without_config(tmp_path: Path) -> None:
    s = resolve_settings({}, cwd=tmp_path, env={})
    assert s == PublishSettings()
    assert resolve_config_path(tmp_path, None, {}) is None


def test_token_from_env_and_gh_token_fallback(tmp_path: Path) -> None:
    assert resolve_settings({}, cwd=tmp_path, env={"GITHUB_TOKEN": "a"}).token == "a"
    assert resolve_settings({}, cwd=tmp_path, env={"GH_TOKEN": "b"}).token == "b"
    assert resolve_settings({"token": "c"}, cwd=tmp_path, env={"GITHUB_TOKEN": "a"}).token == "c"


def test_precedence_cli_env_file(tmp_path: Path) -> None:
    (tmp_path / ".release-publish.yml").write_text(
        "dist: build\noverwrite: false\nlatest_tag: edge\ntoken_env_var: MY_TOKEN\ntimeout: 30\n",
        encoding="utf-8",
    )
    env = {"RELEASE_PUBLISH_OVERWRITE": "yes", "MY_TOKEN": "t0k"}

    s = resolve_settings({"dist": "out", "latest_tag": None}, cwd=tmp_path, env=env)

    assert s.dist == "out"
    assert s.overwrite is True
    assert s.latest_tag == "edge"
    assert s.token == "t0k"
    assert s.timeout == 30.0


def test_no_latest_flag(tmp_path: Path) -> None:
    s = resolve_settings({"no_latest": True}, cwd=tmp_path, env={})
    assert s.publish_latest is False


def test_config_path_from_env(tmp_path: Path) -> None:
    cfg = tmp_path / "custom.yml"
    cfg.write_text("publish_latest: false\n", encoding="utf-8")

    s = resolve_settings({}, cwd=tmp_path, env={"RELEASE_PUBLISH_CONFIG": str(cfg)})

    assert s.publish_latest is False


def test_unknown_key_rejected(tmp_path: Path) -> None:
    (tmp_path / ".release-publish.yml").write_text("dist: dist\nretries: 3\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="schema validation failed"):
        resolve_settings({}, cwd=tmp_path, env={})


def test_wrong_type_rejected(tmp_path: Path) -> None:
    (tmp_path / ".release-publish.yml").write_text("overwrite: sometimes\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        resolve_settings({}, cwd=tmp_path, env={})


def test_explicit_missing_config(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        resolve_settings({"config": str(tmp_path / "nope.yml")}, cwd=tmp_path, env={})


def test_empty_config_file(tmp_path: Path) -> None:
    (tmp_path / ".release-publish.yml").write_text("", encoding="utf-8")
    assert resolve_settings({}, cwd=tmp_path, env={}) == PublishSettings()


def test_relative_config_path_uses_cwd(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path.parent)
    (tmp_path / "my.yml").write_text("latest_tag: edge\n", encoding="utf-8")

    assert resolve_settings({"config": "my.yml"}, cwd=tmp_path, env={}).latest_tag == "edge"
    assert resolve_settings({}, cwd=tmp_path, env={"RELEASE_PUBLISH_CONFIG": "my.yml"}).latest_tag == "edge"
