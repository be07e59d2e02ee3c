from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import jsonschema

from ..errors import ConfigError
from ..utils.yamlio import read_yaml


DEFAULT_CONFIG_FILENAME = ".release-publish.yml"
DEFAULT_LATEST_TAG = "latest"

_TRUTHY = {"1", "true", "yes", "y", "on"}


CONFIG_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "dist": {"type": "string", "minLength": 1},
        "metadata_file": {"type": "string", "minLength": 1},
        "overwrite": {"type": "boolean"},
        "latest_tag": {"type": "string", "minLength": 1},
        "publish_latest": {"type": "boolean"},
        "token_env_var": {"type": "string", "minLength": 1},
        "remote": {"type": "string", "minLength": 1},
        "git_config": {"type": "string", "minLength": 1},
        "api_url": {"type": "string", "minLength": 1},
        "timeout": {"type": "number", "exclusiveMinimum": 0},
    },
    "additionalProperties": False,
}


@dataclass(frozen=True)
class PublishSettings:
    dist: str = "dist"
    metadata_file: str = ""
    overwrite: bool = False
    latest_tag: str = DEFAULT_LATEST_TAG
    publish_latest: bool = True
    token_env_var: str = "GITHUB_TOKEN"
    remote: str = "origin"
    git_config: str = ".git/config"
    api_url: str = ""
    timeout: Optional[float] = None
    token: str = ""
    release_version: str = ""


def _env_truthy(env: Mapping[str, str], name: str) -> Optional[bool]:
    raw = env.get(name)
    if raw is None or not str(raw).strip():
        return None
    return str(raw).strip().lower() in _TRUTHY


def _resolve(cwd: Path, value: str) -> Path:
    p = Path(value).expanduser()
    return (p if p.is_absolute() else cwd / p).resolve()


def resolve_config_path(cwd: Path, cli_path: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> Optional[Path]:
    """Resolve the YAML config path.

    Precedence:
      1) CLI flag --config (must exist)
      2) RELEASE_PUBLISH_CONFIG (must exist)
      3) <cwd>/.release-publish.yml (optional)
    """
    environ = os.environ if env is None else env
    if cli_path and str(cli_path).strip():
        return _resolve(cwd, str(cli_path).strip())

    env_path = str(environ.get("RELEASE_PUBLISH_CONFIG", "") or "").strip()
    if env_path:
        return _resolve(cwd, env_path)

    default = cwd / DEFAULT_CONFIG_FILENAME
    return default.resolve() if default.exists() else None


def load_config_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        data = read_yaml(path)
    except (OSError, ValueError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}")
    try:
        jsonschema.validate(instance=data, schema=CONFIG_SCHEMA)
    except jsonschema.ValidationError as e:
        raise ConfigError(f"Config file schema validation failed ({path}): {e.message}")
    return data


def resolve_settings(
    cli: Mapping[str, Any],
    *,
    cwd: Path,
    env: Optional[Mapping[str, str]] = None,
) -> PublishSettings:
    """Merge CLI values, environment and the optional config file into settings.

    `cli` holds only values the user actually passed; None means "not given".
    """
    environ = os.environ if env is None else env

    merged: Dict[str, Any] = {}
    config_path = resolve_config_path(cwd, cli.get("config"), environ)
    if config_path is not None:
        merged.update(load_config_file(config_path))

    env_overwrite = _env_truthy(environ, "RELEASE_PUBLISH_OVERWRITE")
    if env_overwrite is not None:
        merged["overwrite"] = env_overwrite

    for key in ("dist", "metadata_file", "latest_tag", "remote", "git_config", "api_url", "release_version", "token"):
        val = cli.get(key)
        if val is not None and str(val).strip():
            merged[key] = str(val).strip()
    if cli.get("overwrite"):
        merged["overwrite"] = True
    if cli.get("no_latest"):
        merged["publish_latest"] = False

    if "timeout" in merged:
        merged["timeout"] = float(merged["timeout"])

    settings = PublishSettings(**merged)

    if not settings.token:
        token = str(environ.get(settings.token_env_var, "") or "").strip() or str(environ.get("GH_TOKEN", "") or "").strip()
        if token:
            settings = replace(settings, token=token)
    return settings
