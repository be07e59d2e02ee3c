"""Derive the remote repository identity from a local `.git/config`.

Supported remote URL shapes:
  - https://host/owner/repo(.git)      (http, git, ssh schemes too)
  - ssh://[user@]host[:port]/owner/repo(.git)
  - [user@]host:owner/repo(.git)        (scp-like)
"""

from __future__ import annotations

import configparser
import re
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlsplit

from ..errors import PreconditionError


PUBLIC_HOST = "github.com"
PUBLIC_API_URL = "https://api.github.com"

_SCP_RE = re.compile(r"^(?:(?P<user>[^@/]+)@)?(?P<host>[^:/]+):(?P<path>[^/].*)$")


@dataclass(frozen=True)
class RemoteRepo:
    owner: str
    name: str
    host: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def api_url(self) -> str:
        return api_url_for_host(self.host)


def api_url_for_host(host: str) -> str:
    # Any host other than the public one is used directly as the API endpoint.
    h = str(host).strip().lower()
    if h == PUBLIC_HOST:
        return PUBLIC_API_URL
    return f"https://{host}"


def _split_path(path: str, url: str) -> tuple[str, str]:
    parts = [p for p in path.strip("/").split("/") if p]
    if len(parts) < 2:
        raise PreconditionError(f"Cannot derive owner/repository from remote url: {url}")
    owner, name = parts[-2], parts[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    if not owner or not name:
        raise PreconditionError(f"Cannot derive owner/repository from remote url: {url}")
    return owner, name


def parse_remote_url(url: str) -> RemoteRepo:
    u = str(url or "").strip()
    if not u:
        raise PreconditionError("Remote url is empty")

    if "://" in u:
        parts = urlsplit(u)
        host = parts.hostname or ""
        if not host:
            raise PreconditionError(f"Remote url has no host: {url}")
        owner, name = _split_path(parts.path, u)
        return RemoteRepo(owner=owner, name=name, host=host)

    m = _SCP_RE.match(u)
    if not m:
        raise PreconditionError(f"Unsupported remote url: {url}")
    owner, name = _split_path(m.group("path"), u)
    return RemoteRepo(owner=owner, name=name, host=m.group("host"))


def read_remote_url(git_config: Path, remote: str = "origin") -> str:
    p = Path(git_config)
    if not p.exists():
        raise PreconditionError(f"This does not seem to be a git repo: {p} not found.")

    # git config allows repeated keys (several `fetch` refspecs), bare boolean
    # keys (`sslVerify` alone means true) and trailing comments.
    parser = configparser.ConfigParser(
        strict=False,
        interpolation=None,
        allow_no_value=True,
        inline_comment_prefixes=("#", ";"),
    )
    try:
        parser.read_string(p.read_text(encoding="utf-8"), source=str(p))
    except (OSError, configparser.Error) as e:
        raise PreconditionError(f"Cannot read git config {p}: {e}")

    section = f'remote "{remote}"'
    if not parser.has_section(section):
        raise PreconditionError(f"No [{section}] section in {p}")
    url = (parser.get(section, "url", fallback="") or "").strip()
    if not url:
        raise PreconditionError(f"No url configured for remote {remote!r} in {p}")
    return url


def load_remote_repo(git_config: Path, remote: str = "origin") -> RemoteRepo:
    return parse_remote_url(read_remote_url(git_config, remote))
