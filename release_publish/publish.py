"""Top-level publishing flow.

Preconditions are gathered first, before any network call:
token, artifact set, version, remote repository. Then each target tag is
resolved and synchronized in order: the project version, followed by the
"latest" tag with overwrite forced on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .config import PublishSettings
from .errors import PreconditionError
from .github.client import GitHubReleasesClient
from .project.gitconfig import RemoteRepo, load_remote_repo
from .project.metadata import read_version, resolve_metadata_path
from .sync.assets import AssetSyncResult, ensure_assets
from .sync.releases import ensure_release
from .utils.fs import collect_artifacts


@dataclass(frozen=True)
class PublishTarget:
    tag: str
    overwrite: bool


@dataclass(frozen=True)
class PublishPlan:
    repo: RemoteRepo
    api_url: str
    token: str
    version: str
    files: List[Path]
    targets: List[PublishTarget]


@dataclass
class PublishResult:
    version: str
    releases: Dict[str, int] = field(default_factory=dict)
    assets: List[AssetSyncResult] = field(default_factory=list)


def _resolve(cwd: Path, value: str) -> Path:
    p = Path(value).expanduser()
    return p if p.is_absolute() else cwd / p


def build_plan(settings: PublishSettings, cwd: Path) -> PublishPlan:
    if not settings.token:
        raise PreconditionError(f"You do not have {settings.token_env_var} set in your environment.")

    files = collect_artifacts(_resolve(cwd, settings.dist))

    version = settings.release_version.strip()
    if not version:
        version = read_version(resolve_metadata_path(cwd, settings.metadata_file or None))

    repo = load_remote_repo(_resolve(cwd, settings.git_config), settings.remote)
    api_url = settings.api_url or repo.api_url

    targets = [PublishTarget(tag=version, overwrite=settings.overwrite)]
    if settings.publish_latest and settings.latest_tag:
        targets.append(PublishTarget(tag=settings.latest_tag, overwrite=True))

    return PublishPlan(repo=repo, api_url=api_url, token=settings.token, version=version, files=files, targets=targets)


def build_client(plan: PublishPlan, timeout: Optional[float] = None) -> GitHubReleasesClient:
    return GitHubReleasesClient(
        api_url=plan.api_url,
        owner=plan.repo.owner,
        repo=plan.repo.name,
        token=plan.token,
        timeout=timeout,
    )


def publish(client: GitHubReleasesClient, plan: PublishPlan) -> PublishResult:
    """Run every target of the plan in order. The first error aborts the run."""
    result = PublishResult(version=plan.version)
    for target in plan.targets:
        release_id = ensure_release(client, target.tag)
        result.releases[target.tag] = release_id
        synced = ensure_assets(client, release_id, plan.files, overwrite=target.overwrite)
        result.assets.append(synced)
        print(f"Successfully uploaded version {target.tag}")
    return result
