"""Reconcile local artifacts against the assets already attached to a release.

Per release the synchronizer moves through:

    Listing -> Deleting -> Listing ...   (overwrite and conflicts present)
    Listing -> Uploading -> Done
    Listing -> Done                      (nothing missing)

Names are compared as exact strings; no case folding or host-side
normalization is applied.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from ..errors import SyncError
from ..github.client import Asset, GitHubReleasesClient


@dataclass(frozen=True)
class AssetSyncResult:
    release_id: int
    uploaded: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    passes: int = 0


def _by_basename(local_files: Sequence[Path]) -> Dict[str, Path]:
    # First path wins when two inputs share a base name.
    out: Dict[str, Path] = {}
    for p in local_files:
        out.setdefault(Path(p).name, Path(p))
    return out


def _find_conflicts(local_names: Sequence[str], remote: Sequence[Asset]) -> List[str]:
    remote_names = {a.name for a in remote}
    return [n for n in local_names if n in remote_names]


def _delete_conflicts(client: GitHubReleasesClient, remote: Sequence[Asset], conflicts: Sequence[str]) -> List[str]:
    wanted = set(conflicts)
    batch = [a for a in remote if a.name in wanted]
    removed: List[str] = []
    for asset in batch:
        client.delete_asset(asset.id)
        print(f"Deleted {asset.name}")
        removed.append(asset.name)
    return removed


def _upload_missing(client: GitHubReleasesClient, release_id: int, items: Sequence[Path]) -> List[str]:
    uploaded: List[str] = []
    for item in items:
        client.upload_asset(release_id, item, item.name)
        print(f"Uploaded {item.name}")
        uploaded.append(item.name)
    return uploaded


def ensure_assets(
    client: GitHubReleasesClient,
    release_id: int,
    local_files: Sequence[Path],
    overwrite: bool = False,
    on_complete: Optional[Callable[[AssetSyncResult], None]] = None,
) -> AssetSyncResult:
    """Make every local file present as an asset of `release_id`.

    Conflicting names are skipped unless `overwrite` is set, in which case the
    remote copies are deleted and the listing is repeated before uploading.
    Any API error propagates; completed deletions and uploads are not rolled
    back.
    """
    local = _by_basename(local_files)
    local_names = list(local.keys())

    deleted: List[str] = []
    previous_conflicts: Optional[int] = None
    passes = 0

    while True:
        passes += 1
        remote = client.list_assets(release_id)
        conflicts = _find_conflicts(local_names, remote)

        if conflicts:
            print(f"Some assets have already been uploaded for this release: {conflicts}")
            if overwrite:
                if previous_conflicts is not None and len(conflicts) >= previous_conflicts:
                    raise SyncError(
                        f"Deleting conflicting assets did not converge for release {release_id}: {conflicts}"
                    )
                previous_conflicts = len(conflicts)
                deleted.extend(_delete_conflicts(client, remote, conflicts))
                continue
        break

    remote_names = {a.name for a in remote}
    missing = [local[n] for n in local_names if n not in remote_names]
    uploaded = _upload_missing(client, release_id, missing) if missing else []

    result = AssetSyncResult(
        release_id=release_id,
        uploaded=uploaded,
        deleted=deleted,
        skipped=[] if overwrite else conflicts,
        passes=passes,
    )
    if on_complete is not None:
        on_complete(result)
    return result
