from __future__ import annotations

import sys

from ..github.client import GitHubReleasesClient


def ensure_release(client: GitHubReleasesClient, tag: str) -> int:
    """Return the id of the release tagged `tag`, creating it if absent.

    An existing release is reused as-is (asset sync may still need to run
    against it). Tags are compared exactly, case-sensitive.
    """
    for rel in client.list_releases():
        if rel.tag_name == tag:
            print(f"A release already exists for version {tag}", file=sys.stderr)
            return rel.id

    created = client.create_release(tag)
    print(f"Created release {tag} (id={created.id})")
    return created.id
