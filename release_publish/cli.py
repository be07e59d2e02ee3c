from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, List, Optional

from .config import resolve_settings
from .errors import PublishError
from .github.client import GitHubReleasesClient
from .publish import PublishPlan, build_client, build_plan, publish


ClientFactory = Callable[[PublishPlan, Optional[float]], GitHubReleasesClient]


def _print_plan(plan: PublishPlan) -> None:
    print(f"Repository: {plan.repo.full_name} ({plan.api_url})")
    print(f"Version: {plan.version}")
    for t in plan.targets:
        print(f"Target: {t.tag} (overwrite={'yes' if t.overwrite else 'no'})")
    for f in plan.files:
        print(f"File: {f}")


def cmd_publish(args: argparse.Namespace, *, cwd: Path, client_factory: ClientFactory) -> int:
    settings = resolve_settings(vars(args), cwd=cwd)
    plan = build_plan(settings, cwd)

    if args.dry_run:
        _print_plan(plan)
        return 0

    client = client_factory(plan, settings.timeout)
    publish(client, plan)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="release-publish",
        description="Upload build artifacts as assets of a version-tagged release.",
    )
    p.add_argument("--dist", help="Directory (non-recursive) or single file to upload (default: dist)")
    p.add_argument("--release-version", help="Release tag; defaults to the version in the project metadata file")
    p.add_argument("--metadata-file", help="Project metadata file (default: package.json, then pyproject.toml)")
    p.add_argument("--token", help="API token (default: $GITHUB_TOKEN, then $GH_TOKEN)")
    p.add_argument("--overwrite", action="store_true", default=None, help="Replace assets that already exist on the version release")
    p.add_argument("--latest-tag", help="Tag mirrored after the version release (default: latest)")
    p.add_argument("--no-latest", action="store_true", help="Skip the latest release")
    p.add_argument("--git-config", help="Git config used to find the remote (default: .git/config)")
    p.add_argument("--remote", help="Git remote name (default: origin)")
    p.add_argument("--api-url", help="API endpoint; overrides the one derived from the remote host")
    p.add_argument("--config", help="YAML config file (default: $RELEASE_PUBLISH_CONFIG or .release-publish.yml)")
    p.add_argument("--dry-run", action="store_true", help="Print the plan without calling the API")
    return p


def main(
    argv: Optional[List[str]] = None,
    *,
    cwd: Optional[Path] = None,
    client_factory: ClientFactory = build_client,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return int(cmd_publish(args, cwd=Path(cwd or Path.cwd()).resolve(), client_factory=client_factory) or 0)
    except PublishError as e:
        print(str(e), file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
