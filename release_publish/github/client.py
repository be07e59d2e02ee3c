"""Minimal GitHub Releases REST client.

Only the calls the publisher needs: list/create releases and
list/delete/upload release assets. Every unexpected response raises
ApiError; nothing is retried.
"""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

import requests

from ..errors import ApiError


PER_PAGE = 100


@dataclass(frozen=True)
class Release:
    id: int
    tag_name: str
    upload_url: str = ""


@dataclass(frozen=True)
class Asset:
    id: int
    name: str


def _github_api_headers(token: str) -> Dict[str, str]:
    return {
        "Authorization": f"token {token}",
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
        "User-Agent": "release-publish",
    }


def _release_from_json(data: Dict[str, Any]) -> Release:
    return Release(
        id=int(data["id"]),
        tag_name=str(data.get("tag_name") or ""),
        upload_url=str(data.get("upload_url") or ""),
    )


def _asset_from_json(data: Dict[str, Any]) -> Asset:
    return Asset(id=int(data["id"]), name=str(data.get("name") or ""))


class GitHubReleasesClient:
    def __init__(
        self,
        *,
        api_url: str,
        owner: str,
        repo: str,
        token: str,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.owner = owner
        self.repo = repo
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.session.headers.update(_github_api_headers(token))
        self._upload_urls: Dict[int, str] = {}

    @property
    def repo_url(self) -> str:
        return f"{self.api_url}/repos/{self.owner}/{self.repo}"

    def _request(self, method: str, url: str, *, expected: tuple, what: str, **kwargs: Any) -> requests.Response:
        try:
            r = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise ApiError(f"GitHub API error {what}: {e}")
        if r.status_code not in expected:
            raise ApiError(f"GitHub API error {what}: {r.status_code}: {r.text[:2000]}", status=r.status_code)
        return r

    def _json(self, r: requests.Response, *, what: str) -> Any:
        try:
            return r.json()
        except ValueError as e:
            raise ApiError(f"GitHub API error {what}: response is not JSON: {e}", status=r.status_code)

    def _record(self, r: requests.Response, parse: Any, *, what: str, data: Any = None) -> Any:
        if data is None:
            data = self._json(r, what=what)
        try:
            return parse(data)
        except (KeyError, TypeError, ValueError) as e:
            raise ApiError(f"GitHub API error {what}: unexpected payload: {e!r}", status=r.status_code)

    def _paginate(self, url: str, parse: Any, *, what: str) -> Iterator[Any]:
        page = 1
        while True:
            r = self._request("GET", url, expected=(200,), what=what, params={"per_page": PER_PAGE, "page": page})
            items = self._json(r, what=what)
            if not isinstance(items, list):
                raise ApiError(f"GitHub API error {what}: expected a list, got {type(items).__name__}")
            for item in items:
                if isinstance(item, dict):
                    yield self._record(r, parse, what=what, data=item)
            if len(items) < PER_PAGE or "next" not in r.links:
                return
            page += 1

    def list_releases(self) -> List[Release]:
        return list(self._paginate(f"{self.repo_url}/releases", _release_from_json, what="listing releases"))

    def create_release(self, tag: str) -> Release:
        r = self._request(
            "POST",
            f"{self.repo_url}/releases",
            expected=(201,),
            what=f"creating release {tag}",
            json={"tag_name": tag},
        )
        rel = self._record(r, _release_from_json, what=f"creating release {tag}")
        if rel.upload_url:
            self._upload_urls[rel.id] = rel.upload_url
        return rel

    def get_release(self, release_id: int) -> Release:
        r = self._request("GET", f"{self.repo_url}/releases/{release_id}", expected=(200,), what=f"fetching release {release_id}")
        return self._record(r, _release_from_json, what=f"fetching release {release_id}")

    def list_assets(self, release_id: int) -> List[Asset]:
        url = f"{self.repo_url}/releases/{release_id}/assets"
        return list(self._paginate(url, _asset_from_json, what=f"listing assets for release {release_id}"))

    def delete_asset(self, asset_id: int) -> None:
        self._request("DELETE", f"{self.repo_url}/releases/assets/{asset_id}", expected=(204,), what=f"deleting asset {asset_id}")

    def _upload_url(self, release_id: int) -> str:
        url = self._upload_urls.get(release_id)
        if not url:
            url = self.get_release(release_id).upload_url
            if not url:
                raise ApiError(f"GitHub release {release_id} payload missing upload_url")
            self._upload_urls[release_id] = url
        # Example: https://uploads.github.com/repos/{owner}/{repo}/releases/{id}/assets{?name,label}
        return url.split("{")[0]

    def upload_asset(self, release_id: int, path: Path, name: str) -> Asset:
        content_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
        url = self._upload_url(release_id)
        what = f"uploading asset {name}"
        try:
            fh = Path(path).open("rb")
        except OSError as e:
            raise ApiError(f"GitHub API error {what}: cannot open {path}: {e}")
        with fh:
            r = self._request(
                "POST",
                url,
                expected=(201,),
                what=what,
                params={"name": name},
                headers={"Content-Type": content_type},
                data=fh,
            )
        return self._record(r, _asset_from_json, what=what)
