from .client import Asset, GitHubReleasesClient, Release

__all__ = ["Asset", "GitHubReleasesClient", "Release"]
