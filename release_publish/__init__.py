"""Publish build artifacts as assets of a version-tagged release.

The run is a linear sequence of API calls: resolve (or create) the release
for the project version, reconcile its assets against the local dist
directory, then do the same for the "latest" release with overwrite forced.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.1.0"
