from .assets import AssetSyncResult, ensure_assets
from .releases import ensure_release

__all__ = ["AssetSyncResult", "ensure_assets", "ensure_release"]
