"""Binary asset storage."""

from .assets import AssetStore, AssetUploadError, LocalAssetStore, poster_path

__all__ = ['AssetStore', 'AssetUploadError', 'LocalAssetStore', 'poster_path']
