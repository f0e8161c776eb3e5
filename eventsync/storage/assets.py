"""Binary asset store for event posters."""

import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import Optional

from ..config.external_services import AssetStorageConfig
from ..errors import EventSyncError

logger = logging.getLogger(__name__)


class AssetUploadError(EventSyncError):
    """Raised when an asset cannot be stored."""
    pass


def poster_path(user_id: str, filename: str, timestamp_ms: Optional[int] = None) -> str:
    """
    Storage path for a poster: ``<user_id>/<timestamp>.<ext>``.

    Args:
        user_id: Uploading user
        filename: Original file name, used for its extension
        timestamp_ms: Milliseconds since the epoch (defaults to now)
    """
    timestamp_ms = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    suffix = PurePosixPath(filename or '').suffix.lower()
    return f"{user_id}/{timestamp_ms}{suffix}"


class AssetStore(ABC):
    """Interface of the binary asset collaborator."""

    @abstractmethod
    def upload(self, path: str, data: bytes) -> str:
        """
        Store ``data`` under ``path``.

        Returns:
            str: Public URL of the stored asset

        Raises:
            AssetUploadError: If the asset could not be stored
        """
        pass

    @abstractmethod
    def get_public_url(self, path: str) -> str:
        pass


class LocalAssetStore(AssetStore):
    """Asset store writing into a local directory served under a public base URL."""

    def __init__(self, config: Optional[AssetStorageConfig] = None):
        self.config = config or AssetStorageConfig()
        self.config.validate()

    @property
    def bucket_dir(self) -> Path:
        return Path(self.config.root_dir) / self.config.bucket

    def upload(self, path: str, data: bytes) -> str:
        target = self._resolve(path)
        if target.exists():
            raise AssetUploadError(f"Asset already exists: {path}")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise AssetUploadError(f"Failed to store asset {path}: {e}") from e

        logger.info(f"Stored asset {path} ({len(data)} bytes)")
        return self.get_public_url(path)

    def get_public_url(self, path: str) -> str:
        base = self.config.public_base_url.rstrip('/')
        return f"{base}/{self.config.bucket}/{path.lstrip('/')}"

    def _resolve(self, path: str) -> Path:
        relative = PurePosixPath(path)
        if relative.is_absolute() or '..' in relative.parts:
            raise AssetUploadError(f"Invalid asset path: {path}")
        return self.bucket_dir.joinpath(*relative.parts)
