"""Asset storage configuration."""

import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


@dataclass
class AssetStorageConfig:
    """Settings for the poster asset store."""

    root_dir: Optional[Path] = None
    public_base_url: str = ""
    bucket: str = "event-posters"

    def __post_init__(self):
        """Load settings from environment if not provided."""
        if self.root_dir is None:
            env_dir = os.environ.get('ASSET_STORAGE_DIR')
            self.root_dir = Path(env_dir) if env_dir else Path(__file__).parent.parent.parent.parent / 'data' / 'assets'
        if not self.public_base_url:
            self.public_base_url = os.environ.get('ASSET_PUBLIC_BASE_URL', '/assets')

    def validate(self) -> bool:
        """Validate the configuration."""
        if not self.bucket:
            raise ValueError("Asset bucket name must not be empty")
        return True
