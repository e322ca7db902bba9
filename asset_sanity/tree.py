"""
Asset Sanity - Asset Tree.

============================================================
RESPONSIBILITY
============================================================
Read-only view over the per-chain asset directories.

- Enumerates asset addresses (one per subdirectory)
- Lists the files of one asset
- Resolves conventional paths (asset dir, logo, info)

Nothing is cached: every call reads the file store again, so
renames done by a fix pass are visible immediately.

============================================================
"""

import asyncio
import os
from pathlib import Path
from typing import Union

from asset_sanity.config import RepoLayout
from asset_sanity.exceptions import AssetRootMissing
from asset_sanity.models import AssetFile, Chain


class AssetTree:
    """Filesystem-backed view of one asset registry checkout."""

    def __init__(self, layout: RepoLayout) -> None:
        self._layout = layout

    @property
    def layout(self) -> RepoLayout:
        return self._layout

    # --------------------------------------------------------
    # Paths
    # --------------------------------------------------------

    def chain_path(self, chain: Chain) -> Path:
        return self._layout.root / self._layout.blockchains_dir / chain.value

    def assets_path(self, chain: Chain) -> Path:
        return self.chain_path(chain) / self._layout.assets_dir

    def asset_path(self, chain: Chain, address: str) -> Path:
        return self.assets_path(chain) / address

    def logo_path(self, chain: Chain, address: str) -> Path:
        return self.asset_path(chain, address) / self._layout.logo_full_name

    def info_path(self, chain: Chain, address: str) -> Path:
        return self.asset_path(chain, address) / self._layout.info_name

    # --------------------------------------------------------
    # Reads
    # --------------------------------------------------------

    async def exists(self, path: Union[str, Path]) -> bool:
        return await asyncio.to_thread(os.path.exists, path)

    async def info_exists(self, chain: Chain, address: str) -> bool:
        return await asyncio.to_thread(self.info_path(chain, address).is_file)

    async def list_addresses(self, chain: Chain) -> list[str]:
        """
        Names of the subdirectories of the chain's assets directory.

        Order is whatever the filesystem returns.

        Raises:
            AssetRootMissing: assets directory does not exist
        """
        assets_path = self.assets_path(chain)
        return await asyncio.to_thread(self._scan_dirs, assets_path, chain)

    async def list_files(self, chain: Chain, address: str) -> list[AssetFile]:
        """Regular files directly inside the asset directory."""
        asset_path = self.asset_path(chain, address)
        names = await asyncio.to_thread(self._scan_files, asset_path)
        return [AssetFile.from_filename(name) for name in names]

    @staticmethod
    def _scan_dirs(path: Path, chain: Chain) -> list[str]:
        try:
            with os.scandir(path) as entries:
                return [entry.name for entry in entries if entry.is_dir()]
        except (FileNotFoundError, NotADirectoryError) as e:
            raise AssetRootMissing(
                f"Assets directory not found for chain {chain.value}",
                chain=chain.value,
                path=path,
            ) from e

    @staticmethod
    def _scan_files(path: Path) -> list[str]:
        with os.scandir(path) as entries:
            return [entry.name for entry in entries if entry.is_file()]
