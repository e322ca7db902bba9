"""
Shared fixtures for asset sanity tests.

Builds throwaway asset registries under ``tmp_path``:

    <tmp>/blockchains/<chain>/assets/<address>/{logo.png, info.json}
"""

import json
import os
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import pytest

from asset_sanity.config import RepoLayout
from asset_sanity.models import Chain
from asset_sanity.tree import AssetTree
from tests.asset_sanity.fakes import CHECKSUM_ADDRESS, PNG_BYTES


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def layout(tmp_path: Path) -> RepoLayout:
    return RepoLayout(root=tmp_path)


@pytest.fixture
def tree(layout: RepoLayout) -> AssetTree:
    return AssetTree(layout)


@pytest.fixture
def valid_info() -> dict[str, Any]:
    return {
        "name": "Example Token",
        "type": "ERC20",
        "symbol": "EXT",
        "decimals": 18,
        "description": "Token used in tests.",
        "website": "https://example.org",
        "explorer": f"https://etherscan.io/token/{CHECKSUM_ADDRESS}",
        "status": "active",
        "id": CHECKSUM_ADDRESS,
    }


@pytest.fixture
def make_chain_root(tmp_path: Path):
    """Create an empty assets directory for a chain."""
    def _make(chain: Chain) -> Path:
        path = tmp_path / "blockchains" / chain.value / "assets"
        path.mkdir(parents=True, exist_ok=True)
        return path
    return _make


@pytest.fixture
def make_asset(make_chain_root):
    """Create one asset directory with the given files."""
    def _make(
        chain: Chain,
        address: str,
        files: Iterable[str] = ("logo.png",),
        info: Optional[Union[dict[str, Any], str]] = None,
    ) -> Path:
        asset = make_chain_root(chain) / address
        asset.mkdir(parents=True, exist_ok=True)
        for name in files:
            (asset / name).write_bytes(PNG_BYTES)
        if info is not None:
            text = info if isinstance(info, str) else json.dumps(info)
            (asset / "info.json").write_text(text, encoding="utf-8")
        return asset
    return _make


@pytest.fixture
def case_sensitive_fs(tmp_path: Path) -> bool:
    marker = tmp_path / "case-marker"
    marker.write_text("x")
    sensitive = not os.path.exists(tmp_path / "CASE-MARKER")
    marker.unlink()
    return sensitive

