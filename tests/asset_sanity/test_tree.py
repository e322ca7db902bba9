"""
Asset Tree Tests.
"""

import pytest

from asset_sanity.exceptions import AssetRootMissing
from asset_sanity.models import AssetFile, Chain
from tests.asset_sanity.fakes import CHECKSUM_ADDRESS, OTHER_CHECKSUM_ADDRESS


class TestAssetFile:
    """Tests for file name splitting."""

    @pytest.mark.parametrize("filename,name,extension", [
        ("logo.png", "logo", "png"),
        ("logo.jpg", "logo", "jpg"),
        ("logo.PNG", "logo", "PNG"),
        ("logo", "logo", ""),
        ("logo.old.png", "logo.old", "png"),
        (".DS_Store", ".DS_Store", ""),
    ])
    def test_from_filename(self, filename, name, extension):
        asset_file = AssetFile.from_filename(filename)

        assert asset_file.name == name
        assert asset_file.extension == extension
        assert asset_file.full_name == filename


class TestAssetTree:
    """Tests for AssetTree enumeration and paths."""

    def test_paths(self, tree, tmp_path):
        assets = tmp_path / "blockchains" / "ethereum" / "assets"

        assert tree.assets_path(Chain.ETHEREUM) == assets
        assert tree.asset_path(Chain.ETHEREUM, CHECKSUM_ADDRESS) == assets / CHECKSUM_ADDRESS
        assert tree.logo_path(Chain.ETHEREUM, CHECKSUM_ADDRESS) == assets / CHECKSUM_ADDRESS / "logo.png"
        assert tree.info_path(Chain.ETHEREUM, CHECKSUM_ADDRESS) == assets / CHECKSUM_ADDRESS / "info.json"

    @pytest.mark.asyncio
    async def test_list_addresses_only_directories(self, tree, make_asset, make_chain_root):
        make_asset(Chain.ETHEREUM, CHECKSUM_ADDRESS)
        make_asset(Chain.ETHEREUM, OTHER_CHECKSUM_ADDRESS)
        (make_chain_root(Chain.ETHEREUM) / "README.md").write_text("stray file")

        addresses = await tree.list_addresses(Chain.ETHEREUM)

        assert sorted(addresses) == sorted([CHECKSUM_ADDRESS, OTHER_CHECKSUM_ADDRESS])

    @pytest.mark.asyncio
    async def test_list_addresses_empty_chain(self, tree, make_chain_root):
        make_chain_root(Chain.CLASSIC)

        assert await tree.list_addresses(Chain.CLASSIC) == []

    @pytest.mark.asyncio
    async def test_list_addresses_missing_root(self, tree):
        with pytest.raises(AssetRootMissing) as exc_info:
            await tree.list_addresses(Chain.POA)

        assert exc_info.value.chain == "poa"
        assert exc_info.value.path == str(tree.assets_path(Chain.POA))

    @pytest.mark.asyncio
    async def test_list_files(self, tree, make_asset):
        asset = make_asset(Chain.ETHEREUM, CHECKSUM_ADDRESS, files=["logo.png", "banner.jpg"])
        (asset / "nested").mkdir()

        files = await tree.list_files(Chain.ETHEREUM, CHECKSUM_ADDRESS)

        assert set(files) == {AssetFile("logo", "png"), AssetFile("banner", "jpg")}

    @pytest.mark.asyncio
    async def test_exists_and_info_exists(self, tree, make_asset, valid_info):
        make_asset(Chain.ETHEREUM, CHECKSUM_ADDRESS, info=valid_info)
        make_asset(Chain.ETHEREUM, OTHER_CHECKSUM_ADDRESS)

        assert await tree.exists(tree.logo_path(Chain.ETHEREUM, CHECKSUM_ADDRESS))
        assert not await tree.exists(tree.asset_path(Chain.ETHEREUM, "0xmissing"))
        assert await tree.info_exists(Chain.ETHEREUM, CHECKSUM_ADDRESS)
        assert not await tree.info_exists(Chain.ETHEREUM, OTHER_CHECKSUM_ADDRESS)

    @pytest.mark.asyncio
    async def test_no_caching_across_renames(self, tree, make_asset):
        """A rename is visible on the next enumeration."""
        asset = make_asset(Chain.ETHEREUM, CHECKSUM_ADDRESS.lower())
        assert await tree.list_addresses(Chain.ETHEREUM) == [CHECKSUM_ADDRESS.lower()]

        asset.rename(asset.parent / OTHER_CHECKSUM_ADDRESS)

        assert await tree.list_addresses(Chain.ETHEREUM) == [OTHER_CHECKSUM_ADDRESS]
