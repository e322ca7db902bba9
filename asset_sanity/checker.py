"""
Asset Sanity - Structure Checker.

============================================================
RESPONSIBILITY
============================================================
Read-only validation of one chain's asset directories.

Per address, in this order:
1. Asset directory exists
2. Directory name is the checksum address
3. Logo file exists
4. Descriptor passes the validator

Violations are collected, never raised. One address failing
does not stop the others.

============================================================
"""

import logging

from asset_sanity.checksum import to_checksum
from asset_sanity.concurrency import bounded_gather
from asset_sanity.descriptor import BaseDescriptorValidator
from asset_sanity.exceptions import AssetRootMissing, InvalidAddressFormat
from asset_sanity.filesystem import strip_temp_suffix
from asset_sanity.models import Chain
from asset_sanity.tree import AssetTree


logger = logging.getLogger(__name__)


class StructureChecker:
    """Collects folder-structure violations for a chain."""

    def __init__(
        self,
        tree: AssetTree,
        validator: BaseDescriptorValidator,
        concurrency: int = 8,
    ) -> None:
        self._tree = tree
        self._validator = validator
        self._concurrency = concurrency

    async def check(self, chain: Chain) -> list[str]:
        """
        Violations for every asset of ``chain``; empty list means pass.

        A missing assets directory is reported as a single violation.
        """
        try:
            addresses = await self._tree.list_addresses(chain)
        except AssetRootMissing as e:
            logger.warning(f"Assets directory missing for chain {chain.value}: {e.path}")
            return [f"Expect assets directory at path: {e.path}"]

        logger.info(f"Found {len(addresses)} assets for chain {chain.value}")

        outcome = await bounded_gather(
            addresses,
            lambda address: self.check_asset(chain, address),
            limit=self._concurrency,
        )
        failures = {address: error for address, error in outcome.errors}

        errors: list[str] = []
        for address, violations in zip(addresses, outcome.results):
            if address in failures:
                path = self._tree.asset_path(chain, address)
                logger.error(f"Check failed for asset {path}: {failures[address]}")
                errors.append(f"Failed to check asset at path {path}: {failures[address]}")
            else:
                errors.extend(violations)

        return errors

    async def check_asset(self, chain: Chain, address: str) -> list[str]:
        """Run the four checks for one address."""
        errors: list[str] = []
        asset_path = self._tree.asset_path(chain, address)

        if not await self._tree.exists(asset_path):
            errors.append(f"Expect directory at path: {asset_path}")

        try:
            in_checksum = to_checksum(strip_temp_suffix(address), chain)
        except InvalidAddressFormat as e:
            errors.append(f"Expect asset at path {asset_path} to be a valid address: {e.message}")
        else:
            if address != in_checksum:
                errors.append(f"Expect asset at path {asset_path} in checksum: '{in_checksum}'")

        logo_path = self._tree.logo_path(chain, address)
        if not await self._tree.exists(logo_path):
            errors.append(f"Missing file at path '{logo_path}'")

        is_info_ok, info_message = await self._validator.is_asset_info_ok(chain, address)
        if not is_info_ok:
            errors.append(info_message)

        return errors
