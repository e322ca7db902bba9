"""
Asset Sanity - Normalizer.

============================================================
RESPONSIBILITY
============================================================
Best-effort repairs of one chain's asset directories.

- Logo repair: logo.<other ext> -> logo.<required ext>
- Address repair: directory renamed to its checksum address

Per asset the logo repair runs first, then the directory
rename. Assets are independent and processed concurrently.

============================================================
FAILURE HANDLING
============================================================
- A failed move is logged and recorded, never raised
- A failed logo repair skips that asset's directory rename
- Addresses sharing one checksum target are renamed one at a
  time: the canonical entry (or the first spelling) keeps the
  target, the others are reported as collisions
- No rollback; a directory left under its temporary
  `.rename-tmp` name is renamed on the next run

============================================================
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from asset_sanity.checksum import to_checksum
from asset_sanity.concurrency import bounded_gather
from asset_sanity.exceptions import AssetRootMissing, InvalidAddressFormat, MoveFailed
from asset_sanity.filesystem import BaseMover, strip_temp_suffix
from asset_sanity.models import Chain, MoveRecord, NormalizationReport
from asset_sanity.tree import AssetTree


logger = logging.getLogger(__name__)


@dataclass
class AssetRepair:
    """Moves and errors for a single asset."""
    logo_moves: list[MoveRecord] = field(default_factory=list)
    address_move: Optional[MoveRecord] = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class Normalizer:
    """Applies logo and address-casing repairs to a chain."""

    def __init__(
        self,
        tree: AssetTree,
        mover: BaseMover,
        concurrency: int = 8,
    ) -> None:
        self._tree = tree
        self._mover = mover
        self._concurrency = concurrency

    async def normalize(self, chain: Chain) -> NormalizationReport:
        """Repair every asset of ``chain``."""
        report = NormalizationReport(chain=chain)

        try:
            addresses = await self._tree.list_addresses(chain)
        except AssetRootMissing as e:
            logger.warning(f"Skipping normalization for chain {chain.value}: no assets directory at {e.path}")
            return report

        report.assets_seen = len(addresses)
        claimed_by = self.assign_targets(chain, addresses)

        outcome = await bounded_gather(
            addresses,
            lambda address: self.repair_asset(chain, address, claimed_by.get(address)),
            limit=self._concurrency,
        )

        for repair in outcome.successful():
            report.logo_moves.extend(repair.logo_moves)
            if repair.address_move:
                report.address_moves.append(repair.address_move)
            report.errors.extend(repair.errors)
            report.warnings.extend(repair.warnings)

        for address, error in outcome.errors:
            path = self._tree.asset_path(chain, address)
            logger.error(f"Repair failed for asset {path}: {error}")
            report.errors.append(f"Repair failed for asset {path}: {error}")

        logger.info(
            f"Normalized chain {chain.value}: {len(report.logo_moves)} logo renames, "
            f"{len(report.address_moves)} checksum renames, {len(report.errors)} errors "
            f"(total {report.assets_seen})"
        )
        return report

    def assign_targets(self, chain: Chain, addresses: list[str]) -> dict[str, str]:
        """
        Settle which address may take each checksum target.

        The entry already named like the target keeps it, otherwise the
        first spelling in enumeration order does.

        Returns:
            {losing address: address that keeps the target}
        """
        groups: dict[str, list[str]] = {}
        for address in addresses:
            try:
                target = to_checksum(strip_temp_suffix(address), chain)
            except InvalidAddressFormat:
                continue
            groups.setdefault(target, []).append(address)

        claimed_by: dict[str, str] = {}
        for target, members in groups.items():
            if len(members) < 2:
                continue
            winner = target if target in members else members[0]
            for address in members:
                if address != winner:
                    claimed_by[address] = winner
        return claimed_by

    async def repair_asset(
        self,
        chain: Chain,
        address: str,
        claimed_by: Optional[str] = None,
    ) -> AssetRepair:
        """Logo repair, then directory rename, for one asset."""
        repair = AssetRepair()

        logo_moves, logo_errors = await self.fix_logo_files(chain, address)
        repair.logo_moves.extend(logo_moves)
        repair.errors.extend(logo_errors)
        if logo_errors:
            logger.warning(
                f"Skipping checksum rename of {self._tree.asset_path(chain, address)} "
                f"after failed logo repair"
            )
            return repair

        try:
            repair.address_move = await self.fix_address_casing(chain, address, claimed_by)
        except InvalidAddressFormat as e:
            path = self._tree.asset_path(chain, address)
            logger.warning(f"Cannot checksum asset {path}: {e.message}")
            repair.warnings.append(f"Expect asset at path {path} to be a valid address: {e.message}")
        except MoveFailed as e:
            logger.error(f"Checksum rename failed: {e.message}")
            repair.errors.append(e.message)

        return repair

    async def fix_logo_files(self, chain: Chain, address: str) -> tuple[list[MoveRecord], list[str]]:
        """
        Rename logo files with the wrong extension.

        Only files named like the logo are touched. Each move is attempted
        independently.

        Returns:
            (moves done, error messages)
        """
        layout = self._tree.layout
        asset_path = self._tree.asset_path(chain, address)
        moves: list[MoveRecord] = []
        errors: list[str] = []

        for file in await self._tree.list_files(chain, address):
            if file.name != layout.logo_name or file.extension == layout.logo_extension:
                continue

            logger.info(f"Renaming incorrect asset logo extension {asset_path / file.full_name} ...")
            try:
                await self._mover.move(asset_path, file.full_name, layout.logo_full_name)
            except MoveFailed as e:
                logger.error(f"Logo rename failed: {e.message}")
                errors.append(e.message)
                continue

            moves.append(MoveRecord(
                chain=chain,
                address=address,
                source=str(asset_path / file.full_name),
                target=str(asset_path / layout.logo_full_name),
            ))

        return moves, errors

    async def fix_address_casing(
        self,
        chain: Chain,
        address: str,
        claimed_by: Optional[str] = None,
    ) -> Optional[MoveRecord]:
        """
        Rename the asset directory to its checksum address.

        A name ending in `.rename-tmp` is an interrupted rename and is
        moved to the checksum of the name it was heading for.

        Args:
            claimed_by: Another address of this pass that keeps the target

        Returns:
            The move performed, or None when already canonical

        Raises:
            InvalidAddressFormat: address cannot be checksummed
            MoveFailed: rename failed (including target already present)
        """
        checksum_address = to_checksum(strip_temp_suffix(address), chain)
        if checksum_address == address:
            return None

        assets_path = self._tree.assets_path(chain)
        if claimed_by is not None:
            if claimed_by == checksum_address:
                reason = "target already exists"
            else:
                reason = f"target also claimed by {assets_path / claimed_by}"
            raise MoveFailed(
                f"Cannot move {assets_path / address} to {assets_path / checksum_address}: {reason}",
                source=assets_path / address,
                target=assets_path / checksum_address,
                chain=chain.value,
                address=address,
            )

        if address != strip_temp_suffix(address):
            logger.info(f"Recovering interrupted rename {assets_path / address}")
        await self._mover.move(assets_path, address, checksum_address)
        logger.info(f"Renamed to checksum format {checksum_address}")

        return MoveRecord(
            chain=chain,
            address=address,
            source=str(assets_path / address),
            target=str(assets_path / checksum_address),
        )
