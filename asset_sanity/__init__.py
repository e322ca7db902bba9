"""
Asset Sanity - Folder structure checks for Ethereum-fork asset registries.

Validates and repairs the per-chain asset layout:

    blockchains/<chain>/assets/<address>/logo.png
    blockchains/<chain>/assets/<address>/info.json

- Directory names must be checksum addresses
- Every asset needs a logo.png
- info.json, when present, must be valid

Quick Start:
    from asset_sanity import SanityConfig, create_eth_forks_action, run_sanity_checks

    async def check_all():
        action = create_eth_forks_action(SanityConfig.from_env())
        reports = await run_sanity_checks(action.get_sanity_checks())
        for report in reports:
            print(report.name, report.result.errors)

    async def fix_all():
        action = create_eth_forks_action(SanityConfig.from_env())
        report = await action.sanity_fix()
        print(report.move_count, report.errors)
"""

from asset_sanity.checker import StructureChecker
from asset_sanity.checksum import is_checksum, to_checksum
from asset_sanity.concurrency import BatchOutcome, bounded_gather
from asset_sanity.config import RepoLayout, SanityConfig, load_config
from asset_sanity.descriptor import (
    AssetInfo,
    AssetInfoValidator,
    BaseDescriptorFormatter,
    BaseDescriptorValidator,
    JsonFileFormatter,
)
from asset_sanity.exceptions import (
    AssetRootMissing,
    AssetSanityError,
    ConfigurationError,
    DescriptorInvalid,
    InvalidAddressFormat,
    MoveFailed,
)
from asset_sanity.filesystem import BaseMover, GitMover, LocalMover, create_mover
from asset_sanity.models import (
    ETH_FORK_CHAINS,
    AssetFile,
    Chain,
    CheckStep,
    ChecksumScheme,
    FixReport,
    MoveRecord,
    NormalizationReport,
    StepReport,
    StepResult,
)
from asset_sanity.normalizer import Normalizer
from asset_sanity.orchestrator import (
    BaseAction,
    EthForksAction,
    create_eth_forks_action,
    run_sanity_checks,
)
from asset_sanity.tree import AssetTree


__version__ = "1.0.0"

__all__ = [
    # Models
    "Chain",
    "ChecksumScheme",
    "ETH_FORK_CHAINS",
    "AssetFile",
    "CheckStep",
    "StepResult",
    "StepReport",
    "MoveRecord",
    "NormalizationReport",
    "FixReport",

    # Exceptions
    "AssetSanityError",
    "InvalidAddressFormat",
    "AssetRootMissing",
    "MoveFailed",
    "DescriptorInvalid",
    "ConfigurationError",

    # Components
    "to_checksum",
    "is_checksum",
    "AssetTree",
    "StructureChecker",
    "Normalizer",
    "BaseAction",
    "EthForksAction",
    "run_sanity_checks",
    "create_eth_forks_action",

    # Collaborators
    "BaseDescriptorValidator",
    "BaseDescriptorFormatter",
    "AssetInfo",
    "AssetInfoValidator",
    "JsonFileFormatter",
    "BaseMover",
    "LocalMover",
    "GitMover",
    "create_mover",

    # Config / concurrency
    "RepoLayout",
    "SanityConfig",
    "load_config",
    "BatchOutcome",
    "bounded_gather",
]
