"""
Asset Sanity - Orchestrator.

============================================================
RESPONSIBILITY
============================================================
Runs the two entry points over every Ethereum-fork chain.

- Sanity check: one named, read-only check step per chain
- Sanity fix:   (a) reformat every info.json
                (b) logo + checksum repairs per chain

Chains never block each other: a failing or raising chain is
reported and the rest still run.

============================================================
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional, Sequence

from asset_sanity.checker import StructureChecker
from asset_sanity.concurrency import bounded_gather
from asset_sanity.config import SanityConfig
from asset_sanity.descriptor import (
    AssetInfoValidator,
    BaseDescriptorFormatter,
    BaseDescriptorValidator,
    JsonFileFormatter,
)
from asset_sanity.exceptions import AssetRootMissing, DescriptorInvalid
from asset_sanity.filesystem import BaseMover, create_mover
from asset_sanity.models import (
    ETH_FORK_CHAINS,
    Chain,
    CheckStep,
    FixReport,
    StepReport,
    StepResult,
)
from asset_sanity.normalizer import Normalizer
from asset_sanity.tree import AssetTree


logger = logging.getLogger(__name__)


# ============================================================
# ACTION INTERFACE
# ============================================================

class BaseAction(ABC):
    """A family of checks with an optional automatic fix."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def get_sanity_checks(self) -> list[CheckStep]:
        pass

    @abstractmethod
    async def sanity_fix(self) -> FixReport:
        pass


# ============================================================
# ETHEREUM FORKS
# ============================================================

class EthForksAction(BaseAction):
    """Folder structure checks and repairs for Ethereum-fork chains."""

    def __init__(
        self,
        tree: AssetTree,
        validator: BaseDescriptorValidator,
        formatter: BaseDescriptorFormatter,
        mover: BaseMover,
        chains: Sequence[Chain] = ETH_FORK_CHAINS,
        concurrency: int = 8,
    ) -> None:
        self._tree = tree
        self._formatter = formatter
        self._chains = list(chains)
        self._concurrency = concurrency
        self._checker = StructureChecker(tree, validator, concurrency)
        self._normalizer = Normalizer(tree, mover, concurrency)

    @property
    def name(self) -> str:
        return "Ethereum forks"

    @property
    def chains(self) -> list[Chain]:
        return list(self._chains)

    # --------------------------------------------------------
    # Sanity check
    # --------------------------------------------------------

    def get_sanity_checks(self) -> list[CheckStep]:
        return [self._build_check_step(chain) for chain in self._chains]

    def _build_check_step(self, chain: Chain) -> CheckStep:
        async def check() -> StepResult:
            errors = await self._checker.check(chain)
            return StepResult(errors=errors, warnings=[])

        return CheckStep(
            name=f"Folder structure for chain {chain.value} (ethereum fork)",
            check=check,
            chain=chain,
        )

    # --------------------------------------------------------
    # Sanity fix
    # --------------------------------------------------------

    async def sanity_fix(self) -> FixReport:
        report = FixReport()
        await self.format_infos(report)
        await self.fix_structures(report)
        report.completed_at = datetime.now(timezone.utc)
        logger.info(
            f"Sanity fix complete: {report.move_count} renames, "
            f"{len(report.errors)} errors"
        )
        return report

    async def format_infos(self, report: Optional[FixReport] = None) -> FixReport:
        """Stage (a): rewrite every existing info.json canonically."""
        if report is None:
            report = FixReport()
        logger.info("Formatting info files...")

        async def format_chain(chain: Chain) -> None:
            try:
                addresses = await self._tree.list_addresses(chain)
            except AssetRootMissing as e:
                logger.warning(f"Skipping info formatting for chain {chain.value}: no assets directory at {e.path}")
                return

            async def format_asset(address: str) -> bool:
                if not await self._tree.info_exists(chain, address):
                    return False
                await self._formatter.format_json_file(self._tree.info_path(chain, address))
                return True

            outcome = await bounded_gather(addresses, format_asset, limit=self._concurrency)
            count = sum(1 for formatted in outcome.results if formatted)
            for address, error in outcome.errors:
                path = self._tree.info_path(chain, address)
                if isinstance(error, DescriptorInvalid):
                    logger.warning(f"Could not format {path}: {error.message}")
                    report.format_warnings.append(f"Could not format {path}: {error.message}")
                else:
                    logger.error(f"Could not format {path}: {error}")
                    report.format_errors.append(f"Could not format {path}: {error}")

            report.formatted[chain] = count
            logger.info(f"Formatted {count} info files for chain {chain.value} (total {len(addresses)})")

        outcome = await bounded_gather(self._chains, format_chain, limit=self._concurrency)
        for chain, error in outcome.errors:
            logger.error(f"Info formatting failed for chain {chain.value}: {error}")
            report.chain_errors.append(f"Info formatting failed for chain {chain.value}: {error}")

        return report

    async def fix_structures(self, report: Optional[FixReport] = None) -> FixReport:
        """Stage (b): logo and checksum repairs for every chain."""
        if report is None:
            report = FixReport()
        logger.info("Checking for checksum formats ...")

        outcome = await bounded_gather(
            self._chains,
            self._normalizer.normalize,
            limit=self._concurrency,
        )
        for chain_report in outcome.successful():
            report.chains.append(chain_report)
        for chain, error in outcome.errors:
            logger.error(f"Normalization failed for chain {chain.value}: {error}")
            report.chain_errors.append(f"Normalization failed for chain {chain.value}: {error}")

        return report


# ============================================================
# STEP RUNNER
# ============================================================

async def run_sanity_checks(
    steps: Sequence[CheckStep],
    concurrency: int = 8,
) -> list[StepReport]:
    """
    Run every step independently.

    A step that raises becomes a failed report; other steps still run.
    """
    async def run_step(step: CheckStep) -> StepReport:
        logger.info(f"Running check: {step.name}")
        result = await step.run()
        if result.errors:
            logger.warning(f"Check '{step.name}' found {len(result.errors)} errors")
        return StepReport(name=step.name, result=result, chain=step.chain)

    outcome = await bounded_gather(steps, run_step, limit=concurrency)
    failures = {id(step): error for step, error in outcome.errors}

    reports: list[StepReport] = []
    for step, step_report in zip(steps, outcome.results):
        if id(step) in failures:
            error = failures[id(step)]
            logger.error(f"Check '{step.name}' raised: {error}")
            step_report = StepReport(
                name=step.name,
                result=StepResult(errors=[f"Check step '{step.name}' failed: {error}"]),
                chain=step.chain,
            )
        reports.append(step_report)
    return reports


def create_eth_forks_action(
    config: SanityConfig,
    validator: Optional[BaseDescriptorValidator] = None,
    formatter: Optional[BaseDescriptorFormatter] = None,
    mover: Optional[BaseMover] = None,
) -> EthForksAction:
    """Wire an EthForksAction from configuration, with optional overrides."""
    tree = AssetTree(config.layout)
    return EthForksAction(
        tree=tree,
        validator=validator or AssetInfoValidator(tree),
        formatter=formatter or JsonFileFormatter(),
        mover=mover or create_mover(config.use_git),
        chains=config.chains,
        concurrency=config.concurrency,
    )
