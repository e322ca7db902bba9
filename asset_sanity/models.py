"""
Asset Sanity - Data Models.

Chains, asset files, check steps and the reports produced by
sanity check / sanity fix runs.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from asset_sanity.exceptions import ConfigurationError


# =============================================================
# CHAINS
# =============================================================


class ChecksumScheme(Enum):
    """Mixed-case checksum rule used by a chain."""
    EIP55 = "eip55"
    WANCHAIN = "wanchain"  # EIP-55 with the case rule inverted


class Chain(Enum):
    """Ethereum forks sharing the 20-byte hex address format."""
    ETHEREUM = "ethereum"
    CLASSIC = "classic"
    POA = "poa"
    TOMOCHAIN = "tomochain"
    GOCHAIN = "gochain"
    WANCHAIN = "wanchain"
    THUNDERTOKEN = "thundertoken"
    SMARTCHAIN = "smartchain"

    @property
    def checksum_scheme(self) -> ChecksumScheme:
        if self is Chain.WANCHAIN:
            return ChecksumScheme.WANCHAIN
        return ChecksumScheme.EIP55

    @classmethod
    def from_value(cls, value: str) -> "Chain":
        """Parse a chain name, case-insensitively."""
        try:
            return cls(value.strip().lower())
        except ValueError as e:
            supported = ", ".join(c.value for c in cls)
            raise ConfigurationError(
                f"Unknown chain '{value}' (supported: {supported})",
                config_key="chains",
                original_error=e,
            ) from e

    def __str__(self) -> str:
        return self.value


ETH_FORK_CHAINS: tuple[Chain, ...] = tuple(Chain)


# =============================================================
# ASSET FILES
# =============================================================


@dataclass(frozen=True)
class AssetFile:
    """A file directly inside an asset directory."""
    name: str
    extension: str  # without the dot, "" when absent

    @property
    def full_name(self) -> str:
        if not self.extension:
            return self.name
        return f"{self.name}.{self.extension}"

    @classmethod
    def from_filename(cls, filename: str) -> "AssetFile":
        """Split on the last dot; dotfiles keep their full name."""
        stem, dot, ext = filename.rpartition(".")
        if not dot or not stem:
            return cls(name=filename, extension="")
        return cls(name=stem, extension=ext)


# =============================================================
# CHECK STEPS
# =============================================================


@dataclass
class StepResult:
    """Outcome of one sanity check step."""
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


@dataclass
class CheckStep:
    """A named, independently runnable sanity check."""
    name: str
    check: Callable[[], Awaitable[StepResult]]
    chain: Optional[Chain] = None

    async def run(self) -> StepResult:
        return await self.check()


@dataclass
class StepReport:
    """A check step together with its result."""
    name: str
    result: StepResult
    chain: Optional[Chain] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "chain": self.chain.value if self.chain else None,
            **self.result.to_dict(),
        }


# =============================================================
# FIX REPORTS
# =============================================================


@dataclass(frozen=True)
class MoveRecord:
    """A rename performed during a fix pass."""
    chain: Chain
    address: str
    source: str
    target: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "chain": self.chain.value,
            "address": self.address,
            "source": self.source,
            "target": self.target,
        }


@dataclass
class NormalizationReport:
    """Moves and errors from normalizing one chain."""
    chain: Chain
    assets_seen: int = 0
    logo_moves: list[MoveRecord] = field(default_factory=list)
    address_moves: list[MoveRecord] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def move_count(self) -> int:
        return len(self.logo_moves) + len(self.address_moves)

    def to_dict(self) -> dict[str, Any]:
        return {
            "chain": self.chain.value,
            "assets_seen": self.assets_seen,
            "logo_moves": [m.to_dict() for m in self.logo_moves],
            "address_moves": [m.to_dict() for m in self.address_moves],
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


@dataclass
class FixReport:
    """Aggregate outcome of a sanity fix run."""
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: Optional[datetime] = None
    formatted: dict[Chain, int] = field(default_factory=dict)
    format_errors: list[str] = field(default_factory=list)
    format_warnings: list[str] = field(default_factory=list)
    chains: list[NormalizationReport] = field(default_factory=list)
    chain_errors: list[str] = field(default_factory=list)

    @property
    def errors(self) -> list[str]:
        collected = list(self.format_errors) + list(self.chain_errors)
        for report in self.chains:
            collected.extend(report.errors)
        return collected

    @property
    def warnings(self) -> list[str]:
        collected = list(self.format_warnings)
        for report in self.chains:
            collected.extend(report.warnings)
        return collected

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def move_count(self) -> int:
        return sum(r.move_count for r in self.chains)

    def to_dict(self) -> dict[str, Any]:
        return {
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "formatted": {c.value: n for c, n in self.formatted.items()},
            "format_errors": list(self.format_errors),
            "format_warnings": list(self.format_warnings),
            "chains": [r.to_dict() for r in self.chains],
            "chain_errors": list(self.chain_errors),
            "success": self.success,
        }
