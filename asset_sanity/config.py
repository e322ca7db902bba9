"""
Asset Sanity - Configuration.

============================================================
CONFIGURATION SOURCES
============================================================

Configuration can be loaded from:
- Default values
- Environment variables (ASSET_SANITY_*, .env supported)
- YAML config file

Environment variables:
- ASSET_SANITY_ROOT            repository root
- ASSET_SANITY_CHAINS          comma separated chain subset
- ASSET_SANITY_CONCURRENCY     max concurrent filesystem units
- ASSET_SANITY_USE_GIT         "1"/"true" to move with `git mv`
- ASSET_SANITY_LOGO_EXTENSION  required logo extension
- ASSET_SANITY_LOG_LEVEL       DEBUG, INFO, WARNING, ERROR, CRITICAL
- ASSET_SANITY_LOG_FORMAT      "json" or "text"

A relative `layout.root` in a YAML file is taken relative to
the directory holding that file.

============================================================
"""

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

from asset_sanity.exceptions import ConfigurationError
from asset_sanity.models import ETH_FORK_CHAINS, Chain


logger = logging.getLogger(__name__)


_TRUE_VALUES = {"1", "true", "yes", "on"}


# =============================================================
# REPOSITORY LAYOUT
# =============================================================


@dataclass(frozen=True)
class RepoLayout:
    """
    Directory and file naming conventions of the asset registry.

    <root>/<blockchains_dir>/<chain>/<assets_dir>/<address>/<logo_name>.<logo_extension>
    """
    root: Path = Path(".")
    blockchains_dir: str = "blockchains"
    assets_dir: str = "assets"
    logo_name: str = "logo"
    logo_extension: str = "png"
    info_name: str = "info.json"

    @property
    def logo_full_name(self) -> str:
        return f"{self.logo_name}.{self.logo_extension}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": str(self.root),
            "blockchains_dir": self.blockchains_dir,
            "assets_dir": self.assets_dir,
            "logo_name": self.logo_name,
            "logo_extension": self.logo_extension,
            "info_name": self.info_name,
        }


# =============================================================
# SANITY CONFIG
# =============================================================


@dataclass
class SanityConfig:
    """Settings for sanity check / sanity fix runs."""
    layout: RepoLayout = field(default_factory=RepoLayout)
    chains: list[Chain] = field(default_factory=lambda: list(ETH_FORK_CHAINS))
    concurrency: int = 8
    use_git: bool = False
    log_level: str = "INFO"
    log_format: str = "text"

    @classmethod
    def from_env(cls) -> "SanityConfig":
        """Load configuration from environment variables (and .env)."""
        from dotenv import load_dotenv

        load_dotenv()
        config = cls()

        layout_overrides: dict[str, Any] = {}
        if os.getenv("ASSET_SANITY_ROOT"):
            layout_overrides["root"] = Path(os.getenv("ASSET_SANITY_ROOT"))
        if os.getenv("ASSET_SANITY_LOGO_EXTENSION"):
            layout_overrides["logo_extension"] = os.getenv("ASSET_SANITY_LOGO_EXTENSION").lstrip(".")
        if layout_overrides:
            config.layout = replace(config.layout, **layout_overrides)

        if os.getenv("ASSET_SANITY_CHAINS"):
            config.chains = parse_chains(os.getenv("ASSET_SANITY_CHAINS").split(","))
        if os.getenv("ASSET_SANITY_CONCURRENCY"):
            try:
                config.concurrency = int(os.getenv("ASSET_SANITY_CONCURRENCY"))
            except ValueError as e:
                raise ConfigurationError(
                    "ASSET_SANITY_CONCURRENCY must be an integer",
                    config_key="concurrency",
                    original_error=e,
                ) from e
        if os.getenv("ASSET_SANITY_USE_GIT"):
            config.use_git = os.getenv("ASSET_SANITY_USE_GIT").strip().lower() in _TRUE_VALUES
        if os.getenv("ASSET_SANITY_LOG_LEVEL"):
            config.log_level = os.getenv("ASSET_SANITY_LOG_LEVEL").upper()
        if os.getenv("ASSET_SANITY_LOG_FORMAT"):
            config.log_format = os.getenv("ASSET_SANITY_LOG_FORMAT").strip().lower()

        return config

    @classmethod
    def from_yaml(cls, path: Path) -> "SanityConfig":
        """Load configuration from a YAML file."""
        import yaml

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Could not read config file {path}: {e}",
                original_error=e,
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")

        config = cls()

        if "layout" in data:
            ly = data["layout"] or {}
            defaults = RepoLayout()
            root = defaults.root
            if ly.get("root") is not None:
                root = Path(ly["root"])
                if not root.is_absolute():
                    root = Path(path).parent / root
            config.layout = RepoLayout(
                root=root,
                blockchains_dir=ly.get("blockchains_dir", defaults.blockchains_dir),
                assets_dir=ly.get("assets_dir", defaults.assets_dir),
                logo_name=ly.get("logo_name", defaults.logo_name),
                logo_extension=str(ly.get("logo_extension", defaults.logo_extension)).lstrip("."),
                info_name=ly.get("info_name", defaults.info_name),
            )

        if "chains" in data:
            chains = data["chains"] or []
            if isinstance(chains, str):
                chains = chains.split(",")
            config.chains = parse_chains(chains)

        config.concurrency = data.get("concurrency", config.concurrency)
        config.use_git = bool(data.get("use_git", config.use_git))
        config.log_level = str(data.get("log_level", config.log_level)).upper()
        config.log_format = data.get("log_format", config.log_format)

        return config

    def validate(self) -> list[str]:
        """Return a list of configuration problems (empty when valid)."""
        errors = []
        if not isinstance(self.concurrency, int) or self.concurrency < 1:
            errors.append("concurrency must be a positive integer")
        if not self.chains:
            errors.append("at least one chain is required")
        if not self.layout.logo_name:
            errors.append("logo_name must not be empty")
        if not self.layout.logo_extension:
            errors.append("logo_extension must not be empty")
        if self.log_format not in ("json", "text"):
            errors.append("log_format must be 'json' or 'text'")
        return errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "layout": self.layout.to_dict(),
            "chains": [c.value for c in self.chains],
            "concurrency": self.concurrency,
            "use_git": self.use_git,
            "log_level": self.log_level,
            "log_format": self.log_format,
        }


def parse_chains(values: list[str]) -> list[Chain]:
    """Parse chain names, dropping blanks and duplicates, keeping order."""
    chains: list[Chain] = []
    for value in values:
        if not str(value).strip():
            continue
        chain = Chain.from_value(str(value))
        if chain not in chains:
            chains.append(chain)
    return chains


def load_config(path: Optional[Path] = None) -> SanityConfig:
    """
    Load configuration from file or environment.

    Args:
        path: Optional path to YAML config file

    Returns:
        SanityConfig instance
    """
    if path:
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")
        logger.info(f"Loading configuration from {path}")
        return SanityConfig.from_yaml(path)
    return SanityConfig.from_env()
