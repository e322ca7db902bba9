"""
Asset Sanity - Exceptions.

============================================================
EXCEPTION HIERARCHY
============================================================
AssetSanityError (base)
├── InvalidAddressFormat   - address cannot be canonicalized
├── AssetRootMissing       - chain assets directory absent
├── MoveFailed             - repair move/rename failed
├── DescriptorInvalid      - info descriptor unreadable or malformed
└── ConfigurationError     - invalid configuration or CLI input

============================================================
PROPAGATION
============================================================
- Check mode turns every error into a violation string
- Fix mode catches errors per operation and keeps going
- Nothing here should abort a whole run

============================================================
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union


PathLike = Union[str, Path]


class AssetSanityError(Exception):
    """Base exception for all asset sanity errors."""

    def __init__(
        self,
        message: str,
        chain: Optional[str] = None,
        address: Optional[str] = None,
        path: Optional[PathLike] = None,
        original_error: Optional[Exception] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.chain = chain
        self.address = address
        self.path = str(path) if path is not None else None
        self.original_error = original_error
        self.context = context or {}
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "chain": self.chain,
            "address": self.address,
            "path": self.path,
            "original_error": str(self.original_error) if self.original_error else None,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        parts = [f"{self.__class__.__name__}: {self.message}"]
        if self.chain:
            parts.append(f"[chain={self.chain}]")
        if self.path:
            parts.append(f"[path={self.path}]")
        if self.original_error:
            parts.append(f"(caused by: {self.original_error})")
        return " ".join(parts)


class InvalidAddressFormat(AssetSanityError):
    """Address cannot be parsed into canonical form."""

    def __init__(
        self,
        message: str,
        address: Optional[str] = None,
        chain: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(message, chain=chain, address=address, original_error=original_error)


class AssetRootMissing(AssetSanityError):
    """The assets directory of a chain does not exist."""

    def __init__(
        self,
        message: str,
        chain: Optional[str] = None,
        path: Optional[PathLike] = None,
    ) -> None:
        super().__init__(message, chain=chain, path=path)


class MoveFailed(AssetSanityError):
    """A repair move could not be completed."""

    def __init__(
        self,
        message: str,
        source: PathLike,
        target: PathLike,
        chain: Optional[str] = None,
        address: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            message,
            chain=chain,
            address=address,
            path=source,
            original_error=original_error,
        )
        self.source = str(source)
        self.target = str(target)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = super().to_dict()
        data.update({
            "source": self.source,
            "target": self.target,
        })
        return data


class DescriptorInvalid(AssetSanityError):
    """Info descriptor is not valid JSON or fails its schema."""

    def __init__(
        self,
        message: str,
        chain: Optional[str] = None,
        address: Optional[str] = None,
        path: Optional[PathLike] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            message,
            chain=chain,
            address=address,
            path=path,
            original_error=original_error,
        )


class ConfigurationError(AssetSanityError):
    """Invalid configuration value."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(message, original_error=original_error)
        self.config_key = config_key

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = super().to_dict()
        data["config_key"] = self.config_key
        return data
