"""
Asset Sanity - Info Descriptors.

============================================================
RESPONSIBILITY
============================================================
Everything that reads or rewrites an asset's info.json.

- BaseDescriptorValidator: (chain, address) -> (ok, message)
- BaseDescriptorFormatter: rewrite a JSON file canonically
- AssetInfo: schema of the descriptor

The checker and normalizer only see the two base classes,
so tests can pass fakes.

============================================================
"""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from asset_sanity.exceptions import DescriptorInvalid
from asset_sanity.models import Chain
from asset_sanity.tree import AssetTree


logger = logging.getLogger(__name__)


INFO_NOT_MANDATORY_MESSAGE = "Info file doesn't exist, but it's not mandatory currently"


# =============================================================
# SCHEMA
# =============================================================


class AssetInfo(BaseModel):
    """Required keys of an asset info descriptor."""
    model_config = ConfigDict(extra="allow", strict=True)

    name: str = Field(min_length=1)
    type: str = Field(min_length=1)
    symbol: str = Field(min_length=1)
    decimals: int = Field(ge=0, le=30)
    description: str
    website: str
    explorer: str
    status: str
    id: str = Field(min_length=1)


def _describe_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item.get("loc", ())) or "<root>"
        parts.append(f"{location}: {item.get('msg', 'invalid')}")
    return "; ".join(parts)


# =============================================================
# VALIDATION
# =============================================================


class BaseDescriptorValidator(ABC):
    """Well-formedness predicate for asset descriptors."""

    @abstractmethod
    async def is_asset_info_ok(self, chain: Chain, address: str) -> tuple[bool, str]:
        """
        Returns:
            (passed, message); message is reported verbatim on failure
        """
        pass


class AssetInfoValidator(BaseDescriptorValidator):
    """
    Validates info.json against the AssetInfo schema.

    A missing descriptor passes; an unparsable or incomplete one fails.
    """

    def __init__(self, tree: AssetTree) -> None:
        self._tree = tree

    async def is_asset_info_ok(self, chain: Chain, address: str) -> tuple[bool, str]:
        if not await self._tree.info_exists(chain, address):
            return True, INFO_NOT_MANDATORY_MESSAGE
        try:
            await self.validate(chain, address)
        except DescriptorInvalid as e:
            return False, e.message
        return True, ""

    async def validate(self, chain: Chain, address: str) -> AssetInfo:
        """
        Parse and validate one descriptor.

        Raises:
            DescriptorInvalid: unreadable JSON or schema violation
        """
        path = self._tree.info_path(chain, address)
        data = await asyncio.to_thread(read_json_file, path, chain, address)
        try:
            return AssetInfo.model_validate(data)
        except ValidationError as e:
            raise DescriptorInvalid(
                f"Info at path '{path}' is invalid: {_describe_validation_error(e)}",
                chain=chain.value,
                address=address,
                path=path,
                original_error=e,
            ) from e


# =============================================================
# FORMATTING
# =============================================================


class BaseDescriptorFormatter(ABC):
    """Rewrites a descriptor file to canonical formatting."""

    @abstractmethod
    async def format_json_file(self, path: Path) -> bool:
        """
        Returns:
            True when the file content changed
        """
        pass


class JsonFileFormatter(BaseDescriptorFormatter):
    """4-space indented JSON, key order kept, trailing newline."""

    def __init__(self, indent: int = 4) -> None:
        self._indent = indent

    def render(self, data: Any) -> str:
        return json.dumps(data, indent=self._indent, ensure_ascii=False) + "\n"

    async def format_json_file(self, path: Path) -> bool:
        return await asyncio.to_thread(self._format_sync, Path(path))

    def _format_sync(self, path: Path) -> bool:
        try:
            original = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise DescriptorInvalid(
                f"JSON at path: {path} is invalid",
                path=path,
                original_error=e,
            ) from e
        data = _loads(original, path)
        formatted = self.render(data)
        if formatted == original:
            return False
        path.write_text(formatted, encoding="utf-8")
        logger.debug(f"Formatted {path}")
        return True


# =============================================================
# HELPERS
# =============================================================


def _loads(text: str, path: Path, chain: Optional[Chain] = None, address: Optional[str] = None) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise DescriptorInvalid(
            f"JSON at path: {path} is invalid",
            chain=chain.value if chain else None,
            address=address,
            path=path,
            original_error=e,
        ) from e


def read_json_file(
    path: Union[str, Path],
    chain: Optional[Chain] = None,
    address: Optional[str] = None,
) -> Any:
    """
    Load a JSON file.

    Raises:
        DescriptorInvalid: file unreadable or not valid JSON
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DescriptorInvalid(
            f"JSON at path: {path} is invalid",
            chain=chain.value if chain else None,
            address=address,
            path=path,
            original_error=e,
        ) from e
    return _loads(text, path, chain, address)
