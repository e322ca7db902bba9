"""
Asset Sanity - Movers.

Rename primitives used by the fix pass.

- LocalMover: plain filesystem rename
- GitMover:   `git mv`, keeps the index in sync in a checkout

Both refuse to overwrite an existing target. A rename whose
target is only a case-insensitive alias of the source goes
in two steps through ``<target>.rename-tmp``; every other
rename is a single step. A leftover temporary name is picked
up again by the next fix pass.
"""

import asyncio
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from asset_sanity.exceptions import MoveFailed


logger = logging.getLogger(__name__)


PathLike = Union[str, Path]

TEMP_SUFFIX = ".rename-tmp"


def strip_temp_suffix(name: str) -> str:
    """Name an interrupted two-step rename was heading for."""
    if name.endswith(TEMP_SUFFIX):
        return name[:-len(TEMP_SUFFIX)]
    return name


class BaseMover(ABC):
    """Moves an entry inside one directory from ``old_name`` to ``new_name``."""

    TEMP_SUFFIX = TEMP_SUFFIX

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifier used in logs."""
        pass

    @abstractmethod
    async def _rename(self, directory: Path, old_name: str, new_name: str) -> None:
        """Perform one rename. Raise MoveFailed on error."""
        pass

    async def move(self, directory: PathLike, old_name: str, new_name: str) -> None:
        """
        Rename ``directory/old_name`` to ``directory/new_name``.

        Raises:
            MoveFailed: source missing, target already present, or the
                underlying rename failed
        """
        directory = Path(directory)
        source = directory / old_name
        target = directory / new_name

        if old_name == new_name:
            return

        if not await asyncio.to_thread(os.path.lexists, source):
            raise MoveFailed(
                f"Cannot move {source}: source does not exist",
                source=source,
                target=target,
            )

        if await asyncio.to_thread(_is_other_entry, source, target):
            raise MoveFailed(
                f"Cannot move {source} to {target}: target already exists",
                source=source,
                target=target,
            )

        if await asyncio.to_thread(_is_alias, source, target):
            temp_name = f"{new_name}{self.TEMP_SUFFIX}"
            if await asyncio.to_thread(os.path.lexists, directory / temp_name):
                raise MoveFailed(
                    f"Cannot move {source} to {target}: temporary name {temp_name} is in use",
                    source=source,
                    target=target,
                )
            await self._rename(directory, old_name, temp_name)
            await self._rename(directory, temp_name, new_name)
        else:
            await self._rename(directory, old_name, new_name)

        logger.debug(f"[{self.name}] Moved {source} -> {target}")


def _is_other_entry(source: Path, target: Path) -> bool:
    """True when ``target`` exists and is not ``source`` itself."""
    if not os.path.lexists(target):
        return False
    try:
        return not os.path.samefile(source, target)
    except OSError:
        return True


def _is_alias(source: Path, target: Path) -> bool:
    """True when ``target`` resolves to ``source`` (case-insensitive filesystem)."""
    if not os.path.lexists(target):
        return False
    try:
        return os.path.samefile(source, target)
    except OSError:
        return False


class LocalMover(BaseMover):
    """Rename with the local filesystem."""

    @property
    def name(self) -> str:
        return "local"

    async def _rename(self, directory: Path, old_name: str, new_name: str) -> None:
        source = directory / old_name
        target = directory / new_name
        try:
            await asyncio.to_thread(os.rename, source, target)
        except OSError as e:
            raise MoveFailed(
                f"Rename {source} -> {target} failed: {e}",
                source=source,
                target=target,
                original_error=e,
            ) from e


class GitMover(BaseMover):
    """Rename with `git mv` so the checkout's index follows."""

    def __init__(self, git_executable: str = "git") -> None:
        self._git = git_executable

    @property
    def name(self) -> str:
        return "git"

    async def _rename(self, directory: Path, old_name: str, new_name: str) -> None:
        source = directory / old_name
        target = directory / new_name
        try:
            process = await asyncio.create_subprocess_exec(
                self._git, "mv", "--", old_name, new_name,
                cwd=str(directory),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            _, stderr = await process.communicate()
        except OSError as e:
            raise MoveFailed(
                f"Could not run {self._git} mv: {e}",
                source=source,
                target=target,
                original_error=e,
            ) from e

        if process.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            raise MoveFailed(
                f"git mv {source} -> {target} failed (exit {process.returncode}): {message}",
                source=source,
                target=target,
            )


def create_mover(use_git: bool = False) -> BaseMover:
    """Mover for the configured mode."""
    if use_git:
        return GitMover()
    return LocalMover()
