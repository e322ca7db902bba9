"""
Mover Tests.

============================================================
PURPOSE
============================================================
- Plain and case-only renames
- Refusal to overwrite an existing target
- `git mv` keeps the index in sync (skipped without git)

============================================================
"""

import shutil
import subprocess

import pytest

from asset_sanity.exceptions import MoveFailed
from asset_sanity.filesystem import GitMover, LocalMover, create_mover, strip_temp_suffix
from tests.asset_sanity.fakes import CHECKSUM_ADDRESS, LOWERCASE_ADDRESS, entries


requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def _git(cwd, *args):
    return subprocess.run(
        ["git", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    ).stdout


@pytest.fixture
def git_repo(tmp_path):
    _git(tmp_path, "init", "-q")
    _git(tmp_path, "config", "user.email", "tests@example.org")
    _git(tmp_path, "config", "user.name", "tests")
    _git(tmp_path, "config", "core.ignorecase", "false")
    return tmp_path


# ============================================================
# LOCAL MOVER TESTS
# ============================================================

class TestLocalMover:
    """Tests for LocalMover."""

    @pytest.mark.asyncio
    async def test_rename_file(self, tmp_path):
        (tmp_path / "logo.jpg").write_bytes(b"x")

        await LocalMover().move(tmp_path, "logo.jpg", "logo.png")

        assert entries(tmp_path) == {"logo.png"}
        assert (tmp_path / "logo.png").read_bytes() == b"x"

    @pytest.mark.asyncio
    async def test_case_only_rename(self, tmp_path):
        (tmp_path / LOWERCASE_ADDRESS).mkdir()
        (tmp_path / LOWERCASE_ADDRESS / "logo.png").write_bytes(b"x")

        await LocalMover().move(tmp_path, LOWERCASE_ADDRESS, CHECKSUM_ADDRESS)

        assert entries(tmp_path) == {CHECKSUM_ADDRESS}
        assert entries(tmp_path / CHECKSUM_ADDRESS) == {"logo.png"}

    @pytest.mark.asyncio
    async def test_same_name_is_noop(self, tmp_path):
        (tmp_path / "logo.png").write_bytes(b"x")

        await LocalMover().move(tmp_path, "logo.png", "logo.png")

        assert entries(tmp_path) == {"logo.png"}

    @pytest.mark.asyncio
    async def test_existing_target_not_overwritten(self, tmp_path):
        (tmp_path / "logo.jpg").write_bytes(b"old")
        (tmp_path / "logo.png").write_bytes(b"keep")

        with pytest.raises(MoveFailed) as exc_info:
            await LocalMover().move(tmp_path, "logo.jpg", "logo.png")

        assert "target already exists" in exc_info.value.message
        assert exc_info.value.source == str(tmp_path / "logo.jpg")
        assert exc_info.value.target == str(tmp_path / "logo.png")
        assert (tmp_path / "logo.png").read_bytes() == b"keep"
        assert (tmp_path / "logo.jpg").read_bytes() == b"old"

    @pytest.mark.asyncio
    async def test_missing_source(self, tmp_path):
        with pytest.raises(MoveFailed) as exc_info:
            await LocalMover().move(tmp_path, "logo.jpg", "logo.png")

        assert "source does not exist" in exc_info.value.message

    def test_error_serializes_paths(self, tmp_path):
        error = MoveFailed("boom", source=tmp_path / "a", target=tmp_path / "b")

        data = error.to_dict()

        assert data["error_type"] == "MoveFailed"
        assert data["source"] == str(tmp_path / "a")
        assert data["target"] == str(tmp_path / "b")


# ============================================================
# GIT MOVER TESTS
# ============================================================

@requires_git
class TestGitMover:
    """Tests for GitMover against a throwaway repository."""

    @pytest.mark.asyncio
    async def test_tracked_rename(self, git_repo):
        (git_repo / "logo.jpg").write_bytes(b"x")
        _git(git_repo, "add", "logo.jpg")

        await GitMover().move(git_repo, "logo.jpg", "logo.png")

        assert entries(git_repo) - {".git"} == {"logo.png"}
        staged = _git(git_repo, "diff", "--cached", "--name-only").split()
        assert staged == ["logo.png"]

    @pytest.mark.asyncio
    async def test_case_only_directory_rename(self, git_repo):
        asset = git_repo / LOWERCASE_ADDRESS
        asset.mkdir()
        (asset / "logo.png").write_bytes(b"x")
        _git(git_repo, "add", ".")

        await GitMover().move(git_repo, LOWERCASE_ADDRESS, CHECKSUM_ADDRESS)

        assert entries(git_repo) - {".git"} == {CHECKSUM_ADDRESS}
        tracked = _git(git_repo, "ls-files").split()
        assert tracked == [f"{CHECKSUM_ADDRESS}/logo.png"]

    @pytest.mark.asyncio
    async def test_untracked_source_fails(self, git_repo):
        (git_repo / "logo.jpg").write_bytes(b"x")

        with pytest.raises(MoveFailed) as exc_info:
            await GitMover().move(git_repo, "logo.jpg", "logo.png")

        assert "git mv" in exc_info.value.message
        assert (git_repo / "logo.jpg").exists()

    @pytest.mark.asyncio
    async def test_missing_executable(self, git_repo):
        (git_repo / "logo.jpg").write_bytes(b"x")

        with pytest.raises(MoveFailed):
            await GitMover(git_executable="git-does-not-exist").move(git_repo, "logo.jpg", "logo.png")


def test_create_mover():
    assert isinstance(create_mover(False), LocalMover)
    assert isinstance(create_mover(True), GitMover)


class CountingMover(LocalMover):
    """LocalMover that counts low-level renames."""

    def __init__(self):
        self.renames = []

    async def _rename(self, directory, old_name, new_name):
        self.renames.append((old_name, new_name))
        await super()._rename(directory, old_name, new_name)


class TestRenameSteps:
    """Temporary names are only used for case-insensitive aliases."""

    @pytest.mark.asyncio
    async def test_case_only_rename_single_step_when_case_sensitive(self, tmp_path, case_sensitive_fs):
        if not case_sensitive_fs:
            pytest.skip("needs a case-sensitive filesystem")
        (tmp_path / LOWERCASE_ADDRESS).mkdir()
        mover = CountingMover()

        await mover.move(tmp_path, LOWERCASE_ADDRESS, CHECKSUM_ADDRESS)

        assert mover.renames == [(LOWERCASE_ADDRESS, CHECKSUM_ADDRESS)]

    @pytest.mark.asyncio
    async def test_alias_goes_through_temp_name(self, tmp_path, case_sensitive_fs):
        if case_sensitive_fs:
            pytest.skip("needs a case-insensitive filesystem")
        (tmp_path / LOWERCASE_ADDRESS).mkdir()
        mover = CountingMover()

        await mover.move(tmp_path, LOWERCASE_ADDRESS, CHECKSUM_ADDRESS)

        temp_name = CHECKSUM_ADDRESS + ".rename-tmp"
        assert mover.renames == [(LOWERCASE_ADDRESS, temp_name), (temp_name, CHECKSUM_ADDRESS)]
        assert entries(tmp_path) == {CHECKSUM_ADDRESS}

    @pytest.mark.asyncio
    async def test_alias_with_temp_name_in_use(self, tmp_path, case_sensitive_fs):
        if case_sensitive_fs:
            pytest.skip("needs a case-insensitive filesystem")
        (tmp_path / LOWERCASE_ADDRESS).mkdir()
        (tmp_path / (CHECKSUM_ADDRESS + ".rename-tmp")).mkdir()

        with pytest.raises(MoveFailed) as exc_info:
            await LocalMover().move(tmp_path, LOWERCASE_ADDRESS, CHECKSUM_ADDRESS)

        assert "is in use" in exc_info.value.message


def test_strip_temp_suffix():
    assert strip_temp_suffix(CHECKSUM_ADDRESS + ".rename-tmp") == CHECKSUM_ADDRESS
    assert strip_temp_suffix(CHECKSUM_ADDRESS) == CHECKSUM_ADDRESS
