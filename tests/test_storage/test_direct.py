"""Unit tests for the direct filesystem adapter.

Covers:
- Writes create parents and overwrite
- Reads, existence checks and directory listings
- Removal of files and directories (recursive and not)
- Path normalisation and workspace escape
- Error mapping onto the StorageError family
"""

from __future__ import annotations

from pathlib import Path

import pytest

from libgen.errors import (
    DirectoryCreationError,
    NotFoundError,
    StorageError,
    WriteError,
)
from libgen.storage import DirectAdapter, StorageAdapter, normalise_path


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# normalise_path
# ---------------------------------------------------------------------------


class TestNormalisePath:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("libs/a.ts", "libs/a.ts"),
            ("./libs//b/../a.ts", "libs/a.ts"),
            ("libs\\win\\a.ts", "libs/win/a.ts"),
            ("/ws/libs/a.ts", "libs/a.ts"),
            ("/ws", ""),
            ("", ""),
            (".", ""),
        ],
    )
    def test_relative_posix(self, path, expected):
        assert normalise_path("/ws", path) == expected

    @pytest.mark.parametrize("path", ["..", "../x", "libs/../../x", "/other/x", "/wsx/a"])
    def test_rejects_paths_outside_workspace(self, path):
        with pytest.raises(StorageError, match="outside the workspace"):
            normalise_path("/ws", path)


# ---------------------------------------------------------------------------
# DirectAdapter
# ---------------------------------------------------------------------------


class TestDirectAdapter:
    def test_identity(self, direct_adapter, workspace: Path):
        assert isinstance(direct_adapter, StorageAdapter)
        assert direct_adapter.get_mode() == "direct"
        assert direct_adapter.get_workspace_root() == workspace.resolve().as_posix()

    async def test_write_creates_parents(self, direct_adapter, workspace: Path):
        await direct_adapter.write_file("libs/contract/product/src/index.ts", "export {};\n")
        assert (workspace / "libs/contract/product/src/index.ts").read_text() == "export {};\n"

    async def test_write_overwrites(self, direct_adapter, workspace: Path):
        await direct_adapter.write_file("a.txt", "one")
        await direct_adapter.write_file("a.txt", "two")
        assert await direct_adapter.read_file("a.txt") == "two"

    async def test_absolute_path_inside_root(self, direct_adapter, workspace: Path):
        await direct_adapter.write_file(str(workspace.resolve() / "x" / "y.txt"), "y")
        assert (workspace / "x" / "y.txt").is_file()

    async def test_write_into_directory_fails(self, direct_adapter, workspace: Path):
        (workspace / "dir").mkdir()
        with pytest.raises(WriteError) as exc_info:
            await direct_adapter.write_file("dir", "content")
        assert exc_info.value.path == "dir"
        assert exc_info.value.cause is not None

    async def test_write_below_a_file_fails(self, direct_adapter, workspace: Path):
        (workspace / "file.txt").write_text("x")
        with pytest.raises(DirectoryCreationError):
            await direct_adapter.write_file("file.txt/child.ts", "content")

    async def test_read_missing_file(self, direct_adapter):
        with pytest.raises(NotFoundError) as exc_info:
            await direct_adapter.read_file("missing.ts")
        assert "No such file or directory: missing.ts" in str(exc_info.value)

    async def test_exists(self, direct_adapter, workspace: Path):
        (workspace / "libs").mkdir()
        assert await direct_adapter.exists("libs")
        assert await direct_adapter.exists("nx.json")
        assert not await direct_adapter.exists("nope")

    async def test_make_directory_is_idempotent(self, direct_adapter, workspace: Path):
        await direct_adapter.make_directory("libs/a/b")
        await direct_adapter.make_directory("libs/a/b")
        assert (workspace / "libs/a/b").is_dir()

    async def test_make_directory_over_file_fails(self, direct_adapter, workspace: Path):
        (workspace / "taken").write_text("x")
        with pytest.raises(DirectoryCreationError):
            await direct_adapter.make_directory("taken/sub")

    async def test_list_directory_sorted(self, direct_adapter):
        await direct_adapter.write_file("d/b.ts", "")
        await direct_adapter.write_file("d/a.ts", "")
        await direct_adapter.make_directory("d/c")
        assert await direct_adapter.list_directory("d") == ["a.ts", "b.ts", "c"]

    async def test_list_directory_errors(self, direct_adapter):
        with pytest.raises(NotFoundError):
            await direct_adapter.list_directory("missing")
        with pytest.raises(StorageError, match="Not a directory"):
            await direct_adapter.list_directory("nx.json")

    async def test_remove_file(self, direct_adapter, workspace: Path):
        await direct_adapter.remove("nx.json")
        assert not (workspace / "nx.json").exists()

    async def test_remove_non_empty_directory_requires_recursive(self, direct_adapter, workspace: Path):
        await direct_adapter.write_file("d/a.ts", "")
        with pytest.raises(StorageError, match="Directory not empty"):
            await direct_adapter.remove("d")
        await direct_adapter.remove("d", recursive=True)
        assert not (workspace / "d").exists()

    async def test_remove_empty_directory(self, direct_adapter, workspace: Path):
        await direct_adapter.make_directory("empty")
        await direct_adapter.remove("empty")
        assert not (workspace / "empty").exists()

    async def test_remove_missing(self, direct_adapter):
        with pytest.raises(NotFoundError):
            await direct_adapter.remove("missing")

    async def test_refuses_to_remove_root(self, direct_adapter):
        with pytest.raises(StorageError, match="workspace root"):
            await direct_adapter.remove(".", recursive=True)

    async def test_escape_is_rejected(self, direct_adapter):
        with pytest.raises(StorageError, match="outside the workspace"):
            await direct_adapter.write_file("../escape.txt", "x")
