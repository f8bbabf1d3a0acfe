"""Integration tests for end-to-end library generation.

These tests run the real generator cores against a temporary workspace on
disk, through both storage adapters, and verify the resulting tree.
No TypeScript toolchain is required.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from libgen.errors import StorageError
from libgen.scaffolder import generate_library
from libgen.storage import BufferedAdapter, DirectAdapter


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _tree(root: Path) -> dict[str, str]:
    """Return every file below *root* as ``relative path -> content``."""
    return {
        path.relative_to(root).as_posix(): path.read_text(encoding="utf-8")
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


def _names(files: list[str]) -> set[str]:
    return {path.rsplit("/", 1)[1] for path in files}


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


@pytest.mark.integration
class TestScenarios:
    async def test_contract_with_cqrs(self, direct_adapter, workspace: Path):
        result = await generate_library(
            "contract", direct_adapter, {"name": "Product", "include_cqrs": True}
        )
        src = workspace / result.source_root
        for relative in (
            "lib/entities/product.ts",
            "lib/entities/index.ts",
            "lib/commands.ts",
            "lib/queries.ts",
            "lib/projections.ts",
            "index.ts",
        ):
            assert (src / relative).is_file()
            assert f"{result.source_root}/{relative}" in result.files_generated
        assert not any(path.endswith("rpc.ts") for path in result.files_generated)
        assert not list(src.rglob("rpc.ts"))

    @pytest.mark.parametrize(
        "flags",
        [
            {},
            {"platform": "universal", "include_client_server": True, "include_edge": True},
        ],
    )
    async def test_data_access_never_splits(self, direct_adapter, workspace: Path, flags):
        result = await generate_library("data-access", direct_adapter, {"name": "User", **flags})
        assert not _names(result.files_generated) & {"server.ts", "client.ts", "edge.ts"}
        src = workspace / result.source_root
        assert not any((src / name).exists() for name in ("server.ts", "client.ts", "edge.ts"))

    async def test_provider_platforms(self, workspace: Path):
        universal = await generate_library(
            "provider", DirectAdapter(workspace), {"name": "Stripe", "platform": "universal"}
        )
        assert {"server.ts", "client.ts"} <= _names(universal.files_generated)

        node = await generate_library(
            "provider",
            DirectAdapter(workspace),
            {"name": "Stripe", "platform": "node", "directory": "libs/node-only"},
        )
        names = _names(node.files_generated)
        assert "server.ts" in names
        assert "client.ts" not in names

    async def test_regeneration_is_idempotent(self, tmp_path: Path):
        trees = []
        results = []
        for attempt in ("first", "second"):
            root = tmp_path / attempt
            root.mkdir()
            result = await generate_library(
                "feature",
                DirectAdapter(root),
                {"name": "checkout", "include_rpc": True, "include_cqrs": True},
            )
            results.append(result.files_generated)
            trees.append(_tree(root))
        assert results[0] == results[1]
        assert trees[0] == trees[1]


# ---------------------------------------------------------------------------
# Adapters
# ---------------------------------------------------------------------------


@pytest.mark.integration
class TestAdapters:
    async def test_buffered_flush_matches_direct(self, tmp_path: Path):
        direct_root = tmp_path / "direct"
        buffered_root = tmp_path / "buffered"
        direct_root.mkdir()
        buffered_root.mkdir()
        options = {"name": "cache", "platform": "universal", "include_edge": True}

        await generate_library("infra", DirectAdapter(direct_root), options)
        buffered = BufferedAdapter(buffered_root)
        await generate_library("infra", buffered, options)

        assert _tree(buffered_root) == {}
        await buffered.flush()
        assert _tree(buffered_root) == _tree(direct_root)
        assert (buffered_root / "libs/infra/cache/src/lib").is_dir()

    async def test_buffered_discard_leaves_disk_untouched(self, buffered_adapter, workspace: Path):
        before = _tree(workspace)
        await generate_library("feature", buffered_adapter, {"name": "search"})
        buffered_adapter.discard()
        await buffered_adapter.flush()
        assert _tree(workspace) == before

    async def test_regeneration_overwrites(self, direct_adapter, workspace: Path):
        await generate_library("provider", direct_adapter, {"name": "Stripe"})
        readme = workspace / "libs/provider/stripe/README.md"
        readme.write_text("edited", encoding="utf-8")
        buffered = BufferedAdapter(workspace)
        await generate_library("provider", buffered, {"name": "Stripe"})
        kinds = {change.kind for change in buffered.list_changes()}
        assert kinds == {"update"}
        await buffered.flush()
        assert readme.read_text(encoding="utf-8").startswith("# @workspace/provider-stripe")

    async def test_direct_failure_keeps_partial_writes(self, workspace: Path):
        blocker = workspace / "libs" / "contract" / "product" / "src" / "lib" / "entities"
        blocker.parent.mkdir(parents=True)
        blocker.write_text("not a directory", encoding="utf-8")

        with pytest.raises(StorageError) as exc_info:
            await generate_library("contract", DirectAdapter(workspace), {"name": "product"})

        assert "lib/entities" in exc_info.value.path
        root = workspace / "libs" / "contract" / "product"
        assert (root / "package.json").is_file()
        assert not (root / "src" / "index.ts").exists()

    async def test_manifests_are_valid_json(self, direct_adapter, workspace: Path):
        result = await generate_library(
            "feature", direct_adapter, {"name": "checkout", "platform": "edge"}
        )
        root = workspace / result.project_root
        for name in ("package.json", "tsconfig.json", "tsconfig.lib.json", "project.json"):
            json.loads((root / name).read_text(encoding="utf-8"))
        project = json.loads((root / "project.json").read_text(encoding="utf-8"))
        assert project["name"] == "feature-checkout"
        assert "platform:edge" in project["tags"]
