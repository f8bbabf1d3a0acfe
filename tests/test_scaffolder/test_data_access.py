"""Tests for data-access library templates and generator core."""

from __future__ import annotations

import json

import pytest

from libgen.scaffolder import generate_data_access, generate_library
from libgen.scaffolder.typescript import data_access as templates
from libgen.storage import BufferedAdapter


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

pytestmark = pytest.mark.unit

SRC = "libs/data-access/user/src"


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


class TestDataAccessTemplates:
    def test_contract_package_default(self, make_context):
        assert templates.contract_package(make_context("data-access", "User")) == "@workspace/contract-user"

    def test_contract_package_override(self, make_context):
        ctx = make_context("data-access", "User", contract_package="@acme/contract-accounts")
        assert templates.contract_package(ctx) == "@acme/contract-accounts"
        assert 'from "@acme/contract-accounts";' in templates.generate_repository(ctx)

    def test_errors_use_repository_suffix(self, make_context):
        content = templates.generate_errors(make_context("data-access", "User"))
        assert "export class UserRepositoryError extends Data.TaggedError" in content
        assert "export type UserRepositoryErrors =" in content
        assert "export class UserConflictError" in content

    def test_repository_layers_object(self, make_context):
        content = templates.generate_repository(make_context("data-access", "User"))
        assert "export const UserRepositoryLayers = {" in content
        for variant in ("Live", "Test", "Dev"):
            assert f"  {variant}: Layer.effect(UserRepository, make)," in content

    def test_layers_read_from_repository_layers(self, make_context):
        content = templates.generate_layers(make_context("data-access", "User"))
        assert 'import { UserRepositoryLayers } from "./repository";' in content
        assert "export const UserRepositoryLive = UserRepositoryLayers.Live;" in content
        assert "export const UserRepositoryDev = UserRepositoryLayers.Dev;" in content
        assert "      : UserRepositoryDev;" in content

    def test_queries(self, make_context):
        content = templates.generate_queries(make_context("data-access", "User"))
        assert "export const buildUserQuery = (" in content

    def test_index_has_no_platform_entries(self, make_context):
        content = templates.generate_index(make_context("data-access", "User"))
        assert 'export * from "./lib/repository";' in content
        assert "server" not in content


# ---------------------------------------------------------------------------
# Generator core
# ---------------------------------------------------------------------------


class TestDataAccessGenerator:
    async def test_files(self, buffered_adapter):
        result = await generate_data_access(buffered_adapter, {"name": "User"})
        relative = [p[len(SRC) + 1:] for p in result.files_generated if p.startswith(f"{SRC}/")]
        assert relative == [
            "lib/shared/errors.ts",
            "lib/shared/types.ts",
            "lib/shared/validation.ts",
            "lib/queries.ts",
            "lib/repository.ts",
            "lib/repository.spec.ts",
            "lib/layers.ts",
            "lib/layers.spec.ts",
            "types.ts",
            "index.ts",
        ]

    @pytest.mark.parametrize(
        "flags",
        [
            {},
            {"platform": "universal", "include_client_server": True},
            {"include_edge": True, "include_rpc": True, "include_cqrs": True},
        ],
    )
    async def test_never_platform_splits(self, buffered_adapter, flags):
        result = await generate_library("data-access", buffered_adapter, {"name": "User", **flags})
        names = {path.rsplit("/", 1)[1] for path in result.files_generated}
        assert not names & {"server.ts", "client.ts", "edge.ts", "rpc.ts"}

    async def test_flags_do_not_change_output(self, workspace):
        plain = BufferedAdapter(workspace)
        flagged = BufferedAdapter(workspace)
        await generate_data_access(plain, {"name": "User"})
        await generate_data_access(
            flagged, {"name": "User", "platform": "edge", "include_client_server": True, "include_rpc": True}
        )
        assert plain.list_changes() == flagged.list_changes()

    async def test_contract_dependency(self, buffered_adapter):
        result = await generate_data_access(
            buffered_adapter, {"name": "User"}, {"scope": "@acme"}
        )
        package = json.loads(await buffered_adapter.read_file(f"{result.project_root}/package.json"))
        assert package["dependencies"]["@acme/contract-user"] == "workspace:*"
        readme = await buffered_adapter.read_file(f"{result.project_root}/README.md")
        assert "import type { UserFilter }" in readme
