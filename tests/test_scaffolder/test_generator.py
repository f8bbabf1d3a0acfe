"""Tests for the generator core machinery and kind dispatch.

Covers:
- FileGroup validation and gating
- Option parsing and error mapping
- Dispatch by kind, including unsupported kinds
- Infrastructure first, index last, write failures abort
- Deterministic regeneration
"""

from __future__ import annotations

import pytest

from libgen.errors import ConfigurationError, InvalidNameError, StorageError, UnsupportedKindError, WriteError
from libgen.kinds import LibraryKind, PlatformType
from libgen.platform import FeatureFlags
from libgen.scaffolder import (
    GENERATORS,
    FeatureGenerator,
    GeneratorOptions,
    generate_library,
    get_generator,
)
from libgen.scaffolder.generator import GROUP_ORDER, FileGroup, FileSpec, gitkeep
from libgen.scaffolder.infrastructure import INFRASTRUCTURE_FILES
from libgen.storage import BufferedAdapter


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

pytestmark = pytest.mark.unit


class FailingAdapter(BufferedAdapter):
    """Buffered adapter whose writes fail once a path matches."""

    def __init__(self, workspace_root, fail_on: str) -> None:
        super().__init__(workspace_root)
        self.fail_on = fail_on
        self.attempted: list[str] = []

    async def write_file(self, path: str, content: str) -> None:
        self.attempted.append(path)
        if path.endswith(self.fail_on):
            raise WriteError(path, PermissionError(path))
        await super().write_file(path, content)


# ---------------------------------------------------------------------------
# File table
# ---------------------------------------------------------------------------


class TestFileTable:
    def test_unknown_group_name(self):
        with pytest.raises(ValueError, match="Unknown file group"):
            FileGroup("desktop", lambda ctx: [])

    def test_group_gating(self):
        flags = FeatureFlags(platform=PlatformType.NODE, include_server=True)
        assert FileGroup("core", lambda ctx: []).enabled(flags)
        assert FileGroup("server", lambda ctx: []).enabled(flags)
        assert not FileGroup("client", lambda ctx: []).enabled(flags)

    def test_gitkeep_is_empty(self, make_context):
        spec = gitkeep("lib/server/commands")
        assert spec == FileSpec("lib/server/commands/.gitkeep")
        assert spec.render(make_context("feature")) == ""

    def test_groups_are_ordered(self):
        for generator in GENERATORS.values():
            names = [group.name for group in generator.ordered_groups()]
            assert names == [name for name in GROUP_ORDER if name in names]


# ---------------------------------------------------------------------------
# Dispatch and options
# ---------------------------------------------------------------------------


class TestDispatch:
    def test_every_kind_has_a_generator(self):
        assert set(GENERATORS) == set(LibraryKind)
        for kind, generator in GENERATORS.items():
            assert get_generator(kind.value) is generator
            assert generator.kind is kind

    def test_unsupported_kind(self):
        with pytest.raises(UnsupportedKindError, match="desktop"):
            get_generator("desktop")

    async def test_invalid_name(self, buffered_adapter):
        with pytest.raises(InvalidNameError):
            await generate_library("feature", buffered_adapter, {"name": "  "})
        assert buffered_adapter.list_changes() == []

    async def test_invalid_options(self, buffered_adapter):
        with pytest.raises(ConfigurationError, match="Invalid feature options"):
            await generate_library("feature", buffered_adapter, {"name": "x", "platform": "desktop"})

    async def test_invalid_workspace(self, buffered_adapter):
        with pytest.raises(ConfigurationError):
            await generate_library("infra", buffered_adapter, {"name": "x"}, {"scope": "bad"})
        assert buffered_adapter.list_changes() == []

    def test_base_options_model_is_accepted(self):
        generator = FeatureGenerator()
        parsed = generator.parse_options(GeneratorOptions(name="auth", tags="team:a"))
        assert parsed.name == "auth"
        assert parsed.platform is None


# ---------------------------------------------------------------------------
# Emission order
# ---------------------------------------------------------------------------


class TestEmission:
    @pytest.mark.parametrize("kind", list(LibraryKind))
    async def test_infrastructure_first_index_last(self, buffered_adapter, kind):
        result = await generate_library(kind, buffered_adapter, {"name": "sample"})
        head = [path.rsplit("/", 1)[1] for path in result.files_generated[: len(INFRASTRUCTURE_FILES)]]
        assert head == [file_name for _, file_name in INFRASTRUCTURE_FILES]
        assert result.files_generated[-1] == f"{result.source_root}/index.ts"
        assert len(result.files_generated) == len(set(result.files_generated))

    @pytest.mark.parametrize("kind", list(LibraryKind))
    async def test_reported_files_match_writes(self, buffered_adapter, kind):
        result = await generate_library(kind, buffered_adapter, {"name": "sample"})
        written = [change.path for change in buffered_adapter.list_changes()]
        assert sorted(written) == sorted(result.files_generated)

    async def test_custom_workspace(self, buffered_adapter):
        result = await generate_library(
            "provider",
            buffered_adapter,
            {"name": "stripe", "directory": "packages/vendors"},
            {"scope": "@acme"},
        )
        assert result.project_root == "packages/vendors/stripe"
        assert result.package_name == "@acme/provider-stripe"

    async def test_failure_aborts_before_index(self, workspace):
        adapter = FailingAdapter(workspace, fail_on="lib/errors.ts")
        with pytest.raises(StorageError):
            await generate_library("contract", adapter, {"name": "product"})
        assert not any(path.endswith("src/index.ts") for path in adapter.attempted)
        assert await adapter.exists("libs/contract/product/package.json")


# ---------------------------------------------------------------------------
# Determinism
# ---------------------------------------------------------------------------


class TestDeterminism:
    @pytest.mark.parametrize(
        ("kind", "options"),
        [
            ("contract", {"name": "Product", "include_cqrs": True, "include_rpc": True}),
            ("data-access", {"name": "User"}),
            ("feature", {"name": "checkout", "include_rpc": True, "include_edge": True}),
            ("infra", {"name": "cache", "platform": "universal"}),
            ("provider", {"name": "Stripe", "platform": "universal"}),
        ],
    )
    async def test_regeneration_is_identical(self, workspace, kind, options):
        first = BufferedAdapter(workspace)
        second = BufferedAdapter(workspace)
        first_result = await generate_library(kind, first, options)
        second_result = await generate_library(kind, second, options)
        assert first_result.files_generated == second_result.files_generated
        assert first.list_changes() == second.list_changes()
