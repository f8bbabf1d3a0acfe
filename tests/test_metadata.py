"""Unit tests for libgen.metadata."""

from __future__ import annotations

import pytest

from libgen.config import WorkspaceConfig
from libgen.errors import ConfigurationError
from libgen.kinds import LibraryKind, PlatformType
from libgen.metadata import (
    MetadataOverrides,
    compute_metadata,
    default_tags,
    offset_from_root,
    parse_tags,
)
from libgen.naming import derive_naming


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

pytestmark = pytest.mark.unit


@pytest.fixture
def config() -> WorkspaceConfig:
    return WorkspaceConfig(workspace_root="/ws")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestOffsetFromRoot:
    @pytest.mark.parametrize(
        ("project_root", "expected"),
        [
            ("libs/contract/user", "../../../"),
            ("apps/web", "../../"),
            ("tools", "../"),
        ],
    )
    def test_one_segment_per_level(self, project_root, expected):
        assert offset_from_root(project_root) == expected


class TestParseTags:
    def test_none_keeps_defaults(self):
        assert parse_tags(None, ["a", "b"]) == ("a", "b")

    def test_comma_separated_string(self):
        assert parse_tags("x, y ,,", ["a"]) == ("a", "x", "y")

    def test_list_is_deduplicated_in_order(self):
        assert parse_tags(["b", "c", "a"], ["a", "b"]) == ("a", "b", "c")


class TestDefaultTags:
    def test_contract(self):
        tags = default_tags(LibraryKind.CONTRACT, derive_naming("Product"), PlatformType.UNIVERSAL)
        assert tags == ["type:contract", "domain:product", "platform:universal"]

    def test_data_access_is_server_only(self):
        tags = default_tags(LibraryKind.DATA_ACCESS, derive_naming("User"), PlatformType.BROWSER)
        assert "platform:server" in tags

    def test_other_kinds_use_platform(self):
        tags = default_tags(LibraryKind.PROVIDER, derive_naming("Stripe"), PlatformType.EDGE)
        assert tags == ["type:provider", "scope:shared", "platform:edge"]


# ---------------------------------------------------------------------------
# compute_metadata
# ---------------------------------------------------------------------------


class TestComputeMetadata:
    def test_contract_defaults(self, config):
        metadata = compute_metadata(derive_naming("Product"), LibraryKind.CONTRACT, config)
        assert metadata.project_name == "contract-product"
        assert metadata.project_root == "libs/contract/product"
        assert metadata.source_root == "libs/contract/product/src"
        assert metadata.package_name == "@workspace/contract-product"
        assert metadata.offset_from_root == "../../../"
        assert metadata.description == "Contract library for Product"

    def test_data_access_directory(self, config):
        metadata = compute_metadata(derive_naming("user"), LibraryKind.DATA_ACCESS, config)
        assert metadata.project_root == "libs/data-access/user"
        assert metadata.description == "Data access library for User"

    def test_scope_and_libraries_root(self):
        config = WorkspaceConfig(workspace_root="/ws", scope="@acme", libraries_root="packages")
        metadata = compute_metadata(derive_naming("Stripe"), LibraryKind.PROVIDER, config)
        assert metadata.package_name == "@acme/provider-stripe"
        assert metadata.project_root == "packages/provider/stripe"

    def test_directory_override(self, config):
        metadata = compute_metadata(
            derive_naming("auth"),
            LibraryKind.FEATURE,
            config,
            MetadataOverrides(directory="/apps/shared/"),
        )
        assert metadata.project_root == "apps/shared/auth"
        assert metadata.offset_from_root == "../../../"
        assert metadata.project_name == "feature-auth"

    @pytest.mark.parametrize("directory", ["./libs/shared", "libs//shared", "libs/./shared/"])
    def test_directory_segments_are_normalised(self, config, directory):
        metadata = compute_metadata(
            derive_naming("cache"), LibraryKind.INFRA, config, MetadataOverrides(directory=directory)
        )
        assert metadata.project_root == "libs/shared/cache"
        assert metadata.offset_from_root == "../../../"

    def test_description_and_tags_override(self, config):
        metadata = compute_metadata(
            derive_naming("cache"),
            LibraryKind.INFRA,
            config,
            MetadataOverrides(description="Caching", tags="team:core", platform=PlatformType.EDGE),
        )
        assert metadata.description == "Caching"
        assert metadata.tags == ("type:infra", "scope:shared", "platform:edge", "team:core")

    @pytest.mark.parametrize("directory", ["../escape", "   ", "libs/../../x"])
    def test_rejects_bad_directory(self, config, directory):
        with pytest.raises(ConfigurationError):
            compute_metadata(
                derive_naming("a"), LibraryKind.INFRA, config, MetadataOverrides(directory=directory)
            )

    def test_rejects_raw_mapping_workspace(self):
        with pytest.raises(ConfigurationError):
            compute_metadata(derive_naming("a"), LibraryKind.INFRA, {"workspace_root": "/ws"})
