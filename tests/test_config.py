"""Unit tests for libgen.config.

Covers:
- WorkspaceConfig defaults and validation
- resolve_workspace_config with explicit, mapping and missing input
- LibgenConfig environment loading and JSON round trip
"""

from __future__ import annotations

from pathlib import Path

import pytest

from libgen.config import (
    DEFAULT_LIBRARIES_ROOT,
    DEFAULT_SCOPE,
    LibgenConfig,
    WorkspaceConfig,
    resolve_workspace_config,
)
from libgen.errors import ConfigurationError


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# WorkspaceConfig
# ---------------------------------------------------------------------------


class TestWorkspaceConfig:
    def test_defaults(self):
        config = WorkspaceConfig(workspace_root="/ws")
        assert config.scope == DEFAULT_SCOPE == "@workspace"
        assert config.libraries_root == DEFAULT_LIBRARIES_ROOT == "libs"

    def test_libraries_root_is_trimmed(self):
        config = WorkspaceConfig(workspace_root="/ws", libraries_root="packages/")
        assert config.libraries_root == "packages"

    @pytest.mark.parametrize("libraries_root", ["./packages", "packages//", "./packages/."])
    def test_libraries_root_segments_are_normalised(self, libraries_root):
        config = WorkspaceConfig(workspace_root="/ws", libraries_root=libraries_root)
        assert config.libraries_root == "packages"

    @pytest.mark.parametrize("scope", ["acme", "@", "@Acme", "@acme/core"])
    def test_rejects_bad_scope(self, scope):
        with pytest.raises(ValueError):
            WorkspaceConfig(workspace_root="/ws", scope=scope)

    @pytest.mark.parametrize("libraries_root", ["", "/", "/abs/libs", "../outside"])
    def test_rejects_bad_libraries_root(self, libraries_root):
        with pytest.raises(ValueError):
            WorkspaceConfig(workspace_root="/ws", libraries_root=libraries_root)


# ---------------------------------------------------------------------------
# resolve_workspace_config
# ---------------------------------------------------------------------------


class TestResolveWorkspaceConfig:
    def test_none_uses_defaults_at_root(self):
        config = resolve_workspace_config("/ws")
        assert config.workspace_root == "/ws"
        assert config.scope == "@workspace"

    def test_mapping_overrides(self):
        config = resolve_workspace_config("/ws", {"scope": "@acme", "libraries_root": "packages"})
        assert config.workspace_root == "/ws"
        assert config.scope == "@acme"
        assert config.libraries_root == "packages"

    def test_explicit_config_is_returned_unchanged(self):
        explicit = WorkspaceConfig(workspace_root="/elsewhere", scope="@acme")
        assert resolve_workspace_config("/ws", explicit) is explicit

    def test_invalid_mapping_raises_configuration_error(self):
        with pytest.raises(ConfigurationError, match="Invalid workspace configuration"):
            resolve_workspace_config("/ws", {"scope": "no-at-sign"})

    def test_non_mapping_raises_configuration_error(self):
        with pytest.raises(ConfigurationError, match="must be a mapping"):
            resolve_workspace_config("/ws", ["@acme"])


# ---------------------------------------------------------------------------
# LibgenConfig
# ---------------------------------------------------------------------------


class TestLibgenConfig:
    def test_from_env_defaults(self, monkeypatch):
        for name in ("LIBGEN_WORKSPACE_ROOT", "LIBGEN_SCOPE", "LIBGEN_LIBRARIES_ROOT"):
            monkeypatch.delenv(name, raising=False)
        config = LibgenConfig.from_env()
        assert config.workspace_root == Path(".")
        assert config.scope == "@workspace"
        assert config.libraries_root == "libs"

    def test_from_env_reads_variables(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LIBGEN_WORKSPACE_ROOT", str(tmp_path))
        monkeypatch.setenv("LIBGEN_SCOPE", "@acme")
        monkeypatch.setenv("LIBGEN_LIBRARIES_ROOT", "packages")
        config = LibgenConfig.from_env()
        workspace = config.workspace()
        assert workspace.workspace_root == str(tmp_path)
        assert workspace.scope == "@acme"
        assert workspace.libraries_root == "packages"

    def test_workspace_validates(self):
        config = LibgenConfig(scope="bad")
        with pytest.raises(ConfigurationError):
            config.workspace()

    def test_save_and_load(self, tmp_path):
        config = LibgenConfig(workspace_root=tmp_path, scope="@acme")
        written = config.save()
        assert written == tmp_path / ".libgen.json"
        loaded = LibgenConfig.load(written)
        assert loaded.scope == "@acme"
        assert loaded.workspace_root == tmp_path

    def test_load_rejects_invalid_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text('{"scope": 42}', encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Invalid configuration file"):
            LibgenConfig.load(path)
