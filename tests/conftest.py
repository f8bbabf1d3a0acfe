"""Shared pytest fixtures for the libgen test suite.

Provides reusable fixtures for:
- Temporary workspace directories
- Direct and buffered storage adapters rooted in the workspace
- Workspace configuration and pre-built template contexts
"""

from __future__ import annotations

from pathlib import Path

import pytest

from libgen.config import WorkspaceConfig
from libgen.kinds import LibraryKind
from libgen.metadata import MetadataOverrides, compute_metadata
from libgen.naming import derive_naming
from libgen.platform import resolve_flags
from libgen.scaffolder.context import TemplateContext
from libgen.storage import BufferedAdapter, DirectAdapter


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Temporary monorepo root (auto-cleanup)."""
    root = tmp_path / "workspace"
    root.mkdir()
    (root / "nx.json").write_text("{}\n", encoding="utf-8")
    yield root


@pytest.fixture
def workspace_config(workspace: Path) -> WorkspaceConfig:
    return WorkspaceConfig(workspace_root=str(workspace))


# ---------------------------------------------------------------------------
# Storage adapters
# ---------------------------------------------------------------------------


@pytest.fixture
def direct_adapter(workspace: Path) -> DirectAdapter:
    return DirectAdapter(workspace)


@pytest.fixture
def buffered_adapter(workspace: Path) -> BufferedAdapter:
    return BufferedAdapter(workspace)


# ---------------------------------------------------------------------------
# Template contexts
# ---------------------------------------------------------------------------


@pytest.fixture
def make_context():
    """Factory building a ``TemplateContext`` the way the generator cores do."""

    def _make(
        kind: LibraryKind | str,
        name: str = "Product",
        *,
        scope: str = "@workspace",
        entities: tuple[str, ...] = (),
        external_service: str | None = None,
        contract_package: str | None = None,
        **flag_options,
    ) -> TemplateContext:
        kind = LibraryKind(kind)
        naming = derive_naming(name)
        flags = resolve_flags(kind, **flag_options)
        config = WorkspaceConfig(workspace_root="/ws", scope=scope)
        metadata = compute_metadata(
            naming, kind, config, MetadataOverrides(platform=flags.platform)
        )
        return TemplateContext(
            kind=kind,
            naming=naming,
            metadata=metadata,
            flags=flags,
            scope=scope,
            entities=entities,
            external_service=external_service,
            contract_package=contract_package,
        )

    return _make
