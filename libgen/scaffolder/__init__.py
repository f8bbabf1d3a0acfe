"""libgen scaffolder -- generates monorepo libraries by kind.

Each kind has a generator core that writes a complete TypeScript library
(manifests, sources, barrel) through a storage adapter.

Quick usage::

    from libgen.scaffolder import generate_library
    from libgen.storage import BufferedAdapter

    adapter = BufferedAdapter("/path/to/workspace")
    result = await generate_library(
        "contract", adapter, {"name": "product", "include_cqrs": True}
    )
    await adapter.flush()
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from libgen.config import WorkspaceConfig
from libgen.errors import UnsupportedKindError
from libgen.kinds import LibraryKind
from libgen.scaffolder.contract import ContractGenerator, ContractOptions, generate_contract
from libgen.scaffolder.data_access import DataAccessGenerator, DataAccessOptions, generate_data_access
from libgen.scaffolder.feature import FeatureGenerator, FeatureOptions, generate_feature
from libgen.scaffolder.generator import (
    GROUP_ORDER,
    GeneratedFile,
    GeneratorOptions,
    GeneratorResult,
    LibraryGenerator,
)
from libgen.scaffolder.infra import InfraGenerator, InfraOptions, generate_infra
from libgen.scaffolder.infrastructure import InfrastructureOptions, generate_infrastructure_files
from libgen.scaffolder.provider import ProviderGenerator, ProviderOptions, generate_provider
from libgen.scaffolder.templates import TemplateRenderer
from libgen.storage.adapter import StorageAdapter

GENERATORS: dict[LibraryKind, LibraryGenerator] = {
    LibraryKind.CONTRACT: ContractGenerator(),
    LibraryKind.DATA_ACCESS: DataAccessGenerator(),
    LibraryKind.FEATURE: FeatureGenerator(),
    LibraryKind.INFRA: InfraGenerator(),
    LibraryKind.PROVIDER: ProviderGenerator(),
}


def get_generator(kind: LibraryKind | str) -> LibraryGenerator:
    """Return the generator core for *kind*.

    Raises:
        UnsupportedKindError: If *kind* names no known library kind.
    """
    try:
        return GENERATORS[LibraryKind(kind)]
    except (KeyError, ValueError) as exc:
        raise UnsupportedKindError(kind) from exc


async def generate_library(
    kind: LibraryKind | str,
    adapter: StorageAdapter,
    options: GeneratorOptions | Mapping[str, Any],
    workspace: WorkspaceConfig | Mapping[str, Any] | None = None,
) -> GeneratorResult:
    """Generate a library of *kind* through *adapter*."""
    return await get_generator(kind).generate(adapter, options, workspace)


__all__ = [
    "GENERATORS",
    "GROUP_ORDER",
    "ContractGenerator",
    "ContractOptions",
    "DataAccessGenerator",
    "DataAccessOptions",
    "FeatureGenerator",
    "FeatureOptions",
    "GeneratedFile",
    "GeneratorOptions",
    "GeneratorResult",
    "InfraGenerator",
    "InfraOptions",
    "InfrastructureOptions",
    "LibraryGenerator",
    "ProviderGenerator",
    "ProviderOptions",
    "TemplateRenderer",
    "generate_contract",
    "generate_data_access",
    "generate_feature",
    "generate_infra",
    "generate_infrastructure_files",
    "generate_library",
    "generate_provider",
    "get_generator",
]
