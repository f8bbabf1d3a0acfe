"""Data-access library generator core.

Data-access libraries have no platform split: CQRS, RPC and platform flags
are accepted for a uniform call shape but never change the output.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from ..kinds import LibraryKind, PlatformType
from .context import TemplateContext
from .generator import FileGroup, FileSpec, GeneratorOptions, LibraryGenerator
from .typescript import data_access as templates


class DataAccessOptions(GeneratorOptions):
    contract_package: str | None = Field(
        default=None,
        description="Package providing the repository port; defaults to <scope>/contract-<name>",
    )
    # Ignored; accepted so every kind takes the same flags.
    platform: PlatformType | None = None
    include_client_server: bool | None = None
    include_cqrs: bool = False
    include_rpc: bool = False
    include_edge: bool = False


def _core_files(ctx: TemplateContext) -> list[FileSpec]:
    return [
        FileSpec("lib/shared/errors.ts", templates.generate_errors),
        FileSpec("lib/shared/types.ts", templates.generate_shared_types),
        FileSpec("lib/shared/validation.ts", templates.generate_validation),
        FileSpec("lib/queries.ts", templates.generate_queries),
        FileSpec("lib/repository.ts", templates.generate_repository),
        FileSpec("lib/repository.spec.ts", templates.generate_repository_spec),
        FileSpec("lib/layers.ts", templates.generate_layers),
        FileSpec("lib/layers.spec.ts", templates.generate_layers_spec),
        FileSpec("types.ts", templates.generate_types),
    ]


class DataAccessGenerator(LibraryGenerator):
    """Repository implementation for a contract's port."""

    kind = LibraryKind.DATA_ACCESS
    options_model = DataAccessOptions
    groups = (FileGroup("core", _core_files),)
    index = staticmethod(templates.generate_index)

    def extras(self, options: DataAccessOptions) -> dict[str, Any]:
        return {"contract_package": options.contract_package}

    def dependencies(self, ctx: TemplateContext) -> dict[str, str]:
        return {"effect": "^3.0.0", templates.contract_package(ctx): "workspace:*"}

    def usage_type(self, ctx: TemplateContext) -> str:
        return f"{ctx.class_name}Filter"


async def generate_data_access(adapter, options, workspace=None):
    """Generate a data-access library; see :meth:`LibraryGenerator.generate`."""
    return await DataAccessGenerator().generate(adapter, options, workspace)
