"""Infrastructure library generator core."""

from __future__ import annotations

from pydantic import Field

from ..kinds import LibraryKind, PlatformType
from ..platform import FeatureFlags, resolve_flags
from .context import TemplateContext
from .generator import FileGroup, FileSpec, GeneratorOptions, LibraryGenerator
from .typescript import infra as templates


class InfraOptions(GeneratorOptions):
    platform: PlatformType | None = Field(default=None, description="Defaults to node")
    include_client_server: bool | None = None
    include_edge: bool = False


def _core_files(ctx: TemplateContext) -> list[FileSpec]:
    return [
        FileSpec("lib/service/interface.ts", templates.generate_interface),
        FileSpec("lib/service/config.ts", templates.generate_config),
        FileSpec("lib/service/errors.ts", templates.generate_errors),
        FileSpec("lib/service/index.ts", templates.generate_service_index),
        FileSpec("lib/providers/memory.ts", templates.generate_memory_provider),
        FileSpec("types.ts", templates.generate_types),
    ]


def _server_files(ctx: TemplateContext) -> list[FileSpec]:
    return [
        FileSpec("lib/layers/server-layers.ts", templates.generate_server_layers),
        FileSpec("server.ts", templates.generate_server_entry),
    ]


def _client_files(ctx: TemplateContext) -> list[FileSpec]:
    return [
        FileSpec("lib/layers/client-layers.ts", templates.generate_client_layers),
        FileSpec(f"lib/client/hooks/use-{ctx.file_name}.ts", templates.generate_client_hook),
        FileSpec("client.ts", templates.generate_client_entry),
    ]


def _edge_files(ctx: TemplateContext) -> list[FileSpec]:
    return [
        FileSpec("lib/layers/edge-layers.ts", templates.generate_edge_layers),
        FileSpec("edge.ts", templates.generate_edge_entry),
    ]


class InfraGenerator(LibraryGenerator):
    """Service interface, in-memory provider and platform layers."""

    kind = LibraryKind.INFRA
    options_model = InfraOptions
    groups = (
        FileGroup("core", _core_files),
        FileGroup("server", _server_files),
        FileGroup("client", _client_files),
        FileGroup("edge", _edge_files),
    )
    index = staticmethod(templates.generate_index)

    def resolve_flags(self, options: InfraOptions) -> FeatureFlags:
        return resolve_flags(
            self.kind,
            platform=options.platform,
            include_client_server=options.include_client_server,
            include_edge=options.include_edge,
        )


async def generate_infra(adapter, options, workspace=None):
    """Generate an infrastructure library; see :meth:`LibraryGenerator.generate`."""
    return await InfraGenerator().generate(adapter, options, workspace)
