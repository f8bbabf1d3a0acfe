"""Feature library generator core."""

from __future__ import annotations

from pydantic import Field

from ..kinds import LibraryKind, PlatformType
from ..platform import FeatureFlags, resolve_flags
from .context import TemplateContext
from .generator import FileGroup, FileSpec, GeneratorOptions, LibraryGenerator, gitkeep
from .typescript import feature as templates


class FeatureOptions(GeneratorOptions):
    platform: PlatformType | None = Field(default=None, description="Defaults to universal")
    include_client_server: bool | None = Field(
        default=None,
        description="Force the client layer on or off; unset follows the platform",
    )
    include_rpc: bool = False
    include_cqrs: bool = False
    include_edge: bool = False


def _core_files(ctx: TemplateContext) -> list[FileSpec]:
    return [
        FileSpec("lib/shared/errors.ts", templates.generate_errors),
        FileSpec("lib/shared/types.ts", templates.generate_shared_types),
        FileSpec("lib/shared/schemas.ts", templates.generate_schemas),
        FileSpec("types.ts", templates.generate_types),
    ]


def _cqrs_files(ctx: TemplateContext) -> list[FileSpec]:
    return [
        gitkeep(f"lib/server/{directory}")
        for directory in ("commands", "queries", "operations", "projections")
    ]


def _rpc_files(ctx: TemplateContext) -> list[FileSpec]:
    return [
        FileSpec("lib/rpc/rpc.ts", templates.generate_rpc),
        FileSpec("lib/rpc/handlers.ts", templates.generate_rpc_handlers),
        FileSpec("lib/rpc/errors.ts", templates.generate_rpc_errors),
    ]


def _server_files(ctx: TemplateContext) -> list[FileSpec]:
    return [
        FileSpec("lib/server/service.ts", templates.generate_service),
        FileSpec("lib/server/layers.ts", templates.generate_layers),
        FileSpec("lib/server/service.spec.ts", templates.generate_service_spec),
        FileSpec("server.ts", templates.generate_server_entry),
    ]


def _client_files(ctx: TemplateContext) -> list[FileSpec]:
    return [
        FileSpec(f"lib/client/hooks/use-{ctx.file_name}.ts", templates.generate_hooks),
        FileSpec("lib/client/hooks/index.ts", templates.generate_hooks_index),
        FileSpec(f"lib/client/atoms/{ctx.file_name}-atoms.ts", templates.generate_atoms),
        FileSpec("lib/client/atoms/index.ts", templates.generate_atoms_index),
        gitkeep("lib/client/components"),
        FileSpec("client.ts", templates.generate_client_entry),
    ]


def _edge_files(ctx: TemplateContext) -> list[FileSpec]:
    return [
        FileSpec("lib/edge/middleware.ts", templates.generate_middleware),
        FileSpec("edge.ts", templates.generate_edge_entry),
    ]


class FeatureGenerator(LibraryGenerator):
    """Service, RPC, client state and edge middleware for one feature."""

    kind = LibraryKind.FEATURE
    options_model = FeatureOptions
    groups = (
        FileGroup("core", _core_files),
        FileGroup("cqrs", _cqrs_files),
        FileGroup("rpc", _rpc_files),
        FileGroup("server", _server_files),
        FileGroup("client", _client_files),
        FileGroup("edge", _edge_files),
    )
    index = staticmethod(templates.generate_index)

    def resolve_flags(self, options: FeatureOptions) -> FeatureFlags:
        return resolve_flags(
            self.kind,
            platform=options.platform,
            include_client_server=options.include_client_server,
            include_cqrs=options.include_cqrs,
            include_rpc=options.include_rpc,
            include_edge=options.include_edge,
        )

    def dependencies(self, ctx: TemplateContext) -> dict[str, str]:
        deps = {"effect": "^3.0.0"}
        if ctx.flags.include_rpc:
            deps["@effect/rpc"] = "^0.69.0"
        if ctx.flags.include_client:
            deps["@effect-atom/atom-react"] = "^0.1.0"
        return deps


async def generate_feature(adapter, options, workspace=None):
    """Generate a feature library; see :meth:`LibraryGenerator.generate`."""
    return await FeatureGenerator().generate(adapter, options, workspace)
