"""Provider library generator core."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from ..kinds import LibraryKind, PlatformType
from ..platform import FeatureFlags, resolve_flags
from .context import TemplateContext
from .generator import FileGroup, FileSpec, GeneratorOptions, LibraryGenerator
from .typescript import provider as templates


class ProviderOptions(GeneratorOptions):
    platform: PlatformType | None = Field(default=None, description="Defaults to node")
    include_client_server: bool | None = Field(
        default=None,
        description="True adds a client entry; the server entry always follows the platform",
    )
    external_service: str | None = Field(
        default=None,
        description="Display name of the wrapped service; defaults to the class name",
    )


def _core_files(ctx: TemplateContext) -> list[FileSpec]:
    return [
        FileSpec("lib/errors.ts", templates.generate_errors),
        FileSpec("lib/types.ts", templates.generate_lib_types),
        FileSpec("lib/validation.ts", templates.generate_validation),
        FileSpec("lib/service.ts", templates.generate_service),
        FileSpec("lib/layers.ts", templates.generate_layers),
        FileSpec("lib/service.spec.ts", templates.generate_service_spec),
        FileSpec("types.ts", templates.generate_types),
    ]


def _server_files(ctx: TemplateContext) -> list[FileSpec]:
    return [FileSpec("server.ts", templates.generate_server_entry)]


def _client_files(ctx: TemplateContext) -> list[FileSpec]:
    return [FileSpec("client.ts", templates.generate_client_entry)]


def _edge_files(ctx: TemplateContext) -> list[FileSpec]:
    return [FileSpec("edge.ts", templates.generate_edge_entry)]


class ProviderGenerator(LibraryGenerator):
    """Effect service wrapping one external SDK or API."""

    kind = LibraryKind.PROVIDER
    options_model = ProviderOptions
    groups = (
        FileGroup("core", _core_files),
        FileGroup("server", _server_files),
        FileGroup("client", _client_files),
        FileGroup("edge", _edge_files),
    )
    index = staticmethod(templates.generate_index)

    def resolve_flags(self, options: ProviderOptions) -> FeatureFlags:
        return resolve_flags(
            self.kind,
            platform=options.platform,
            include_client_server=options.include_client_server,
        )

    def extras(self, options: ProviderOptions) -> dict[str, Any]:
        return {"external_service": options.external_service}


async def generate_provider(adapter, options, workspace=None):
    """Generate a provider library; see :meth:`LibraryGenerator.generate`."""
    return await ProviderGenerator().generate(adapter, options, workspace)
