"""``package.json`` export maps.

Every library exports ``.`` and ``./types``; the functions here return the
additional subpath exports per kind.  Each entry maps a subpath to
``{"import": ..., "types": ...}`` pointing at the TypeScript source, so
workspace consumers resolve sources directly without a build step.
"""

from __future__ import annotations

from ..kinds import LibraryKind
from ..naming import entity_file_name
from .context import TemplateContext
from .typescript.contract import entity_names

ExportEntry = dict[str, str]
ExportMap = dict[str, ExportEntry]


def export_entry(source: str) -> ExportEntry:
    """Return the export entry for a path relative to the project root."""
    target = f"./{source}"
    return {"import": target, "types": target}


def base_exports() -> ExportMap:
    return {
        ".": export_entry("src/index.ts"),
        "./types": export_entry("src/types.ts"),
    }


def _contract_exports(ctx: TemplateContext) -> ExportMap:
    exports = {
        "./errors": export_entry("src/lib/errors.ts"),
        "./ports": export_entry("src/lib/ports.ts"),
        "./events": export_entry("src/lib/events.ts"),
        "./entities": export_entry("src/lib/entities/index.ts"),
        "./entities/*": export_entry("src/lib/entities/*.ts"),
    }
    for entity in entity_names(ctx):
        name = entity_file_name(entity)
        exports[f"./entities/{name}"] = export_entry(f"src/lib/entities/{name}.ts")
    if ctx.flags.include_cqrs:
        exports["./commands"] = export_entry("src/lib/commands.ts")
        exports["./queries"] = export_entry("src/lib/queries.ts")
        exports["./projections"] = export_entry("src/lib/projections.ts")
    if ctx.flags.include_rpc:
        exports["./rpc"] = export_entry("src/lib/rpc.ts")
    return exports


def _data_access_exports(ctx: TemplateContext) -> ExportMap:
    return {
        "./repository": export_entry("src/lib/repository.ts"),
        "./queries": export_entry("src/lib/queries.ts"),
        "./validation": export_entry("src/lib/shared/validation.ts"),
        "./layers": export_entry("src/lib/layers.ts"),
    }


def _feature_exports(ctx: TemplateContext) -> ExportMap:
    exports = {
        "./server": export_entry("src/server.ts"),
        "./server/service": export_entry("src/lib/server/service.ts"),
        "./server/layers": export_entry("src/lib/server/layers.ts"),
    }
    if ctx.flags.include_rpc:
        exports["./rpc"] = export_entry("src/lib/rpc/rpc.ts")
        exports["./rpc/handlers"] = export_entry("src/lib/rpc/handlers.ts")
    if ctx.flags.include_client:
        exports["./client"] = export_entry("src/client.ts")
        exports["./client/hooks"] = export_entry("src/lib/client/hooks/index.ts")
        exports["./client/atoms"] = export_entry("src/lib/client/atoms/index.ts")
    if ctx.flags.include_edge:
        exports["./edge"] = export_entry("src/edge.ts")
    return exports


def _infra_exports(ctx: TemplateContext) -> ExportMap:
    exports = {
        "./service": export_entry("src/lib/service/index.ts"),
        "./providers/*": export_entry("src/lib/providers/*.ts"),
    }
    if ctx.flags.include_server:
        exports["./server"] = export_entry("src/server.ts")
    if ctx.flags.include_client:
        exports["./client"] = export_entry("src/client.ts")
    if ctx.flags.include_edge:
        exports["./edge"] = export_entry("src/edge.ts")
    return exports


def _provider_exports(ctx: TemplateContext) -> ExportMap:
    exports = {"./service": export_entry("src/lib/service.ts")}
    if ctx.flags.include_server:
        exports["./server"] = export_entry("src/server.ts")
    if ctx.flags.include_client:
        exports["./client"] = export_entry("src/client.ts")
    if ctx.flags.include_edge:
        exports["./edge"] = export_entry("src/edge.ts")
    return exports


_BUILDERS = {
    LibraryKind.CONTRACT: _contract_exports,
    LibraryKind.DATA_ACCESS: _data_access_exports,
    LibraryKind.FEATURE: _feature_exports,
    LibraryKind.INFRA: _infra_exports,
    LibraryKind.PROVIDER: _provider_exports,
}


def additional_exports(ctx: TemplateContext) -> ExportMap:
    """Return the subpath exports *ctx*'s library adds to the base map."""
    return _BUILDERS[ctx.kind](ctx)
