"""Templates for infrastructure libraries.

An infra library wraps a cross-cutting capability (cache, queue, storage...)
behind a service interface with an in-memory provider.  Platform layers and
entry points are added per resolved flag; the server layer is always on.
"""

from __future__ import annotations

from ..context import TemplateContext
from .builder import CodeBuilder, Import, Interface, Property
from .shared import (
    base_error_name,
    generate_barrel_file,
    generate_errors_file,
    generate_layers_file,
    generate_platform_entry_file,
    generate_types_only_file,
)


def generate_interface(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    errors = f"{base_error_name(ctx)}s"
    builder = CodeBuilder()
    builder.add_file_header(
        f"{class_name} Service Interface",
        f"Context.Tag for the {class_name} infrastructure service.",
    )
    builder.add_blank_line()
    builder.add_imports(
        [
            Import(source="effect", names=("Context", "Effect", "Layer")),
            Import(source="./errors", names=(errors,), type_only=True),
            Import(source="../providers/memory", names=(f"make{class_name}MemoryProvider",)),
        ]
    )
    builder.add_blank_line()
    builder.add_raw(
        f"export interface {class_name}ServiceShape {{\n"
        f"  readonly get: (key: string) => Effect.Effect<string | undefined, {errors}>;\n"
        f"  readonly set: (key: string, value: string) => Effect.Effect<void, {errors}>;\n"
        f"  readonly healthCheck: () => Effect.Effect<boolean, {errors}>;\n"
        "}\n"
    )
    builder.add_blank_line()
    builder.add_raw(
        f"export class {class_name}Service extends Context.Tag(\"{class_name}Service\")<\n"
        f"  {class_name}Service,\n"
        f"  {class_name}ServiceShape\n"
        ">() {\n"
        f"  static readonly Live = Layer.sync({class_name}Service, make{class_name}MemoryProvider);\n"
        f"  static readonly Test = Layer.sync({class_name}Service, make{class_name}MemoryProvider);\n"
        "}\n"
    )
    return builder.render()


def generate_config(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    builder = CodeBuilder()
    builder.add_file_header(f"{class_name} Configuration", "Configuration read from the environment.")
    builder.add_blank_line()
    builder.add_imports([Import(source="effect", names=("Config",))])
    builder.add_blank_line()
    builder.add_interface(
        Interface(
            name=f"{class_name}Config",
            doc=f"{class_name} service configuration",
            properties=(
                Property(name="enabled", type="boolean", readonly=True),
                Property(name="timeoutMs", type="number", readonly=True),
            ),
        )
    )
    builder.add_blank_line()
    builder.add_raw(
        f"export const {ctx.property_name}Config = Config.all({{\n"
        f'  enabled: Config.boolean("{ctx.constant_name}_ENABLED").pipe(Config.withDefault(true)),\n'
        f'  timeoutMs: Config.number("{ctx.constant_name}_TIMEOUT_MS").pipe(Config.withDefault(5000)),\n'
        "});\n"
    )
    return builder.render()


def generate_errors(ctx: TemplateContext) -> str:
    return generate_errors_file(ctx)


def generate_service_index(ctx: TemplateContext) -> str:
    return generate_barrel_file(
        ctx, ["./interface", "./config", "./errors"], title=f"{ctx.class_name} Service"
    )


def generate_memory_provider(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    builder = CodeBuilder()
    builder.add_file_header(f"{class_name} Memory Provider", "In-memory implementation for tests and local development.")
    builder.add_blank_line()
    builder.add_imports(
        [
            Import(source="effect", names=("Effect",)),
            Import(source="../service/interface", names=(f"{class_name}ServiceShape",), type_only=True),
        ]
    )
    builder.add_blank_line()
    builder.add_raw(
        f"export const make{class_name}MemoryProvider = (): {class_name}ServiceShape => {{\n"
        "  const store = new Map<string, string>();\n"
        "  return {\n"
        "    get: (key) => Effect.sync(() => store.get(key)),\n"
        "    set: (key, value) => Effect.sync(() => void store.set(key, value)),\n"
        "    healthCheck: () => Effect.succeed(true),\n"
        "  };\n"
        "};\n"
    )
    return builder.render()


def _platform_layers(ctx: TemplateContext, platform: str) -> str:
    return generate_layers_file(
        ctx, f"{ctx.class_name}Service", "../service/interface", platform=platform
    )


def generate_server_layers(ctx: TemplateContext) -> str:
    return _platform_layers(ctx, "Server")


def generate_client_layers(ctx: TemplateContext) -> str:
    return _platform_layers(ctx, "Client")


def generate_edge_layers(ctx: TemplateContext) -> str:
    return _platform_layers(ctx, "Edge")


def generate_client_hook(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    builder = CodeBuilder()
    builder.add_file_header(f"use{class_name} Hook", f"Client access to the {class_name} service.")
    builder.add_blank_line()
    builder.add_imports(
        [
            Import(source="effect", names=("Effect",)),
            Import(source="../../service/interface", names=(f"{class_name}Service",)),
            Import(source="../../layers/client-layers", names=(f"{class_name}ServiceClientLive",)),
        ]
    )
    builder.add_blank_line()
    builder.add_raw(
        f"export function use{class_name}() {{\n"
        "  return {\n"
        "    get: (key: string) =>\n"
        "      Effect.runPromise(\n"
        f"        Effect.flatMap({class_name}Service, (service) => service.get(key)).pipe(\n"
        f"          Effect.provide({class_name}ServiceClientLive)\n"
        "        )\n"
        "      ),\n"
        "  };\n"
        "}\n"
    )
    return builder.render()


def generate_server_entry(ctx: TemplateContext) -> str:
    return generate_platform_entry_file(ctx, "server", ["./lib/service", "./lib/layers/server-layers"])


def generate_client_entry(ctx: TemplateContext) -> str:
    return generate_platform_entry_file(
        ctx,
        "client",
        ["./lib/layers/client-layers", f"./lib/client/hooks/use-{ctx.file_name}"],
    )


def generate_edge_entry(ctx: TemplateContext) -> str:
    return generate_platform_entry_file(ctx, "edge", ["./lib/layers/edge-layers"])


def generate_types(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    return generate_types_only_file(
        ctx,
        [
            ("./lib/service/interface", (f"{class_name}ServiceShape",)),
            ("./lib/service/config", (f"{class_name}Config",)),
            ("./lib/service/errors", (f"{base_error_name(ctx)}s",)),
        ],
    )


def generate_index(ctx: TemplateContext) -> str:
    return generate_barrel_file(ctx, ["./lib/service", "./lib/providers/memory"])
