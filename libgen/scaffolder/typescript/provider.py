"""Templates for provider libraries.

A provider library adapts one external service (an SDK or HTTP API) to an
Effect service.  Entry points per platform are gated by the resolved flags.
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


def external_service(ctx: TemplateContext) -> str:
    return ctx.external_service or ctx.class_name


def generate_errors(ctx: TemplateContext) -> str:
    return generate_errors_file(ctx)


def generate_lib_types(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    builder = CodeBuilder()
    builder.add_file_header(
        f"{class_name} Types",
        f"Request and response shapes for {external_service(ctx)}.",
    )
    builder.add_blank_line()
    builder.add_interface(
        Interface(
            name="ServiceMetadata",
            doc="Service Metadata",
            properties=(
                Property(name="name", type="string", readonly=True, doc="Service name"),
                Property(name="version", type="string", readonly=True, doc="Service version"),
                Property(
                    name="environment",
                    type='"production" | "development" | "test"',
                    readonly=True,
                    doc="Environment",
                ),
            ),
        )
    )
    builder.add_blank_line()
    builder.add_interface(
        Interface(
            name="PaginationOptions",
            doc="Pagination Options",
            properties=(
                Property(name="limit", type="number", readonly=True, optional=True, doc="Maximum number of items to return"),
                Property(name="offset", type="number", readonly=True, optional=True, doc="Number of items to skip"),
                Property(name="cursor", type="string", readonly=True, optional=True, doc="Cursor for cursor-based pagination"),
            ),
        )
    )
    builder.add_blank_line()
    builder.add_interface(
        Interface(
            name="PaginatedResponse<T>",
            doc="Paginated Response",
            properties=(
                Property(name="data", type="readonly T[]", readonly=True, doc="Data items"),
                Property(name="total", type="number", readonly=True, doc="Total number of items"),
                Property(name="hasMore", type="boolean", readonly=True, doc="Whether there are more items"),
                Property(name="nextCursor", type="string", readonly=True, optional=True, doc="Cursor for next page"),
            ),
        )
    )
    builder.add_blank_line()
    builder.add_interface(
        Interface(
            name=f"{class_name}Config",
            doc=f"{external_service(ctx)} client configuration",
            properties=(
                Property(name="apiKey", type="string", readonly=True),
                Property(name="baseUrl", type="string", readonly=True, optional=True),
                Property(name="timeoutMs", type="number", readonly=True, optional=True),
            ),
        )
    )
    return builder.render()


def generate_validation(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    builder = CodeBuilder()
    builder.add_file_header(f"{class_name} Validation", "Validates configuration before the client is built.")
    builder.add_blank_line()
    builder.add_imports(
        [
            Import(source="effect", names=("Effect",)),
            Import(source="./errors", names=(f"{class_name}ValidationError",)),
            Import(source="./types", names=(f"{class_name}Config",), type_only=True),
        ]
    )
    builder.add_blank_line()
    builder.add_raw(
        f"export const validate{class_name}Config = (config: {class_name}Config) =>\n"
        "  config.apiKey.length > 0\n"
        "    ? Effect.succeed(config)\n"
        f'    : Effect.fail({class_name}ValidationError.create("apiKey is required", "missing apiKey"));\n'
    )
    return builder.render()


def generate_service(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    errors = f"{base_error_name(ctx)}s"
    builder = CodeBuilder()
    builder.add_file_header(
        f"{class_name} Service",
        f"Effect wrapper around the {external_service(ctx)} client.",
    )
    builder.add_blank_line()
    builder.add_imports(
        [
            Import(source="effect", names=("Context", "Effect", "Layer")),
            Import(source="./errors", names=(errors,), type_only=True),
            Import(source="./types", names=("ServiceMetadata",), type_only=True),
        ]
    )
    builder.add_blank_line()
    builder.add_raw(
        f"export interface {class_name}ServiceShape {{\n"
        "  readonly metadata: ServiceMetadata;\n"
        f"  readonly healthCheck: () => Effect.Effect<boolean, {errors}>;\n"
        "}\n"
    )
    builder.add_blank_line()
    builder.add_raw(
        f"export class {class_name}Service extends Context.Tag(\"{class_name}Service\")<\n"
        f"  {class_name}Service,\n"
        f"  {class_name}ServiceShape\n"
        ">() {\n"
        f"  static readonly Live = Layer.succeed({class_name}Service, {{\n"
        f'    metadata: {{ name: "{external_service(ctx)}", version: "0.0.1", environment: "production" }},\n'
        "    healthCheck: () => Effect.succeed(true),\n"
        "  });\n"
        "\n"
        f"  static readonly Test = Layer.succeed({class_name}Service, {{\n"
        f'    metadata: {{ name: "{external_service(ctx)}", version: "0.0.1", environment: "test" }},\n'
        "    healthCheck: () => Effect.succeed(true),\n"
        "  });\n"
        "\n"
        f"  static readonly Dev = {class_name}Service.Live;\n"
        "}\n"
    )
    return builder.render()


def generate_layers(ctx: TemplateContext) -> str:
    return generate_layers_file(
        ctx,
        f"{ctx.class_name}Service",
        "./service",
        variants=("Live", "Test", "Dev", "Auto"),
    )


def generate_service_spec(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    builder = CodeBuilder()
    builder.add_file_header(f"{class_name} Service Tests")
    builder.add_blank_line()
    builder.add_imports(
        [
            Import(source="vitest", names=("describe", "expect", "it")),
            Import(source="effect", names=("Effect",)),
            Import(source="./service", names=(f"{class_name}Service",)),
        ]
    )
    builder.add_blank_line()
    builder.add_raw(
        f'describe("{class_name}Service", () => {{\n'
        '  it("reports healthy", async () => {\n'
        "    const program = Effect.flatMap(\n"
        f"      {class_name}Service,\n"
        "      (service) => service.healthCheck()\n"
        f"    ).pipe(Effect.provide({class_name}Service.Test));\n"
        "    expect(await Effect.runPromise(program)).toBe(true);\n"
        "  });\n"
        "});\n"
    )
    return builder.render()


def generate_server_entry(ctx: TemplateContext) -> str:
    return generate_platform_entry_file(ctx, "server", ["./lib/service", "./lib/layers"])


def generate_client_entry(ctx: TemplateContext) -> str:
    return generate_platform_entry_file(ctx, "client", ["./lib/types", "./lib/errors"])


def generate_edge_entry(ctx: TemplateContext) -> str:
    return generate_platform_entry_file(ctx, "edge", ["./lib/service", "./lib/errors"])


def generate_types(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    return generate_types_only_file(
        ctx,
        [
            ("./lib/types", ("ServiceMetadata", "PaginationOptions", "PaginatedResponse", f"{class_name}Config")),
            ("./lib/errors", (f"{base_error_name(ctx)}s",)),
            ("./lib/service", (f"{class_name}ServiceShape",)),
        ],
    )


def generate_index(ctx: TemplateContext) -> str:
    modules = ["./lib/errors", "./lib/types", "./lib/validation"]
    # Without a server entry the service is only reachable from the barrel.
    if not ctx.flags.include_server:
        modules += ["./lib/service", "./lib/layers"]
    return generate_barrel_file(ctx, modules)
