"""Templates for feature libraries.

A feature library always carries a shared layer (errors, types, schemas) and
a server layer (service, layers, spec).  RPC, client and edge layers are
emitted only when the resolved flags ask for them.
"""

from __future__ import annotations

from ..context import TemplateContext
from .builder import CodeBuilder, Import
from .shared import (
    base_error_name,
    generate_barrel_file,
    generate_errors_file,
    generate_layers_file,
    generate_platform_entry_file,
    generate_types_only_file,
)


# ---------------------------------------------------------------------------
# Shared layer
# ---------------------------------------------------------------------------


def generate_errors(ctx: TemplateContext) -> str:
    return generate_errors_file(ctx)


def generate_shared_types(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    builder = CodeBuilder()
    builder.add_file_header(f"{class_name} Types", f"Shared types for the {ctx.file_name} feature.")
    builder.add_blank_line()
    builder.add_raw(
        f"export interface {class_name}Config {{\n"
        "  readonly enabled: boolean;\n"
        "}\n"
    )
    builder.add_blank_line()
    builder.add_raw(
        f"export interface {class_name}Result {{\n"
        "  readonly success: boolean;\n"
        "  readonly message: string;\n"
        "}\n"
    )
    return builder.render()


def generate_schemas(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    builder = CodeBuilder()
    builder.add_file_header(f"{class_name} Schemas", "Runtime schemas for feature inputs and outputs.")
    builder.add_blank_line()
    builder.add_imports([Import(source="effect", names=("Schema",))])
    builder.add_blank_line()
    builder.add_raw(
        f"export const {class_name}Input = Schema.Struct({{\n"
        "  id: Schema.String,\n"
        "});\n"
        f"export type {class_name}Input = typeof {class_name}Input.Type;\n"
    )
    builder.add_blank_line()
    builder.add_raw(
        f"export const {class_name}Output = Schema.Struct({{\n"
        "  success: Schema.Boolean,\n"
        "  message: Schema.String,\n"
        "});\n"
        f"export type {class_name}Output = typeof {class_name}Output.Type;\n"
    )
    return builder.render()


# ---------------------------------------------------------------------------
# Server layer
# ---------------------------------------------------------------------------


def generate_service(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    errors = f"{base_error_name(ctx)}s"
    builder = CodeBuilder()
    builder.add_file_header(
        f"{class_name} Service",
        f"Business logic for the {ctx.file_name} feature.",
        [f"Access the service with `yield* {class_name}Service`."],
    )
    builder.add_blank_line()
    builder.add_imports(
        [
            Import(source="effect", names=("Context", "Effect", "Layer")),
            Import(source="../shared/errors", names=(errors,), type_only=True),
        ]
    )
    builder.add_blank_line()
    builder.add_raw(
        f"export interface {class_name}ServiceShape {{\n"
        f"  readonly exampleOperation: () => Effect.Effect<void, {errors}>;\n"
        "}\n"
    )
    builder.add_blank_line()
    builder.add_raw(
        f"export class {class_name}Service extends Context.Tag(\"{class_name}Service\")<\n"
        f"  {class_name}Service,\n"
        f"  {class_name}ServiceShape\n"
        ">() {\n"
        f"  static readonly Live = Layer.succeed({class_name}Service, {{\n"
        f'    exampleOperation: () => Effect.logInfo("{class_name} operation executed"),\n'
        "  });\n"
        "\n"
        f"  static readonly Test = Layer.succeed({class_name}Service, {{\n"
        "    exampleOperation: () => Effect.void,\n"
        "  });\n"
        "}\n"
    )
    return builder.render()


def generate_layers(ctx: TemplateContext) -> str:
    return generate_layers_file(ctx, f"{ctx.class_name}Service", "./service")


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
        '  it("runs the example operation", async () => {\n'
        "    const program = Effect.flatMap(\n"
        f"      {class_name}Service,\n"
        "      (service) => service.exampleOperation()\n"
        f"    ).pipe(Effect.provide({class_name}Service.Test));\n"
        "    await expect(Effect.runPromise(program)).resolves.toBeUndefined();\n"
        "  });\n"
        "});\n"
    )
    return builder.render()


def generate_server_entry(ctx: TemplateContext) -> str:
    return generate_platform_entry_file(ctx, "server", ["./lib/server/service", "./lib/server/layers"])


# ---------------------------------------------------------------------------
# RPC layer
# ---------------------------------------------------------------------------


def generate_rpc(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    builder = CodeBuilder()
    builder.add_file_header(
        f"{class_name} RPC Group",
        f"Defines the RPC interface for {ctx.file_name} operations.",
    )
    builder.add_blank_line()
    builder.add_imports(
        [
            Import(source="@effect/rpc", names=("Rpc", "RpcGroup")),
            Import(source="effect", names=("Schema",)),
            Import(source="./errors", names=(f"{class_name}RpcError",)),
        ]
    )
    builder.add_blank_line()
    builder.add_comment("Request/Response schemas")
    builder.add_raw(
        "export const ExampleRequest = Schema.Struct({\n"
        "  id: Schema.String,\n"
        "});\n"
    )
    builder.add_blank_line()
    builder.add_raw(
        "export const ExampleResponse = Schema.Struct({\n"
        "  success: Schema.Boolean,\n"
        "  message: Schema.String,\n"
        "});\n"
    )
    builder.add_blank_line()
    builder.add_raw(
        f"export class {class_name}Rpcs extends RpcGroup.make(\n"
        '  Rpc.make("exampleOperation", {\n'
        "    payload: ExampleRequest,\n"
        "    success: ExampleResponse,\n"
        f"    error: {class_name}RpcError,\n"
        "  })\n"
        ") {}\n"
    )
    return builder.render()


def generate_rpc_handlers(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    builder = CodeBuilder()
    builder.add_file_header(
        f"{class_name} RPC Handlers",
        "Handler implementations for the RPC group.",
        ["Handlers have access to middleware context."],
    )
    builder.add_blank_line()
    builder.add_imports(
        [
            Import(source="effect", names=("Effect",)),
            Import(source="./rpc", names=("ExampleRequest",), type_only=True),
            Import(source="../server/service", names=(f"{class_name}Service",)),
        ]
    )
    builder.add_blank_line()
    builder.add_raw(
        f"export const {class_name}Handlers = {{\n"
        "  exampleOperation: (_payload: typeof ExampleRequest.Type) =>\n"
        "    Effect.gen(function* () {\n"
        f"      const service = yield* {class_name}Service;\n"
        "      yield* service.exampleOperation();\n"
        '      return { success: true, message: "Operation completed successfully" };\n'
        "    }),\n"
        "};\n"
    )
    return builder.render()


def generate_rpc_errors(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    builder = CodeBuilder()
    builder.add_file_header(f"{class_name} RPC Errors", "Serializable errors returned over RPC.")
    builder.add_blank_line()
    builder.add_imports([Import(source="effect", names=("Schema",))])
    builder.add_blank_line()
    builder.add_raw(
        f"export class {class_name}RpcError extends Schema.TaggedError<{class_name}RpcError>()(\n"
        f'  "{class_name}RpcError",\n'
        "  {\n"
        "    message: Schema.String,\n"
        "    code: Schema.String,\n"
        "  },\n"
        ") {}\n"
    )
    return builder.render()


# ---------------------------------------------------------------------------
# Client layer
# ---------------------------------------------------------------------------


def generate_hooks(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    builder = CodeBuilder()
    builder.add_file_header(f"use{class_name} Hook", f"React hook exposing {ctx.file_name} state.")
    builder.add_blank_line()
    builder.add_imports(
        [
            Import(source="@effect-atom/atom-react", names=("useAtomValue",)),
            Import(source=f"../atoms/{ctx.file_name}-atoms", names=(f"{ctx.property_name}Atom",)),
        ]
    )
    builder.add_blank_line()
    builder.add_raw(
        f"export function use{class_name}() {{\n"
        f"  return useAtomValue({ctx.property_name}Atom);\n"
        "}\n"
    )
    return builder.render()


def generate_hooks_index(ctx: TemplateContext) -> str:
    return generate_barrel_file(ctx, [f"./use-{ctx.file_name}"], title=f"{ctx.class_name} Hooks")


def generate_atoms(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    builder = CodeBuilder()
    builder.add_file_header(f"{class_name} Atoms", "Client-side state.")
    builder.add_blank_line()
    builder.add_imports([Import(source="@effect-atom/atom-react", names=("Atom",))])
    builder.add_blank_line()
    builder.add_raw(
        f"export interface {class_name}State {{\n"
        "  readonly isLoading: boolean;\n"
        "  readonly error: string | null;\n"
        "}\n"
    )
    builder.add_blank_line()
    builder.add_raw(
        f"export const {ctx.property_name}Atom = Atom.make<{class_name}State>({{\n"
        "  isLoading: false,\n"
        "  error: null,\n"
        "});\n"
    )
    return builder.render()


def generate_atoms_index(ctx: TemplateContext) -> str:
    return generate_barrel_file(ctx, [f"./{ctx.file_name}-atoms"], title=f"{ctx.class_name} Atoms")


def generate_client_entry(ctx: TemplateContext) -> str:
    return generate_platform_entry_file(ctx, "client", ["./lib/client/hooks", "./lib/client/atoms"])


# ---------------------------------------------------------------------------
# Edge layer
# ---------------------------------------------------------------------------


def generate_middleware(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    builder = CodeBuilder()
    builder.add_file_header(f"{class_name} Edge Middleware", "Runs at the edge before requests reach the server.")
    builder.add_blank_line()
    builder.add_imports([Import(source="effect", names=("Effect",))])
    builder.add_blank_line()
    builder.add_raw(
        f"export const {ctx.property_name}Middleware = (request: Request) =>\n"
        "  Effect.gen(function* () {\n"
        f'    yield* Effect.logDebug("{class_name} middleware", request.url);\n'
        "    return request;\n"
        "  });\n"
    )
    return builder.render()


def generate_edge_entry(ctx: TemplateContext) -> str:
    return generate_platform_entry_file(ctx, "edge", ["./lib/edge/middleware"])


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def generate_types(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    exports: list[tuple[str, tuple[str, ...]]] = [
        ("./lib/shared/types", (f"{class_name}Config", f"{class_name}Result")),
        ("./lib/shared/schemas", (f"{class_name}Input", f"{class_name}Output")),
        ("./lib/shared/errors", (f"{base_error_name(ctx)}s",)),
        ("./lib/server/service", (f"{class_name}ServiceShape",)),
    ]
    if ctx.flags.include_client:
        exports.append((f"./lib/client/atoms/{ctx.file_name}-atoms", (f"{class_name}State",)))
    return generate_types_only_file(ctx, exports)


def generate_index(ctx: TemplateContext) -> str:
    modules = ["./lib/shared/errors", "./lib/shared/types", "./lib/shared/schemas"]
    if ctx.flags.include_rpc:
        modules += ["./lib/rpc/rpc", "./lib/rpc/errors"]
    return generate_barrel_file(
        ctx,
        modules,
        notes=["Platform code is exported from ./server, ./client and ./edge."],
    )
