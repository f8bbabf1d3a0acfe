"""Templates for data-access libraries.

A data-access library implements the repository port declared by the
matching contract library.  It never splits by platform: everything is
exported from ``index.ts``.
"""

from __future__ import annotations

from ..context import TemplateContext
from .builder import CodeBuilder, Import
from .shared import base_error_name, generate_barrel_file, generate_errors_file, generate_layers_file, generate_types_only_file


def contract_package(ctx: TemplateContext) -> str:
    return ctx.contract_package or f"{ctx.scope}/contract-{ctx.file_name}"


def generate_errors(ctx: TemplateContext) -> str:
    return generate_errors_file(ctx)


def generate_shared_types(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    builder = CodeBuilder()
    builder.add_file_header(f"{class_name} Data Access Types", "Filter and pagination shapes used by queries.")
    builder.add_blank_line()
    builder.add_raw(
        f"export interface {class_name}Filter {{\n"
        "  readonly search?: string;\n"
        "  readonly ids?: ReadonlyArray<string>;\n"
        "}\n"
    )
    builder.add_blank_line()
    builder.add_raw(
        "export interface Pagination {\n"
        "  readonly limit: number;\n"
        "  readonly offset: number;\n"
        "}\n"
    )
    builder.add_blank_line()
    builder.add_raw(
        "export interface PaginatedResult<T> {\n"
        "  readonly items: ReadonlyArray<T>;\n"
        "  readonly total: number;\n"
        "  readonly hasMore: boolean;\n"
        "}\n"
    )
    return builder.render()


def generate_validation(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    builder = CodeBuilder()
    builder.add_file_header(f"{class_name} Validation", "Input validation applied before writes.")
    builder.add_blank_line()
    builder.add_imports(
        [
            Import(source="effect", names=("Effect",)),
            Import(source="./errors", names=(f"{class_name}ValidationError",)),
        ]
    )
    builder.add_blank_line()
    builder.add_raw(
        f"export const validate{class_name}Id = (id: string) =>\n"
        "  id.trim().length > 0\n"
        "    ? Effect.succeed(id)\n"
        f'    : Effect.fail({class_name}ValidationError.create("id must not be empty", "id", "empty"));\n'
    )
    return builder.render()


def generate_queries(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    builder = CodeBuilder()
    builder.add_file_header(f"{class_name} Queries", "Query builders for the repository.")
    builder.add_blank_line()
    builder.add_imports([Import(source="./shared/types", names=(f"{class_name}Filter", "Pagination"), type_only=True)])
    builder.add_blank_line()
    builder.add_raw(
        f"export interface {class_name}Query {{\n"
        f"  readonly filter: {class_name}Filter;\n"
        "  readonly pagination: Pagination;\n"
        "}\n"
    )
    builder.add_blank_line()
    builder.add_raw(
        f"export const build{class_name}Query = (\n"
        f"  filter: {class_name}Filter = {{}},\n"
        "  pagination: Pagination = { limit: 50, offset: 0 }\n"
        f"): {class_name}Query => ({{ filter, pagination }});\n"
    )
    return builder.render()


def generate_repository(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    errors = f"{base_error_name(ctx)}s"
    builder = CodeBuilder()
    builder.add_file_header(
        f"{class_name} Repository",
        f"Implements the {class_name}Repository port from {contract_package(ctx)}.",
    )
    builder.add_blank_line()
    builder.add_imports(
        [
            Import(source="effect", names=("Effect", "Layer", "Option")),
            Import(source=contract_package(ctx), names=(f"{class_name}Repository",)),
            Import(source="./shared/errors", names=(errors,), type_only=True),
            Import(source="./shared/validation", names=(f"validate{class_name}Id",)),
        ]
    )
    builder.add_blank_line()
    builder.add_raw(
        "const make = Effect.sync(() => {\n"
        "  const store = new Map<string, any>();\n"
        "  return {\n"
        "    findById: (id: string) =>\n"
        f"      validate{class_name}Id(id).pipe(Effect.map((valid) => Option.fromNullable(store.get(valid)))),\n"
        "    findAll: () => Effect.succeed(Array.from(store.values())),\n"
        "    create: (input: any) => Effect.sync(() => input),\n"
        "    update: (_id: string, input: any) => Effect.sync(() => input),\n"
        "    delete: (id: string) => Effect.sync(() => void store.delete(id)),\n"
        "  };\n"
        "});\n"
    )
    builder.add_blank_line()
    builder.add_raw(
        f"export const {class_name}RepositoryLayers = {{\n"
        f"  Live: Layer.effect({class_name}Repository, make),\n"
        f"  Test: Layer.effect({class_name}Repository, make),\n"
        f"  Dev: Layer.effect({class_name}Repository, make),\n"
        "};\n"
    )
    builder.add_blank_line()
    builder.add_raw(f"export type {class_name}RepositoryErrors = {errors};\n")
    return builder.render()


def generate_repository_spec(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    builder = CodeBuilder()
    builder.add_file_header(f"{class_name} Repository Tests")
    builder.add_blank_line()
    builder.add_imports(
        [
            Import(source="vitest", names=("describe", "expect", "it")),
            Import(source="effect", names=("Effect", "Option")),
            Import(source=contract_package(ctx), names=(f"{class_name}Repository",)),
            Import(source="./repository", names=(f"{class_name}RepositoryLayers",)),
        ]
    )
    builder.add_blank_line()
    builder.add_raw(
        f'describe("{class_name}Repository", () => {{\n'
        '  it("returns none for an unknown id", async () => {\n'
        "    const result = await Effect.runPromise(\n"
        f"      Effect.flatMap({class_name}Repository, (repo) => repo.findById(\"missing\")).pipe(\n"
        f"        Effect.provide({class_name}RepositoryLayers.Test)\n"
        "      )\n"
        "    );\n"
        "    expect(Option.isNone(result)).toBe(true);\n"
        "  });\n"
        "});\n"
    )
    return builder.render()


def generate_layers(ctx: TemplateContext) -> str:
    return generate_layers_file(
        ctx,
        f"{ctx.class_name}Repository",
        "./repository",
        layer_source=f"{ctx.class_name}RepositoryLayers",
        variants=("Live", "Test", "Dev", "Auto"),
    )


def generate_layers_spec(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    builder = CodeBuilder()
    builder.add_file_header(f"{class_name} Layers Tests")
    builder.add_blank_line()
    builder.add_imports(
        [
            Import(source="vitest", names=("describe", "expect", "it")),
            Import(source="./layers", names=(f"{class_name}RepositoryAuto",)),
        ]
    )
    builder.add_blank_line()
    builder.add_raw(
        f'describe("{class_name} layers", () => {{\n'
        '  it("selects a layer", () => {\n'
        f"    expect({class_name}RepositoryAuto).toBeDefined();\n"
        "  });\n"
        "});\n"
    )
    return builder.render()


def generate_types(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    return generate_types_only_file(
        ctx,
        [
            ("./lib/shared/types", (f"{class_name}Filter", "Pagination", "PaginatedResult")),
            ("./lib/shared/errors", (f"{base_error_name(ctx)}s",)),
            ("./lib/queries", (f"{class_name}Query",)),
        ],
    )


def generate_index(ctx: TemplateContext) -> str:
    return generate_barrel_file(
        ctx,
        ["./lib/shared/errors", "./lib/shared/types", "./lib/shared/validation", "./lib/queries", "./lib/repository", "./lib/layers"],
    )
