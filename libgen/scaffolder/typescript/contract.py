"""Templates for contract libraries.

A contract library owns the domain vocabulary: entity schemas, domain errors,
events and the repository port.  Each entity gets its own file so consumers
can import a single entity without pulling in the rest of the domain.
"""

from __future__ import annotations

from ...naming import derive_naming
from ..context import TemplateContext
from .builder import CodeBuilder, Import
from .shared import base_error_name, generate_barrel_file, generate_errors_file, generate_types_only_file


def entity_names(ctx: TemplateContext) -> tuple[str, ...]:
    """Entity class names, defaulting to the library's own class name."""
    if not ctx.entities:
        return (ctx.class_name,)
    by_file: dict[str, str] = {}
    for entity in ctx.entities:
        naming = derive_naming(entity)
        by_file.setdefault(naming.file_name, naming.class_name)
    return tuple(by_file.values())


def generate_errors(ctx: TemplateContext) -> str:
    return generate_errors_file(ctx, include_rpc_errors=ctx.flags.include_rpc)


def generate_entity(ctx: TemplateContext, entity: str) -> str:
    naming = derive_naming(entity)
    name = naming.class_name
    builder = CodeBuilder()
    builder.add_file_header(
        f"{name} Entity",
        f"Schema definition for the {name} entity.",
        [f"Import directly for tree-shaking: {ctx.metadata.package_name}/entities/{naming.file_name}"],
    )
    builder.add_blank_line()
    builder.add_imports([Import(source="effect", names=("Schema",))])
    builder.add_blank_line()
    builder.add_comment(f"Branded identifier for {name}")
    builder.add_raw(f'export const {name}Id = Schema.String.pipe(Schema.brand("{name}Id"));\n')
    builder.add_raw(f"export type {name}Id = typeof {name}Id.Type;\n")
    builder.add_blank_line()
    builder.add_raw(
        f"export class {name} extends Schema.Class<{name}>(\"{name}\")({{\n"
        f"  id: {name}Id,\n"
        "  createdAt: Schema.DateFromSelf,\n"
        "  updatedAt: Schema.DateFromSelf,\n"
        "}) {}\n"
    )
    builder.add_blank_line()
    builder.add_comment(f"Input accepted when creating a {name}")
    builder.add_raw(f"export const Create{name}Input = Schema.Struct({{}});\n")
    builder.add_raw(f"export type Create{name}Input = typeof Create{name}Input.Type;\n")
    builder.add_blank_line()
    builder.add_comment(f"Input accepted when updating a {name}")
    builder.add_raw(f"export const Update{name}Input = Schema.partial(Create{name}Input);\n")
    builder.add_raw(f"export type Update{name}Input = typeof Update{name}Input.Type;\n")
    return builder.render()


def generate_entities_index(ctx: TemplateContext) -> str:
    modules = [f"./{derive_naming(entity).file_name}" for entity in entity_names(ctx)]
    return generate_barrel_file(ctx, modules, title=f"{ctx.class_name} Entities")


def generate_ports(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    entity = entity_names(ctx)[0]
    errors = f"{base_error_name(ctx)}s"
    builder = CodeBuilder()
    builder.add_file_header(
        f"{class_name} Ports",
        "Repository and service interfaces (Context.Tag pattern).",
        ["Implementations live in data-access and feature libraries."],
    )
    builder.add_blank_line()
    builder.add_imports(
        [
            Import(source="effect", names=("Context", "Effect", "Option")),
            Import(source="./entities", names=(entity, f"Create{entity}Input", f"Update{entity}Input"), type_only=True),
            Import(source="./errors", names=(errors,), type_only=True),
        ]
    )
    builder.add_blank_line()
    builder.add_section_comment("Repository Port")
    builder.add_blank_line()
    builder.add_raw(
        f"export interface {class_name}RepositoryShape {{\n"
        f"  readonly findById: (id: string) => Effect.Effect<Option.Option<{entity}>, {errors}>;\n"
        f"  readonly findAll: () => Effect.Effect<ReadonlyArray<{entity}>, {errors}>;\n"
        f"  readonly create: (input: Create{entity}Input) => Effect.Effect<{entity}, {errors}>;\n"
        f"  readonly update: (id: string, input: Update{entity}Input) => Effect.Effect<{entity}, {errors}>;\n"
        f"  readonly delete: (id: string) => Effect.Effect<void, {errors}>;\n"
        "}\n"
    )
    builder.add_blank_line()
    builder.add_raw(
        f"export class {class_name}Repository extends Context.Tag(\"{class_name}Repository\")<\n"
        f"  {class_name}Repository,\n"
        f"  {class_name}RepositoryShape\n"
        ">() {}\n"
    )
    return builder.render()


def generate_events(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    builder = CodeBuilder()
    builder.add_file_header(f"{class_name} Events", "Domain events published by this domain.")
    builder.add_blank_line()
    builder.add_imports([Import(source="effect", names=("Schema",))])
    builder.add_blank_line()
    names = []
    for action in ("Created", "Updated", "Deleted"):
        event = f"{class_name}{action}Event"
        names.append(event)
        builder.add_raw(
            f'export class {event} extends Schema.TaggedClass<{event}>()("{event}", {{\n'
            "  aggregateId: Schema.String,\n"
            "  occurredAt: Schema.DateFromSelf,\n"
            "}) {}\n"
        )
        builder.add_blank_line()
    builder.add_raw(f"export type {class_name}Event = {' | '.join(names)};\n")
    return builder.render()


def _generate_cqrs(ctx: TemplateContext, title: str, kind: str, members: tuple[str, ...]) -> str:
    class_name = ctx.class_name
    builder = CodeBuilder()
    builder.add_file_header(f"{class_name} {title}", f"CQRS {kind} schemas for the {class_name} domain.")
    builder.add_blank_line()
    builder.add_imports([Import(source="effect", names=("Schema",))])
    builder.add_blank_line()
    names = []
    for member in members:
        name = f"{member}{class_name}{kind.capitalize()}"
        names.append(name)
        builder.add_raw(
            f'export class {name} extends Schema.TaggedClass<{name}>()("{name}", {{\n'
            "  id: Schema.String,\n"
            "}) {}\n"
        )
        builder.add_blank_line()
    builder.add_raw(f"export type {class_name}{kind.capitalize()} = {' | '.join(names)};\n")
    return builder.render()


def generate_commands(ctx: TemplateContext) -> str:
    return _generate_cqrs(ctx, "Commands", "command", ("Create", "Update", "Delete"))


def generate_queries(ctx: TemplateContext) -> str:
    return _generate_cqrs(ctx, "Queries", "query", ("Get", "List"))


def generate_projections(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    builder = CodeBuilder()
    builder.add_file_header(f"{class_name} Projections", "Read models built from domain events.")
    builder.add_blank_line()
    builder.add_imports([Import(source="effect", names=("Schema",))])
    builder.add_blank_line()
    builder.add_raw(
        f"export const {class_name}Summary = Schema.Struct({{\n"
        "  id: Schema.String,\n"
        "  updatedAt: Schema.DateFromSelf,\n"
        "});\n"
        f"export type {class_name}Summary = typeof {class_name}Summary.Type;\n"
    )
    return builder.render()


def generate_rpc(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    entity = entity_names(ctx)[0]
    builder = CodeBuilder()
    builder.add_file_header(f"{class_name} RPC Definitions", f"RPC endpoints for the {class_name} domain.")
    builder.add_blank_line()
    builder.add_imports(
        [
            Import(source="@effect/rpc", names=("Rpc", "RpcGroup")),
            Import(source="effect", names=("Schema",)),
            Import(source="./entities", names=(entity,)),
            Import(source="./errors", names=(f"{class_name}NotFoundRpcError",)),
        ]
    )
    builder.add_blank_line()
    builder.add_raw(
        f"export class {class_name}Rpcs extends RpcGroup.make(\n"
        f'  Rpc.make("get{class_name}", {{\n'
        "    payload: { id: Schema.String },\n"
        f"    success: {entity},\n"
        f"    error: {class_name}NotFoundRpcError,\n"
        "  }),\n"
        ") {}\n"
    )
    return builder.render()


def generate_types(ctx: TemplateContext) -> str:
    class_name = ctx.class_name
    entities = entity_names(ctx)
    exports: list[tuple[str, tuple[str, ...]]] = []
    for entity in entities:
        exports.append(
            (
                f"./lib/entities/{derive_naming(entity).file_name}",
                (entity, f"{entity}Id", f"Create{entity}Input", f"Update{entity}Input"),
            )
        )
    exports.append(("./lib/errors", (f"{base_error_name(ctx)}s",)))
    exports.append(("./lib/events", (f"{class_name}Event",)))
    exports.append(("./lib/ports", (f"{class_name}RepositoryShape",)))
    if ctx.flags.include_cqrs:
        exports.append(("./lib/commands", (f"{class_name}Command",)))
        exports.append(("./lib/queries", (f"{class_name}Query",)))
        exports.append(("./lib/projections", (f"{class_name}Summary",)))
    if ctx.flags.include_rpc:
        exports.append(("./lib/rpc", (f"{class_name}Rpcs",)))
    return generate_types_only_file(ctx, exports)


def generate_index(ctx: TemplateContext) -> str:
    modules = ["./lib/errors", "./lib/entities", "./lib/events", "./lib/ports"]
    if ctx.flags.include_cqrs:
        modules += ["./lib/commands", "./lib/queries", "./lib/projections"]
    if ctx.flags.include_rpc:
        modules.append("./lib/rpc")
    return generate_barrel_file(ctx, modules)
