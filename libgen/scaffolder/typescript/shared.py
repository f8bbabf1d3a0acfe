"""Template pieces shared by every library kind.

* ``generate_errors_file``: base error, standard errors per kind, optional
  RPC-serialisable schemas, union type and type guards.
* ``generate_layers_file``: Live/Test/Dev/Auto layer variants, or one
  section per platform.
* ``generate_types_only_file``: a ``types.ts`` made only of
  ``export type`` statements.
* ``generate_barrel_file``: the ``index.ts`` that re-exports a library.
"""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict

from ...kinds import LibraryKind
from ..context import TemplateContext
from .builder import CodeBuilder, Import


class ErrorField(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: str = "string"
    optional: bool = False


class ErrorType(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    fields: tuple[ErrorField, ...] = ()


_DOMAIN_ERRORS: tuple[ErrorType, ...] = (
    ErrorType(
        name="NotFound",
        description="Error when entity is not found",
        fields=(ErrorField(name="id"),),
    ),
    ErrorType(
        name="Validation",
        description="Error when validation fails",
        fields=(ErrorField(name="field"), ErrorField(name="reason")),
    ),
    ErrorType(
        name="Conflict",
        description="Error when operation conflicts with existing state",
        fields=(ErrorField(name="conflictingId"),),
    ),
    ErrorType(
        name="Config",
        description="Error when configuration is invalid",
        fields=(ErrorField(name="configKey"),),
    ),
    ErrorType(
        name="Connection",
        description="Error when connection fails",
        fields=(ErrorField(name="target"),),
    ),
    ErrorType(
        name="Timeout",
        description="Error when operation times out",
        fields=(ErrorField(name="operation"), ErrorField(name="timeoutMs", type="number")),
    ),
    ErrorType(
        name="Internal",
        description="Internal error - unexpected system failure",
        fields=(ErrorField(name="operation"),),
    ),
)

_SERVICE_ERRORS: tuple[ErrorType, ...] = (
    ErrorType(
        name="NotFound",
        description="Error when resource is not found",
        fields=(ErrorField(name="resource"),),
    ),
    ErrorType(
        name="Validation",
        description="Error when input validation fails",
        fields=(ErrorField(name="reason"),),
    ),
    ErrorType(
        name="Internal",
        description="Internal service error",
        fields=(ErrorField(name="operation"),),
    ),
)

_ERROR_DESCRIPTIONS: dict[LibraryKind, str] = {
    LibraryKind.CONTRACT: "Domain error definitions using Data.TaggedError",
    LibraryKind.DATA_ACCESS: "Repository error definitions for data access operations",
    LibraryKind.FEATURE: "Feature service error definitions",
    LibraryKind.INFRA: "Infrastructure service error definitions",
    LibraryKind.PROVIDER: "Provider service error definitions for external API integration",
}

_ERROR_ROLES: dict[LibraryKind, str] = {
    LibraryKind.CONTRACT: "These are domain errors; they represent business rule violations.",
    LibraryKind.DATA_ACCESS: "These are repository errors; they represent data access failures.",
}

_SCHEMA_TYPES = {"string": "Schema.String", "number": "Schema.Number", "boolean": "Schema.Boolean"}


def standard_error_types(kind: LibraryKind) -> tuple[ErrorType, ...]:
    """Return the standard error classes generated for *kind*."""
    if kind in (LibraryKind.CONTRACT, LibraryKind.DATA_ACCESS):
        return _DOMAIN_ERRORS
    return _SERVICE_ERRORS


def error_suffix(kind: LibraryKind) -> str:
    if kind is LibraryKind.CONTRACT:
        return ""
    if kind is LibraryKind.DATA_ACCESS:
        return "Repository"
    return "Service"


def base_error_name(ctx: TemplateContext) -> str:
    return f"{ctx.class_name}{error_suffix(ctx.kind)}Error"


def generate_errors_file(
    ctx: TemplateContext,
    *,
    include_rpc_errors: bool = False,
) -> str:
    """Generate an ``errors.ts`` with the standard error classes for the kind."""
    class_name = ctx.class_name
    kind = ctx.kind
    base = base_error_name(ctx)
    error_types = standard_error_types(kind)

    builder = CodeBuilder()
    builder.add_file_header(
        f"{class_name} Errors",
        _ERROR_DESCRIPTIONS[kind],
        [
            f"This file defines error types for the {class_name} domain.",
            "All errors extend Data.TaggedError for Effect integration.",
            _ERROR_ROLES.get(kind, "These are service errors; they represent operation failures."),
        ],
    )
    builder.add_blank_line()
    builder.add_imports([Import(source="effect", names=("Data",))])
    if include_rpc_errors:
        builder.add_imports([Import(source="effect", names=("Schema",))])
    builder.add_blank_line()

    builder.add_comment(f"Base error for all {class_name} {kind.value} operations")
    builder.add_raw(
        f'export class {base} extends Data.TaggedError("{base}")<{{\n'
        "  readonly message: string;\n"
        "  readonly cause?: unknown;\n"
        "}> {\n"
        f"  static create(message: string, cause?: unknown): {base} {{\n"
        f"    return new {base}({{ message, cause }});\n"
        "  }\n"
        "}\n"
    )
    builder.add_blank_line()

    for error_type in error_types:
        _add_error_class(builder, class_name, error_type)
        builder.add_blank_line()

    if include_rpc_errors:
        builder.add_section_comment("RPC Error Schemas (Serializable)")
        builder.add_blank_line()
        builder.add_comment("These errors can be serialized across RPC boundaries")
        for error_type in error_types:
            rpc_name = f"{class_name}{error_type.name}RpcError"
            builder.add_raw(
                f"export class {rpc_name} extends Schema.TaggedError<{rpc_name}>()(\n"
                f'  "{rpc_name}",\n'
                "  {\n"
                "    message: Schema.String,\n"
            )
            for field in error_type.fields:
                schema = _SCHEMA_TYPES.get(field.type, "Schema.String")
                builder.add_raw(f"    {field.name}: {schema},\n")
            builder.add_raw("  },\n) {}\n")
            builder.add_blank_line()

    all_errors = [base, *(f"{class_name}{e.name}Error" for e in error_types)]
    builder.add_comment(f"Union type of all {class_name} {kind.value} errors")
    builder.add_raw(f"export type {base}s =\n")
    builder.add_lines(f"  | {name}" for name in all_errors[:-1])
    builder.add_raw(f"  | {all_errors[-1]};\n")
    builder.add_blank_line()

    builder.add_section_comment("Type Guards")
    builder.add_blank_line()
    for error_type in error_types:
        full_name = f"{class_name}{error_type.name}Error"
        builder.add_raw(
            f"export function is{full_name}(error: unknown): error is {full_name} {{\n"
            f"  return error instanceof {full_name};\n"
            "}\n"
        )
        builder.add_blank_line()

    return builder.render()


def _add_error_class(builder: CodeBuilder, class_name: str, error_type: ErrorType) -> None:
    full_name = f"{class_name}{error_type.name}Error"
    builder.add_comment(error_type.description)
    builder.add_raw(f'export class {full_name} extends Data.TaggedError("{full_name}")<{{\n')
    builder.add_raw("  readonly message: string;\n")
    for field in error_type.fields:
        optional = "?" if field.optional else ""
        builder.add_raw(f"  readonly {field.name}{optional}: {field.type};\n")
    builder.add_raw("  readonly cause?: unknown;\n}> {\n")

    params = "".join(
        f"    {f.name}{'?' if f.optional else ''}: {f.type},\n" for f in error_type.fields
    )
    assignments = "".join(f"{f.name}, " for f in error_type.fields)
    builder.add_raw(
        "  static create(\n"
        "    message: string,\n"
        f"{params}"
        "    cause?: unknown\n"
        f"  ): {full_name} {{\n"
        f"    return new {full_name}({{ message, {assignments}cause }});\n"
        "  }\n"
        "}\n"
    )


# ---------------------------------------------------------------------------
# Layers
# ---------------------------------------------------------------------------

_LAYER_DESCRIPTIONS: dict[LibraryKind, str] = {
    LibraryKind.DATA_ACCESS: "Repository layer compositions for dependency injection",
    LibraryKind.FEATURE: "Feature service layer compositions",
    LibraryKind.INFRA: "Infrastructure service layer compositions",
    LibraryKind.PROVIDER: "Provider service layer compositions",
}

_VARIANT_NOTES = {
    "Live": "Production layer",
    "Test": "Test layer with in-memory implementations",
    "Dev": "Development layer with verbose logging",
}


def generate_layers_file(
    ctx: TemplateContext,
    service_name: str,
    service_import: str,
    *,
    layer_source: str | None = None,
    dependencies: Sequence[str] = (),
    variants: Sequence[str] = ("Live", "Test", "Auto"),
    platform: str | None = None,
) -> str:
    """Generate a ``layers.ts`` wiring *service_name* and its dependencies.

    Variant layers are read from static members of *layer_source*
    (``Source.Live``, ``Source.Test``...), which defaults to *service_name*.

    With *platform* set (``"Server"``, ``"Client"`` or ``"Edge"``) a single
    platform section is emitted instead of the standard variants.
    """
    source = layer_source or service_name
    builder = CodeBuilder()
    title = f"{ctx.class_name} {platform} Layers" if platform else f"{ctx.class_name} Layers"
    sections = [
        "Layers are composable units that wire up services and their dependencies.",
        "",
        "Layers are accessed via static members:",
    ]
    sections += [f"  - {service_name}.{v}" for v in variants if v != "Auto"]
    if "Auto" in variants:
        sections.append(f"  - {service_name}Auto (selected from NODE_ENV)")
    builder.add_file_header(
        title,
        _LAYER_DESCRIPTIONS.get(ctx.kind, "Layer compositions for dependency injection"),
        sections,
    )
    builder.add_blank_line()

    builder.add_imports(
        [
            Import(source="effect", names=("Layer",)),
            Import(source=service_import, names=(source,)),
        ]
    )
    if dependencies:
        builder.add_blank_line()
        builder.add_comment("Service dependencies")
        builder.add_imports(Import(source=f"./{dep}", names=(dep,)) for dep in dependencies)
    builder.add_blank_line()

    if platform:
        builder.add_section_comment(f"{platform} Layers")
        builder.add_blank_line()
        _add_layer(builder, f"{service_name}{platform}Live", f"{source}.Live", dependencies, "Live")
        return builder.render()

    for variant in variants:
        if variant == "Auto":
            builder.add_comment(f"{service_name}Auto - selects a layer from NODE_ENV")
            builder.add_raw(
                f"export const {service_name}Auto =\n"
                '  process.env["NODE_ENV"] === "production"\n'
                f"    ? {service_name}Live\n"
                '    : process.env["NODE_ENV"] === "test"\n'
                f"      ? {service_name}Test\n"
                f"      : {service_name}{'Dev' if 'Dev' in variants else 'Live'};\n"
            )
        else:
            builder.add_comment(f"{service_name}{variant} - {_VARIANT_NOTES[variant]}")
            _add_layer(builder, f"{service_name}{variant}", f"{source}.{variant}", dependencies, variant)
        builder.add_blank_line()
    return builder.render()


def _add_layer(
    builder: CodeBuilder,
    name: str,
    source: str,
    dependencies: Sequence[str],
    variant: str,
) -> None:
    if not dependencies:
        builder.add_raw(f"export const {name} = {source};\n")
        return
    builder.add_raw(f"export const {name} = {source}.pipe(\n  Layer.provide(\n    Layer.mergeAll(\n")
    builder.add_raw(",\n".join(f"      {dep}.{variant}" for dep in dependencies) + "\n")
    builder.add_raw("    )\n  )\n);\n")


# ---------------------------------------------------------------------------
# Entry files
# ---------------------------------------------------------------------------


def generate_types_only_file(
    ctx: TemplateContext,
    exports: Sequence[tuple[str, Sequence[str]]],
) -> str:
    """Generate ``types.ts``: type-only re-exports for zero-runtime imports."""
    builder = CodeBuilder()
    builder.add_file_header(
        f"{ctx.class_name} Types",
        "Type-only exports",
        [
            "Import from this entry point when only types are needed; it has no",
            "runtime cost:",
            "",
            f'  import type {{ ... }} from "{ctx.metadata.package_name}/types";',
        ],
    )
    builder.add_blank_line()
    for module, names in exports:
        if names:
            builder.add_raw(f'export type {{ {", ".join(names)} }} from "{module}";\n')
    return builder.render()


def generate_barrel_file(
    ctx: TemplateContext,
    modules: Sequence[str],
    *,
    title: str | None = None,
    notes: Sequence[str] = (),
) -> str:
    """Generate a barrel that re-exports every module in *modules*."""
    builder = CodeBuilder()
    builder.add_file_header(
        title or ctx.class_name,
        ctx.metadata.description,
        notes,
    )
    builder.add_blank_line()
    builder.add_lines(f'export * from "{module}";' for module in modules)
    return builder.render()


def generate_platform_entry_file(
    ctx: TemplateContext,
    platform: str,
    modules: Sequence[str],
) -> str:
    """Generate ``server.ts``, ``client.ts`` or ``edge.ts``."""
    notes = {
        "server": "Server-side exports. Safe to import from Node.js only.",
        "client": "Client-side exports. Safe to bundle for the browser.",
        "edge": "Edge runtime exports. No Node.js built-ins.",
    }[platform]
    return generate_barrel_file(
        ctx,
        modules,
        title=f"{ctx.class_name} {platform.capitalize()} Entry",
        notes=[notes],
    )
