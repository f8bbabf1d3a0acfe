"""Contract library generator core."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from ..errors import InvalidNameError
from ..kinds import LibraryKind
from ..naming import derive_naming, entity_file_name
from ..platform import FeatureFlags, resolve_flags
from .context import TemplateContext
from .generator import FileGroup, FileSpec, GeneratorOptions, LibraryGenerator
from .typescript import contract as templates


class ContractOptions(GeneratorOptions):
    include_cqrs: bool = Field(default=False, description="Emit commands, queries and projections")
    include_rpc: bool = Field(default=False, description="Emit RPC definitions and RPC errors")
    entities: list[str] = Field(
        default_factory=list,
        description="Entity names; defaults to the library's class name",
    )


# The entities barrel owns lib/entities/index.ts.
RESERVED_ENTITY_FILE_NAMES = frozenset({"index"})


def unique_entities(entities: list[str], library_name: str) -> tuple[str, ...]:
    """Return *entities* deduplicated by file name, rejecting reserved names.

    With no entities the library name itself becomes the entity, so it is
    checked against the reserved names as well.
    """
    by_file: dict[str, str] = {}
    for entity in entities or [library_name]:
        file_name = derive_naming(entity).file_name
        if file_name in RESERVED_ENTITY_FILE_NAMES:
            raise InvalidNameError(
                entity, f"entity file name {file_name!r} is reserved for the entities barrel"
            )
        by_file.setdefault(file_name, entity)
    return tuple(by_file.values()) if entities else ()


def _entity_spec(entity: str) -> FileSpec:
    return FileSpec(
        f"lib/entities/{entity_file_name(entity)}.ts",
        lambda ctx: templates.generate_entity(ctx, entity),
    )


def _core_files(ctx: TemplateContext) -> list[FileSpec]:
    return [
        FileSpec("lib/errors.ts", templates.generate_errors),
        FileSpec("lib/ports.ts", templates.generate_ports),
        FileSpec("lib/events.ts", templates.generate_events),
        *(_entity_spec(entity) for entity in templates.entity_names(ctx)),
        FileSpec("lib/entities/index.ts", templates.generate_entities_index),
        FileSpec("types.ts", templates.generate_types),
    ]


def _cqrs_files(ctx: TemplateContext) -> list[FileSpec]:
    return [
        FileSpec("lib/commands.ts", templates.generate_commands),
        FileSpec("lib/queries.ts", templates.generate_queries),
        FileSpec("lib/projections.ts", templates.generate_projections),
    ]


def _rpc_files(ctx: TemplateContext) -> list[FileSpec]:
    return [FileSpec("lib/rpc.ts", templates.generate_rpc)]


class ContractGenerator(LibraryGenerator):
    """Entities, errors, events and ports for one domain."""

    kind = LibraryKind.CONTRACT
    options_model = ContractOptions
    groups = (
        FileGroup("core", _core_files),
        FileGroup("cqrs", _cqrs_files),
        FileGroup("rpc", _rpc_files),
    )
    index = staticmethod(templates.generate_index)

    def resolve_flags(self, options: ContractOptions) -> FeatureFlags:
        return resolve_flags(
            self.kind,
            include_cqrs=options.include_cqrs,
            include_rpc=options.include_rpc,
        )

    def extras(self, options: ContractOptions) -> dict[str, Any]:
        return {"entities": unique_entities(options.entities, options.name)}

    def dependencies(self, ctx: TemplateContext) -> dict[str, str]:
        deps = {"effect": "^3.0.0"}
        if ctx.flags.include_rpc:
            deps["@effect/rpc"] = "^0.69.0"
        return deps

    def usage_type(self, ctx: TemplateContext) -> str:
        return templates.entity_names(ctx)[0]


async def generate_contract(adapter, options, workspace=None):
    """Generate a contract library; see :meth:`LibraryGenerator.generate`."""
    return await ContractGenerator().generate(adapter, options, workspace)
