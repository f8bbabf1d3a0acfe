"""Generator core machinery shared by every library kind.

A generator is a declarative table of file groups.  Each group has a name
from ``GROUP_ORDER``, a flag that switches it on, and a factory listing the
files it contributes.  ``LibraryGenerator.generate`` runs the same steps for
every kind:

1. resolve the workspace configuration
2. derive naming variants and compute project metadata
3. resolve feature flags from the options and the kind's defaults
4. write the infrastructure files (package.json, tsconfig, project.json...)
5. create ``<source_root>/lib``
6. emit every enabled group in ``GROUP_ORDER``
7. emit ``<source_root>/index.ts``
8. return a ``GeneratorResult``

Writes inside a group run concurrently; a group starts only after the previous
one has finished, and the barrel index is always written last.  The first
failing write aborts the run.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..config import WorkspaceConfig, resolve_workspace_config
from ..errors import ConfigurationError
from ..kinds import LibraryKind
from ..metadata import MetadataOverrides, compute_metadata
from ..naming import derive_naming
from ..platform import FeatureFlags, resolve_flags
from ..storage.adapter import StorageAdapter
from .context import TemplateContext
from .exports import additional_exports
from .infrastructure import InfrastructureOptions, generate_infrastructure_files

# Emission order of file groups.  The barrel index follows the last group.
GROUP_ORDER: tuple[str, ...] = ("core", "cqrs", "rpc", "server", "client", "edge")

_GROUP_FLAGS: dict[str, str | None] = {
    "core": None,
    "cqrs": "include_cqrs",
    "rpc": "include_rpc",
    "server": "include_server",
    "client": "include_client",
    "edge": "include_edge",
}

Template = Callable[[TemplateContext], str]


# ---------------------------------------------------------------------------
# File table
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FileSpec:
    """One file, relative to the source root.  No template means an empty file."""

    path: str
    template: Template | None = None

    def render(self, ctx: TemplateContext) -> str:
        return self.template(ctx) if self.template else ""


@dataclass(frozen=True)
class FileGroup:
    """Files that are emitted together when the group's flag is on."""

    name: str
    files: Callable[[TemplateContext], list[FileSpec]]

    def __post_init__(self) -> None:
        if self.name not in _GROUP_FLAGS:
            raise ValueError(f"Unknown file group {self.name!r}; expected one of {GROUP_ORDER}")

    def enabled(self, flags: FeatureFlags) -> bool:
        flag = _GROUP_FLAGS[self.name]
        return flag is None or bool(getattr(flags, flag))


def gitkeep(directory: str) -> FileSpec:
    return FileSpec(f"{directory}/.gitkeep")


# ---------------------------------------------------------------------------
# Options and results
# ---------------------------------------------------------------------------


class GeneratorOptions(BaseModel):
    """Options every kind accepts."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Library name in any case style")
    description: str | None = Field(default=None)
    tags: str | list[str] | None = Field(default=None, description="Comma-separated or list")
    directory: str | None = Field(default=None, description="Parent directory override")


class GeneratedFile(BaseModel):
    """A rendered file ready to be written."""

    model_config = ConfigDict(frozen=True)

    path: str
    content: str


class GeneratorResult(BaseModel):
    """What a generation call produced."""

    project_name: str
    project_root: str
    package_name: str
    source_root: str
    files_generated: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Base generator
# ---------------------------------------------------------------------------


class LibraryGenerator:
    """Base class for the per-kind generator cores.

    Subclasses set ``kind``, ``options_model``, ``groups`` and ``index`` and
    may override :meth:`resolve_flags`, :meth:`extras` and
    :meth:`infrastructure_options`.
    """

    kind: ClassVar[LibraryKind]
    options_model: ClassVar[type[GeneratorOptions]] = GeneratorOptions
    groups: ClassVar[tuple[FileGroup, ...]] = ()
    index: ClassVar[Template]

    # -- Hooks -------------------------------------------------------------

    def resolve_flags(self, options: GeneratorOptions) -> FeatureFlags:
        return resolve_flags(self.kind)

    def extras(self, options: GeneratorOptions) -> dict[str, Any]:
        """Per-kind fields added to the ``TemplateContext``."""
        return {}

    def dependencies(self, ctx: TemplateContext) -> dict[str, str]:
        return {"effect": "^3.0.0"}

    def usage_type(self, ctx: TemplateContext) -> str:
        return f"{ctx.class_name}ServiceShape"

    def infrastructure_options(self, ctx: TemplateContext) -> InfrastructureOptions:
        entry_points = tuple(
            f"src/{name}.ts"
            for name, enabled in (
                ("server", ctx.flags.include_server),
                ("client", ctx.flags.include_client),
                ("edge", ctx.flags.include_edge),
            )
            if enabled
        )
        return InfrastructureOptions(
            kind=self.kind,
            metadata=ctx.metadata,
            platform=ctx.flags.platform,
            class_name=ctx.class_name,
            additional_exports=additional_exports(ctx),
            entry_points=entry_points,
            dependencies=self.dependencies(ctx),
            usage_type=self.usage_type(ctx),
        )

    # -- Pipeline ----------------------------------------------------------

    def parse_options(self, options: GeneratorOptions | Mapping[str, Any]) -> GeneratorOptions:
        if isinstance(options, self.options_model):
            return options
        raw = options.model_dump() if isinstance(options, BaseModel) else options
        try:
            return self.options_model.model_validate(raw)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid {self.kind.value} options: {exc}") from exc

    def build_context(
        self,
        options: GeneratorOptions,
        workspace: WorkspaceConfig,
    ) -> TemplateContext:
        """Steps 2 and 3: naming, metadata and flags."""
        naming = derive_naming(options.name)
        flags = self.resolve_flags(options)
        overrides = MetadataOverrides(
            directory=options.directory,
            description=options.description,
            tags=options.tags,
            platform=flags.platform,
        )
        metadata = compute_metadata(naming, self.kind, workspace, overrides)
        return TemplateContext(
            kind=self.kind,
            naming=naming,
            metadata=metadata,
            flags=flags,
            scope=workspace.scope,
            **self.extras(options),
        )

    def ordered_groups(self) -> list[FileGroup]:
        return sorted(self.groups, key=lambda group: GROUP_ORDER.index(group.name))

    def render_files(self, ctx: TemplateContext) -> list[list[GeneratedFile]]:
        """Render every enabled group, in emission order, index last."""
        source_root = ctx.metadata.source_root
        batches = []
        for group in self.ordered_groups():
            if not group.enabled(ctx.flags):
                continue
            batches.append(
                [
                    GeneratedFile(path=f"{source_root}/{spec.path}", content=spec.render(ctx))
                    for spec in group.files(ctx)
                ]
            )
        batches.append([GeneratedFile(path=f"{source_root}/index.ts", content=self.index(ctx))])
        return batches

    async def generate(
        self,
        adapter: StorageAdapter,
        options: GeneratorOptions | Mapping[str, Any],
        workspace: WorkspaceConfig | Mapping[str, Any] | None = None,
    ) -> GeneratorResult:
        """Generate one library through *adapter*.

        Args:
            adapter: Storage back-end to write through.
            options: Kind-specific options (model or raw mapping).
            workspace: Workspace configuration; defaults are anchored at the
                adapter's workspace root.

        Raises:
            InvalidNameError: If the library name is unusable.
            ConfigurationError: If options or workspace configuration are
                malformed.
            StorageError: If any write fails.
        """
        parsed = self.parse_options(options)
        config = resolve_workspace_config(adapter.get_workspace_root(), workspace)
        ctx = self.build_context(parsed, config)
        metadata = ctx.metadata

        files_generated = await generate_infrastructure_files(
            adapter, self.infrastructure_options(ctx)
        )
        await adapter.make_directory(f"{metadata.source_root}/lib")

        for batch in self.render_files(ctx):
            await asyncio.gather(*(adapter.write_file(f.path, f.content) for f in batch))
            files_generated.extend(f.path for f in batch)

        return GeneratorResult(
            project_name=metadata.project_name,
            project_root=metadata.project_root,
            package_name=metadata.package_name,
            source_root=metadata.source_root,
            files_generated=files_generated,
        )
