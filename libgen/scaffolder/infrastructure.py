"""Infrastructure file step.

Writes the files that make a directory a buildable workspace project:
``package.json``, ``tsconfig.json``, ``tsconfig.lib.json``, ``project.json``
and ``README.md``.  All five are rendered from Jinja2 templates and written
through the storage adapter before any domain file.
"""

from __future__ import annotations

import asyncio
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..kinds import LibraryKind, PlatformType
from ..metadata import ProjectMetadata
from ..storage.adapter import StorageAdapter
from .exports import ExportMap, base_exports
from .templates import TemplateRenderer

# Template name -> file name, in write order.
INFRASTRUCTURE_FILES: tuple[tuple[str, str], ...] = (
    ("package.json.j2", "package.json"),
    ("tsconfig.json.j2", "tsconfig.json"),
    ("tsconfig.lib.json.j2", "tsconfig.lib.json"),
    ("project.json.j2", "project.json"),
    ("README.md.j2", "README.md"),
)

_TSCONFIG_TYPES: dict[PlatformType, list[str]] = {
    PlatformType.NODE: ["node"],
    PlatformType.BROWSER: [],
    PlatformType.UNIVERSAL: ["node"],
    PlatformType.EDGE: [],
}


class InfrastructureOptions(BaseModel):
    """Everything the infrastructure step needs for one library."""

    model_config = ConfigDict(frozen=True)

    kind: LibraryKind
    metadata: ProjectMetadata
    platform: PlatformType
    class_name: str
    additional_exports: ExportMap = Field(default_factory=dict)
    entry_points: tuple[str, ...] = Field(
        default=(),
        description="Extra build entry points relative to the project root (src/server.ts)",
    )
    dependencies: dict[str, str] = Field(default_factory=lambda: {"effect": "^3.0.0"})
    usage_type: str | None = None


def build_targets(options: InfrastructureOptions) -> dict[str, Any]:
    """Return the ``project.json`` build, lint, typecheck and test targets."""
    root = options.metadata.project_root
    build_options: dict[str, Any] = {
        "outputPath": f"dist/{root}",
        "main": f"{root}/src/index.ts",
        "tsConfig": f"{root}/tsconfig.lib.json",
    }
    if options.entry_points:
        build_options["additionalEntryPoints"] = [f"{root}/{entry}" for entry in options.entry_points]
    build_options.update(
        {
            "assets": [f"{root}/*.md"],
            "batch": True,
            "declaration": True,
            "declarationMap": True,
            "clean": False,
        }
    )
    return {
        "build": {
            "executor": "@nx/js:tsc",
            "outputs": ["{options.outputPath}"],
            "options": build_options,
        },
        "lint": {
            "executor": "@nx/eslint:lint",
            "outputs": ["{options.outputFile}"],
            "options": {"lintFilePatterns": [f"{root}/**/*.ts"]},
        },
        "typecheck": {
            "executor": "nx:run-commands",
            "options": {"command": f"tsc --noEmit -p {root}/tsconfig.lib.json"},
        },
        "test": {
            "executor": "@nx/vite:test",
            "outputs": ["{workspaceRoot}/coverage/{projectRoot}"],
            "options": {"config": f"{root}/vitest.config.ts", "passWithNoTests": True},
        },
    }


def build_context(options: InfrastructureOptions) -> dict[str, Any]:
    """Return the template context shared by every infrastructure template."""
    metadata = options.metadata
    return {
        "kind": options.kind.value,
        "class_name": options.class_name,
        "project_name": metadata.project_name,
        "package_name": metadata.package_name,
        "description": metadata.description,
        "source_root": metadata.source_root,
        "offset_from_root": metadata.offset_from_root,
        "tags": list(metadata.tags),
        "exports": {**base_exports(), **options.additional_exports},
        "dependencies": dict(options.dependencies),
        "types": _TSCONFIG_TYPES[options.platform],
        "targets": build_targets(options),
        "usage_type": options.usage_type or options.class_name,
    }


def render_infrastructure_files(
    options: InfrastructureOptions,
    renderer: TemplateRenderer | None = None,
) -> list[tuple[str, str]]:
    """Render the infrastructure files as ``(path, content)`` pairs, in order."""
    renderer = renderer or TemplateRenderer()
    context = build_context(options)
    root = options.metadata.project_root
    return [
        (f"{root}/{file_name}", renderer.render(template, context))
        for template, file_name in INFRASTRUCTURE_FILES
    ]


async def generate_infrastructure_files(
    adapter: StorageAdapter,
    options: InfrastructureOptions,
    renderer: TemplateRenderer | None = None,
) -> list[str]:
    """Write the infrastructure files for one library.

    Returns:
        The written paths, in template order.

    Raises:
        StorageError: If any write fails; the caller aborts the generation.
    """
    files = render_infrastructure_files(options, renderer)
    await asyncio.gather(*(adapter.write_file(path, content) for path, content in files))
    return [path for path, _ in files]
