"""Project paths and package metadata for a generated library.

``compute_metadata`` turns naming variants, the library kind and the workspace
configuration into the ``ProjectMetadata`` every template receives.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict, Field

from .config import WorkspaceConfig
from .errors import ConfigurationError
from .kinds import DEFAULT_PLATFORMS, LibraryKind, PlatformType
from .naming import NamingVariants

_DESCRIPTIONS: dict[LibraryKind, str] = {
    LibraryKind.CONTRACT: "Contract library for {class_name}",
    LibraryKind.DATA_ACCESS: "Data access library for {class_name}",
    LibraryKind.FEATURE: "Feature library for {class_name}",
    LibraryKind.INFRA: "Infrastructure library for {class_name}",
    LibraryKind.PROVIDER: "Provider library for {class_name}",
}


class ProjectMetadata(BaseModel):
    """Where a library lives and how it is published."""

    model_config = ConfigDict(frozen=True)

    project_name: str = Field(..., description="Build-graph project name (contract-product)")
    project_root: str = Field(..., description="Workspace-relative project directory")
    source_root: str = Field(..., description="Always <project_root>/src")
    package_name: str = Field(..., description="npm package name (@scope/contract-product)")
    offset_from_root: str = Field(..., description="'../' once per project_root segment")
    description: str = Field(default="")
    tags: tuple[str, ...] = Field(default=())


class MetadataOverrides(BaseModel):
    """Caller-supplied values that replace the computed defaults."""

    model_config = ConfigDict(frozen=True)

    directory: str | None = None
    description: str | None = None
    tags: str | tuple[str, ...] | list[str] | None = None
    platform: PlatformType | None = None


def offset_from_root(project_root: str) -> str:
    """Return the relative path from *project_root* back to the workspace root.

    Examples::

        offset_from_root("libs/contract/user") -> "../../../"
        offset_from_root("apps/web")           -> "../../"
    """
    return "../" * len(project_root.split("/"))


def parse_tags(
    tags: str | Iterable[str] | None,
    defaults: Iterable[str],
) -> tuple[str, ...]:
    """Merge user tags into *defaults*, dropping blanks and duplicates.

    Tags may be a comma-separated string or any iterable of strings.  Order
    is preserved: defaults first, then user tags in the order given.
    """
    if tags is None:
        extra: list[str] = []
    elif isinstance(tags, str):
        extra = tags.split(",")
    else:
        extra = list(tags)

    merged: dict[str, None] = {}
    for tag in [*defaults, *extra]:
        cleaned = tag.strip()
        if cleaned:
            merged.setdefault(cleaned, None)
    return tuple(merged)


def default_tags(
    kind: LibraryKind,
    naming: NamingVariants,
    platform: PlatformType,
) -> list[str]:
    """Return the tags every library of *kind* starts with."""
    if kind is LibraryKind.CONTRACT:
        return ["type:contract", f"domain:{naming.file_name}", "platform:universal"]
    if kind is LibraryKind.DATA_ACCESS:
        return ["type:data-access", "scope:shared", "platform:server"]
    return [f"type:{kind.value}", "scope:shared", f"platform:{platform.value}"]


def _normalise_directory(directory: str) -> str:
    # PurePosixPath drops "." and empty segments.
    parts = PurePosixPath(directory.strip().strip("/")).parts
    cleaned = "/".join(parts)
    if not cleaned or ".." in parts:
        raise ConfigurationError(
            f"directory must be a path inside the workspace, got {directory!r}"
        )
    return cleaned


def compute_metadata(
    naming: NamingVariants,
    kind: LibraryKind,
    workspace: WorkspaceConfig,
    overrides: MetadataOverrides | None = None,
) -> ProjectMetadata:
    """Compute the project metadata for one library.

    Args:
        naming: Variants derived from the library name.
        kind: Library kind; selects the default subdirectory and tags.
        workspace: Scope and libraries root of the workspace.
        overrides: Optional directory, description, tags and platform.

    Raises:
        ConfigurationError: If the workspace or the directory override is
            malformed.
    """
    if not isinstance(workspace, WorkspaceConfig):
        raise ConfigurationError(
            f"Expected a WorkspaceConfig, got {type(workspace).__name__}"
        )
    overrides = overrides or MetadataOverrides()
    kind = LibraryKind(kind)

    project_name = f"{kind.value}-{naming.file_name}"
    if overrides.directory:
        parent = _normalise_directory(overrides.directory)
    else:
        parent = f"{workspace.libraries_root}/{kind.value}"
    project_root = f"{parent}/{naming.file_name}"

    platform = overrides.platform or DEFAULT_PLATFORMS[kind]
    description = overrides.description or _DESCRIPTIONS[kind].format(
        class_name=naming.class_name
    )

    return ProjectMetadata(
        project_name=project_name,
        project_root=project_root,
        source_root=f"{project_root}/src",
        package_name=f"{workspace.scope}/{project_name}",
        offset_from_root=offset_from_root(project_root),
        description=description,
        tags=parse_tags(overrides.tags, default_tags(kind, naming, platform)),
    )
