"""libgen configuration.

Typed configuration for the generators.  ``WorkspaceConfig`` is the only
configuration the generator cores consume; ``LibgenConfig`` holds the
user-level defaults a wrapper builds it from (environment variables or a saved
JSON file).  The cores never read environment variables themselves.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from pathlib import Path, PurePosixPath
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError

DEFAULT_SCOPE = "@workspace"
DEFAULT_LIBRARIES_ROOT = "libs"

_SCOPE_PATTERN = re.compile(r"^@[a-z0-9][a-z0-9._~-]*$")


class WorkspaceConfig(BaseModel):
    """Workspace facts every generator core needs.

    Attributes:
        workspace_root: Directory containing the monorepo.
        scope: npm scope for generated packages (``@acme``).
        libraries_root: Workspace-relative directory holding libraries.
    """

    model_config = ConfigDict(frozen=True)

    workspace_root: str = Field(..., min_length=1)
    scope: str = Field(default=DEFAULT_SCOPE)
    libraries_root: str = Field(default=DEFAULT_LIBRARIES_ROOT)

    @field_validator("scope")
    @classmethod
    def _check_scope(cls, value: str) -> str:
        if not _SCOPE_PATTERN.match(value):
            raise ValueError(
                f"scope must look like '@name' (lowercase, no slashes), got {value!r}"
            )
        return value

    @field_validator("libraries_root")
    @classmethod
    def _check_libraries_root(cls, value: str) -> str:
        parts = PurePosixPath(value.strip().strip("/")).parts
        cleaned = "/".join(parts)
        if not cleaned:
            raise ValueError("libraries_root cannot be empty")
        if value.startswith("/") or ".." in parts:
            raise ValueError(
                f"libraries_root must be a path inside the workspace, got {value!r}"
            )
        return cleaned


def resolve_workspace_config(
    workspace_root: str,
    workspace: WorkspaceConfig | Mapping[str, Any] | None = None,
) -> WorkspaceConfig:
    """Return a validated ``WorkspaceConfig``.

    Args:
        workspace_root: Root reported by the storage adapter; used when
            *workspace* is omitted or does not name a root itself.
        workspace: An explicit configuration, a raw mapping of its fields,
            or ``None`` for the defaults.

    Raises:
        ConfigurationError: If the supplied configuration is malformed.
    """
    if isinstance(workspace, WorkspaceConfig):
        return workspace

    raw: dict[str, Any] = {"workspace_root": workspace_root}
    if workspace is not None:
        if not isinstance(workspace, Mapping):
            raise ConfigurationError(
                f"Workspace configuration must be a mapping, got {type(workspace).__name__}"
            )
        raw.update(workspace)

    try:
        return WorkspaceConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid workspace configuration: {exc}") from exc


class LibgenConfig(BaseModel):
    """User-level defaults for library generation.

    Instances are created by a wrapper (usually via :meth:`from_env`) and
    turned into a ``WorkspaceConfig`` with :meth:`workspace`.
    """

    workspace_root: Path = Field(default=Path("."))
    scope: str = Field(default=DEFAULT_SCOPE)
    libraries_root: str = Field(default=DEFAULT_LIBRARIES_ROOT)
    config_file: str = Field(default=".libgen.json")

    @property
    def config_path(self) -> Path:
        """Path to the persisted configuration inside the workspace."""
        return self.workspace_root / self.config_file

    def workspace(self) -> WorkspaceConfig:
        """Build the validated ``WorkspaceConfig`` for the generator cores."""
        return resolve_workspace_config(
            str(self.workspace_root),
            {"scope": self.scope, "libraries_root": self.libraries_root},
        )

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path | None = None) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file. Defaults to :attr:`config_path`.

        Returns:
            The path where the file was written.
        """
        target = path or self.config_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "LibgenConfig":
        """Load a previously-saved configuration from JSON.

        Raises:
            ConfigurationError: If the file is not a valid configuration.
        """
        raw = Path(path).read_text(encoding="utf-8")
        try:
            return cls.model_validate_json(raw)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid configuration file {path}: {exc}") from exc

    @classmethod
    def from_env(cls) -> "LibgenConfig":
        """Build a ``LibgenConfig`` from environment variables.

        Recognised variables (all optional):
            LIBGEN_WORKSPACE_ROOT, LIBGEN_SCOPE, LIBGEN_LIBRARIES_ROOT.
        """
        return cls(
            workspace_root=Path(os.environ.get("LIBGEN_WORKSPACE_ROOT", ".")),
            scope=os.environ.get("LIBGEN_SCOPE", DEFAULT_SCOPE),
            libraries_root=os.environ.get("LIBGEN_LIBRARIES_ROOT", DEFAULT_LIBRARIES_ROOT),
        )
