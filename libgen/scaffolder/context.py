"""The single argument every template generator receives."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..kinds import LibraryKind
from ..metadata import ProjectMetadata
from ..naming import NamingVariants
from ..platform import FeatureFlags


class TemplateContext(BaseModel):
    """Metadata, naming and resolved flags for one library, plus per-kind extras."""

    model_config = ConfigDict(frozen=True)

    kind: LibraryKind
    naming: NamingVariants
    metadata: ProjectMetadata
    flags: FeatureFlags
    scope: str = Field(default="@workspace")

    # contract
    entities: tuple[str, ...] = Field(default=())
    # provider
    external_service: str | None = None
    # data-access
    contract_package: str | None = None

    @property
    def class_name(self) -> str:
        return self.naming.class_name

    @property
    def property_name(self) -> str:
        return self.naming.property_name

    @property
    def file_name(self) -> str:
        return self.naming.file_name

    @property
    def constant_name(self) -> str:
        return self.naming.constant_name
