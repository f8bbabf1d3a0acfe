"""Closed enumerations shared across libgen."""

from __future__ import annotations

from enum import Enum


class LibraryKind(str, Enum):
    """Kind of library to scaffold.  Fixed for one generation call."""

    CONTRACT = "contract"
    DATA_ACCESS = "data-access"
    FEATURE = "feature"
    INFRA = "infra"
    PROVIDER = "provider"


class PlatformType(str, Enum):
    """Runtime a library targets."""

    NODE = "node"
    BROWSER = "browser"
    UNIVERSAL = "universal"
    EDGE = "edge"


# Platform assumed when the caller does not pick one.
DEFAULT_PLATFORMS: dict[LibraryKind, PlatformType] = {
    LibraryKind.CONTRACT: PlatformType.UNIVERSAL,
    LibraryKind.DATA_ACCESS: PlatformType.NODE,
    LibraryKind.FEATURE: PlatformType.UNIVERSAL,
    LibraryKind.INFRA: PlatformType.NODE,
    LibraryKind.PROVIDER: PlatformType.NODE,
}
