"""Feature-flag resolution per library kind.

Callers pass loose, optional switches; ``resolve_flags`` turns them into the
fully-resolved ``FeatureFlags`` that gate which file groups are emitted.

Precedence for the client/server split:

1. ``contract`` and ``data-access`` libraries never split by platform.
2. An explicit ``include_client_server`` wins over the platform.
3. Otherwise the platform decides (``node`` -> server, ``browser`` -> client,
   ``universal`` -> both).

Feature and infra libraries always carry their server layer. Provider
libraries take their server entry from the platform alone (``node`` or
``universal``); ``include_client_server`` only ever adds a client entry.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from .kinds import DEFAULT_PLATFORMS, LibraryKind, PlatformType

_SERVER_PLATFORMS = frozenset({PlatformType.NODE, PlatformType.UNIVERSAL})
_CLIENT_PLATFORMS = frozenset({PlatformType.BROWSER, PlatformType.UNIVERSAL})


class FeatureFlags(BaseModel):
    """Resolved switches for one generation call."""

    model_config = ConfigDict(frozen=True)

    platform: PlatformType
    include_cqrs: bool = False
    include_rpc: bool = False
    include_server: bool = False
    include_client: bool = False
    include_edge: bool = False


def supports_platform_exports(kind: LibraryKind) -> bool:
    """Return ``True`` if *kind* may emit server/client/edge entry points."""
    return kind not in (LibraryKind.CONTRACT, LibraryKind.DATA_ACCESS)


def determine_platform_exports(
    kind: LibraryKind,
    platform: PlatformType,
    include_client_server: bool | None = None,
) -> tuple[bool, bool]:
    """Return ``(server, client)`` entry-point switches for *kind*."""
    if not supports_platform_exports(kind):
        return False, False
    if include_client_server is True:
        return True, True
    if include_client_server is False:
        return False, False
    return platform in _SERVER_PLATFORMS, platform in _CLIENT_PLATFORMS


def resolve_flags(
    kind: LibraryKind,
    *,
    platform: PlatformType | str | None = None,
    include_client_server: bool | None = None,
    include_cqrs: bool = False,
    include_rpc: bool = False,
    include_edge: bool = False,
) -> FeatureFlags:
    """Resolve the feature flags for *kind* using its defaults."""
    kind = LibraryKind(kind)
    resolved = PlatformType(platform) if platform else DEFAULT_PLATFORMS[kind]

    if kind is LibraryKind.DATA_ACCESS:
        return FeatureFlags(platform=resolved)
    if kind is LibraryKind.CONTRACT:
        return FeatureFlags(
            platform=resolved, include_cqrs=include_cqrs, include_rpc=include_rpc
        )

    edge = resolved is PlatformType.EDGE

    if kind is LibraryKind.PROVIDER:
        # The platform alone decides the server entry; the override can only
        # add a client.
        return FeatureFlags(
            platform=resolved,
            include_server=resolved in _SERVER_PLATFORMS,
            include_client=include_client_server is True or resolved in _CLIENT_PLATFORMS,
            include_edge=edge,
        )

    _, client = determine_platform_exports(kind, resolved, include_client_server)

    # When include_client_server is False the server layer still stays for
    # feature and infra libraries; only the client split is dropped.
    return FeatureFlags(
        platform=resolved,
        include_cqrs=include_cqrs if kind is LibraryKind.FEATURE else False,
        include_rpc=include_rpc if kind is LibraryKind.FEATURE else False,
        include_server=True,
        include_client=client,
        include_edge=edge or include_edge,
    )
