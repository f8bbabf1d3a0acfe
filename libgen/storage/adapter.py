"""Storage adapter contract.

Generator cores write through a ``StorageAdapter`` and never touch the
filesystem directly, so the same core runs against a buffered change list or
straight against disk.  Paths are workspace-relative POSIX strings; absolute
paths below the workspace root are accepted and made relative.

Every operation raises a ``StorageError`` subclass on failure:

* ``write_file``      -> ``WriteError`` / ``DirectoryCreationError``
* ``read_file``       -> ``NotFoundError`` / ``ReadError``
* ``make_directory``  -> ``DirectoryCreationError``
* ``list_directory``  -> ``NotFoundError`` / ``StorageError``
* ``remove``          -> ``NotFoundError`` / ``StorageError``
"""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Literal, Protocol, runtime_checkable

from ..errors import StorageError

AdapterMode = Literal["buffered", "direct"]


@runtime_checkable
class StorageAdapter(Protocol):
    """Capability interface implemented by every storage back-end."""

    async def write_file(self, path: str, content: str) -> None:
        """Write *content* to *path*, creating parents and overwriting."""
        ...

    async def read_file(self, path: str) -> str:
        """Return the text content of *path*."""
        ...

    async def exists(self, path: str) -> bool:
        """Return ``True`` if a file or directory exists at *path*."""
        ...

    async def make_directory(self, path: str) -> None:
        """Create *path* and its parents; succeed if it already exists."""
        ...

    async def list_directory(self, path: str) -> list[str]:
        """Return the sorted names of the direct children of *path*."""
        ...

    async def remove(self, path: str, *, recursive: bool = False) -> None:
        """Delete the file or directory at *path*."""
        ...

    def get_workspace_root(self) -> str:
        """Return the absolute workspace root."""
        ...

    def get_mode(self) -> AdapterMode:
        """Return ``"buffered"`` or ``"direct"``."""
        ...


def normalise_path(workspace_root: str | Path, path: str) -> str:
    """Return *path* as a clean workspace-relative POSIX path.

    ``""`` and ``"."`` denote the workspace root itself.

    Raises:
        StorageError: If *path* points outside the workspace root.
    """
    root = Path(workspace_root).as_posix().rstrip("/") or "/"
    candidate = path.replace("\\", "/")
    if candidate.startswith("/"):
        if candidate == root:
            return ""
        prefix = root if root.endswith("/") else f"{root}/"
        if not candidate.startswith(prefix):
            raise StorageError("Path is outside the workspace", path)
        candidate = candidate[len(prefix):]

    cleaned = posixpath.normpath(candidate) if candidate else "."
    if cleaned == "..":
        raise StorageError("Path is outside the workspace", path)
    if cleaned.startswith("../"):
        raise StorageError("Path is outside the workspace", path)
    return "" if cleaned == "." else cleaned
