"""Buffered (virtual tree) adapter.

Writes and deletes are recorded in an ordered change list layered over a
read-through view of the real workspace.  Nothing touches disk until
:meth:`BufferedAdapter.flush` applies the changes; :meth:`discard` drops them.
This makes a whole generation previewable and all-or-nothing.

The change list keeps one entry per path, positioned by the most recent
action on that path, so replaying it in order reproduces the virtual tree.
"""

from __future__ import annotations

import asyncio
import posixpath
import shutil
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict

from ..errors import (
    DirectoryCreationError,
    NotFoundError,
    StorageError,
    WriteError,
)
from .adapter import AdapterMode, normalise_path
from .direct import _make_directory, _read_text, _write_text

ChangeKind = Literal["create", "update", "delete"]


class FileChange(BaseModel):
    """One pending change in the buffered tree."""

    model_config = ConfigDict(frozen=True)

    path: str
    kind: ChangeKind
    content: str | None = None


def _ancestors(path: str) -> list[str]:
    """Return the proper ancestors of *path*, nearest first (root excluded)."""
    parents = []
    parent = posixpath.dirname(path)
    while parent:
        parents.append(parent)
        parent = posixpath.dirname(parent)
    return parents


def _is_within(path: str, directory: str) -> bool:
    return path == directory or path.startswith(f"{directory}/")


class BufferedAdapter:
    """``StorageAdapter`` that records changes and applies them on ``flush``."""

    def __init__(self, workspace_root: str | Path) -> None:
        self._root = Path(workspace_root).resolve()
        self._changes: dict[str, FileChange] = {}
        self._directories: set[str] = set()
        self._removed_directories: set[str] = set()

    def get_workspace_root(self) -> str:
        return self._root.as_posix()

    def get_mode(self) -> AdapterMode:
        return "buffered"

    # -- Change list -------------------------------------------------------

    def list_changes(self) -> list[FileChange]:
        """Return pending changes in application order."""
        return list(self._changes.values())

    def discard(self) -> None:
        """Drop every pending change."""
        self._changes.clear()
        self._directories.clear()
        self._removed_directories.clear()

    async def flush(self) -> list[FileChange]:
        """Apply pending changes to disk in order, then clear the buffer.

        Returns:
            The changes that were applied.
        """
        applied = self.list_changes()
        for change in applied:
            target = self._root / change.path
            if change.kind == "delete":
                await asyncio.to_thread(_delete_path, change.path, target)
            else:
                # A file written where a directory was removed replaces it.
                if change.path in self._removed_directories:
                    await asyncio.to_thread(_delete_path, change.path, target)
                await asyncio.to_thread(
                    _write_text, change.path, target, change.content or ""
                )
        for directory in sorted(self._directories):
            await asyncio.to_thread(_make_directory, directory, self._root / directory)
        self.discard()
        return applied

    def _record(self, change: FileChange) -> None:
        self._changes.pop(change.path, None)
        self._changes[change.path] = change

    # -- Virtual view ------------------------------------------------------

    def _hidden(self, path: str) -> bool:
        """Return ``True`` if a removed directory masks *path* on disk."""
        return any(_is_within(path, removed) for removed in self._removed_directories)

    def _has_virtual_children(self, path: str) -> bool:
        prefix = f"{path}/" if path else ""
        live = (
            change.path
            for change in self._changes.values()
            if change.kind != "delete"
        )
        return any(
            candidate.startswith(prefix)
            for candidate in (*live, *self._directories)
            if candidate != path
        )

    def _is_file(self, path: str) -> bool:
        change = self._changes.get(path)
        if change is not None:
            return change.kind != "delete"
        if not path or self._hidden(path):
            return False
        return (self._root / path).is_file()

    def _is_dir(self, path: str) -> bool:
        if not path or path in self._directories:
            return True
        change = self._changes.get(path)
        if change is not None and change.kind != "delete":
            return False
        if self._has_virtual_children(path):
            return True
        if self._hidden(path):
            return False
        return (self._root / path).is_dir()

    # -- Files -------------------------------------------------------------

    async def write_file(self, path: str, content: str) -> None:
        relative = normalise_path(self._root, path)
        if not relative or self._is_dir(relative):
            raise WriteError(path, IsADirectoryError(relative or "."))
        for parent in _ancestors(relative):
            if self._is_file(parent):
                raise DirectoryCreationError(parent, NotADirectoryError(parent))
        kind: ChangeKind = "update" if self._is_file(relative) else "create"
        self._record(FileChange(path=relative, kind=kind, content=content))

    async def read_file(self, path: str) -> str:
        relative = normalise_path(self._root, path)
        change = self._changes.get(relative)
        if change is not None:
            if change.kind == "delete":
                raise NotFoundError(relative)
            return change.content or ""
        if self._hidden(relative):
            raise NotFoundError(relative)
        return await asyncio.to_thread(_read_text, relative, self._root / relative)

    async def exists(self, path: str) -> bool:
        relative = normalise_path(self._root, path)
        return self._is_file(relative) or self._is_dir(relative)

    # -- Directories -------------------------------------------------------

    async def make_directory(self, path: str) -> None:
        relative = normalise_path(self._root, path)
        for candidate in (relative, *_ancestors(relative)):
            if candidate and self._is_file(candidate):
                raise DirectoryCreationError(candidate, NotADirectoryError(candidate))
        if relative and not self._is_dir(relative):
            self._directories.add(relative)

    async def list_directory(self, path: str) -> list[str]:
        relative = normalise_path(self._root, path)
        if self._is_file(relative):
            raise StorageError("Not a directory", relative)
        if not self._is_dir(relative):
            raise NotFoundError(relative)

        names: set[str] = set()
        disk_dir = self._root / relative if relative else self._root
        if not self._hidden(relative) and disk_dir.is_dir():
            for entry in disk_dir.iterdir():
                child = posixpath.join(relative, entry.name) if relative else entry.name
                if self._is_file(child) or self._is_dir(child):
                    names.add(entry.name)

        prefix = f"{relative}/" if relative else ""
        live = [c.path for c in self._changes.values() if c.kind != "delete"]
        for candidate in (*live, *self._directories):
            if candidate.startswith(prefix) and candidate != relative:
                names.add(candidate[len(prefix):].split("/", 1)[0])
        return sorted(names)

    async def remove(self, path: str, *, recursive: bool = False) -> None:
        relative = normalise_path(self._root, path)
        if not relative:
            raise StorageError("Refusing to remove the workspace root", path)

        if self._is_file(relative):
            change = self._changes.get(relative)
            # A create over a removed directory still has the directory to delete.
            if (
                change is not None
                and change.kind == "create"
                and relative not in self._removed_directories
            ):
                del self._changes[relative]
            else:
                self._record(FileChange(path=relative, kind="delete"))
            return

        if not self._is_dir(relative):
            raise NotFoundError(relative)
        if not recursive and await self.list_directory(relative):
            raise StorageError("Directory not empty", relative)

        on_disk = not self._hidden(relative) and (self._root / relative).is_dir()
        for key in [k for k in self._changes if _is_within(k, relative)]:
            del self._changes[key]
        self._directories = {
            d for d in self._directories if not _is_within(d, relative)
        }
        if on_disk:
            self._removed_directories.add(relative)
            self._record(FileChange(path=relative, kind="delete"))


def _delete_path(relative: str, target: Path) -> None:
    try:
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        elif target.exists() or target.is_symlink():
            target.unlink()
    except OSError as exc:
        raise StorageError("Failed to remove", relative, exc) from exc
