"""Direct filesystem adapter.

Every operation is applied to disk immediately.  Blocking I/O runs in a
worker thread via ``asyncio.to_thread`` so that concurrent writes inside one
file group do not stall the event loop.  A failed generation leaves the files
written before the failure in place.
"""

from __future__ import annotations

import asyncio
import os
import posixpath
import shutil
from pathlib import Path

from ..errors import (
    DirectoryCreationError,
    NotFoundError,
    ReadError,
    StorageError,
    WriteError,
)
from .adapter import AdapterMode, normalise_path


class DirectAdapter:
    """``StorageAdapter`` that reads and writes the real workspace."""

    def __init__(self, workspace_root: str | Path) -> None:
        self._root = Path(workspace_root).resolve()

    def get_workspace_root(self) -> str:
        return self._root.as_posix()

    def get_mode(self) -> AdapterMode:
        return "direct"

    def _resolve(self, path: str) -> tuple[str, Path]:
        relative = normalise_path(self._root, path)
        return relative, self._root / relative if relative else self._root

    # -- Files -------------------------------------------------------------

    async def write_file(self, path: str, content: str) -> None:
        relative, target = self._resolve(path)
        await asyncio.to_thread(_write_text, relative, target, content)

    async def read_file(self, path: str) -> str:
        relative, target = self._resolve(path)
        return await asyncio.to_thread(_read_text, relative, target)

    async def exists(self, path: str) -> bool:
        _, target = self._resolve(path)
        return await asyncio.to_thread(target.exists)

    # -- Directories -------------------------------------------------------

    async def make_directory(self, path: str) -> None:
        relative, target = self._resolve(path)
        await asyncio.to_thread(_make_directory, relative, target)

    async def list_directory(self, path: str) -> list[str]:
        relative, target = self._resolve(path)
        return await asyncio.to_thread(_list_directory, relative, target)

    async def remove(self, path: str, *, recursive: bool = False) -> None:
        relative, target = self._resolve(path)
        if not relative:
            raise StorageError("Refusing to remove the workspace root", path)
        await asyncio.to_thread(_remove, relative, target, recursive)


# ---------------------------------------------------------------------------
# Blocking helpers (run in a worker thread)
# ---------------------------------------------------------------------------


def _make_directory(relative: str, target: Path) -> None:
    try:
        target.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryCreationError(relative, exc) from exc


def _write_text(relative: str, target: Path, content: str) -> None:
    _make_directory(posixpath.dirname(relative), target.parent)
    try:
        target.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise WriteError(relative, exc) from exc


def _read_text(relative: str, target: Path) -> str:
    try:
        return target.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise NotFoundError(relative, exc) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ReadError(relative, exc) from exc


def _list_directory(relative: str, target: Path) -> list[str]:
    if not target.exists():
        raise NotFoundError(relative)
    if not target.is_dir():
        raise StorageError("Not a directory", relative)
    try:
        return sorted(os.listdir(target))
    except OSError as exc:
        raise StorageError("Failed to list directory", relative, exc) from exc


def _remove(relative: str, target: Path, recursive: bool) -> None:
    if not target.exists() and not target.is_symlink():
        raise NotFoundError(relative)
    try:
        if target.is_dir() and not target.is_symlink():
            if recursive:
                shutil.rmtree(target)
            elif any(target.iterdir()):
                raise StorageError("Directory not empty", relative)
            else:
                target.rmdir()
        else:
            target.unlink()
    except OSError as exc:
        raise StorageError("Failed to remove", relative, exc) from exc
