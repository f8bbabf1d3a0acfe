"""Storage back-ends the generator cores write through."""

from libgen.storage.adapter import AdapterMode, StorageAdapter, normalise_path
from libgen.storage.buffered import BufferedAdapter, FileChange
from libgen.storage.direct import DirectAdapter

__all__ = [
    "AdapterMode",
    "BufferedAdapter",
    "DirectAdapter",
    "FileChange",
    "StorageAdapter",
    "normalise_path",
]
