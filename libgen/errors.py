"""Exception hierarchy for libgen.

Every failure raised by the generator cores derives from ``LibgenError`` so
that wrappers can report it with a single ``except`` clause.  Storage errors
form their own family and always carry the offending path plus, where one
exists, the underlying cause (also chained via ``raise ... from``).
"""

from __future__ import annotations

from typing import Any


class LibgenError(Exception):
    """Base class for every error raised by libgen."""


class InvalidNameError(LibgenError):
    """Raised when a library or entity name cannot be turned into identifiers."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid name {name!r}: {reason}")


class UnsupportedKindError(LibgenError):
    """Raised when dispatching on a library kind that has no generator.

    This is a programming error; valid dispatch never reaches it.
    """

    def __init__(self, kind: Any) -> None:
        self.kind = kind
        super().__init__(f"Unsupported library kind: {kind!r}")


class ConfigurationError(LibgenError):
    """Raised when the workspace configuration is malformed."""


# ---------------------------------------------------------------------------
# Storage errors
# ---------------------------------------------------------------------------


class StorageError(LibgenError):
    """Raised by a storage adapter when an operation fails."""

    def __init__(
        self,
        message: str,
        path: str,
        cause: BaseException | None = None,
    ) -> None:
        self.path = path
        self.cause = cause
        detail = f"{message}: {path}"
        if cause is not None:
            detail = f"{detail} ({cause})"
        super().__init__(detail)


class WriteError(StorageError):
    """Raised when a file cannot be written."""

    def __init__(self, path: str, cause: BaseException | None = None) -> None:
        super().__init__("Failed to write file", path, cause)


class ReadError(StorageError):
    """Raised when a file exists but cannot be read."""

    def __init__(self, path: str, cause: BaseException | None = None) -> None:
        super().__init__("Failed to read file", path, cause)


class DirectoryCreationError(StorageError):
    """Raised when a directory cannot be created."""

    def __init__(self, path: str, cause: BaseException | None = None) -> None:
        super().__init__("Failed to create directory", path, cause)


class NotFoundError(StorageError):
    """Raised when the target path does not exist."""

    def __init__(self, path: str, cause: BaseException | None = None) -> None:
        super().__init__("No such file or directory", path, cause)
