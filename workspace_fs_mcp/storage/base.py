"""Abstract storage provider contract.

A provider hands out opaque handles bound to one entry each. The workspace only
ever talks to storage through these handles, so a real disk, an in-memory tree
or a remote blob store can stand behind the same adapter.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import Literal

HandleKind = Literal["file", "directory"]


class Handle(ABC):
    """Capability bound to exactly one storage entry."""

    kind: HandleKind

    @property
    @abstractmethod
    def name(self) -> str:
        """The entry name inside its parent directory."""
        pass


class FileHandle(Handle):
    kind: HandleKind = "file"

    @abstractmethod
    async def read_text(self) -> str:
        """Read the whole file as text."""
        pass

    @abstractmethod
    async def write_text(self, content: str) -> None:
        """Replace the whole file content."""
        pass


class DirectoryHandle(Handle):
    kind: HandleKind = "directory"

    @abstractmethod
    async def get_directory(self, name: str, create: bool = False) -> "DirectoryHandle":
        """
        Get a child directory, optionally creating it.

        Raises:
            NotFound: If the child does not exist and `create` is False.
            ProviderError: If the child exists but is a file.
        """
        pass

    @abstractmethod
    async def get_file(self, name: str, create: bool = False) -> FileHandle:
        """
        Get a child file, optionally creating it empty.

        An existing file is returned as-is, its content is not truncated.

        Raises:
            NotFound: If the child does not exist and `create` is False.
            ProviderError: If the child exists but is a directory.
        """
        pass

    @abstractmethod
    def entries(self) -> AsyncIterator[tuple[str, Handle]]:
        """Enumerate immediate children in the provider's own order."""
        pass

    @abstractmethod
    async def remove_entry(self, name: str, recursive: bool = False) -> None:
        """
        Remove a child by name.

        Raises:
            NotFound: If there is no such child.
            ProviderError: If the child is a non-empty directory and `recursive` is False.
        """
        pass


class StorageProvider(ABC):
    """Entry point of a storage backend."""

    @abstractmethod
    async def open_root(self, location: str | None = None) -> DirectoryHandle:
        """
        Obtain a read-write grant on a root directory.

        Raises:
            UserCancelled: If no location was chosen.
            PermissionDenied: If the grant was refused.
        """
        pass
