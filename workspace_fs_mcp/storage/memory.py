import logging
from collections.abc import AsyncIterator
from typing_extensions import override

from workspace_fs_mcp.errors import NotFound, PermissionDenied, ProviderError
from workspace_fs_mcp.storage.base import DirectoryHandle, FileHandle, Handle, StorageProvider

logger = logging.getLogger(__name__)


class InMemoryFileHandle(FileHandle):
    """File entry kept in process memory."""

    def __init__(self, name: str, content: str = "") -> None:
        self._name = name
        self._content = content
        self._detached = False

    @property
    @override
    def name(self) -> str:
        return self._name

    def _check_attached(self) -> None:
        if self._detached:
            raise NotFound(f"File '{self._name}' no longer exists.")

    def detach(self) -> None:
        self._detached = True

    @override
    async def read_text(self) -> str:
        self._check_attached()
        return self._content

    @override
    async def write_text(self, content: str) -> None:
        self._check_attached()
        self._content = content


class InMemoryDirectoryHandle(DirectoryHandle):
    """
    Directory entry kept in process memory.

    Children are stored in insertion order, which is the enumeration order.
    Removing an entry detaches every handle below it, so stale handles fail
    the same way a browser handle does after the entry disappears.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._children: dict[str, InMemoryFileHandle | InMemoryDirectoryHandle] = {}
        self._detached = False

    @property
    @override
    def name(self) -> str:
        return self._name

    def _check_attached(self) -> None:
        if self._detached:
            raise NotFound(f"Directory '{self._name}' no longer exists.")

    def _check_name(self, name: str) -> None:
        if not name or name in (".", "..") or "/" in name:
            raise ProviderError(f"Invalid entry name: '{name}'")

    def detach(self) -> None:
        self._detached = True
        for child in self._children.values():
            child.detach()

    @override
    async def get_directory(self, name: str, create: bool = False) -> "InMemoryDirectoryHandle":
        self._check_attached()
        self._check_name(name)
        child = self._children.get(name)
        if child is None:
            if not create:
                raise NotFound(f"Directory '{name}' not found in '{self._name}'.")
            child = InMemoryDirectoryHandle(name)
            self._children[name] = child
        if not isinstance(child, InMemoryDirectoryHandle):
            raise ProviderError(f"'{name}' in '{self._name}' is a file, not a directory.")
        return child

    @override
    async def get_file(self, name: str, create: bool = False) -> InMemoryFileHandle:
        self._check_attached()
        self._check_name(name)
        child = self._children.get(name)
        if child is None:
            if not create:
                raise NotFound(f"File '{name}' not found in '{self._name}'.")
            child = InMemoryFileHandle(name)
            self._children[name] = child
        if not isinstance(child, InMemoryFileHandle):
            raise ProviderError(f"'{name}' in '{self._name}' is a directory, not a file.")
        return child

    @override
    async def entries(self) -> AsyncIterator[tuple[str, Handle]]:
        self._check_attached()
        for name, child in list(self._children.items()):
            yield name, child

    @override
    async def remove_entry(self, name: str, recursive: bool = False) -> None:
        self._check_attached()
        child = self._children.get(name)
        if child is None:
            raise NotFound(f"Entry '{name}' not found in '{self._name}'.")
        if isinstance(child, InMemoryDirectoryHandle) and child._children and not recursive:
            raise ProviderError(f"Directory '{name}' is not empty.")
        del self._children[name]
        child.detach()


class InMemoryStorageProvider(StorageProvider):
    """
    Storage provider holding a single tree in memory.

    Args:
        root_name: Name reported by the root directory handle.
        grant_access: When False, every `open_root` call is refused.
    """

    def __init__(self, root_name: str = "workspace", grant_access: bool = True) -> None:
        self.root = InMemoryDirectoryHandle(root_name)
        self.grant_access = grant_access

    @override
    async def open_root(self, location: str | None = None) -> InMemoryDirectoryHandle:
        if not self.grant_access:
            raise PermissionDenied("Read-write access to the in-memory workspace was refused.")
        logger.debug(f"Granting access to in-memory root '{self.root.name}'")
        return self.root
