"""Storage providers for the workspace."""

from .base import DirectoryHandle, FileHandle, Handle, HandleKind, StorageProvider
from .local import LocalStorageProvider
from .memory import InMemoryStorageProvider

__all__ = [
    "DirectoryHandle",
    "FileHandle",
    "Handle",
    "HandleKind",
    "InMemoryStorageProvider",
    "LocalStorageProvider",
    "StorageProvider",
]
