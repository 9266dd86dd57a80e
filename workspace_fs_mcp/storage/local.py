import asyncio
import logging
import os
import shutil
from collections.abc import AsyncIterator
from pathlib import Path
from typing_extensions import override

from workspace_fs_mcp.errors import (
    NotFound,
    PermissionDenied,
    ProviderError,
    UserCancelled,
    WorkspaceError,
)
from workspace_fs_mcp.storage.base import DirectoryHandle, FileHandle, Handle, StorageProvider

logger = logging.getLogger(__name__)


def _translate_os_error(e: OSError, action: str) -> WorkspaceError:
    """Map an OS error onto the workspace error taxonomy."""
    if isinstance(e, FileNotFoundError):
        return NotFound(f"{action}: {e}")
    if isinstance(e, PermissionError):
        return PermissionDenied(f"{action}: {e}")
    return ProviderError(f"{action}: {e}")


class LocalFileHandle(FileHandle):
    """Handle on a regular file of the local disk."""

    def __init__(self, path: Path) -> None:
        self.path = path

    @property
    @override
    def name(self) -> str:
        return self.path.name

    def _read_sync(self) -> str:
        # newline="" keeps \r\n and \r exactly as stored.
        with self.path.open("r", encoding="utf-8", newline="") as f:
            return f.read()

    def _write_sync(self, content: str) -> None:
        with self.path.open("w", encoding="utf-8", newline="") as f:
            f.write(content)

    @override
    async def read_text(self) -> str:
        try:
            return await asyncio.to_thread(self._read_sync)
        except OSError as e:
            raise _translate_os_error(e, f"Reading {self.path}") from e

    @override
    async def write_text(self, content: str) -> None:
        try:
            await asyncio.to_thread(self._write_sync, content)
        except OSError as e:
            raise _translate_os_error(e, f"Writing {self.path}") from e


class LocalDirectoryHandle(DirectoryHandle):
    """
    Handle on a directory of the local disk.

    Args:
        path: The directory this handle stands for.
        root: The granted workspace root. Entries that resolve outside of it are refused.
    """

    def __init__(self, path: Path, root: Path | None = None) -> None:
        self.path = path
        self.root = root or path

    @property
    @override
    def name(self) -> str:
        return self.path.name

    def _child(self, name: str) -> Path:
        # Child names are single segments, anything else would escape the handle.
        if not name or name in (".", "..") or "/" in name or os.sep in name:
            raise ProviderError(f"Invalid entry name: '{name}'")
        child = self.path / name
        if child.is_symlink() and not child.resolve().is_relative_to(self.root):
            raise PermissionDenied(f"'{name}' in '{self.path}' points outside the workspace root.")
        return child

    def _get_directory_sync(self, name: str, create: bool) -> Path:
        child = self._child(name)
        if child.is_file():
            raise ProviderError(f"'{name}' in '{self.path}' is a file, not a directory.")
        if not child.exists():
            if not create:
                raise NotFound(f"Directory '{name}' not found in '{self.path}'.")
            child.mkdir()
        return child

    def _get_file_sync(self, name: str, create: bool) -> Path:
        child = self._child(name)
        if child.is_dir():
            raise ProviderError(f"'{name}' in '{self.path}' is a directory, not a file.")
        if not child.exists():
            if not create:
                raise NotFound(f"File '{name}' not found in '{self.path}'.")
            child.touch()
        return child

    def _scan_sync(self) -> list[os.DirEntry]:
        entries = []
        for entry in os.scandir(self.path):
            if entry.is_symlink() and not Path(entry.path).resolve().is_relative_to(self.root):
                logger.warning(f"Skipping {entry.path}: it points outside the workspace root")
                continue
            entries.append(entry)
        return entries

    def _remove_entry_sync(self, name: str, recursive: bool) -> None:
        child = self._child(name)
        if not child.exists() and not child.is_symlink():
            raise NotFound(f"Entry '{name}' not found in '{self.path}'.")
        if child.is_dir() and not child.is_symlink():
            if recursive:
                shutil.rmtree(child)
            elif any(child.iterdir()):
                raise ProviderError(f"Directory '{name}' is not empty.")
            else:
                child.rmdir()
        else:
            child.unlink()

    @override
    async def get_directory(self, name: str, create: bool = False) -> "LocalDirectoryHandle":
        try:
            path = await asyncio.to_thread(self._get_directory_sync, name, create)
        except OSError as e:
            raise _translate_os_error(e, f"Opening directory {name}") from e
        return LocalDirectoryHandle(path, self.root)

    @override
    async def get_file(self, name: str, create: bool = False) -> LocalFileHandle:
        try:
            path = await asyncio.to_thread(self._get_file_sync, name, create)
        except OSError as e:
            raise _translate_os_error(e, f"Opening file {name}") from e
        return LocalFileHandle(path)

    @override
    async def entries(self) -> AsyncIterator[tuple[str, Handle]]:
        try:
            scanned = await asyncio.to_thread(self._scan_sync)
        except OSError as e:
            raise _translate_os_error(e, f"Listing {self.path}") from e

        for entry in scanned:
            entry_path = Path(entry.path)
            if entry.is_dir(follow_symlinks=False):
                yield entry.name, LocalDirectoryHandle(entry_path, self.root)
            elif entry.is_file():
                yield entry.name, LocalFileHandle(entry_path)

    @override
    async def remove_entry(self, name: str, recursive: bool = False) -> None:
        try:
            await asyncio.to_thread(self._remove_entry_sync, name, recursive)
        except OSError as e:
            raise _translate_os_error(e, f"Removing {name}") from e


class LocalStorageProvider(StorageProvider):
    """
    Storage provider backed by the local file system.

    The "grant" is a check that the chosen location is an existing, writable directory.

    Args:
        default_location: Directory to open when `open_root` is called without a location.
    """

    def __init__(self, default_location: str | None = None) -> None:
        self.default_location = default_location

    @override
    async def open_root(self, location: str | None = None) -> LocalDirectoryHandle:
        location = location or self.default_location
        if not location:
            raise UserCancelled("No directory was selected.")

        path = Path(location).expanduser().resolve()
        if not path.exists():
            raise NotFound(f"Directory '{path}' does not exist.")
        if not path.is_dir():
            raise PermissionDenied(f"'{path}' is not a directory.")
        if not os.access(path, os.R_OK | os.W_OK | os.X_OK):
            raise PermissionDenied(f"Read-write access to '{path}' was refused.")

        logger.info(f"Opened local workspace root: {path}")
        return LocalDirectoryHandle(path)
