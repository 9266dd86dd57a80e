"""Path-indexed handle cache over a storage provider.

The manager maps slash-delimited workspace paths to provider handles. The cache
is advisory: every lookup that misses walks the path again from the root, so
entries added or removed by other tools are picked up lazily.

Apart from opening the root, no operation raises. Failures come back as
`False`/`None` together with a log line naming the failure category.
"""

import logging

from workspace_fs_mcp.errors import (
    AlreadyInconsistent,
    NotFound,
    UnsupportedOperation,
    WorkspaceError,
)
from workspace_fs_mcp.models.session import WorkspaceSession
from workspace_fs_mcp.models.tree import FileTreeNode
from workspace_fs_mcp.storage.base import DirectoryHandle, FileHandle, StorageProvider
from workspace_fs_mcp.utils.path_utils import (
    ROOT_PATH,
    is_same_or_descendant,
    join_path,
    normalize_path,
    split_path,
)

logger = logging.getLogger(__name__)


def _log_failure(action: str, error: Exception) -> None:
    if isinstance(error, NotFound):
        logger.warning(f"[NotFound] {action}: {error}")
    elif isinstance(error, WorkspaceError):
        logger.error(f"[{error.category}] {action}: {error}")
    else:
        logger.error(f"[ProviderError] {action}: {error}", exc_info=True)


def _is_entry_name(name: str) -> bool:
    return bool(name) and "/" not in name and name not in (".", "..")


class FileSystemManager:
    """
    Handle cache and CRUD adapter for one workspace session.

    Args:
        provider: The storage backend the root is obtained from.
        session: Session object holding the root and both handle maps.
    """

    def __init__(self, provider: StorageProvider, session: WorkspaceSession) -> None:
        self.provider = provider
        self.session = session

    @property
    def is_open(self) -> bool:
        return self.session.root is not None

    def reset(self) -> None:
        """Forget the current root and every cached handle."""
        logger.debug("Resetting workspace handles")
        self.session.clear_handles()

    async def open_root(self, location: str | None = None) -> DirectoryHandle:
        """
        Ask the provider for a read-write root and make it the session root.

        The previous root and all cached handles are dropped before the new root
        is installed, even though the request may still fail afterwards.

        Raises:
            UserCancelled: If no location was chosen.
            PermissionDenied: If the grant was refused.
            NotFound: If the location does not exist.
        """
        self.reset()
        root = await self.provider.open_root(location)
        self.session.root = root
        self.session.directory_handles[ROOT_PATH] = root
        self.session.current_directory = ROOT_PATH
        self.session.current_file = ""
        logger.info(f"Workspace root opened: {root.name}")
        return root

    async def open_directory(self, location: str | None = None) -> FileTreeNode:
        """Open a root and eagerly scan it, the "open project" flow."""
        root = await self.open_root(location)
        return await self.scan_directory(root, ROOT_PATH)

    async def resolve_directory(self, path: str) -> DirectoryHandle | None:
        """
        Resolve a directory path to a handle without creating anything.

        Every intermediate directory visited on the way is cached.

        Returns:
            The handle, or None if the root is unset or any segment is missing.
        """
        root = self.session.root
        if root is None:
            return None

        path = normalize_path(path)
        if path == ROOT_PATH:
            return root

        cached = self.session.directory_handles.get(path)
        if cached is not None:
            return cached

        current = root
        current_path = ROOT_PATH
        for segment in path.strip("/").split("/"):
            current_path = join_path(current_path, segment)
            cached = self.session.directory_handles.get(current_path)
            if cached is not None:
                current = cached
                continue
            try:
                current = await current.get_directory(segment)
            except Exception as e:
                _log_failure(f"Resolving directory '{segment}' in {path}", e)
                return None
            self.session.directory_handles[current_path] = current

        return current

    async def resolve_file(self, path: str) -> FileHandle | None:
        """
        Resolve a file path to a handle without creating anything.

        Returns:
            The handle, or None if the parent cannot be resolved or the file does not exist.
        """
        if self.session.root is None:
            return None

        parts = split_path(path)
        if parts is None:
            return None
        path = normalize_path(path)

        cached = self.session.file_handles.get(path)
        if cached is not None:
            return cached

        directory_path, file_name = parts
        directory = await self.resolve_directory(directory_path)
        if directory is None:
            return None

        try:
            handle = await directory.get_file(file_name)
        except Exception as e:
            _log_failure(f"Resolving file {path}", e)
            return None

        self.session.file_handles[path] = handle
        return handle

    async def create_file(self, directory_path: str, file_name: str, content: str = "") -> bool:
        """
        Create or overwrite `file_name` under `directory_path` and write `content` to it.

        Returns:
            True on success, False if the directory cannot be resolved or I/O fails.
        """
        directory_path = normalize_path(directory_path)
        if not _is_entry_name(file_name):
            logger.warning(f"[ProviderError] Invalid file name: '{file_name}'")
            return False
        directory = await self.resolve_directory(directory_path)
        if directory is None:
            logger.warning(f"[NotFound] Cannot create {file_name}: directory {directory_path} is not available")
            return False

        file_path = join_path(directory_path, file_name)
        try:
            handle = await directory.get_file(file_name, create=True)
            await handle.write_text(content)
        except Exception as e:
            _log_failure(f"Creating file {file_path}", e)
            return False

        self.session.file_handles[file_path] = handle
        logger.debug(f"Created file {file_path}, content length: {len(content)}")
        return True

    async def create_directory(self, parent_path: str, directory_name: str) -> bool:
        """Create (or reuse) `directory_name` under `parent_path`."""
        parent_path = normalize_path(parent_path)
        if not _is_entry_name(directory_name):
            logger.warning(f"[ProviderError] Invalid directory name: '{directory_name}'")
            return False
        parent = await self.resolve_directory(parent_path)
        if parent is None:
            logger.warning(f"[NotFound] Cannot create {directory_name}: directory {parent_path} is not available")
            return False

        directory_path = join_path(parent_path, directory_name)
        try:
            handle = await parent.get_directory(directory_name, create=True)
        except Exception as e:
            _log_failure(f"Creating directory {directory_path}", e)
            return False

        self.session.directory_handles[directory_path] = handle
        logger.debug(f"Created directory {directory_path}")
        return True

    async def read_file(self, path: str) -> str | None:
        """Read a whole file. None on any resolution or I/O failure."""
        handle = await self.resolve_file(path)
        if handle is None:
            return None
        try:
            return await handle.read_text()
        except Exception as e:
            _log_failure(f"Reading file {path}", e)
            return None

    async def write_file(self, path: str, content: str) -> bool:
        """Replace the whole content of an existing file."""
        handle = await self.resolve_file(path)
        if handle is None:
            return False
        try:
            await handle.write_text(content)
        except Exception as e:
            _log_failure(f"Writing file {path}", e)
            return False
        return True

    async def delete_file(self, path: str) -> bool:
        """
        Remove a file from its parent directory and evict it from the cache.

        Directories are left alone, they belong to `delete_directory`.
        """
        parts = split_path(path)
        if parts is None:
            logger.warning("[UnsupportedOperation] The workspace root cannot be deleted as a file")
            return False
        path = normalize_path(path)
        directory_path, file_name = parts

        directory = await self.resolve_directory(directory_path)
        if directory is None:
            return False
        if await self.resolve_file(path) is None:
            return False
        try:
            await directory.remove_entry(file_name)
        except Exception as e:
            _log_failure(f"Deleting file {path}", e)
            return False

        self.session.file_handles.pop(path, None)
        return True

    async def delete_directory(self, path: str) -> bool:
        """
        Recursively remove a directory with everything below it.

        Every cached handle at or below `path` is evicted, so stale descendants
        are never served from the cache.
        """
        parts = split_path(path)
        if parts is None:
            logger.warning("[UnsupportedOperation] The workspace root cannot be deleted")
            return False
        path = normalize_path(path)
        parent_path, directory_name = parts

        parent = await self.resolve_directory(parent_path)
        if parent is None:
            return False
        try:
            await parent.remove_entry(directory_name, recursive=True)
        except Exception as e:
            _log_failure(f"Deleting directory {path}", e)
            return False

        self._evict_subtree(path)
        return True

    async def rename(self, old_path: str, new_name: str) -> bool:
        """
        Rename a file within its directory.

        The content is copied to the new name and the old entry is removed. If the
        old entry cannot be removed, the copy is removed again and the rename fails.
        Renaming directories is not supported.
        """
        parts = split_path(old_path)
        if parts is None:
            logger.warning("[UnsupportedOperation] The workspace root cannot be renamed")
            return False
        old_path = normalize_path(old_path)
        parent_path, old_name = parts

        if not _is_entry_name(new_name):
            logger.warning(f"[ProviderError] Invalid new name for {old_path}: '{new_name}'")
            return False
        if new_name == old_name:
            logger.warning(f"[ProviderError] {old_path} already has the name '{new_name}'")
            return False

        parent = await self.resolve_directory(parent_path)
        if parent is None:
            return False

        if await self.resolve_file(old_path) is None:
            if await self.resolve_directory(old_path) is not None:
                _log_failure(
                    f"Renaming {old_path}",
                    UnsupportedOperation("Directory renaming is not supported"),
                )
            return False

        content = await self.read_file(old_path)
        if content is None:
            return False

        if not await self.create_file(parent_path, new_name, content):
            return False
        new_path = join_path(parent_path, new_name)

        try:
            await parent.remove_entry(old_name)
        except Exception as e:
            _log_failure(f"Removing {old_path} after copying it to {new_path}", e)
            await self._rollback_rename(parent, new_path, new_name)
            return False

        self.session.file_handles.pop(old_path, None)
        logger.debug(f"Renamed {old_path} to {new_path}")
        return True

    async def _rollback_rename(self, parent: DirectoryHandle, new_path: str, new_name: str) -> None:
        try:
            await parent.remove_entry(new_name)
        except Exception as e:
            _log_failure(
                "Rolling back rename",
                AlreadyInconsistent(f"Both the original file and {new_path} now exist: {e}"),
            )
            return
        self.session.file_handles.pop(new_path, None)

    async def scan_directory(self, handle: DirectoryHandle, path: str) -> FileTreeNode:
        """
        Build the full tree below `handle`, caching every handle encountered.

        Children keep the provider's enumeration order. There is no depth limit.
        """
        path = normalize_path(path)
        children: list[FileTreeNode] = []

        async for name, child in handle.entries():
            child_path = join_path(path, name)
            if isinstance(child, FileHandle):
                self.session.file_handles[child_path] = child
                children.append(FileTreeNode(name=name, kind="file", handle=child))
            elif isinstance(child, DirectoryHandle):
                self.session.directory_handles[child_path] = child
                children.append(await self.scan_directory(child, child_path))

        return FileTreeNode(name=handle.name, kind="directory", handle=handle, children=children)

    def _evict_subtree(self, path: str) -> None:
        for cache in (self.session.file_handles, self.session.directory_handles):
            for key in [key for key in cache if is_same_or_descendant(key, path)]:
                del cache[key]
