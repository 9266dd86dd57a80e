import logging
from collections.abc import Callable

from workspace_fs_mcp.filesystem.manager import FileSystemManager
from workspace_fs_mcp.models.results import ChangeEvent, ChangeKind
from workspace_fs_mcp.utils.path_utils import join_path, normalize_path

logger = logging.getLogger(__name__)

ChangeListener = Callable[[ChangeKind, str], None]


class ChangeRecorder:
    """Change listener that keeps every event it receives, in order."""

    def __init__(self) -> None:
        self.events: list[ChangeEvent] = []

    def __call__(self, kind: ChangeKind, path: str) -> None:
        self.events.append(ChangeEvent(kind=kind, path=path))

    def describe(self) -> list[str]:
        return [event.describe() for event in self.events]


class FileOperationsService:
    """
    CRUD facade over the file-system adapter shared by the tools and the chat interpreter.

    After every successful mutation the change listener is called exactly once,
    before the method returns. Nothing raises out of this class: failures are
    logged and reported as `False`/`None`.

    Args:
        file_system: The adapter bound to the current session.
        on_change: Listener receiving `(kind, path)` after each successful mutation.
    """

    def __init__(self, file_system: FileSystemManager, on_change: ChangeListener | None = None) -> None:
        self.file_system = file_system
        self.on_change = on_change

    def _notify(self, kind: ChangeKind, path: str) -> None:
        logger.info(f"File operation: {kind.value} on {path}")
        if self.on_change is None:
            return
        try:
            self.on_change(kind, path)
        except Exception as e:
            logger.error(f"Change listener failed for {kind.value} on {path}: {e}", exc_info=True)

    async def create_file(self, directory: str, file_name: str, content: str = "") -> bool:
        try:
            full_path = join_path(normalize_path(directory), file_name)
            if await self.file_system.create_file(directory, file_name, content):
                self._notify(ChangeKind.CREATE, full_path)
                return True
            return False
        except Exception as e:
            logger.error(f"Error creating file: {e}", exc_info=True)
            return False

    async def read_file(self, path: str) -> str | None:
        try:
            return await self.file_system.read_file(path)
        except Exception as e:
            logger.error(f"Error reading file: {e}", exc_info=True)
            return None

    async def update_file(self, path: str, content: str) -> bool:
        try:
            if await self.file_system.write_file(path, content):
                self._notify(ChangeKind.UPDATE, normalize_path(path))
                return True
            return False
        except Exception as e:
            logger.error(f"Error updating file: {e}", exc_info=True)
            return False

    async def delete_file(self, path: str) -> bool:
        try:
            if await self.file_system.delete_file(path):
                self._notify(ChangeKind.DELETE, normalize_path(path))
                return True
            return False
        except Exception as e:
            logger.error(f"Error deleting file: {e}", exc_info=True)
            return False

    async def create_directory(self, directory: str, directory_name: str) -> bool:
        try:
            full_path = join_path(normalize_path(directory), directory_name)
            if await self.file_system.create_directory(directory, directory_name):
                self._notify(ChangeKind.CREATE, full_path)
                return True
            return False
        except Exception as e:
            logger.error(f"Error creating directory: {e}", exc_info=True)
            return False

    async def delete_directory(self, path: str) -> bool:
        try:
            if await self.file_system.delete_directory(path):
                self._notify(ChangeKind.DELETE, normalize_path(path))
                return True
            return False
        except Exception as e:
            logger.error(f"Error deleting directory: {e}", exc_info=True)
            return False

    async def rename(self, old_path: str, new_name: str) -> bool:
        try:
            if await self.file_system.rename(old_path, new_name):
                self._notify(ChangeKind.RENAME, normalize_path(old_path))
                return True
            return False
        except Exception as e:
            logger.error(f"Error renaming: {e}", exc_info=True)
            return False
