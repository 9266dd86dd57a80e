import logging
from typing_extensions import override

from workspace_fs_mcp.errors import WorkspaceError
from workspace_fs_mcp.filesystem.manager import FileSystemManager
from workspace_fs_mcp.models.session import WorkspaceSession
from workspace_fs_mcp.services.file_operations import ChangeRecorder, FileOperationsService
from workspace_fs_mcp.storage.base import StorageProvider
from workspace_fs_mcp.utils.path_utils import (
    ROOT_PATH,
    is_same_or_descendant,
    join_path,
    normalize_path,
    parent_path,
)

from .base import Tool, ToolCallArguments, ToolError, ToolExecResult, ToolParameter
from .utils.formatting_utils import format_changes, format_tree

logger = logging.getLogger(__name__)

WorkspaceToolCommands = [
    "open",
    "reset",
    "tree",
    "open_file",
    "cd",
    "pwd",
    "create_file",
    "update_file",
    "delete_file",
    "create_directory",
    "delete_directory",
    "rename",
]


class WorkspaceTool(Tool):
    """
    Tool for opening a workspace root and managing the files below it.

    Every call works on the session passed in as `_session`, so independent
    sessions never share a root or a handle cache.
    """

    def __init__(self, storage_provider: StorageProvider) -> None:
        self._storage_provider = storage_provider

    @override
    def get_name(self) -> str:
        return "workspace"

    @override
    def get_description(self) -> str:
        return """Open a project directory and create, read, update, rename and delete its files.
* `open` grants access to a root directory (the configured default when `path` is omitted) and returns its full tree
* `tree` rescans the opened root, `reset` closes it
* `open_file` reads a file and makes it the current file; `cd` and `pwd` manage the current directory
* `create_file` and `create_directory` create `name` inside `path` (the current directory by default) and overwrite existing files
* `update_file` replaces the whole content of `path` (the current file by default)
* `delete_directory` removes the directory with everything below it, without confirmation
* `rename` only supports files
"""

    @override
    def get_parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="command",
                type="string",
                description=f"The command to run. Allowed options are: {', '.join(WorkspaceToolCommands)}.",
                required=True,
                enum=WorkspaceToolCommands,
            ),
            ToolParameter(
                name="path",
                type="string",
                description="Workspace path the command works on, e.g. '/src/app.js'. For `open`, a directory on the host.",
                required=False,
            ),
            ToolParameter(
                name="name",
                type="string",
                description="Entry name for `create_file` and `create_directory`, new name for `rename`.",
                required=False,
            ),
            ToolParameter(
                name="content",
                type="string",
                description="File content for `create_file` and `update_file`.",
                required=False,
            ),
        ]

    @override
    async def execute(self, arguments: ToolCallArguments) -> ToolExecResult:
        session = arguments.get("_session")
        if not isinstance(session, WorkspaceSession):
            return ToolExecResult(
                error="WorkspaceSession not found in arguments. This is an internal server error.",
                error_code=-1,
            )

        command = arguments.get("command")
        if not isinstance(command, str):
            return ToolExecResult(error="Command must be a string.", error_code=-1)

        file_system = FileSystemManager(self._storage_provider, session)
        recorder = ChangeRecorder()
        operations = FileOperationsService(file_system, recorder)

        try:
            match command:
                case "open":
                    return await self._open_handler(file_system, arguments)
                case "reset":
                    file_system.reset()
                    return ToolExecResult(output="Workspace closed.")
                case "tree":
                    return await self._tree_handler(file_system)
                case "open_file":
                    return await self._open_file_handler(file_system, session, arguments)
                case "cd":
                    return await self._cd_handler(file_system, session, arguments)
                case "pwd":
                    return self._pwd_handler(session)
                case "create_file" | "update_file" | "delete_file" | "create_directory" | "delete_directory" | "rename":
                    self._require_open(file_system)
                    result = await self._mutation_handler(command, operations, session, arguments)
                    if result.output is not None:
                        result.output = format_changes(result.output, recorder.describe())
                    return result
                case _:
                    return ToolExecResult(
                        error=f"Unknown command: {command}. Allowed commands are: {', '.join(WorkspaceToolCommands)}",
                        error_code=-1,
                    )
        except ToolError as e:
            logger.error(f"Tool error in {self.get_name()}: {e}")
            return ToolExecResult(error=e.message, error_code=-1)
        except WorkspaceError as e:
            logger.error(f"[{e.category}] {self.get_name()} {command} failed: {e}")
            return ToolExecResult(error=f"{e.category}: {e.message}", error_code=-1)
        except Exception as e:
            logger.error(f"Unexpected error in {self.get_name()}: {e}", exc_info=True)
            return ToolExecResult(error=f"Unexpected error: {str(e)}", error_code=-1)

    @staticmethod
    def _require_open(file_system: FileSystemManager) -> None:
        if not file_system.is_open:
            raise ToolError("No workspace is open. Use the `open` command first.")

    @staticmethod
    def _string_argument(arguments: ToolCallArguments, name: str, required: bool = True) -> str | None:
        value = arguments.get(name)
        if value is None:
            if required:
                raise ToolError(f"Parameter `{name}` is required for this command.")
            return None
        if not isinstance(value, str):
            raise ToolError(f"Parameter `{name}` must be a string.")
        return value

    async def _open_handler(self, file_system: FileSystemManager, arguments: ToolCallArguments) -> ToolExecResult:
        location = self._string_argument(arguments, "path", required=False)
        tree = await file_system.open_directory(location)
        return ToolExecResult(output=format_tree(tree))

    async def _tree_handler(self, file_system: FileSystemManager) -> ToolExecResult:
        self._require_open(file_system)
        root = await file_system.resolve_directory(ROOT_PATH)
        tree = await file_system.scan_directory(root, ROOT_PATH)
        return ToolExecResult(output=format_tree(tree))

    async def _open_file_handler(
        self, file_system: FileSystemManager, session: WorkspaceSession, arguments: ToolCallArguments
    ) -> ToolExecResult:
        self._require_open(file_system)
        path = normalize_path(self._string_argument(arguments, "path"))
        content = await file_system.read_file(path)
        if content is None:
            raise ToolError(f"Could not read {path}.")

        session.current_file = path
        session.current_directory = parent_path(path) or ROOT_PATH
        return ToolExecResult(output=content)

    async def _cd_handler(
        self, file_system: FileSystemManager, session: WorkspaceSession, arguments: ToolCallArguments
    ) -> ToolExecResult:
        self._require_open(file_system)
        path = normalize_path(self._string_argument(arguments, "path"))
        if await file_system.resolve_directory(path) is None:
            raise ToolError(f"'{path}' is not a directory of the workspace.")
        session.current_directory = path
        return ToolExecResult(output=f"Current directory is now {path}")

    def _pwd_handler(self, session: WorkspaceSession) -> ToolExecResult:
        output = f"Current directory: {session.current_directory}"
        if session.current_file:
            output += f"\nCurrent file: {session.current_file}"
        return ToolExecResult(output=output)

    async def _mutation_handler(
        self,
        command: str,
        operations: FileOperationsService,
        session: WorkspaceSession,
        arguments: ToolCallArguments,
    ) -> ToolExecResult:
        match command:
            case "create_file":
                directory = self._string_argument(arguments, "path", required=False) or session.current_directory
                name = self._string_argument(arguments, "name")
                content = self._string_argument(arguments, "content", required=False) or ""
                if not await operations.create_file(directory, name, content):
                    raise ToolError(f"Could not create file {name} in {directory}.")
                return ToolExecResult(output=f"File {name} created in {directory}.")

            case "update_file":
                path = self._string_argument(arguments, "path", required=False) or session.current_file
                if not path:
                    raise ToolError("Parameter `path` is required when no file is open.")
                content = self._string_argument(arguments, "content")
                if not await operations.update_file(path, content):
                    raise ToolError(f"Could not update {path}.")
                return ToolExecResult(output=f"File {path} saved.")

            case "delete_file":
                path = self._string_argument(arguments, "path")
                if not await operations.delete_file(path):
                    raise ToolError(f"Could not delete file {path}.")
                if normalize_path(path) == session.current_file:
                    session.current_file = ""
                return ToolExecResult(output=f"File {path} deleted.")

            case "create_directory":
                directory = self._string_argument(arguments, "path", required=False) or session.current_directory
                name = self._string_argument(arguments, "name")
                if not await operations.create_directory(directory, name):
                    raise ToolError(f"Could not create directory {name} in {directory}.")
                return ToolExecResult(output=f"Directory {name} created in {directory}.")

            case "delete_directory":
                path = self._string_argument(arguments, "path")
                if not await operations.delete_directory(path):
                    raise ToolError(f"Could not delete directory {path}.")
                deleted = normalize_path(path)
                if is_same_or_descendant(session.current_file, deleted):
                    session.current_file = ""
                if is_same_or_descendant(session.current_directory, deleted):
                    session.current_directory = ROOT_PATH
                return ToolExecResult(output=f"Directory {path} deleted.")

            case "rename":
                path = self._string_argument(arguments, "path")
                name = self._string_argument(arguments, "name")
                if not await operations.rename(path, name):
                    raise ToolError(f"Could not rename {path} to {name}. Only files can be renamed.")
                if normalize_path(path) == session.current_file:
                    session.current_file = join_path(parent_path(session.current_file) or ROOT_PATH, name)
                return ToolExecResult(output=f"Renamed {path} to {name}.")

        raise ToolError(f"Unknown command: {command}")
