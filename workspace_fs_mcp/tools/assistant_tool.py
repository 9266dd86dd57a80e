import json
import logging
from typing_extensions import override

from workspace_fs_mcp.filesystem.manager import FileSystemManager
from workspace_fs_mcp.models.session import WorkspaceSession
from workspace_fs_mcp.services.file_operations import ChangeRecorder, FileOperationsService
from workspace_fs_mcp.services.intent_interpreter import IntentInterpreter
from workspace_fs_mcp.storage.base import StorageProvider

from .base import Tool, ToolCallArguments, ToolExecResult, ToolParameter

logger = logging.getLogger(__name__)


class AssistantTool(Tool):
    """
    Tool that performs file operations requested in plain chat messages.

    Messages such as "create file called app.js with content: ..." are carried
    out against the session's workspace. Anything that is not a file operation
    comes back with an empty response so the client can hand it to its own
    conversational model.
    """

    def __init__(self, storage_provider: StorageProvider) -> None:
        self._storage_provider = storage_provider

    @override
    def get_name(self) -> str:
        return "assistant"

    @override
    def get_description(self) -> str:
        return """Carry out a file operation described in a chat message.
Understood requests (case-insensitive):
* "create file called <name> [with content: <text>]" (also "new file", "make a file")
* "update/modify/change the file with content: <text>" (applies to the current file)
* "delete file <path>" or "remove file <path>"
* "create folder <name>" or "new directory <name>"
The result is JSON with `response`, `operation_performed` and `changes`.
An empty `response` with `operation_performed` false means the message was not a file operation.
"""

    @override
    def get_parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="message",
                type="string",
                description="The chat message to interpret.",
                required=True,
            ),
            ToolParameter(
                name="current_file",
                type="string",
                description="Path of the file open in the editor. Defaults to the session's current file.",
                required=False,
            ),
            ToolParameter(
                name="current_directory",
                type="string",
                description="Directory new entries are created in. Defaults to the session's current directory.",
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

        message = arguments.get("message")
        if not isinstance(message, str):
            return ToolExecResult(error="The 'message' parameter is required.", error_code=-1)

        current_file = arguments.get("current_file")
        if not isinstance(current_file, str):
            current_file = session.current_file
        current_directory = arguments.get("current_directory")
        if not isinstance(current_directory, str) or not current_directory:
            current_directory = session.current_directory

        recorder = ChangeRecorder()
        file_operations = FileOperationsService(FileSystemManager(self._storage_provider, session), recorder)
        interpreter = IntentInterpreter(file_operations)

        try:
            result = await interpreter.process_message(message, current_file, current_directory)
        except Exception as e:
            logger.error(f"Unexpected error in {self.get_name()}: {e}", exc_info=True)
            return ToolExecResult(error=f"Unexpected error: {str(e)}", error_code=-1)

        return ToolExecResult(
            output=json.dumps({
                "response": result.response,
                "operation_performed": result.operation_performed,
                "changes": recorder.describe(),
            }, indent=2)
        )
