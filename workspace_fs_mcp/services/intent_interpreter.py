import logging
from collections.abc import Awaitable, Callable
from typing import NamedTuple

from workspace_fs_mcp.errors import MissingParameter
from workspace_fs_mcp.models.results import InterpretResult
from workspace_fs_mcp.services.file_operations import FileOperationsService
from workspace_fs_mcp.services.intent_rules import (
    Intent,
    classify_intent,
    extract_content,
    extract_delete_target,
    extract_directory_name,
    extract_filename,
)
from workspace_fs_mcp.utils.path_utils import ROOT_PATH

logger = logging.getLogger(__name__)

IntentHandler = Callable[[str, str, str], Awaitable[InterpretResult]]


def _missing(parameter: str, intent: Intent, response: str) -> InterpretResult:
    logger.warning(f"[{MissingParameter.category}] No {parameter} found for intent '{intent.value}'")
    return InterpretResult(response=response)


class IntentRule(NamedTuple):
    intent: Intent
    handler: IntentHandler


class IntentInterpreter:
    """
    Turns chat messages into file operations.

    Stateless between calls. A message either maps to exactly one create,
    update or delete operation, or to nothing, in which case the caller is
    expected to answer it with a general conversational model.

    Args:
        file_operations: Service used to perform the detected operation.
    """

    def __init__(self, file_operations: FileOperationsService) -> None:
        self.file_operations = file_operations
        self.rules: tuple[IntentRule, ...] = (
            IntentRule(Intent.CREATE_FILE, self._handle_create_file),
            IntentRule(Intent.UPDATE_FILE, self._handle_update_file),
            IntentRule(Intent.DELETE_FILE, self._handle_delete_file),
            IntentRule(Intent.CREATE_DIRECTORY, self._handle_create_directory),
        )

    async def process_message(
        self,
        message: str,
        current_file: str = "",
        current_directory: str = ROOT_PATH,
    ) -> InterpretResult:
        """
        Interpret one chat message and perform the file operation it asks for.

        Args:
            message: Raw chat text.
            current_file: Path of the file open in the editor, possibly empty.
            current_directory: Directory new entries are created in.

        Returns:
            The acknowledgement text and whether a mutation actually happened.
            Both are empty/False when the message is not a file operation.
        """
        text = message.lower()
        intent = classify_intent(text)
        if intent is Intent.NONE:
            return InterpretResult()

        logger.info(f"Detected intent '{intent.value}' in chat message")
        current_directory = current_directory or ROOT_PATH
        for rule in self.rules:
            if rule.intent is intent:
                try:
                    return await rule.handler(text, current_file, current_directory)
                except Exception as e:
                    logger.error(f"Error handling intent '{intent.value}': {e}", exc_info=True)
                    return InterpretResult(
                        response="Sorry, I encountered an error while performing that file operation."
                    )
        return InterpretResult()

    async def _handle_create_file(self, text: str, current_file: str, current_directory: str) -> InterpretResult:
        file_name = extract_filename(text)
        if not file_name:
            return _missing(
                "filename",
                Intent.CREATE_FILE,
                "I'd like to create a file for you, but I need a filename. Can you specify what to name the file?"
            )

        content = extract_content(text) or ""
        if await self.file_operations.create_file(current_directory, file_name, content):
            return InterpretResult(response=f'I\'ve created the file "{file_name}" for you.', operation_performed=True)
        return InterpretResult(
            response=f'I couldn\'t create the file "{file_name}". '
            "Please check if the file already exists or if you have the necessary permissions."
        )

    async def _handle_update_file(self, text: str, current_file: str, current_directory: str) -> InterpretResult:
        if not current_file:
            return InterpretResult(
                response="I'd like to update a file for you, but no file is currently open. Please open a file first."
            )

        content = extract_content(text)
        if content is None:
            return _missing(
                "content",
                Intent.UPDATE_FILE,
                "I'd like to update the file for you, but I need the new content. "
                "Can you specify what content to use?"
            )

        if await self.file_operations.update_file(current_file, content):
            return InterpretResult(response=f'I\'ve updated the file "{current_file}" for you.', operation_performed=True)
        return InterpretResult(
            response=f'I couldn\'t update the file "{current_file}". '
            "Please check if the file exists or if you have the necessary permissions."
        )

    async def _handle_delete_file(self, text: str, current_file: str, current_directory: str) -> InterpretResult:
        target = extract_delete_target(text)
        if not target:
            return _missing(
                "filename",
                Intent.DELETE_FILE,
                "I'd like to delete a file for you, but I need a filename. Can you specify which file to delete?"
            )

        # Delete targets are taken relative to the workspace root.
        if await self.file_operations.delete_file(target):
            return InterpretResult(response=f'I\'ve deleted the file "{target}" for you.', operation_performed=True)
        return InterpretResult(
            response=f'I couldn\'t delete the file "{target}". '
            "Please check if the file exists or if you have the necessary permissions."
        )

    async def _handle_create_directory(
        self, text: str, current_file: str, current_directory: str
    ) -> InterpretResult:
        directory_name = extract_directory_name(text)
        if not directory_name:
            return _missing(
                "directory name",
                Intent.CREATE_DIRECTORY,
                "I'd like to create a directory for you, but I need a name. "
                "Can you specify what to name the directory?"
            )

        if await self.file_operations.create_directory(current_directory, directory_name):
            return InterpretResult(
                response=f'I\'ve created the directory "{directory_name}" for you.', operation_performed=True
            )
        return InterpretResult(
            response=f'I couldn\'t create the directory "{directory_name}". '
            "Please check if the directory already exists or if you have the necessary permissions."
        )
