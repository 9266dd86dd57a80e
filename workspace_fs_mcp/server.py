"""
MCP server definition for the Workspace MCP.
"""

import logging
from typing import Any, Optional

from fastapi.middleware.cors import CORSMiddleware
from starlette.applications import Starlette
from starlette.middleware import Middleware

from mcp.server.fastmcp import Context, FastMCP

from workspace_fs_mcp.models.session import WorkspaceSession
from workspace_fs_mcp.prompts import build_assistant_prompt, get_prompts
from workspace_fs_mcp.tools.base import ToolExecResult
from workspace_fs_mcp.utils.config import ServiceConfig
from workspace_fs_mcp.utils.dependencies import (
    get_assistant_tool_provider,
    get_base_config,
    get_session_manager,
    get_workspace_tool_provider,
)


# Get a module-level logger
logger = logging.getLogger(__name__)


class CustomFastMCP(FastMCP):
    """Custom FastMCP server with CORS middleware."""

    def _add_cors_middleware(self, app: Starlette) -> Starlette:
        """A helper to add CORS middleware to a Starlette app."""
        app.user_middleware.insert(
            0,
            Middleware(
                CORSMiddleware,
                allow_origin_regex=".*",  # Allow any origin
                allow_credentials=True,
                allow_methods=["*"],
                allow_headers=["*"],
            ),
        )
        app.middleware_stack = app.build_middleware_stack()
        return app

    def sse_app(self, mount_path: str | None = None) -> Starlette:
        """Overrides the default sse_app to inject CORS middleware."""
        app = super().sse_app(mount_path)
        return self._add_cors_middleware(app)

    def streamable_http_app(self) -> Starlette:
        """Overrides the default streamable_http_app to inject CORS middleware."""
        app = super().streamable_http_app()
        return self._add_cors_middleware(app)


def build_server(config: ServiceConfig) -> CustomFastMCP:
    """Build and configure the FastMCP server instance.

    Args:
        config: The server's service configuration.

    Returns:
        A configured CustomFastMCP instance.
    """
    logger.info(
        "Initializing FastMCP server",
        extra={"host": config.MCP_HOST, "port": config.MCP_PORT},
    )
    return CustomFastMCP(
        "workspace-fs-mcp",
        host=config.MCP_HOST,
        port=config.MCP_PORT,
    )


def get_session(context: Context) -> WorkspaceSession:
    """Returns the workspace session of the calling client."""
    session_id = context.client_id or "default"
    return get_session_manager().get_session(session_id)


def to_response(result: ToolExecResult) -> dict[str, Any]:
    """Converts a tool result into the dictionary returned to MCP clients."""
    if result.error:
        return {"status": "error", "error": result.error, "exit_code": result.error_code}
    return {"status": "success", "result": result.output, "exit_code": result.error_code}


# Get the base configuration for server initialization.
# This is also imported by main.py to run the server.
server_config = get_base_config()
mcp_app = build_server(server_config)


# --- Prompt Handlers ---
@mcp_app.prompt(name="assistant-system-prompt", title="Coding Assistant System Prompt")
def get_system_prompt(current_file: str = "", code: str = "") -> str:
    """Provides the coding assistant prompt, optionally scoped to the file being edited."""
    return build_assistant_prompt(current_file=current_file, code=code)


@mcp_app.prompt(name="file-operations-instructions", title="File Operations Instructions")
def get_file_operations_prompt() -> str:
    """Describes the chat requests the assistant tool turns into file operations."""
    prompts = get_prompts()
    return prompts["file-operations-instructions"]


# --- Tool Definitions ---

@mcp_app.tool(name="workspace")
async def workspace_tool(
    context: Context,
    command: str,
    path: Optional[str] = None,
    name: Optional[str] = None,
    content: Optional[str] = None,
) -> dict[str, Any]:
    """
    Opens a project directory and manages the files and folders inside it.

    Args:
        command: One of 'open', 'reset', 'tree', 'open_file', 'cd', 'pwd', 'create_file',
            'update_file', 'delete_file', 'create_directory', 'delete_directory', 'rename'.
        path: Workspace path the command works on (e.g. '/src/app.js'). For 'open', a host directory.
        name: Entry name for 'create_file' / 'create_directory', or the new name for 'rename'.
        content: File content for 'create_file' and 'update_file'.

    Returns:
        A dictionary containing the result of the operation.
    """
    logger.info(f"Executing workspace command '{command}' on path '{path}'")
    try:
        tool = get_workspace_tool_provider()
        args = {
            "command": command,
            "path": path,
            "name": name,
            "content": content,
        }
        # Filter out None values so we don't pass them to the tool
        args = {k: v for k, v in args.items() if v is not None}
        args["_session"] = get_session(context)

        result = await tool.execute(args)
        return to_response(result)

    except Exception as e:
        logger.error(f"Error executing workspace command: {e}", exc_info=True)
        return {"status": "error", "error": str(e), "exit_code": 1}


@mcp_app.tool(name="assistant")
async def assistant_tool(
    context: Context,
    message: str,
    current_file: Optional[str] = None,
    current_directory: Optional[str] = None,
) -> dict[str, Any]:
    """
    Carries out a file operation requested in a chat message.

    Args:
        message: The user's chat message, e.g. "create file called app.js with content: ...".
        current_file: The file open in the editor. Defaults to the session's current file.
        current_directory: Where new entries go. Defaults to the session's current directory.

    Returns:
        A dictionary whose result holds the JSON-encoded response text, whether an
        operation was performed, and the list of changes.
    """
    logger.info("Executing assistant message")
    try:
        tool = get_assistant_tool_provider()
        args = {
            "message": message,
            "current_file": current_file,
            "current_directory": current_directory,
        }
        args = {k: v for k, v in args.items() if v is not None}
        args["_session"] = get_session(context)

        result = await tool.execute(args)
        return to_response(result)

    except Exception as e:
        logger.error(f"Error executing assistant message: {e}", exc_info=True)
        return {"status": "error", "error": str(e), "exit_code": 1}
